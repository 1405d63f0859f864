"""Tests for src/deploy/preconditions.py — tool and login checks."""

import pytest

from src.deploy.errors import PreconditionError
from src.deploy.preconditions import check_preconditions
from tests.conftest import FakeRunner


class TestCheckPreconditions:

    def test_all_present(self, fake_runner):
        check_preconditions(fake_runner)
        assert fake_runner.calls == [["az", "account", "show", "--output", "none"]]

    @pytest.mark.parametrize("missing", ["az", "kubectl", "jq"])
    def test_missing_tool(self, missing):
        runner = FakeRunner(tools={"az", "kubectl", "jq"} - {missing})
        with pytest.raises(PreconditionError) as exc_info:
            check_preconditions(runner)
        assert exc_info.value.resource == missing
        assert exc_info.value.step == "preconditions"
        # Nothing is run before every tool is confirmed
        assert runner.calls == []

    def test_not_logged_in(self, fake_runner):
        fake_runner.on(["az", "account", "show"], (1, "", "Please run 'az login'"))
        with pytest.raises(PreconditionError, match="az login"):
            check_preconditions(fake_runner)
