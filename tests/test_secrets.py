"""Tests for src/deploy/secrets.py — credential generation and the secrets record."""

import re
import stat

from src.deploy.secrets import (
    GeneratedSecrets,
    generate_secrets,
    read_secrets_file,
    write_secrets_file,
)

TOKEN_RE = re.compile(r"^[0-9a-f]{32}$")


class TestGenerateSecrets:

    def test_format(self):
        s = generate_secrets()
        assert TOKEN_RE.match(s.master_key)
        assert TOKEN_RE.match(s.gateway_token)

    def test_values_differ(self):
        s = generate_secrets()
        assert s.master_key != s.gateway_token

    def test_uniqueness_across_runs(self):
        runs = [generate_secrets() for _ in range(50)]
        master_keys = {s.master_key for s in runs}
        tokens = {s.gateway_token for s in runs}
        assert len(master_keys) == 50
        assert len(tokens) == 50


class TestSecretsFile:

    def test_writes_two_lines(self, tmp_path, generated):
        path = tmp_path / ".secrets"
        write_secrets_file(path, generated)
        assert path.read_text(encoding="utf-8").splitlines() == [
            f"MASTER_KEY={generated.master_key}",
            f"OPENCLAW_TOKEN={generated.gateway_token}",
        ]

    def test_overwrites_previous_record(self, tmp_path, generated):
        path = tmp_path / ".secrets"
        path.write_text("MASTER_KEY=old\nOPENCLAW_TOKEN=old\nSTALE=1\n", encoding="utf-8")

        write_secrets_file(path, generated)

        content = path.read_text(encoding="utf-8")
        assert "old" not in content
        assert "STALE" not in content
        assert len(content.splitlines()) == 2

    def test_new_file_is_private(self, tmp_path, generated):
        path = tmp_path / ".secrets"
        write_secrets_file(path, generated)
        mode = stat.S_IMODE(path.stat().st_mode)
        assert mode & 0o077 == 0

    def test_read_back(self, tmp_path, generated):
        path = tmp_path / ".secrets"
        write_secrets_file(path, generated)
        assert read_secrets_file(path) == generated

    def test_consecutive_runs_replace_record(self, tmp_path):
        path = tmp_path / ".secrets"
        first = generate_secrets()
        write_secrets_file(path, first)
        second = generate_secrets()
        write_secrets_file(path, second)

        stored = read_secrets_file(path)
        assert stored == second
        assert stored != first
        assert isinstance(stored, GeneratedSecrets)
