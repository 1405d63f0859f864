"""Shared fixtures for the deployment tool test suite."""

import json
import logging

import pytest

from src.clients.runner import CommandResult
from src.config.azure_openai import AzureOpenAIConfig, EndpointConfig
from src.config.settings import Settings, get_settings
from src.deploy.identity import DeploymentIdentity
from src.deploy.secrets import GeneratedSecrets
from src.logging.events import get_logger


class FakeRunner:
    """Scripted stand-in for CommandRunner.

    Responses are registered per argument prefix; the longest matching
    prefix wins. A list of responses is consumed in order and its last
    entry repeats. Unmatched commands succeed with empty output.
    """

    def __init__(self, tools=("az", "kubectl", "jq")):
        self.tools = set(tools)
        self.calls: list[list[str]] = []
        self.inputs: list[str | None] = []
        self._responses: dict[tuple[str, ...], list[CommandResult]] = {}

    def on(self, prefix, *results):
        """Register one or more (returncode, stdout, stderr) tuples for a prefix."""
        self._responses[tuple(prefix)] = [
            CommandResult(args=list(prefix), returncode=rc, stdout=out, stderr=err)
            for rc, out, err in results
        ]
        return self

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.tools else None

    def run(self, args, input=None, timeout=None):
        self.calls.append(list(args))
        self.inputs.append(input)
        best = None
        for prefix in self._responses:
            if tuple(args[:len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return CommandResult(args=list(args), returncode=0)
        queue = self._responses[best]
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        return CommandResult(args=list(args), returncode=result.returncode,
                             stdout=result.stdout, stderr=result.stderr)

    def called(self, *prefix) -> list[list[str]]:
        """All recorded calls starting with the given arguments."""
        return [c for c in self.calls if tuple(c[:len(prefix)]) == prefix]


def no_sleep(seconds: float) -> None:
    pass


@pytest.fixture(autouse=True)
def reset_deploy_logger():
    """Drop handlers bound to per-test streams (CliRunner, tmp files)."""
    yield
    logger = get_logger()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings rooted in a temp work dir with no poll delays."""
    return Settings(
        _env_file=None,
        work_dir=str(tmp_path),
        cluster_poll_attempts=5,
        cluster_poll_interval=0,
        address_poll_attempts=3,
        address_poll_interval=0,
        smoke_test_warmup=0,
    )


@pytest.fixture
def identity() -> DeploymentIdentity:
    return DeploymentIdentity(deploy_name="demo", region="eastus2", model_name="gpt-5.2")


@pytest.fixture
def generated() -> GeneratedSecrets:
    return GeneratedSecrets(
        master_key="0123456789abcdef0123456789abcdef",
        gateway_token="fedcba9876543210fedcba9876543210",
    )


@pytest.fixture
def input_data() -> dict:
    """A typical azure-openai.json payload."""
    return {
        "apiVersion": "2024-12-01-preview",
        "deploymentName": "gpt-5.2",
        "azureOpenAI": [
            {
                "name": "eastus2",
                "endpoint": "https://demo-eastus2.openai.azure.com/",
                "key": "aoai-key-eastus2",
            },
        ],
    }


@pytest.fixture
def azure_config(input_data) -> AzureOpenAIConfig:
    return AzureOpenAIConfig.model_validate(input_data)


@pytest.fixture
def two_endpoint_config() -> AzureOpenAIConfig:
    return AzureOpenAIConfig(
        api_version="2024-12-01-preview",
        deployment_name="gpt-5.2",
        azure_openai=[
            EndpointConfig(name="eastus2", endpoint="https://a.openai.azure.com/", key="key-a"),
            EndpointConfig(name="swedencentral", endpoint="https://b.openai.azure.com", key="key-b"),
        ],
    )


@pytest.fixture
def input_file(tmp_path, input_data):
    """Write azure-openai.json into the temp work dir and return its path."""
    path = tmp_path / "azure-openai.json"
    path.write_text(json.dumps(input_data), encoding="utf-8")
    return path


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(WORK_DIR="/tmp/x", LOG_FORMAT="json")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()
