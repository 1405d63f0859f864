"""Application settings loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Local files (relative names resolve against work_dir)
    work_dir: str = "."
    input_file: str = "azure-openai.json"
    secrets_file: str = ".secrets"
    proxy_config_file: str = "litellm-config.yaml"
    app_config_file: str = "openclaw-config.json"

    # Cluster shape
    namespace: str = "openclaw-ns"
    node_count: int = 1
    node_vm_size: str = "Standard_D2s_v5"

    # Container images substituted into the workload manifests
    proxy_image: str = "ghcr.io/berriai/litellm:main-stable"
    app_image: str = "ghcr.io/openclaw/openclaw:latest"

    # Poll budgets
    cluster_poll_attempts: int = 60
    cluster_poll_interval: float = 10.0  # seconds
    address_poll_attempts: int = 60
    address_poll_interval: float = 5.0  # seconds
    proxy_rollout_timeout: int = 300  # seconds
    app_rollout_timeout: int = 600  # seconds

    # Smoke test
    smoke_test_timeout: float = 60.0
    smoke_test_warmup: float = 10.0  # wait for the proxy to settle first

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def resolve(self, name: str) -> Path:
        """Resolve a local file name against the work directory."""
        path = Path(name)
        if path.is_absolute():
            return path
        return Path(self.work_dir) / path

    @property
    def input_path(self) -> Path:
        return self.resolve(self.input_file)

    @property
    def secrets_path(self) -> Path:
        return self.resolve(self.secrets_file)

    @property
    def proxy_config_path(self) -> Path:
        return self.resolve(self.proxy_config_file)

    @property
    def app_config_path(self) -> Path:
        return self.resolve(self.app_config_file)


@lru_cache
def get_settings() -> Settings:
    return Settings()
