"""The deployment pipeline.

Steps run strictly in order; each depends on the side effects of the one
before it. Any DeployError halts the run with nothing rolled back, and a
re-run converges because every create is guarded by an existence check.
The smoke test is the only step whose failure is tolerated.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx

from src.clients.azure import AzureCLI
from src.clients.kubectl import Kubectl
from src.clients.runner import CommandRunner
from src.config.azure_openai import AzureOpenAIConfig, load_azure_openai_config
from src.config.settings import Settings
from src.deploy.identity import PROXY_PORT, DeploymentIdentity
from src.deploy.preconditions import check_preconditions
from src.deploy.provisioner import ResourceProvisioner
from src.deploy.secrets import GeneratedSecrets, generate_secrets, write_secrets_file
from src.deploy.summary import DeploymentSummary, build_summary
from src.deploy.workloads import WorkloadDeployer, app_workload, proxy_workload
from src.logging.events import StepTimer, get_logger
from src.render.app_config import render_app_config
from src.render.proxy_config import render_proxy_config
from src.verify.smoke import SmokeResult, run_smoke_test


@dataclass
class RenderedConfigs:
    proxy: str  # litellm-config.yaml
    app: str  # openclaw-config.json


def write_rendered_configs(settings: Settings, rendered: RenderedConfigs) -> tuple[Path, Path]:
    """Overwrite the local copies of both generated configs."""
    proxy_path = settings.proxy_config_path
    app_path = settings.app_config_path
    proxy_path.write_text(rendered.proxy, encoding="utf-8")
    app_path.write_text(rendered.app, encoding="utf-8")
    return proxy_path, app_path


class DeploymentPipeline:
    def __init__(
        self,
        identity: DeploymentIdentity,
        settings: Settings,
        runner: CommandRunner | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.identity = identity
        self.settings = settings
        self.runner = runner or CommandRunner()
        self.http_client = http_client
        self.sleep = sleep

        self.config: AzureOpenAIConfig | None = None
        self.secrets: GeneratedSecrets | None = None
        self.rendered: RenderedConfigs | None = None
        self.proxy_ip = ""
        self.app_ip = ""
        self.smoke_result: SmokeResult | None = None

    def _step(self, name: str, func: Callable[[], None]) -> None:
        logger = get_logger()
        with StepTimer(name) as timer:
            logger.info(f"==== {name} ====")
            func()
        logger.debug(f"{name} finished", extra={"audit_data": {"elapsed_s": timer.elapsed_s}})

    def check_preconditions(self) -> None:
        check_preconditions(self.runner)

    def load_config(self) -> None:
        self.config = load_azure_openai_config(self.settings.input_path)
        get_logger().info(
            "Azure OpenAI config loaded",
            extra={"audit_data": {
                "model_name": self.identity.model_name,
                "api_version": self.config.api_version,
                "deployment_name": self.config.deployment_name,
                "endpoints": len(self.config.azure_openai),
            }},
        )

    def generate_secrets(self) -> None:
        self.secrets = generate_secrets()
        write_secrets_file(self.settings.secrets_path, self.secrets)
        get_logger().info(
            "New credentials generated",
            extra={"audit_data": {
                "secrets_file": str(self.settings.secrets_path),
            }},
        )

    def render_configs(self) -> None:
        logger = get_logger()
        self.rendered = RenderedConfigs(
            proxy=render_proxy_config(self.config, self.secrets, self.identity),
            app=render_app_config(self.secrets, self.identity),
        )
        for endpoint in self.config.azure_openai:
            logger.info(
                f"Added endpoint {endpoint.name}",
                extra={"audit_data": {"api_base": endpoint.base_url}},
            )
        proxy_path, app_path = write_rendered_configs(self.settings, self.rendered)
        logger.info(f"LiteLLM config written to {proxy_path}")
        logger.info(f"OpenClaw config written to {app_path}")

    def provision(self) -> None:
        provisioner = ResourceProvisioner(AzureCLI(self.runner), self.identity, self.settings, sleep=self.sleep)
        provisioner.provision()

    def manifest_values(self) -> dict[str, str]:
        return {
            "DEPLOY_NAME": self.identity.deploy_name,
            "NAMESPACE": self.identity.namespace,
            "MASTER_KEY": self.secrets.master_key,
            "PROXY_IMAGE": self.settings.proxy_image,
            "APP_IMAGE": self.settings.app_image,
        }

    def deploy_workloads(self) -> None:
        deployer = WorkloadDeployer(Kubectl(self.runner), self.identity, self.settings, sleep=self.sleep)
        values = self.manifest_values()
        self.proxy_ip = deployer.deploy(proxy_workload(self.identity, self.rendered.proxy, self.settings), values)
        self.app_ip = deployer.deploy(app_workload(self.identity, self.rendered.app, self.settings), values)

    @property
    def proxy_url(self) -> str:
        return f"http://{self.proxy_ip}:{PROXY_PORT}"

    def smoke_test(self) -> None:
        self.smoke_result = run_smoke_test(
            self.proxy_url,
            self.secrets.master_key,
            self.identity.model_name,
            self.settings,
            client=self.http_client,
            sleep=self.sleep,
        )

    def summary(self) -> DeploymentSummary:
        return build_summary(self.identity, self.secrets, self.config, self.proxy_ip, self.app_ip)

    def run(self) -> DeploymentSummary:
        self._step("Check prerequisites", self.check_preconditions)
        self._step("Load Azure OpenAI config", self.load_config)
        self._step("Generate credentials", self.generate_secrets)
        self._step("Render configs", self.render_configs)
        self._step("Provision Azure resources", self.provision)
        self._step("Deploy workloads", self.deploy_workloads)
        self._step("Smoke test LiteLLM", self.smoke_test)
        return self.summary()
