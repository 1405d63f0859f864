"""Publishes configs and rolls out the proxy and gateway workloads."""

import time
from collections.abc import Callable
from dataclasses import dataclass

from src.clients.kubectl import Kubectl
from src.config.settings import Settings
from src.deploy.errors import RolloutError
from src.deploy.identity import DeploymentIdentity
from src.deploy.polling import PollBudget, poll
from src.logging.events import get_logger
from src.render.manifests import APP_MANIFEST, PROXY_MANIFEST, build_configmap, render_manifest

STEP = "deploy"

PROXY_CONFIG_KEY = "litellm-config.yaml"
APP_CONFIG_KEY = "openclaw-config.json"


@dataclass(frozen=True)
class WorkloadSpec:
    label: str  # human name for logs, e.g. "LiteLLM"
    deployment: str
    service: str
    configmap: str
    config_key: str  # file name inside the ConfigMap
    config_text: str
    manifest: str  # packaged manifest template name
    rollout_timeout: int  # seconds
    external_address: bool = True


def proxy_workload(identity: DeploymentIdentity, config_text: str, settings: Settings) -> WorkloadSpec:
    return WorkloadSpec(
        label="LiteLLM",
        deployment=identity.proxy_deployment,
        service=identity.proxy_service,
        configmap=identity.proxy_configmap,
        config_key=PROXY_CONFIG_KEY,
        config_text=config_text,
        manifest=PROXY_MANIFEST,
        rollout_timeout=settings.proxy_rollout_timeout,
    )


def app_workload(identity: DeploymentIdentity, config_text: str, settings: Settings) -> WorkloadSpec:
    return WorkloadSpec(
        label="OpenClaw",
        deployment=identity.app_deployment,
        service=identity.app_service,
        configmap=identity.app_configmap,
        config_key=APP_CONFIG_KEY,
        config_text=config_text,
        manifest=APP_MANIFEST,
        rollout_timeout=settings.app_rollout_timeout,
    )


class WorkloadDeployer:
    def __init__(
        self,
        kubectl: Kubectl,
        identity: DeploymentIdentity,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._kubectl = kubectl
        self._identity = identity
        self._settings = settings
        self._sleep = sleep
        self._created_namespace = False

    @property
    def address_budget(self) -> PollBudget:
        return PollBudget(
            max_attempts=self._settings.address_poll_attempts,
            interval=self._settings.address_poll_interval,
        )

    def ensure_namespace(self) -> None:
        logger = get_logger()
        namespace = self._identity.namespace

        if self._kubectl.namespace_exists(namespace):
            if self._created_namespace:
                logger.info(f"Namespace {namespace} ready")
            else:
                logger.warning(f"Namespace {namespace} already exists")
            return

        result = self._kubectl.create_namespace(namespace)
        if not result.ok:
            raise RolloutError(STEP, namespace, f"namespace creation failed: {result.stderr.strip()}")
        self._created_namespace = True
        logger.info(f"Namespace {namespace} created")

    def publish_config(self, spec: WorkloadSpec) -> None:
        """Replace the workload's ConfigMap with the freshly rendered config."""
        namespace = self._identity.namespace

        result = self._kubectl.delete_configmap(spec.configmap, namespace)
        if not result.ok:
            raise RolloutError(STEP, spec.configmap, f"could not delete old ConfigMap: {result.stderr.strip()}")

        manifest = build_configmap(spec.configmap, namespace, spec.config_key, spec.config_text)
        result = self._kubectl.create(manifest)
        if not result.ok:
            raise RolloutError(STEP, spec.configmap, f"ConfigMap creation failed: {result.stderr.strip()}")
        get_logger().info(f"{spec.label} ConfigMap {spec.configmap} created")

    def apply_manifest(self, spec: WorkloadSpec, values: dict[str, str]) -> None:
        manifest = render_manifest(spec.manifest, values)
        result = self._kubectl.apply(manifest)
        if not result.ok:
            raise RolloutError(STEP, spec.deployment, f"kubectl apply failed: {result.stderr.strip()}")
        get_logger().info(f"{spec.label} manifest applied")

    def wait_for_rollout(self, spec: WorkloadSpec) -> None:
        get_logger().info(f"Waiting for {spec.label} deployment {spec.deployment} (up to {spec.rollout_timeout}s)")
        result = self._kubectl.rollout_status(spec.deployment, self._identity.namespace, spec.rollout_timeout)
        if not result.ok:
            detail = result.stderr.strip() or result.stdout.strip()
            raise RolloutError(STEP, spec.deployment, f"rollout did not complete: {detail}")
        get_logger().info(f"{spec.label} deployment is available")

    def wait_for_external_address(self, spec: WorkloadSpec) -> str:
        budget = self.address_budget
        namespace = self._identity.namespace

        def probe() -> str | None:
            return self._kubectl.service_external_ip(spec.service, namespace) or None

        get_logger().info(f"Waiting for an external IP on {spec.service} (up to {budget.timeout:.0f}s)")
        result = poll(probe, budget, sleep=self._sleep)
        if result.timed_out:
            raise RolloutError(
                STEP, spec.service,
                f"no external IP assigned after {result.attempts} checks",
            )
        get_logger().info(f"{spec.label} service address is {result.value}")
        return result.value

    def deploy(self, spec: WorkloadSpec, values: dict[str, str]) -> str:
        """Run every deploy step for one workload; returns its external IP ("" if not exposed)."""
        self.ensure_namespace()
        self.publish_config(spec)
        self.apply_manifest(spec, values)
        self.wait_for_rollout(spec)
        if not spec.external_address:
            return ""
        return self.wait_for_external_address(spec)
