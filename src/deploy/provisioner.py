"""Resource group and AKS cluster provisioning.

Each resource moves absent -> creating -> ready | failed. Resources that
already exist go straight to ready and are never modified, so re-running
against the same identity is safe.
"""

import enum
import time
from collections.abc import Callable

from src.clients.azure import AzureCLI
from src.config.settings import Settings
from src.deploy.errors import ProvisioningError
from src.deploy.identity import DeploymentIdentity
from src.deploy.polling import PollBudget, poll
from src.logging.events import get_logger

STEP = "provision"

SUCCEEDED = "Succeeded"
FAILED = "Failed"


class ResourceState(enum.StrEnum):
    ABSENT = "absent"
    CREATING = "creating"
    READY = "ready"
    FAILED = "failed"


class ResourceProvisioner:
    def __init__(
        self,
        azure: AzureCLI,
        identity: DeploymentIdentity,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._azure = azure
        self._identity = identity
        self._settings = settings
        self._sleep = sleep
        self.states: dict[str, ResourceState] = {}

    @property
    def cluster_budget(self) -> PollBudget:
        return PollBudget(
            max_attempts=self._settings.cluster_poll_attempts,
            interval=self._settings.cluster_poll_interval,
        )

    def _set(self, resource: str, state: ResourceState) -> ResourceState:
        self.states[resource] = state
        return state

    def ensure_resource_group(self) -> ResourceState:
        logger = get_logger()
        name = self._identity.resource_group

        if self._azure.group_exists(name):
            logger.warning(f"Resource group {name} already exists, reusing it")
            return self._set(name, ResourceState.READY)

        self._set(name, ResourceState.ABSENT)
        logger.info(f"Creating resource group {name} in {self._identity.region}")
        self._set(name, ResourceState.CREATING)
        result = self._azure.create_group(name, self._identity.region)
        if not result.ok:
            self._set(name, ResourceState.FAILED)
            raise ProvisioningError(STEP, name, f"resource group creation failed: {result.stderr.strip()}")

        logger.info(f"Resource group {name} created")
        return self._set(name, ResourceState.READY)

    def ensure_cluster(self) -> ResourceState:
        """Create the cluster if absent. Returns CREATING or READY."""
        logger = get_logger()
        name = self._identity.cluster_name
        resource_group = self._identity.resource_group

        if self._azure.cluster_exists(name, resource_group):
            logger.warning(f"AKS cluster {name} already exists, reusing it")
            return self._set(name, ResourceState.READY)

        self._set(name, ResourceState.ABSENT)
        logger.info(
            f"Creating AKS cluster {name} (this can take 5-10 minutes)",
            extra={"audit_data": {
                "node_count": self._settings.node_count,
                "node_vm_size": self._settings.node_vm_size,
            }},
        )
        self._set(name, ResourceState.CREATING)
        result = self._azure.create_cluster(
            name=name,
            resource_group=resource_group,
            location=self._identity.region,
            node_count=self._settings.node_count,
            node_vm_size=self._settings.node_vm_size,
        )
        if not result.ok:
            self._set(name, ResourceState.FAILED)
            raise ProvisioningError(STEP, name, f"cluster creation failed: {result.stderr.strip()}")

        logger.info(f"AKS cluster {name} create command completed")
        return ResourceState.CREATING

    def wait_for_cluster(self) -> ResourceState:
        """Poll provisioningState until Succeeded, Failed, or the budget runs out."""
        logger = get_logger()
        name = self._identity.cluster_name
        resource_group = self._identity.resource_group
        budget = self.cluster_budget
        last_state = ""

        def probe() -> str | None:
            nonlocal last_state
            last_state = self._azure.cluster_provisioning_state(name, resource_group)
            if last_state in (SUCCEEDED, FAILED):
                return last_state
            logger.debug(f"Cluster {name} is {last_state}")
            return None

        logger.info(f"Waiting for AKS cluster {name} (up to {budget.timeout:.0f}s)")
        result = poll(probe, budget, sleep=self._sleep)

        if result.timed_out:
            self._set(name, ResourceState.FAILED)
            raise ProvisioningError(
                STEP, name,
                f"timed out after {result.attempts} checks, last state: {last_state}",
            )
        if result.value == FAILED:
            self._set(name, ResourceState.FAILED)
            raise ProvisioningError(STEP, name, "cluster provisioning failed")

        logger.info(f"AKS cluster {name} is ready", extra={"audit_data": {"checks": result.attempts}})
        return self._set(name, ResourceState.READY)

    def install_credentials(self) -> None:
        name = self._identity.cluster_name
        result = self._azure.get_credentials(name, self._identity.resource_group)
        if not result.ok:
            raise ProvisioningError(STEP, name, f"could not fetch cluster credentials: {result.stderr.strip()}")
        get_logger().info(f"kubectl is configured for {name}")

    def provision(self) -> dict[str, ResourceState]:
        self.ensure_resource_group()
        self.ensure_cluster()
        self.wait_for_cluster()
        self.install_credentials()
        return dict(self.states)
