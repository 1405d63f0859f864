"""Azure CLI (`az`) operations used by the provisioner."""

from src.clients.runner import CommandResult, CommandRunner


class AzureCLI:
    """Wraps the handful of `az` calls the deployment needs.

    Probe methods return plain values; mutating methods return the
    CommandResult so callers decide how to report failures.
    """

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def _az(self, *args: str) -> CommandResult:
        return self._runner.run(["az", *args])

    def is_logged_in(self) -> bool:
        return self._az("account", "show", "--output", "none").ok

    def group_exists(self, name: str) -> bool:
        return self._az("group", "show", "--name", name, "--output", "none").ok

    def create_group(self, name: str, location: str) -> CommandResult:
        return self._az(
            "group", "create",
            "--name", name,
            "--location", location,
            "--output", "none",
        )

    def cluster_exists(self, name: str, resource_group: str) -> bool:
        return self._az(
            "aks", "show",
            "--name", name,
            "--resource-group", resource_group,
            "--output", "none",
        ).ok

    def create_cluster(
        self,
        name: str,
        resource_group: str,
        location: str,
        node_count: int,
        node_vm_size: str,
    ) -> CommandResult:
        return self._az(
            "aks", "create",
            "--resource-group", resource_group,
            "--name", name,
            "--node-count", str(node_count),
            "--node-vm-size", node_vm_size,
            "--enable-managed-identity",
            "--generate-ssh-keys",
            "--location", location,
            "--output", "none",
        )

    def cluster_provisioning_state(self, name: str, resource_group: str) -> str:
        """Current provisioningState, or "NotFound" when the lookup fails."""
        result = self._az(
            "aks", "show",
            "--name", name,
            "--resource-group", resource_group,
            "--query", "provisioningState",
            "--output", "tsv",
        )
        if not result.ok:
            return "NotFound"
        return result.stdout.strip() or "NotFound"

    def get_credentials(self, name: str, resource_group: str) -> CommandResult:
        return self._az(
            "aks", "get-credentials",
            "--resource-group", resource_group,
            "--name", name,
            "--overwrite-existing",
            "--output", "none",
        )
