"""kubectl operations used by the workload deployer."""

from src.clients.runner import CommandResult, CommandRunner

EXTERNAL_IP_PATH = "jsonpath={.status.loadBalancer.ingress[0].ip}"


class Kubectl:
    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def _kubectl(self, *args: str, input: str | None = None, timeout: float | None = None) -> CommandResult:
        return self._runner.run(["kubectl", *args], input=input, timeout=timeout)

    def namespace_exists(self, namespace: str) -> bool:
        return self._kubectl("get", "namespace", namespace).ok

    def create_namespace(self, namespace: str) -> CommandResult:
        return self._kubectl("create", "namespace", namespace)

    def delete_configmap(self, name: str, namespace: str) -> CommandResult:
        return self._kubectl("delete", "configmap", name, "-n", namespace, "--ignore-not-found")

    def create(self, manifest: str) -> CommandResult:
        """Create objects from a manifest on stdin; fails if any already exist."""
        return self._kubectl("create", "-f", "-", input=manifest)

    def apply(self, manifest: str) -> CommandResult:
        return self._kubectl("apply", "-f", "-", input=manifest)

    def rollout_status(self, deployment: str, namespace: str, timeout: int) -> CommandResult:
        # Give the subprocess a little headroom over kubectl's own timeout
        return self._kubectl(
            "rollout", "status", f"deployment/{deployment}",
            "-n", namespace,
            f"--timeout={timeout}s",
            timeout=timeout + 30,
        )

    def service_external_ip(self, service: str, namespace: str) -> str:
        """External load-balancer IP, or "" while none is assigned."""
        result = self._kubectl("get", "svc", service, "-n", namespace, "-o", EXTERNAL_IP_PATH)
        if not result.ok:
            return ""
        return result.stdout.strip()
