"""Deployment identity and the resource names derived from it."""

from dataclasses import dataclass

DEFAULT_DEPLOY_NAME = "openclaw"
DEFAULT_REGION = "eastus2"
DEFAULT_MODEL_NAME = "gpt-5.2"
DEFAULT_NAMESPACE = "openclaw-ns"

PROXY_PORT = 4000
GATEWAY_PORT = 18789


@dataclass(frozen=True)
class DeploymentIdentity:
    deploy_name: str = DEFAULT_DEPLOY_NAME
    region: str = DEFAULT_REGION
    model_name: str = DEFAULT_MODEL_NAME
    namespace: str = DEFAULT_NAMESPACE

    # Names are not checked against Azure or Kubernetes length/charset rules.

    @property
    def resource_group(self) -> str:
        return f"{self.deploy_name}-RG"

    @property
    def cluster_name(self) -> str:
        return f"{self.deploy_name}-aks"

    @property
    def proxy_deployment(self) -> str:
        return f"{self.deploy_name}-llmproxy"

    @property
    def proxy_service(self) -> str:
        return f"{self.deploy_name}-llmproxy-svc"

    @property
    def proxy_configmap(self) -> str:
        return f"{self.deploy_name}-llmproxy-config"

    @property
    def app_deployment(self) -> str:
        return self.deploy_name

    @property
    def app_service(self) -> str:
        return f"{self.deploy_name}-svc"

    @property
    def app_configmap(self) -> str:
        return f"{self.deploy_name}-openclaw-config"

    @property
    def proxy_cluster_url(self) -> str:
        """OpenAI-compatible base URL of the proxy as seen from inside the cluster."""
        return (
            f"http://{self.proxy_service}.{self.namespace}.svc.cluster.local:{PROXY_PORT}/v1"
        )
