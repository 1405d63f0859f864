"""End-of-run summary shown to the operator."""

from dataclasses import dataclass

from src.config.azure_openai import AzureOpenAIConfig
from src.deploy.identity import GATEWAY_PORT, PROXY_PORT, DeploymentIdentity
from src.deploy.secrets import GeneratedSecrets

APP_SERVICE_PORT = 80


@dataclass(frozen=True)
class DeploymentSummary:
    resource_group: str
    cluster_name: str
    region: str
    namespace: str
    proxy_deployment: str
    proxy_service: str
    proxy_url: str
    master_key: str
    model_name: str
    deployment_name: str
    app_deployment: str
    app_service: str
    app_url: str
    port_forward_command: str
    local_url: str


def build_summary(
    identity: DeploymentIdentity,
    generated: GeneratedSecrets,
    config: AzureOpenAIConfig,
    proxy_ip: str,
    app_ip: str,
) -> DeploymentSummary:
    return DeploymentSummary(
        resource_group=identity.resource_group,
        cluster_name=identity.cluster_name,
        region=identity.region,
        namespace=identity.namespace,
        proxy_deployment=identity.proxy_deployment,
        proxy_service=identity.proxy_service,
        proxy_url=f"http://{proxy_ip}:{PROXY_PORT}",
        master_key=generated.master_key,
        model_name=identity.model_name,
        deployment_name=config.deployment_name,
        app_deployment=identity.app_deployment,
        app_service=identity.app_service,
        app_url=f"http://{app_ip}",
        port_forward_command=(
            f"kubectl port-forward service/{identity.app_service} "
            f"{GATEWAY_PORT}:{APP_SERVICE_PORT} -n {identity.namespace}"
        ),
        local_url=f"http://127.0.0.1:{GATEWAY_PORT}/?token={generated.gateway_token}",
    )


def format_summary(summary: DeploymentSummary) -> str:
    lines = [
        "============================================",
        "          Deployment summary",
        "============================================",
        "",
        "Azure resources:",
        f"  Resource group:  {summary.resource_group}",
        f"  AKS cluster:     {summary.cluster_name}",
        f"  Region:          {summary.region}",
        "",
        "Kubernetes resources:",
        f"  Namespace:       {summary.namespace}",
        "",
        "LiteLLM service:",
        f"  Deployment:      {summary.proxy_deployment}",
        f"  Service:         {summary.proxy_service}",
        f"  URL:             {summary.proxy_url}",
        f"  Master key:      {summary.master_key}",
        f"  Model name:      {summary.model_name}",
        f"  Deployment name: {summary.deployment_name}",
        "",
        "OpenClaw service:",
        f"  Deployment:      {summary.app_deployment}",
        f"  Service:         {summary.app_service}",
        f"  URL:             {summary.app_url}",
        "",
        "Access:",
        "  Browsers block WebCrypto on plain-HTTP origins, so the Control UI",
        "  must be opened through localhost. Keep this running in another terminal:",
        f"    {summary.port_forward_command}",
        "  then open:",
        f"    {summary.local_url}",
        "============================================",
    ]
    return "\n".join(lines)
