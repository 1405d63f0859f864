"""LiteLLM proxy configuration (litellm-config.yaml).

Every Azure OpenAI endpoint becomes one route under the same client-facing
model name, so LiteLLM load-balances across them.
"""

import pydantic
import yaml

from src.config.azure_openai import AzureOpenAIConfig
from src.deploy.identity import DeploymentIdentity
from src.deploy.secrets import GeneratedSecrets


class LiteLLMParams(pydantic.BaseModel):
    model: str  # azure/<deployment-name>
    api_base: str
    api_key: str
    api_version: str


class ModelRoute(pydantic.BaseModel):
    model_config = {"protected_namespaces": ()}

    model_name: str  # name clients send in the "model" field
    litellm_params: LiteLLMParams


class LiteLLMSettings(pydantic.BaseModel):
    drop_params: bool = True
    set_verbose: bool = False


class GeneralSettings(pydantic.BaseModel):
    master_key: str


class ProxyConfig(pydantic.BaseModel):
    model_config = {"protected_namespaces": ()}

    model_list: list[ModelRoute]
    litellm_settings: LiteLLMSettings = LiteLLMSettings()
    general_settings: GeneralSettings


def build_proxy_config(
    config: AzureOpenAIConfig,
    generated: GeneratedSecrets,
    identity: DeploymentIdentity,
) -> ProxyConfig:
    routes = [
        ModelRoute(
            model_name=identity.model_name,
            litellm_params=LiteLLMParams(
                model=f"azure/{config.deployment_name}",
                api_base=endpoint.base_url,
                api_key=endpoint.key,
                api_version=config.api_version,
            ),
        )
        for endpoint in config.azure_openai
    ]
    return ProxyConfig(
        model_list=routes,
        general_settings=GeneralSettings(master_key=generated.master_key),
    )


def render_proxy_config(
    config: AzureOpenAIConfig,
    generated: GeneratedSecrets,
    identity: DeploymentIdentity,
) -> str:
    proxy_config = build_proxy_config(config, generated, identity)
    return yaml.safe_dump(
        proxy_config.model_dump(),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
