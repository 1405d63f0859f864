"""OpenClaw gateway configuration (openclaw-config.json).

Points the gateway's default agent at the LiteLLM proxy through its
in-cluster service DNS name, registering the proxy as an OpenAI-compatible
provider called "litellm".
"""

import json

import pydantic
from pydantic.alias_generators import to_camel

from src.deploy.identity import GATEWAY_PORT, DeploymentIdentity
from src.deploy.secrets import GeneratedSecrets

PROVIDER_NAME = "litellm"
WORKSPACE_DIR = "/home/node/.openclaw/workspace"
CONTEXT_WINDOW = 128000
MAX_OUTPUT_TOKENS = 16384


class AppModel(pydantic.BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class GatewayAuth(AppModel):
    mode: str = "token"
    token: str


class ControlUi(AppModel):
    enabled: bool = True
    allow_insecure_auth: bool = True


class Gateway(AppModel):
    mode: str = "local"
    bind: str = "lan"
    port: int = GATEWAY_PORT
    auth: GatewayAuth
    control_ui: ControlUi = ControlUi()
    trusted_proxies: list[str] = ["0.0.0.0/0"]


class PrimaryModel(AppModel):
    primary: str


class ModelAlias(AppModel):
    alias: str


class AgentDefaults(AppModel):
    workspace: str = WORKSPACE_DIR
    model: PrimaryModel
    models: dict[str, ModelAlias]


class Agents(AppModel):
    defaults: AgentDefaults


class CatalogModel(AppModel):
    id: str
    name: str
    reasoning: bool = False
    input: list[str] = ["text", "image"]
    context_window: int = CONTEXT_WINDOW
    max_tokens: int = MAX_OUTPUT_TOKENS


class Provider(AppModel):
    base_url: str
    api_key: str
    api: str = "openai-completions"
    models: list[CatalogModel]


class Models(AppModel):
    mode: str = "merge"
    providers: dict[str, Provider]


class AppConfig(AppModel):
    gateway: Gateway
    agents: Agents
    models: Models


def display_name(model_name: str) -> str:
    return f"Azure OpenAI {model_name}"


def build_app_config(generated: GeneratedSecrets, identity: DeploymentIdentity) -> AppConfig:
    model_ref = f"{PROVIDER_NAME}/{identity.model_name}"
    return AppConfig(
        gateway=Gateway(auth=GatewayAuth(token=generated.gateway_token)),
        agents=Agents(
            defaults=AgentDefaults(
                model=PrimaryModel(primary=model_ref),
                models={model_ref: ModelAlias(alias=display_name(identity.model_name))},
            ),
        ),
        models=Models(
            providers={
                PROVIDER_NAME: Provider(
                    base_url=identity.proxy_cluster_url,
                    api_key=generated.master_key,
                    models=[
                        CatalogModel(
                            id=identity.model_name,
                            name=display_name(identity.model_name),
                        ),
                    ],
                ),
            },
        ),
    )


def render_app_config(generated: GeneratedSecrets, identity: DeploymentIdentity) -> str:
    app_config = build_app_config(generated, identity)
    return json.dumps(app_config.model_dump(by_alias=True), indent=2, ensure_ascii=False) + "\n"
