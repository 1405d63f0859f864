"""Loader for the Azure OpenAI endpoint file (azure-openai.json)."""

import json
from pathlib import Path

import pydantic
from pydantic.alias_generators import to_camel

from src.deploy.errors import InputError

STEP = "load-config"


class CamelModel(pydantic.BaseModel):
    model_config = {
        "extra": "ignore",
        "alias_generator": to_camel,
        # Allow instantiation with snake_case names in code and tests
        "populate_by_name": True,
        "frozen": True,
    }


class EndpointConfig(CamelModel):
    """One upstream Azure OpenAI resource."""

    name: str
    endpoint: str
    key: str

    @property
    def base_url(self) -> str:
        """Endpoint with a trailing slash removed."""
        return self.endpoint.removesuffix("/")


class AzureOpenAIConfig(CamelModel):
    api_version: str
    deployment_name: str
    azure_openai: list[EndpointConfig] = pydantic.Field(alias="azureOpenAI", min_length=1)


def load_azure_openai_config(path: Path | str) -> AzureOpenAIConfig:
    """Read and validate the endpoint file.

    Raises:
        InputError: if the file is missing, is not JSON, or does not match
            the expected shape.
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(STEP, str(path), "config file not found")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputError(STEP, str(path), f"invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise InputError(STEP, str(path), f"not UTF-8 text: {e}") from e
    except OSError as e:
        raise InputError(STEP, str(path), f"cannot read config file: {e}") from e

    try:
        return AzureOpenAIConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise InputError(STEP, str(path), f"invalid config: {e}") from e
