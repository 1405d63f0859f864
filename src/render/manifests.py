"""Kubernetes manifests for the two workloads.

Templates are parsed as YAML before placeholders are substituted, and only
string scalars are substituted, so a value can never change the document
structure (no quoting or indentation surprises).
"""

from pathlib import Path
from string import Template
from typing import Any

import yaml

from src.deploy.errors import InputError

MANIFEST_DIR = Path(__file__).parent / "templates"

PROXY_MANIFEST = "litellm-deployment.yaml"
APP_MANIFEST = "openclaw-deployment.yaml"

STEP = "render-manifest"


def _substitute(node: Any, values: dict[str, str]) -> Any:
    if isinstance(node, str):
        return Template(node).substitute(values)
    if isinstance(node, dict):
        return {
            _substitute(key, values): _substitute(value, values)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [_substitute(item, values) for item in node]
    return node


def load_manifest_template(name: str, manifest_dir: Path = MANIFEST_DIR) -> list[dict]:
    path = manifest_dir / name
    if not path.is_file():
        raise InputError(STEP, str(path), "manifest template not found")
    with open(path, encoding="utf-8") as f:
        return [doc for doc in yaml.safe_load_all(f) if doc]


def render_manifest(name: str, values: dict[str, str], manifest_dir: Path = MANIFEST_DIR) -> str:
    """Render a packaged template with ${PLACEHOLDER} values.

    Raises:
        InputError: if the template is missing or references a placeholder
            that has no value.
    """
    documents = load_manifest_template(name, manifest_dir)
    try:
        rendered = [_substitute(doc, values) for doc in documents]
    except KeyError as e:
        raise InputError(STEP, name, f"no value for placeholder {e.args[0]}") from e
    except ValueError as e:
        raise InputError(STEP, name, f"malformed placeholder: {e}") from e
    return yaml.safe_dump_all(rendered, sort_keys=False, default_flow_style=False)


def build_configmap(name: str, namespace: str, filename: str, content: str) -> str:
    """ConfigMap manifest holding one file."""
    configmap = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "name": name,
            "namespace": namespace,
        },
        "data": {
            filename: content,
        },
    }
    return yaml.safe_dump(configmap, sort_keys=False, default_flow_style=False)
