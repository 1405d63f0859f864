"""Per-run credential generation and the local secrets record.

Both credentials are regenerated on every run and the record is replaced
wholesale, so a stale key never survives a redeploy.
"""

import os
import secrets
from dataclasses import dataclass
from pathlib import Path

from src.logging.events import get_logger

TOKEN_BYTES = 16  # 32 hex characters

MASTER_KEY_VAR = "MASTER_KEY"
GATEWAY_TOKEN_VAR = "OPENCLAW_TOKEN"


@dataclass(frozen=True)
class GeneratedSecrets:
    master_key: str  # LiteLLM proxy master key
    gateway_token: str  # OpenClaw gateway access token


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def generate_secrets() -> GeneratedSecrets:
    master_key = generate_token()
    gateway_token = generate_token()
    while gateway_token == master_key:
        gateway_token = generate_token()
    return GeneratedSecrets(master_key=master_key, gateway_token=gateway_token)


def write_secrets_file(path: Path | str, generated: GeneratedSecrets) -> None:
    """Replace the secrets record with the given credentials."""
    path = Path(path)
    if path.exists():
        get_logger().warning(
            "Replacing existing secrets record; previous credentials stop working",
            extra={"audit_data": {"path": str(path)}},
        )

    content = (
        f"{MASTER_KEY_VAR}={generated.master_key}\n"
        f"{GATEWAY_TOKEN_VAR}={generated.gateway_token}\n"
    )
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)


def read_secrets_file(path: Path | str) -> GeneratedSecrets:
    """Parse a secrets record written by write_secrets_file."""
    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or "=" not in line:
                continue
            key, _, value = line.partition("=")
            values[key] = value
    return GeneratedSecrets(
        master_key=values[MASTER_KEY_VAR],
        gateway_token=values[GATEWAY_TOKEN_VAR],
    )
