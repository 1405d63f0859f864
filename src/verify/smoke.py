"""Post-deploy smoke test against the LiteLLM proxy.

Sends one chat completion through the proxy's external address. The
outcome is only reported; a failed check never stops the deployment.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from src.config.settings import Settings
from src.logging.events import get_logger

SMOKE_PROMPT = "Hello"


@dataclass
class SmokeResult:
    passed: bool
    status_code: int | None = None
    content: str = ""  # first choice's message text on success
    reason: str = ""  # why the check failed


def _build_headers(master_key: str) -> dict:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {master_key}",
    }


def _build_body(model_name: str) -> dict:
    return {
        "model": model_name,
        "messages": [{"role": "user", "content": SMOKE_PROMPT}],
    }


def _extract_content(body: dict) -> str | None:
    """First choice's message text ("" if there is none), or None when the choices are malformed."""
    choices = body.get("choices")
    if not isinstance(choices, list):
        return None
    if not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict) or not isinstance(first.get("message"), dict):
        return None
    content = first["message"].get("content")
    return content if isinstance(content, str) else ""


def _post(client: httpx.Client, url: str, master_key: str, model_name: str) -> SmokeResult:
    try:
        response = client.post(url, json=_build_body(model_name), headers=_build_headers(master_key))
    except httpx.ConnectError:
        return SmokeResult(passed=False, reason="cannot reach proxy")
    except httpx.TimeoutException:
        return SmokeResult(passed=False, reason="proxy timed out")
    except httpx.HTTPError as e:
        return SmokeResult(passed=False, reason=f"request error: {e}")

    try:
        body = response.json()
    except ValueError:
        return SmokeResult(
            passed=False,
            status_code=response.status_code,
            reason=f"non-JSON response: {response.text[:200]}",
        )

    if not isinstance(body, dict) or "choices" not in body:
        return SmokeResult(
            passed=False,
            status_code=response.status_code,
            reason=f"unexpected response: {str(body)[:200]}",
        )

    content = _extract_content(body)
    if content is None:
        return SmokeResult(
            passed=False,
            status_code=response.status_code,
            reason=f"malformed choices: {str(body)[:200]}",
        )

    return SmokeResult(passed=True, status_code=response.status_code, content=content)


def run_smoke_test(
    proxy_url: str,
    master_key: str,
    model_name: str,
    settings: Settings,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SmokeResult:
    """Send one chat completion through the proxy and report the outcome."""
    logger = get_logger()
    url = f"{proxy_url.rstrip('/')}/chat/completions"

    if settings.smoke_test_warmup > 0:
        sleep(settings.smoke_test_warmup)

    logger.info("Sending test request to LiteLLM", extra={"audit_data": {"url": url, "model": model_name}})
    if client is not None:
        result = _post(client, url, master_key, model_name)
    else:
        timeout = httpx.Timeout(settings.smoke_test_timeout, connect=10.0)
        with httpx.Client(timeout=timeout) as owned_client:
            result = _post(owned_client, url, master_key, model_name)

    if result.passed:
        logger.info("LiteLLM smoke test passed", extra={"audit_data": {"response": result.content}})
    else:
        logger.warning(
            "LiteLLM smoke test failed, continuing deployment",
            extra={"audit_data": {"status_code": result.status_code, "reason": result.reason}},
        )
    return result
