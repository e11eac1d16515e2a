"""Hugging Face Inference API client and response normalization."""

import logging
from typing import Any, Optional

import httpx

import config

logger = logging.getLogger(__name__)


def build_payload(prompt: str) -> dict:
    return {
        "inputs": prompt,
        "parameters": {
            "max_new_tokens": config.HF_MAX_NEW_TOKENS,
            "temperature": config.HF_TEMPERATURE,
            "return_full_text": False,
        },
        # Block until a cold model is loaded instead of getting a 503 back.
        "options": {"wait_for_model": True},
    }


def safe_json(response: httpx.Response) -> Any:
    """Parsed body, or None when the upstream sent something that isn't JSON."""
    try:
        return response.json()
    except (ValueError, RecursionError):
        return None


async def query_model(
    prompt: str,
    token: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[int, Any]:
    """Call the inference endpoint and return (status_code, payload)."""
    # No timeout: wait_for_model can legitimately hold the request open.
    async with httpx.AsyncClient(timeout=None, transport=transport) as client:
        response = await client.post(
            config.HF_API_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            json=build_payload(prompt),
        )
    return response.status_code, safe_json(response)


def upstream_error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
    return f"HuggingFace request failed ({status_code})"


def extract_generated_text(payload: Any) -> str:
    """Pull `generated_text` out of either accepted payload shape.

    Accepts `[{"generated_text": "..."}]` (first element wins) or
    `{"generated_text": "..."}`. Returns "" for anything else.
    """
    candidate = None
    if isinstance(payload, list):
        if payload and isinstance(payload[0], dict):
            candidate = payload[0].get("generated_text")
    elif isinstance(payload, dict):
        candidate = payload.get("generated_text")

    if isinstance(candidate, str):
        return candidate.strip()
    return ""
