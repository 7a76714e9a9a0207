"""Helpers shared by the token endpoint calls"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Tuple

import httpx

from .config import XConfig

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


@asynccontextmanager
async def http_client(
    client: Optional[httpx.AsyncClient],
    timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit"""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned_client:
        yield owned_client


def client_auth(config: XConfig, data: Dict[str, str]) -> Tuple[Dict[str, str], Optional[Tuple[str, str]]]:
    """Attach client credentials to a token endpoint form

    Confidential clients authenticate with HTTP Basic, public clients send
    client_id in the form body.

    Returns:
        Tuple of (form data, basic auth tuple or None)
    """
    if config.is_confidential:
        return data, (config.client_id, config.client_secret)
    return {**data, "client_id": config.client_id}, None


def parse_json(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Parse a JSON object body, returning None for anything else"""
    try:
        payload = response.json()
    except (json.JSONDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def extract_oauth_error(response: httpx.Response) -> str:
    """Get a human readable reason from a failed token endpoint response"""
    payload = parse_json(response)
    if payload:
        for key in ("error_description", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"
