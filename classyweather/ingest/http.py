"""Shared async GET helper for the Open-Meteo clients."""

import logging
from typing import Any

import httpx

from classyweather.core.cancellation import CancelToken
from classyweather.ingest.errors import MalformedResponseError, NetworkError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "classyweather/0.1.0"


async def get_json(
    url: str,
    params: dict[str, Any],
    cancel: CancelToken,
    timeout: float = 30.0,
    user_agent: str = DEFAULT_USER_AGENT,
) -> dict:
    """GET ``url`` and decode a JSON object body.

    The request is guarded by ``cancel``; a fired token aborts the transfer
    and raises ``RequestCancelled``.
    """
    headers = {"User-Agent": user_agent, "Accept": "application/json"}
    async with httpx.AsyncClient(timeout=timeout, headers=headers) as client:
        try:
            resp = await cancel.guard(client.get(url, params=params))
        except httpx.RequestError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise NetworkError(f"Request failed: {e}") from e

    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        logger.warning("%s returned HTTP %d", url, status)
        raise NetworkError(f"HTTP {status}", status) from e

    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Invalid JSON from {url}", resp.status_code
        ) from e
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object from {url}", resp.status_code
        )
    return data
