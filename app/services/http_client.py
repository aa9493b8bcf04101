from __future__ import annotations

"""Async HTTP GET-JSON helper used by rate providers.

Single attempt, no retry: callers own retry/backoff policy. Timeouts are
reported separately from other failures so providers can map them.
"""
from typing import Any, Dict, Mapping, Optional

import httpx


class HttpError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HttpTimeout(HttpError):
    pass


async def get_json(
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(url, params=params)
    except httpx.TimeoutException as e:
        raise HttpTimeout(f"Timed out after {timeout}s fetching {url}") from e
    except httpx.HTTPError as e:
        raise HttpError(f"Failed to fetch JSON from {url}: {e}") from e

    if resp.status_code >= 400:
        raise HttpError(f"HTTP {resp.status_code} for {url}", status_code=resp.status_code)
    try:
        data = resp.json()
    except ValueError as e:  # JSON decode
        raise HttpError(f"Invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise HttpError(f"Unexpected JSON payload from {url}")
    return data
