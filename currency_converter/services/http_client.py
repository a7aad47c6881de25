"""Async HTTP JSON helper for upstream rate providers.

Focus: a single GET returning a JSON object, with the whole call (connect,
send, read) bounded by one deadline so a slow provider cannot hold a request.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httpx


class HttpError(Exception):
    pass


async def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    async def _fetch() -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(url)
            if resp.status_code >= 400:
                raise HttpError(f"HTTP {resp.status_code} for {url}")
            data = resp.json()
            if not isinstance(data, dict):
                raise HttpError(f"Expected a JSON object from {url}")
            return data

    try:
        # wait_for cancels the in-flight request when the deadline passes
        return await asyncio.wait_for(_fetch(), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise HttpError(f"Timed out after {timeout}s fetching {url}") from e
    except (httpx.HTTPError, ValueError) as e:  # ValueError for JSON decode
        raise HttpError(f"Failed to fetch JSON from {url}: {e}") from e
