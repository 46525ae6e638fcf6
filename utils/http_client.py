"""JSON-over-HTTP fetcher used by lookup skills."""

import logging
from typing import Any, Dict, Optional

import httpx

from agent_kit.errors import ExternalCallFailure


logger = logging.getLogger("HttpClient")

DEFAULT_TIMEOUT = 10.0


class HttpJsonClient:
    """Thin async GET-and-decode wrapper around httpx."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        self.headers.update(headers or {})
        self.transport = transport

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug(f"GET {url} params={params}")
        try:
            async with httpx.AsyncClient(
                timeout = self.timeout,
                headers = self.headers,
                transport = self.transport,
            ) as client:
                resp = await client.get(url, params = params)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ExternalCallFailure("http", f"GET {url}: {exc}", exc) from exc
