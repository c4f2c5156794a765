"""Thin Monzo API transport over httpx."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, Optional

import httpx

from api.metrics import record_upstream_call
from tooling.errors import UpstreamError

logger = logging.getLogger("mcp_gateway.upstream")


class MonzoClient:
    """Issues bearer-authenticated GETs against the Monzo API.

    Non-success answers become :class:`UpstreamError` carrying the upstream
    status and its ``message`` when the error payload has one. Successful
    payloads are returned untouched; shape checks belong to the caller.
    """

    upstream_name = "monzo"

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str],
        *,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._access_token = access_token
        self._own_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def get(
        self, path: str, *, params: Optional[Dict[str, Any]] = None, failure_message: str
    ) -> Any:
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"Bearer {self._access_token}"}
        start = perf_counter()
        response = self._client.get(url, params=params, headers=headers)
        latency_ms = (perf_counter() - start) * 1000
        record_upstream_call(self.upstream_name, response.status_code, latency_ms)
        logger.info(
            {
                "event": "upstream.call",
                "upstream": self.upstream_name,
                "method": "GET",
                "path": path,
                "status": response.status_code,
                "latency_ms": round(latency_ms, 3),
            }
        )
        payload = response.json()
        if not response.is_success:
            raise UpstreamError(
                response.status_code,
                _error_message(payload, failure_message),
                upstream=self.upstream_name,
            )
        return payload

    def close(self) -> None:
        if self._own_client:
            self._client.close()


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return fallback
