"""Chat-completion client for the assistant, built on the OpenAI SDK."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, List, Optional

import httpx
from openai import APIStatusError, OpenAI

from api.metrics import record_upstream_call
from tooling.errors import InvalidResponseError, UpstreamError

logger = logging.getLogger("mcp_gateway.upstream")

ChatMessages = List[Dict[str, Any]]


class LLMClient:
    """Sends chat-completion requests with a fixed model and temperature."""

    upstream_name = "openai"

    def __init__(
        self,
        *,
        api_key: Optional[str],
        base_url: str,
        model: str,
        temperature: float = 0.7,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self._client = OpenAI(
            api_key=api_key or "not-provided",
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    def complete(
        self, messages: ChatMessages, *, max_tokens: int, failure_message: str
    ) -> str:
        """Return the first choice's text or raise a tool error."""

        start = perf_counter()
        status_code = 0
        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.temperature,
            )
            status_code = 200
        except APIStatusError as exc:
            status_code = exc.status_code
            raise UpstreamError(
                exc.status_code,
                _error_message(exc.body, failure_message),
                upstream=self.upstream_name,
            ) from exc
        finally:
            latency_ms = (perf_counter() - start) * 1000
            record_upstream_call(self.upstream_name, status_code, latency_ms)
            logger.info(
                {
                    "event": "upstream.call",
                    "upstream": self.upstream_name,
                    "method": "POST",
                    "path": "/chat/completions",
                    "status": status_code,
                    "latency_ms": round(latency_ms, 3),
                }
            )
        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        if not content:
            raise InvalidResponseError("Invalid response format from OpenAI")
        return content

    def close(self) -> None:
        self._client.close()


def _error_message(body: Any, fallback: str) -> str:
    # The SDK hands over the inner ``error`` object when the payload has one.
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
        inner = body.get("error")
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return fallback
