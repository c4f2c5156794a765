"""Canned Monzo and OpenAI upstreams served through ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

import httpx

MONZO_BASE = "https://monzo.test"
OPENAI_BASE = "https://llm.test/v1"


def completion(content: str) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1711584000,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2},
    }


class FakeUpstreams:
    """Serves canned answers and records every request in arrival order."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.monzo: Dict[str, Tuple[int, Any]] = {}
        self.completions: List[Tuple[int, Any]] = []
        self.network_down = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_down:
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.host == "llm.test":
            status, payload = self.completions.pop(0)
        else:
            status, payload = self.monzo[request.url.path]
        return httpx.Response(status, json=payload)

    def reply(self, content: str) -> None:
        self.completions.append((200, completion(content)))

    def fail_completion(self, status: int, message: str) -> None:
        self.completions.append(
            (status, {"error": {"message": message, "type": "invalid_request_error"}})
        )

    def monzo_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == "monzo.test"]

    def llm_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == "llm.test"]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)
