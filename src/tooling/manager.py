"""Tool manager: owns the manifest and dispatches invocations by name."""

from __future__ import annotations

import logging
from pathlib import Path
from time import perf_counter
from typing import Any, Callable, Dict, List, Optional

import httpx

from api.metrics import record_tool_invocation
from config import Settings
from observability.context import bind_log_fields
from tooling.assistant import ChatAssistant
from tooling.errors import CredentialsNotConfiguredError, ToolNotFoundError
from tooling.llm_client import LLMClient
from tooling.models import ToolsFile
from tooling.monzo_client import MonzoClient
from tooling.operations import BankingOperations

logger = logging.getLogger("mcp_gateway.tooling")

ToolHandler = Callable[[Dict[str, Any]], Any]


class ToolManager:
    """Validates credentials and routes a tool name to its handler.

    Handlers for the data tools come from :class:`BankingOperations`; the
    assistant shares that same instance so both paths behave identically.
    """

    def __init__(
        self,
        settings: Settings,
        manifest: ToolsFile,
        operations: BankingOperations,
        assistant: ChatAssistant,
    ) -> None:
        self._settings = settings
        self._manifest = manifest
        self._handlers: Dict[str, ToolHandler] = {
            name: operations.get(name) for name in operations.names()
        }
        self._handlers["chatWithAI"] = assistant.chat
        undeclared = set(self._handlers) - set(manifest.names())
        if undeclared:
            logger.warning(
                {"event": "tool.manifest_mismatch", "undeclared": sorted(undeclared)}
            )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, http_client: Optional[httpx.Client] = None
    ) -> "ToolManager":
        manifest = ToolsFile.load(Path(settings.tool_config_path).resolve())
        monzo = MonzoClient(
            settings.monzo_base_url,
            settings.monzo_token,
            timeout=settings.upstream_timeout,
            client=http_client,
        )
        llm = LLMClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            timeout=settings.upstream_timeout,
            http_client=http_client,
        )
        operations = BankingOperations(monzo, settings.monzo_user_id)
        assistant = ChatAssistant(
            llm,
            operations,
            reference_date=settings.reference_date,
            max_tokens_cap=settings.chat_max_tokens_cap,
        )
        return cls(settings, manifest, operations, assistant)

    def list_tools(self) -> List[Dict[str, Any]]:
        return self._manifest.to_manifest()

    def assert_configured(self) -> None:
        if not self._settings.monzo_token:
            raise CredentialsNotConfiguredError("Monzo token not configured")
        if not self._settings.openai_api_key:
            raise CredentialsNotConfiguredError("OpenAI API key not configured")

    def invoke_tool(self, name: str, params: Dict[str, Any]) -> Any:
        self.assert_configured()
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(name)
        bind_log_fields(tool=name)
        start = perf_counter()
        success = False
        try:
            result = handler(params)
            success = True
            return result
        finally:
            latency_ms = (perf_counter() - start) * 1000
            record_tool_invocation(
                tool_name=name, latency_ms=latency_ms, success=success
            )
            logger.log(
                logging.INFO if success else logging.WARNING,
                {
                    "event": "tool.invoke",
                    "tool": name,
                    "latency_ms": round(latency_ms, 3),
                    "status": "success" if success else "failure",
                },
            )
            bind_log_fields(tool=None)
