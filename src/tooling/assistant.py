"""Natural-language assistant: pick a data tool, run it, phrase the answer."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, List

from pydantic import ValidationError

from tooling.errors import (
    AIResponseParseError,
    InvalidParameterError,
    MissingParameterError,
    ToolNotFoundError,
)
from tooling.json_extract import JSONExtractionError, extract_json
from tooling.llm_client import LLMClient
from tooling.models import ToolDecision
from tooling.operations import BankingOperations

logger = logging.getLogger("mcp_gateway.tooling")

SELECTION_MAX_TOKENS = 150
DEFAULT_MAX_TOKENS = 150
OFF_TOPIC_REPLY = "I can only help with Monzo-related queries."

SELECTION_PROMPT = """
You are a helpful assistant that can interact with a user's Monzo bank account. The user has asked: "{prompt}". Based on this query, decide which of the following Monzo tools to call and with what parameters:

- listAccounts: Fetches the user's Monzo accounts. Parameters: none.
- getBalance: Fetches the balance for a specific account. Parameters: accountId (string).
- listTransactions: Fetches recent transactions for a specific account. Parameters: accountId (string), limit (number, default 5), since (string, default "").
- getPots: Fetches savings pots for a specific account. Parameters: accountId (string).
- getUserInfo: Fetches the user's ID. Parameters: none.

The accountId to use is "{account_id}". The current date is {today}. Use this date to interpret queries involving time (e.g., "this month" refers to {month}).

Conversation history:
{history}

Respond with a JSON object specifying the tool to call and the parameters to use, e.g., {{"tool": "getBalance", "params": {{"accountId": "acc_123"}}}}. If the query is unrelated to Monzo, respond with {{"tool": "none", "params": {{}}}} and provide a direct answer in the "response" field. If the query requires analysis (e.g., "Did I spend a lot this month?"), fetch the necessary data and analyze it in the next step. Be concise in your responses.
"""

FORMAT_PROMPT = """
You are a helpful assistant. The user asked: "{prompt}". You have fetched the following data from Monzo:

{data}

Conversation history:
{history}

The current date is {today}. Use this date to interpret queries involving time (e.g., "this month" refers to {month}).

Format this data into a conversational response that answers the user's query. Be concise, natural, and insightful. If the query involves analysis (e.g., "Did I spend a lot this month?"), analyze the data and provide a thoughtful response. For example, if asked about spending on a specific merchant, calculate the total spend and compare it to typical spending patterns if possible. If the data is insufficient, explain why and suggest what might help (e.g., fetching more transactions).
"""


def _long_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


class ChatAssistant:
    """Runs the ``chatWithAI`` tool.

    The model first answers with a JSON tool decision, the chosen banking
    operation runs, then a second completion turns the data into prose.
    The three steps never overlap.
    """

    def __init__(
        self,
        llm: LLMClient,
        operations: BankingOperations,
        *,
        reference_date: date,
        max_tokens_cap: int = 4096,
    ) -> None:
        self._llm = llm
        self._operations = operations
        self._reference_date = reference_date
        self._max_tokens_cap = max_tokens_cap

    def chat(self, params: Dict[str, Any]) -> Dict[str, str]:
        prompt = params.get("prompt")
        account_id = params.get("accountId")
        if not prompt or not account_id:
            raise MissingParameterError("prompt", "accountId")
        history: List[Dict[str, Any]] = params.get("conversationHistory") or []
        if not isinstance(history, list):
            raise InvalidParameterError("conversationHistory")
        max_tokens = self._effective_max_tokens(params.get("maxTokens"))

        decision = self._select_tool(prompt, account_id, history)
        if decision.is_direct_answer:
            return {"response": decision.response or OFF_TOPIC_REPLY}

        operation = self._operations.get(decision.tool)
        if operation is None:
            raise ToolNotFoundError(decision.tool)
        data = operation(decision.params)

        answer = self._format_answer(prompt, data, history, max_tokens)
        return {"response": answer}

    def _effective_max_tokens(self, value: Any) -> int:
        if not value:
            return DEFAULT_MAX_TOKENS
        try:
            requested = int(value)
        except OverflowError:
            return self._max_tokens_cap if value > 0 else 1
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError("maxTokens") from exc
        return max(1, min(requested, self._max_tokens_cap))

    def _select_tool(
        self, prompt: str, account_id: str, history: List[Dict[str, Any]]
    ) -> ToolDecision:
        system_prompt = SELECTION_PROMPT.format(
            prompt=prompt,
            account_id=account_id,
            today=_long_date(self._reference_date),
            month=f"{self._reference_date:%B %Y}",
            history=json.dumps(history, indent=2),
        )
        messages = [
            {"role": "system", "content": system_prompt},
            *history,
            {"role": "user", "content": prompt},
        ]
        content = self._llm.complete(
            messages,
            max_tokens=SELECTION_MAX_TOKENS,
            failure_message="Failed to get response from OpenAI",
        )
        try:
            decision = ToolDecision.model_validate(extract_json(content))
        except (JSONExtractionError, ValidationError) as exc:
            logger.warning(
                {"event": "assistant.parse_failed", "content": content, "error": str(exc)}
            )
            raise AIResponseParseError() from exc
        logger.info({"event": "assistant.decision", "tool": decision.tool})
        return decision

    def _format_answer(
        self,
        prompt: str,
        data: Any,
        history: List[Dict[str, Any]],
        max_tokens: int,
    ) -> str:
        format_prompt = FORMAT_PROMPT.format(
            prompt=prompt,
            data=json.dumps(data, indent=2),
            history=json.dumps(history, indent=2),
            today=_long_date(self._reference_date),
            month=f"{self._reference_date:%B %Y}",
        )
        messages = [
            {"role": "system", "content": "You are a helpful assistant."},
            *history,
            {"role": "user", "content": format_prompt},
        ]
        return self._llm.complete(
            messages,
            max_tokens=max_tokens,
            failure_message="Failed to format response with OpenAI",
        )
