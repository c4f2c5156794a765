"""Tests for the chatWithAI two-hop pipeline."""

from __future__ import annotations

import json

import pytest

from tooling import ToolManager
from tooling.errors import (
    AIResponseParseError,
    InvalidResponseError,
    MissingParameterError,
    ToolNotFoundError,
    UpstreamError,
)
from upstream_fakes import FakeUpstreams

CHAT_PARAMS = {"prompt": "How much money do I have?", "accountId": "acc_1"}


def test_direct_answer_skips_data_fetch(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply('{"tool": "none", "params": {}, "response": "Hello there"}')

    result = tool_manager.invoke_tool("chatWithAI", {**CHAT_PARAMS, "prompt": "Hi"})

    assert result == {"response": "Hello there"}
    assert len(upstreams.requests) == 1
    assert upstreams.monzo_requests() == []


def test_direct_answer_without_text_uses_default_reply(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply('{"tool": "none", "params": {}}')

    result = tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    assert result == {"response": "I can only help with Monzo-related queries."}


def test_balance_question_runs_fetch_then_format(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply(
        'Let me check.\n```json\n{"tool":"getBalance","params":{"accountId":"acc_1"}}\n```'
    )
    upstreams.monzo["/balance"] = (
        200,
        {"balance": 4210, "total_balance": 9210, "currency": "GBP", "spend_today": 0},
    )
    upstreams.reply("You have £42.10 in your account.")

    result = tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    assert result == {"response": "You have £42.10 in your account."}
    hosts = [(r.url.host, r.url.path) for r in upstreams.requests]
    assert hosts == [
        ("llm.test", "/v1/chat/completions"),
        ("monzo.test", "/balance"),
        ("llm.test", "/v1/chat/completions"),
    ]

    selection = FakeUpstreams.body(upstreams.requests[0])
    assert selection["model"] == "gpt-4o"
    assert selection["max_tokens"] == 150
    assert selection["temperature"] == 0.7
    assert selection["messages"][0]["role"] == "system"
    assert "March 28, 2025" in selection["messages"][0]["content"]
    assert '"acc_1"' in selection["messages"][0]["content"]
    assert selection["messages"][-1] == {"role": "user", "content": CHAT_PARAMS["prompt"]}

    formatting = FakeUpstreams.body(upstreams.requests[2])
    assert formatting["max_tokens"] == 150
    assert formatting["messages"][0] == {
        "role": "system",
        "content": "You are a helpful assistant.",
    }
    assert '"balance": 42.1' in formatting["messages"][-1]["content"]


def test_history_is_passed_through_to_both_hops(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    history = [
        {"role": "user", "content": "What pots do I have?"},
        {"role": "assistant", "content": "You have a Holiday pot."},
    ]
    upstreams.reply('{"tool": "getUserInfo", "params": {}}')
    upstreams.reply("Your user id is user_default.")

    tool_manager.invoke_tool(
        "chatWithAI", {**CHAT_PARAMS, "conversationHistory": history, "maxTokens": 300}
    )

    selection, formatting = (FakeUpstreams.body(r) for r in upstreams.llm_requests())
    assert selection["messages"][1:3] == history
    assert formatting["messages"][1:3] == history
    assert formatting["max_tokens"] == 300


def test_max_tokens_is_capped(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply('{"tool": "getUserInfo", "params": {}}')
    upstreams.reply("ok")

    tool_manager.invoke_tool("chatWithAI", {**CHAT_PARAMS, "maxTokens": 100000})

    formatting = FakeUpstreams.body(upstreams.llm_requests()[1])
    assert formatting["max_tokens"] == 4096


def test_infinite_max_tokens_is_capped(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply('{"tool": "getUserInfo", "params": {}}')
    upstreams.reply("ok")

    tool_manager.invoke_tool("chatWithAI", {**CHAT_PARAMS, "maxTokens": float("inf")})

    formatting = FakeUpstreams.body(upstreams.llm_requests()[1])
    assert formatting["max_tokens"] == 4096


def test_model_chosen_account_id_is_used(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply(
        json.dumps(
            {"tool": "listTransactions", "params": {"accountId": "acc_other", "limit": 80}}
        )
    )
    upstreams.monzo["/transactions"] = (200, {"transactions": []})
    upstreams.reply("No transactions yet.")

    tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    params = upstreams.monzo_requests()[0].url.params
    assert params["account_id"] == "acc_other"
    assert params["limit"] == "50"


def test_unparseable_decision_fails(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply("I think you should check your balance.")

    with pytest.raises(AIResponseParseError) as excinfo:
        tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    assert excinfo.value.status_code == 500
    assert len(upstreams.requests) == 1


def test_decision_without_tool_is_parse_error(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply('{"params": {}}')

    with pytest.raises(AIResponseParseError) as excinfo:
        tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "Failed to parse AI response"
    assert upstreams.monzo_requests() == []


def test_unknown_decided_tool_is_not_found(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply('{"tool": "chatWithAI", "params": {}}')

    with pytest.raises(ToolNotFoundError):
        tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    assert upstreams.monzo_requests() == []


def test_llm_error_is_passed_through(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.fail_completion(429, "Rate limit reached")

    with pytest.raises(UpstreamError) as excinfo:
        tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)

    assert excinfo.value.status_code == 429
    assert excinfo.value.message == "Rate limit reached"
    assert len(upstreams.requests) == 1


def test_empty_completion_is_invalid(
    tool_manager: ToolManager, upstreams: FakeUpstreams
) -> None:
    upstreams.reply("")

    with pytest.raises(InvalidResponseError, match="from OpenAI"):
        tool_manager.invoke_tool("chatWithAI", CHAT_PARAMS)


def test_prompt_and_account_are_required(tool_manager: ToolManager) -> None:
    with pytest.raises(MissingParameterError) as excinfo:
        tool_manager.invoke_tool("chatWithAI", {"prompt": "hi"})

    assert excinfo.value.message == "Missing required parameters: prompt and accountId"
