"""Data-fetching tools backed by the Monzo API.

Every operation takes the caller's parameter mapping and returns a
JSON-ready result with monetary amounts converted from pence to pounds.
The same instance serves direct ``/mcp/run`` calls and the assistant.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from tooling.errors import (
    InvalidParameterError,
    InvalidResponseError,
    MissingParameterError,
)
from tooling.models import Account, Balance, Pot, Transaction
from tooling.monzo_client import MonzoClient

DEFAULT_TRANSACTION_LIMIT = 5
MAX_TRANSACTION_LIMIT = 50

Operation = Callable[[Dict[str, Any]], Any]


def to_pounds(minor_units: Optional[int]) -> Optional[float]:
    if minor_units is None:
        return None
    return minor_units / 100


def transaction_limit(value: Any) -> int:
    """Effective page size: default when unset, never above the cap."""

    if not value:
        return DEFAULT_TRANSACTION_LIMIT
    try:
        requested = int(value)
    except OverflowError:
        # json.loads reads 1e400 as inf
        return MAX_TRANSACTION_LIMIT if value > 0 else 1
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError("limit") from exc
    return max(1, min(requested, MAX_TRANSACTION_LIMIT))


def _require_account_id(params: Dict[str, Any]) -> str:
    account_id = params.get("accountId")
    if not account_id:
        raise MissingParameterError("accountId")
    return str(account_id)


def _require_field(payload: Any, field: str) -> Any:
    if not isinstance(payload, dict) or field not in payload:
        raise InvalidResponseError()
    return payload[field]


class BankingOperations:
    def __init__(self, monzo: MonzoClient, user_id: Optional[str]) -> None:
        self._monzo = monzo
        self._user_id = user_id
        self._operations: Dict[str, Operation] = {
            "listAccounts": self.list_accounts,
            "getBalance": self.get_balance,
            "listTransactions": self.list_transactions,
            "getPots": self.get_pots,
            "getUserInfo": self.get_user_info,
        }

    def names(self) -> List[str]:
        return list(self._operations)

    def get(self, name: str) -> Optional[Operation]:
        return self._operations.get(name)

    def list_accounts(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        payload = self._monzo.get("/accounts", failure_message="Failed to fetch accounts")
        accounts = _require_field(payload, "accounts")
        results = []
        for raw in accounts:
            owner = raw.get("owner") or {}
            account = Account(
                id=raw["id"],
                description=raw.get("description"),
                created=raw.get("created"),
                user_id=owner.get("user_id") or self._user_id,
            )
            results.append(account.model_dump(by_alias=True))
        return results

    def get_balance(self, params: Dict[str, Any]) -> Dict[str, Any]:
        account_id = _require_account_id(params)
        payload = self._monzo.get(
            "/balance",
            params={"account_id": account_id},
            failure_message="Failed to fetch balance",
        )
        _require_field(payload, "balance")
        balance = Balance(
            balance=to_pounds(payload["balance"]),
            total_balance=to_pounds(payload.get("total_balance")),
            currency=payload.get("currency"),
            spend_today=to_pounds(payload.get("spend_today")),
        )
        return balance.model_dump(by_alias=True)

    def list_transactions(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        account_id = _require_account_id(params)
        query: Dict[str, Any] = {
            "account_id": account_id,
            "limit": transaction_limit(params.get("limit")),
        }
        since = params.get("since")
        if since:
            query["since"] = since
        payload = self._monzo.get(
            "/transactions", params=query, failure_message="Failed to fetch transactions"
        )
        transactions = _require_field(payload, "transactions")
        results = []
        for raw in transactions:
            tx = Transaction(
                id=raw["id"],
                amount=to_pounds(raw["amount"]),
                description=raw.get("description"),
                date=raw.get("created"),
                currency=raw.get("currency"),
                merchant=raw.get("merchant"),
                category=raw.get("category"),
                notes=raw.get("notes"),
            )
            exclude = None if "merchant" in raw else {"merchant"}
            results.append(tx.model_dump(exclude=exclude))
        return results

    def get_pots(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        account_id = _require_account_id(params)
        payload = self._monzo.get(
            "/pots",
            params={"current_account_id": account_id},
            failure_message="Failed to fetch pots",
        )
        pots = _require_field(payload, "pots")
        live = [raw for raw in pots if not raw.get("deleted")]
        return [
            Pot(id=raw["id"], name=raw.get("name"), balance=to_pounds(raw["balance"])).model_dump()
            for raw in live
        ]

    def get_user_info(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"userId": self._user_id}
