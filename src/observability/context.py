"""Per-request correlation state shared by middleware, tools and logging."""

from __future__ import annotations

import contextvars
from typing import Any, Dict, Optional


_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_log_fields_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "log_fields", default={}
)


def set_request_id(value: str) -> None:
    _request_id_var.set(value)
    bind_log_fields(request_id=value)


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def reset_request_context() -> None:
    """Forget the request id and every bound log field."""

    _request_id_var.set(None)
    _log_fields_var.set({})


def bind_log_fields(**fields: Any) -> None:
    """Attach fields to every log record emitted in this context.

    Passing ``None`` for a key unbinds it.
    """

    current = dict(_log_fields_var.get())
    for key, value in fields.items():
        if value is None:
            current.pop(key, None)
        else:
            current[key] = value
    _log_fields_var.set(current)


def get_log_fields() -> Dict[str, Any]:
    return dict(_log_fields_var.get())
