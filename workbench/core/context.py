"""Per-request identifiers read by the log filter and the response envelope."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass

UNSET = "-"

_loan_id: contextvars.ContextVar[str] = contextvars.ContextVar("loan_id", default=UNSET)
_request_id: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default=UNSET)


@dataclass(frozen=True)
class ContextTokens:
    request_id: contextvars.Token
    loan_id: contextvars.Token


def bind_request_context(request_id: str, loan_id: str | None = None) -> ContextTokens:
    """Bind ids for the current request; pass the result to ``reset_request_context``."""
    return ContextTokens(
        request_id=_request_id.set(request_id or UNSET),
        loan_id=_loan_id.set(loan_id or UNSET),
    )


def reset_request_context(tokens: ContextTokens) -> None:
    _request_id.reset(tokens.request_id)
    _loan_id.reset(tokens.loan_id)


def get_loan_id() -> str:
    return _loan_id.get()


def get_request_id() -> str:
    return _request_id.get()
