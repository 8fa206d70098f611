"""Invariant markers for stackwalk."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import NoReturn, TypeVar

from stackwalk.exceptions import NeverThrown

_PROOF_MODE_OVERRIDE: ContextVar[bool | None] = ContextVar(
    "stackwalk_proof_mode_override",
    default=None,
)

T = TypeVar("T")


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The optional env payload is metadata only; it is attached to the raised
    exception for diagnostics.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)


def proof_mode() -> bool:
    override = _PROOF_MODE_OVERRIDE.get()
    return bool(override)


@contextmanager
def proof_mode_scope(enabled: bool):
    token = _PROOF_MODE_OVERRIDE.set(bool(enabled))
    try:
        yield
    finally:
        _PROOF_MODE_OVERRIDE.reset(token)


def require_not_none(
    value: T | None,
    *,
    reason: str = "",
    strict: bool | None = None,
    **env: object,
) -> T | None:
    if value is None:
        if strict is None:
            strict = proof_mode()
        if strict:
            never(reason or "required value is None", **env)
    return value
