from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, TypeVar

from stackwalk.invariants import never


T = TypeVar("T")

_ORDER_POLICY_ENV = "STACKWALK_ORDER_POLICY"
_ORDER_TELEMETRY_ENV = "STACKWALK_ORDER_TELEMETRY"
_ORDER_POLICY_CONTEXT: ContextVar["OrderPolicy | None"] = ContextVar(
    "stackwalk_order_policy",
    default=None,
)
_ORDER_TELEMETRY_CONTEXT: ContextVar[list[dict[str, object]] | None] = ContextVar(
    "stackwalk_order_telemetry",
    default=None,
)
_ORDER_TELEMETRY_GLOBAL: list[dict[str, object]] = []

logger = logging.getLogger(__name__)


class OrderPolicy(str, Enum):
    SORT = "sort"
    CHECK = "check"


def sort_once(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> list[T]:
    """Sort exactly once, regardless of the active order policy."""
    return sorted(values, key=key, reverse=reverse)


def ordered_or_sorted(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
    policy: OrderPolicy | str | None = None,
    on_unsorted: Callable[[dict[str, object]], None] | None = None,
) -> list[T]:
    """Return deterministic order with a configurable caller-order policy.

    - `OrderPolicy.SORT`: always apply sorting.
    - `OrderPolicy.CHECK`: sort, and record a telemetry event when the caller
      order was not already sorted.

    Neither policy raises: both yield the same sequence for the same set of
    values and differ only in whether a non-canonical caller order is reported.

    Policy resolution precedence:
    1. explicit `policy`
    2. context policy (`order_policy(...)`)
    3. `STACKWALK_ORDER_POLICY`
    4. default `SORT`
    """
    items = list(values)
    resolved_policy = _resolve_policy(policy)
    if resolved_policy is OrderPolicy.SORT:
        return sorted(items, key=key, reverse=reverse)
    violation = _first_order_violation(items, key=key, reverse=reverse)
    if violation is None:
        return items
    payload: dict[str, object] = {
        "source": source,
        "previous_index": violation[0],
        "current_index": violation[1],
        "previous_key": repr(violation[2]),
        "current_key": repr(violation[3]),
        "violation_kind": violation[4],
        "reverse": reverse,
        "policy": resolved_policy.value,
    }
    _record_order_telemetry(payload)
    if on_unsorted is not None:
        on_unsorted(payload)
    return sorted(items, key=key, reverse=reverse)


def _resolve_policy(policy: OrderPolicy | str | None) -> OrderPolicy:
    if policy is not None:
        return normalize_policy(policy)
    context_policy = _ORDER_POLICY_CONTEXT.get()
    if context_policy is not None:
        return context_policy
    env_policy = _order_policy_from_env()
    if env_policy is not None:
        return env_policy
    return OrderPolicy.SORT


def get_order_policy() -> OrderPolicy:
    return _resolve_policy(None)


def get_order_telemetry_events(*, clear: bool = False) -> list[dict[str, object]]:
    events = [dict(entry) for entry in _ORDER_TELEMETRY_GLOBAL]
    if clear:
        _ORDER_TELEMETRY_GLOBAL.clear()
    return events


def set_order_policy(policy: OrderPolicy | str) -> Token[OrderPolicy | None]:
    return _ORDER_POLICY_CONTEXT.set(normalize_policy(policy))


def reset_order_policy(token: Token[OrderPolicy | None]) -> None:
    _ORDER_POLICY_CONTEXT.reset(token)


@contextmanager
def order_policy(policy: OrderPolicy | str) -> Iterator[None]:
    token = set_order_policy(policy)
    try:
        yield
    finally:
        reset_order_policy(token)


@contextmanager
def order_telemetry() -> Iterator[list[dict[str, object]]]:
    events: list[dict[str, object]] = []
    token = _ORDER_TELEMETRY_CONTEXT.set(events)
    try:
        yield events
    finally:
        _ORDER_TELEMETRY_CONTEXT.reset(token)


def _order_policy_from_env() -> OrderPolicy | None:
    raw = os.environ.get(_ORDER_POLICY_ENV)
    if raw is None:
        return None
    value = raw.strip().lower()
    if not value:
        return None
    if value in {"off", "false", "0"}:
        return OrderPolicy.SORT
    if value in {"on", "true", "1"}:
        return OrderPolicy.CHECK
    for candidate in OrderPolicy:
        if candidate.value == value:
            return candidate
    logger.warning("ignoring unknown %s=%r", _ORDER_POLICY_ENV, raw)
    return None


def _order_telemetry_enabled() -> bool:
    return os.environ.get(_ORDER_TELEMETRY_ENV) == "1"


def normalize_policy(policy: OrderPolicy | str) -> OrderPolicy:
    if isinstance(policy, OrderPolicy):
        return policy
    normalized = policy.strip().lower()
    for candidate in OrderPolicy:
        if candidate.value == normalized:
            return candidate
    never(
        "unknown order policy",
        policy=policy,
        allowed=[candidate.value for candidate in OrderPolicy],
    )


def _first_order_violation(
    values: Iterable[T],
    *,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> tuple[int, int, Any, Any, str] | None:
    previous_marker: Any | None = None
    previous_index = -1
    has_previous = False
    for index, value in enumerate(values):
        marker = key(value) if key is not None else value
        if has_previous:
            try:
                out_of_order = (
                    bool(previous_marker < marker)
                    if reverse
                    else bool(previous_marker > marker)
                )
            except TypeError:
                return (previous_index, index, previous_marker, marker, "incomparable")
            if out_of_order:
                return (previous_index, index, previous_marker, marker, "out_of_order")
        previous_marker = marker
        previous_index = index
        has_previous = True
    return None


def _record_order_telemetry(payload: dict[str, object]) -> None:
    event = dict(payload)
    event["action"] = "fallback_sort"
    logger.debug(
        "fallback sort at %s (%s)", event["source"], event["violation_kind"]
    )
    sink = _ORDER_TELEMETRY_CONTEXT.get()
    if sink is not None:
        sink.append(event)
    if _order_telemetry_enabled():
        _ORDER_TELEMETRY_GLOBAL.append(event)
