from __future__ import annotations

import logging

import pytest

from stackwalk.exceptions import NeverThrown
from stackwalk.order_contract import (
    OrderPolicy,
    get_order_policy,
    get_order_telemetry_events,
    normalize_policy,
    order_policy,
    order_telemetry,
    ordered_or_sorted,
    sort_once,
)


def test_ordered_or_sorted_sorts_by_default() -> None:
    values = ["b", "a", "c"]
    assert ordered_or_sorted(values, source="test") == ["a", "b", "c"]


def test_ordered_or_sorted_orders_by_code_point() -> None:
    values = ["b", "B", "é", "a", "_"]
    ordered = ordered_or_sorted(values, source="test")
    assert ordered == ["B", "_", "a", "b", "é"]
    assert ordered == sorted(values, key=lambda item: item.encode("utf-8"))


def test_ordered_or_sorted_check_policy_sorts_and_reports_regression() -> None:
    observed: list[dict[str, object]] = []
    with order_policy(OrderPolicy.CHECK):
        ordered = ordered_or_sorted(
            ["b", "a", "c"],
            source="test",
            on_unsorted=lambda payload: observed.append(payload),
        )
    assert ordered == ["a", "b", "c"]
    assert len(observed) == 1
    assert observed[0]["violation_kind"] == "out_of_order"
    assert observed[0]["policy"] == "check"


def test_ordered_or_sorted_check_policy_accepts_sorted_input_silently() -> None:
    observed: list[dict[str, object]] = []
    with order_policy(OrderPolicy.CHECK):
        ordered = ordered_or_sorted(
            ["a", "b"],
            source="test",
            on_unsorted=lambda payload: observed.append(payload),
        )
    assert ordered == ["a", "b"]
    assert observed == []


@pytest.mark.parametrize("policy", list(OrderPolicy))
def test_ordered_or_sorted_never_raises_on_unsorted_input(policy: OrderPolicy) -> None:
    with order_policy(policy):
        assert ordered_or_sorted(["c", "a", "b"], source="test") == ["a", "b", "c"]


def test_ordered_or_sorted_policy_argument_overrides_context() -> None:
    observed: list[dict[str, object]] = []
    with order_policy(OrderPolicy.CHECK):
        assert ordered_or_sorted(
            ["b", "a", "c"],
            source="test",
            policy=OrderPolicy.SORT,
            on_unsorted=lambda payload: observed.append(payload),
        ) == ["a", "b", "c"]
    assert observed == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("check", OrderPolicy.CHECK),
        (" SORT ", OrderPolicy.SORT),
        ("off", OrderPolicy.SORT),
        ("1", OrderPolicy.CHECK),
        ("on", OrderPolicy.CHECK),
        (" ", OrderPolicy.SORT),
    ],
)
def test_order_policy_resolves_from_env(monkeypatch, raw: str, expected: OrderPolicy) -> None:
    monkeypatch.setenv("STACKWALK_ORDER_POLICY", raw)
    assert get_order_policy() is expected


def test_unknown_env_policy_is_ignored_with_warning(monkeypatch, caplog) -> None:
    monkeypatch.setenv("STACKWALK_ORDER_POLICY", "enforce")
    with caplog.at_level(logging.WARNING, logger="stackwalk.order_contract"):
        assert get_order_policy() is OrderPolicy.SORT
        assert ordered_or_sorted(["b", "a"], source="test") == ["a", "b"]
    assert "STACKWALK_ORDER_POLICY" in caplog.text


def test_order_policy_context_is_scoped() -> None:
    assert get_order_policy() is OrderPolicy.SORT
    with order_policy("check"):
        assert get_order_policy() is OrderPolicy.CHECK
    assert get_order_policy() is OrderPolicy.SORT


def test_normalize_policy_rejects_unknown_value() -> None:
    with pytest.raises(NeverThrown) as exc_info:
        normalize_policy("enforce")
    assert exc_info.value.env["allowed"] == ["sort", "check"]


def test_order_telemetry_context_collects_fallback_events() -> None:
    with order_telemetry() as events:
        with order_policy(OrderPolicy.CHECK):
            ordered_or_sorted(["z", "y"], source="test.telemetry")
    assert [event["source"] for event in events] == ["test.telemetry"]
    assert events[0]["action"] == "fallback_sort"


def test_order_telemetry_global_requires_env(monkeypatch) -> None:
    get_order_telemetry_events(clear=True)
    with order_policy(OrderPolicy.CHECK):
        ordered_or_sorted(["z", "y"], source="test.quiet")
    assert get_order_telemetry_events() == []
    monkeypatch.setenv("STACKWALK_ORDER_TELEMETRY", "1")
    with order_policy(OrderPolicy.CHECK):
        ordered_or_sorted(["z", "y"], source="test.global")
    events = get_order_telemetry_events(clear=True)
    assert [event["source"] for event in events] == ["test.global"]
    assert get_order_telemetry_events() == []


def test_sort_once_ignores_check_policy() -> None:
    with order_telemetry() as events:
        with order_policy(OrderPolicy.CHECK):
            assert sort_once(["b", "a"], source="test") == ["a", "b"]
    assert events == []
