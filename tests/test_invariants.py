from __future__ import annotations

import pytest

from stackwalk import invariants
from stackwalk.exceptions import NeverRaise, NeverThrown


def test_never_raises_never_thrown_with_env_payload() -> None:
    with pytest.raises(NeverThrown) as exc_info:
        invariants.never("boom", flag=True)
    assert isinstance(exc_info.value, NeverRaise)
    assert exc_info.value.reason == "boom"
    assert exc_info.value.payload == {"reason": "boom", "env": {"flag": True}}


def test_never_without_reason_has_default_message() -> None:
    with pytest.raises(NeverThrown, match="never"):
        invariants.never()


def test_require_not_none_non_strict() -> None:
    assert invariants.require_not_none(None, strict=False) is None
    assert invariants.require_not_none("ok", strict=False) == "ok"


def test_require_not_none_strict_raises() -> None:
    with pytest.raises(NeverThrown):
        invariants.require_not_none(None, strict=True)


def test_require_not_none_follows_proof_mode_scope() -> None:
    assert invariants.require_not_none(None) is None
    with invariants.proof_mode_scope(True):
        assert invariants.proof_mode() is True
        with pytest.raises(NeverThrown):
            invariants.require_not_none(None)
    assert invariants.proof_mode() is False
