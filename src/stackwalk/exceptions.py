"""Exception protocol markers for stackwalk."""

from __future__ import annotations


class NeverRaise(RuntimeError):
    """Sentinel exception that should be unreachable.

    Raising this exception signals that a caller broke a contract (for example
    an unknown order policy name or a missing sink in proof mode).
    The ``env`` payload is metadata only and carries the offending values.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env: dict[str, object] = dict(env or {})

    @property
    def payload(self) -> dict[str, object]:
        return {"reason": self.reason, "env": dict(self.env)}


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
