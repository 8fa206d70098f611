"""Document references and the diagnostics sink observers report through."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """Identity of the source artifact a stack was loaded from."""

    file: str
    body: bytes = b""


@dataclass(frozen=True)
class Diag:
    id: int
    message: str

    def format(self, *args: object) -> str:
        return self.message % args if args else self.message


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    doc: Document | None
    diag: Diag
    severity: Severity
    message: str

    def render(self) -> str:
        prefix = f"{self.doc.file}: " if self.doc is not None and self.doc.file else ""
        return f"{prefix}{self.severity.value} SW{self.diag.id:04d}: {self.message}"


@runtime_checkable
class Sink(Protocol):
    def count(self) -> int: ...

    def errors(self) -> int: ...

    def warnings(self) -> int: ...

    def success(self) -> bool: ...

    def errorf(self, doc: Document | None, diag: Diag, *args: object) -> None: ...

    def warningf(self, doc: Document | None, diag: Diag, *args: object) -> None: ...


@dataclass
class DefaultSink:
    """In-memory sink; keeps every report in arrival order."""

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def count(self) -> int:
        return len(self.diagnostics)

    def errors(self) -> int:
        return sum(1 for entry in self.diagnostics if entry.severity is Severity.ERROR)

    def warnings(self) -> int:
        return sum(1 for entry in self.diagnostics if entry.severity is Severity.WARNING)

    def success(self) -> bool:
        return self.errors() == 0

    def errorf(self, doc: Document | None, diag: Diag, *args: object) -> None:
        self._report(doc, diag, Severity.ERROR, args)

    def warningf(self, doc: Document | None, diag: Diag, *args: object) -> None:
        self._report(doc, diag, Severity.WARNING, args)

    def _report(
        self,
        doc: Document | None,
        diag: Diag,
        severity: Severity,
        args: tuple[object, ...],
    ) -> None:
        entry = Diagnostic(doc=doc, diag=diag, severity=severity, message=diag.format(*args))
        self.diagnostics.append(entry)
        logger.debug("reported %s", entry.render())

    def lines(self) -> list[str]:
        return [entry.render() for entry in self.diagnostics]
