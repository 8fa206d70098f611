from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from stackwalk.core.visitor import NullVisitor
from stackwalk.diag import Document
from stackwalk.json_types import JSONObject
from stackwalk.model import (
    Dependency,
    Metadata,
    Name,
    Parameter,
    Service,
    Services,
    Stack,
    Target,
)


@dataclass(frozen=True)
class VisitEvent:
    label: str
    method: str
    name: str = ""
    public: bool | None = None

    def render(self) -> str:
        text = f"{self.label}:{self.method}" if self.label else self.method
        if self.name:
            text = f"{text} {self.name}"
        if self.public is not None:
            text = f"{text} ({'public' if self.public else 'private'})"
        return text

    def to_payload(self) -> JSONObject:
        payload: JSONObject = {"method": self.method, "name": self.name}
        if self.label:
            payload["label"] = self.label
        if self.public is not None:
            payload["public"] = self.public
        return payload


@dataclass
class TraceVisitor(NullVisitor):
    """Records one event per visit call, in call order."""

    label: str = ""
    events: List[VisitEvent] = field(default_factory=list)

    def _record(self, method: str, name: str = "", public: bool | None = None) -> None:
        self.events.append(VisitEvent(self.label, method, name, public))

    def visit_metadata(self, doc: Document, kind: str, meta: Metadata) -> None:
        self._record("metadata", kind)

    def visit_stack(self, doc: Document, stack: Stack) -> None:
        self._record("stack", stack.metadata.name)

    def visit_parameter(self, doc: Document, name: str, param: Parameter) -> None:
        self._record("parameter", name)

    def visit_dependency(self, doc: Document, name: Name, dep: Dependency) -> None:
        self._record("dependency", name)

    def visit_services(self, doc: Document, svcs: Services) -> None:
        self._record("services")

    def visit_service(
        self,
        doc: Document,
        name: Name,
        public: bool,
        svc: Service,
    ) -> None:
        self._record("service", name, public)

    def visit_target(self, doc: Document, name: str, target: Target) -> None:
        self._record("target", name)

    def lines(self) -> list[str]:
        return [event.render() for event in self.events]

    def to_payload(self) -> list[JSONObject]:
        return [event.to_payload() for event in self.events]
