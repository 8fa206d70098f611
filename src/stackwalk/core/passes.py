"""Passes built on top of the in-order walker."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stackwalk.clouds import arch_for_name
from stackwalk.core.visitor import NullVisitor
from stackwalk.diag import Diag, Document
from stackwalk.invariants import require_not_none
from stackwalk.model import Dependency, Name, Parameter, Service, Target

logger = logging.getLogger(__name__)

ERR_UNKNOWN_CLOUD = Diag(101, "target '%s' selects unknown cloud '%s'")
WARN_NO_DEFAULT_TARGET = Diag(102, "stack '%s' declares targets but none is the default")


@dataclass
class CloudTargetChecker(NullVisitor):
    """Reports targets whose cloud is not a known architecture.

    Without a sink, findings are only logged unless proof mode is active, in
    which case a missing sink is a contract violation.
    """

    def visit_metadata(self, doc, kind, meta) -> None:
        if meta.targets and not any(target.default for target in meta.targets.values()):
            self._report(doc, WARN_NO_DEFAULT_TARGET, meta.name, error=False)

    def visit_target(self, doc: Document, name: str, target: Target) -> None:
        if arch_for_name(target.cloud) is None:
            self._report(doc, ERR_UNKNOWN_CLOUD, name, target.cloud, error=True)

    def _report(self, doc: Document, diag: Diag, *args: object, error: bool) -> None:
        sink = require_not_none(
            self.sink,
            reason="cloud target checker has no diagnostics sink",
            doc=doc.file,
        )
        if sink is None:
            logger.warning("%s: %s", doc.file, diag.format(*args))
            return
        if error:
            sink.errorf(doc, diag, *args)
        else:
            sink.warningf(doc, diag, *args)


@dataclass
class NameBinder(NullVisitor):
    """Fills empty record names from their mapping keys."""

    def visit_parameter(self, doc: Document, name: str, param: Parameter) -> None:
        if not param.name:
            param.name = name

    def visit_dependency(self, doc: Document, name: Name, dep: Dependency) -> None:
        if not dep.name:
            dep.name = name

    def visit_service(
        self,
        doc: Document,
        name: Name,
        public: bool,
        svc: Service,
    ) -> None:
        if not svc.name:
            svc.name = name
        svc.public = public

    def visit_target(self, doc: Document, name: str, target: Target) -> None:
        if not target.name:
            target.name = name
