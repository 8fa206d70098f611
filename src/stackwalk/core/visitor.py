from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from stackwalk.diag import Document, Sink
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
from stackwalk.order_contract import ordered_or_sorted

logger = logging.getLogger(__name__)

STACK_KIND = "Stack"


class Phase(Protocol):
    def diag(self) -> Sink | None: ...


class Visitor(Phase, Protocol):
    """Observer contract for stack traversal.

    Implementations may read and mutate the record they are handed. A record
    reference is only valid for the duration of the call; the engine stores it
    back into its owning mapping once the call returns.
    """

    def visit_metadata(self, doc: Document, kind: str, meta: Metadata) -> None: ...

    def visit_stack(self, doc: Document, stack: Stack) -> None: ...

    def visit_parameter(self, doc: Document, name: str, param: Parameter) -> None: ...

    def visit_dependency(self, doc: Document, name: Name, dep: Dependency) -> None: ...

    def visit_services(self, doc: Document, svcs: Services) -> None: ...

    def visit_service(
        self,
        doc: Document,
        name: Name,
        public: bool,
        svc: Service,
    ) -> None: ...

    def visit_target(self, doc: Document, name: str, target: Target) -> None: ...


@dataclass
class NullVisitor:
    sink: Sink | None = None

    def diag(self) -> Sink | None:
        return self.sink

    def visit_metadata(self, doc: Document, kind: str, meta: Metadata) -> None:
        pass

    def visit_stack(self, doc: Document, stack: Stack) -> None:
        pass

    def visit_parameter(self, doc: Document, name: str, param: Parameter) -> None:
        pass

    def visit_dependency(self, doc: Document, name: Name, dep: Dependency) -> None:
        pass

    def visit_services(self, doc: Document, svcs: Services) -> None:
        pass

    def visit_service(
        self,
        doc: Document,
        name: Name,
        public: bool,
        svc: Service,
    ) -> None:
        pass

    def visit_target(self, doc: Document, name: str, target: Target) -> None:
        pass


class InOrderVisitor:
    """Walks a stack in a deterministic order around a pre and a post visitor.

    Every mapping is visited in lexicographic key order. For each record the
    pre visitor (if any) runs before the record's children are walked and the
    post visitor (if any) runs after. Leaf records are copied back into their
    owning mapping after each visit, even when the visitor raised.
    """

    def __init__(self, pre: Visitor | None = None, post: Visitor | None = None) -> None:
        self.pre = pre
        self.post = post

    def diag(self) -> Sink | None:
        if self.pre is not None:
            return self.pre.diag()
        if self.post is not None:
            return self.post.diag()
        return None

    def visit_metadata(self, doc: Document, kind: str, meta: Metadata) -> None:
        if self.pre is not None:
            self.pre.visit_metadata(doc, kind, meta)

        for name in ordered_or_sorted(
            list(meta.targets),
            source="visitor.metadata.targets",
        ):
            target = meta.targets[name]
            try:
                self.visit_target(doc, name, target)
            finally:
                meta.targets[name] = target

        if self.post is not None:
            self.post.visit_metadata(doc, kind, meta)

    def visit_stack(self, doc: Document, stack: Stack) -> None:
        if self.pre is not None:
            self.pre.visit_stack(doc, stack)

        self.visit_metadata(doc, STACK_KIND, stack.metadata)

        for name in ordered_or_sorted(
            list(stack.parameters),
            source="visitor.stack.parameters",
        ):
            param = stack.parameters[name]
            try:
                self.visit_parameter(doc, name, param)
            finally:
                stack.parameters[name] = param

        for dep_name in ordered_or_sorted(
            list(stack.dependencies),
            source="visitor.stack.dependencies",
        ):
            dep = stack.dependencies[dep_name]
            try:
                self.visit_dependency(doc, dep_name, dep)
            finally:
                stack.dependencies[dep_name] = dep

        self.visit_services(doc, stack.services)

        if self.post is not None:
            self.post.visit_stack(doc, stack)

    def visit_parameter(self, doc: Document, name: str, param: Parameter) -> None:
        if self.pre is not None:
            self.pre.visit_parameter(doc, name, param)
        if self.post is not None:
            self.post.visit_parameter(doc, name, param)

    def visit_dependency(self, doc: Document, name: Name, dep: Dependency) -> None:
        if self.pre is not None:
            self.pre.visit_dependency(doc, name, dep)
        if self.post is not None:
            self.post.visit_dependency(doc, name, dep)

    def visit_services(self, doc: Document, svcs: Services) -> None:
        if self.pre is not None:
            self.pre.visit_services(doc, svcs)

        for name in ordered_or_sorted(
            list(svcs.public),
            source="visitor.services.public",
        ):
            public = svcs.public[name]
            try:
                self.visit_service(doc, name, True, public)
            finally:
                svcs.public[name] = public

        for name in ordered_or_sorted(
            list(svcs.private),
            source="visitor.services.private",
        ):
            private = svcs.private[name]
            try:
                self.visit_service(doc, name, False, private)
            finally:
                svcs.private[name] = private

        if self.post is not None:
            self.post.visit_services(doc, svcs)

    def visit_service(
        self,
        doc: Document,
        name: Name,
        public: bool,
        svc: Service,
    ) -> None:
        if self.pre is not None:
            self.pre.visit_service(doc, name, public, svc)
        if self.post is not None:
            self.post.visit_service(doc, name, public, svc)

    def visit_target(self, doc: Document, name: str, target: Target) -> None:
        if self.pre is not None:
            self.pre.visit_target(doc, name, target)
        if self.post is not None:
            self.post.visit_target(doc, name, target)


def new_in_order_visitor(
    pre: Visitor | None = None,
    post: Visitor | None = None,
) -> InOrderVisitor:
    """Wrap a pre and/or post visitor in a deterministic walker; either may be None."""
    return InOrderVisitor(pre, post)


def walk(
    doc: Document,
    stack: Stack,
    visitor: Visitor | None,
    post: Visitor | None = None,
) -> None:
    """Walk ``stack`` in order, calling ``visitor`` before and ``post`` after children."""
    logger.debug("walking stack %r from %s", stack.metadata.name, doc.file)
    new_in_order_visitor(visitor, post).visit_stack(doc, stack)
    logger.debug("finished stack %r from %s", stack.metadata.name, doc.file)
