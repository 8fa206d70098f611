from stackwalk.core.visitor import (
    InOrderVisitor,
    NullVisitor,
    Phase,
    Visitor,
    new_in_order_visitor,
    walk,
)

__all__ = [
    "InOrderVisitor",
    "NullVisitor",
    "Phase",
    "Visitor",
    "new_in_order_visitor",
    "walk",
]
