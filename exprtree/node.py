"""Expression tree produced by the parser and consumed by the evaluator.

The tree is a closed union of three frozen dataclasses. A ``VariableOrFunction``
node is a variable reference when it has no argument and a function call when it
has one; which one applies is decided against the function registry both when
parsing and when evaluating.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from exprtree.utils import PrintableEnum


class NodeKind(PrintableEnum):
    NUMBER = enum.auto()
    VARIABLE_OR_FUNCTION = enum.auto()
    OPERATOR = enum.auto()


class BinaryOperator(PrintableEnum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


@dataclass(frozen=True)
class Number:
    value: float

    @property
    def kind(self) -> NodeKind:
        return NodeKind.NUMBER

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True)
class VariableOrFunction:
    name: str
    argument: Optional["Node"] = None

    @property
    def kind(self) -> NodeKind:
        return NodeKind.VARIABLE_OR_FUNCTION

    @property
    def children(self) -> tuple["Node", ...]:
        return () if self.argument is None else (self.argument,)

    @property
    def is_call(self) -> bool:
        return self.argument is not None

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True)
class Operator:
    operator: BinaryOperator
    left: "Node"
    right: "Node"

    @property
    def kind(self) -> NodeKind:
        return NodeKind.OPERATOR

    @property
    def children(self) -> tuple["Node", ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return render(self)


Node = Number | VariableOrFunction | Operator


def render(node: Node) -> str:
    """Fully parenthesized text of the tree, e.g. ((1.0 + 2.0) * x)"""
    pending: list[tuple[Node, bool]] = [(node, False)]
    parts: list[str] = []
    while pending:
        current, children_ready = pending.pop()
        if isinstance(current, Number):
            parts.append(repr(current.value))
        elif isinstance(current, VariableOrFunction):
            if not current.is_call:
                parts.append(current.name)
            elif children_ready:
                parts.append(f"{current.name}({parts.pop()})")
            else:
                pending.append((current, True))
                pending.append((current.argument, False))
        elif isinstance(current, Operator):
            if children_ready:
                right = parts.pop()
                left = parts.pop()
                parts.append(f"({left} {current.operator.value} {right})")
            else:
                pending.append((current, True))
                pending.append((current.right, False))
                pending.append((current.left, False))
        else:
            raise TypeError(f"Unexpected node type: {current!r}")
    return parts.pop()
