import logging
import math
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Optional

from exprtree.node import BinaryOperator, Node, Number, Operator, VariableOrFunction
from exprtree.utils import ExpressionError

logger = logging.getLogger(__name__)


@dataclass
class EvalError(ExpressionError):
    errmsg: str

    def __str__(self) -> str:
        return f"Evaluation error: {self.errmsg}"


UnaryFunc = Callable[[float], float]
VariableResolver = Callable[[str], float]
BinaryOperationImpl = Callable[[float, float], float]


def strict_resolver(name: str) -> float:
    """Resolver for non-interactive use: every unbound variable is an error"""
    raise EvalError(f"undefined variable: {name}")


def evaluate(
    node: Node,
    variables: MutableMapping[str, float],
    functions: Mapping[str, UnaryFunc],
    resolver: Optional[VariableResolver] = None,
) -> float:
    """Compute the value of an expression tree.

    Names registered in ``functions`` are applied to their evaluated argument,
    other names are looked up in ``variables``. When a variable is missing and
    ``resolver`` is given, the value it returns is stored into ``variables``
    before being used, so later references (and later evaluations with the same
    mapping) see it without asking again. Without a resolver a missing variable
    raises ``EvalError``.

    The tree is walked with an explicit stack, so depth is not limited by the
    interpreter's recursion limit. Operands are still evaluated left first.
    """
    # (node, operands_ready) pairs; a node is revisited once its operands are on ``results``
    pending: list[tuple[Node, bool]] = [(node, False)]
    results: list[float] = []
    while pending:
        current, operands_ready = pending.pop()
        if isinstance(current, Number):
            results.append(current.value)
        elif isinstance(current, VariableOrFunction):
            if current.name in functions:
                if not current.is_call:
                    raise EvalError(f"function {current.name!r} referenced without an argument")
                if operands_ready:
                    results.append(functions[current.name](results.pop()))
                else:
                    pending.append((current, True))
                    pending.append((current.argument, False))
            elif current.is_call:
                raise EvalError(f"{current.name!r} is called but is not a registered function")
            else:
                results.append(_lookup_variable(current.name, variables, resolver))
        elif isinstance(current, Operator):
            impl = BINARY_OPERATION_IMPLS.get(current.operator)
            if impl is None:
                raise EvalError(f"unknown operator: {current.operator}")
            if operands_ready:
                right_res = results.pop()
                left_res = results.pop()
                results.append(impl(left_res, right_res))
            else:
                pending.append((current, True))
                pending.append((current.right, False))
                pending.append((current.left, False))
        else:
            raise EvalError(f"unknown node kind: {current!r}")
    return results.pop()


def _lookup_variable(name: str, variables: MutableMapping[str, float], resolver: Optional[VariableResolver]) -> float:
    if name in variables:
        return variables[name]
    if resolver is None:
        raise EvalError(f"undefined variable: {name}")
    value = float(resolver(name))
    logger.debug("Binding resolved variable %s = %r", name, value)
    variables[name] = value
    return value


def ieee_div(a: float, b: float) -> float:
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and x % 2 == 1


def ieee_pow(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except ValueError:
        # math.pow refuses a zero base with a negative exponent and a negative
        # base with a non-integer exponent
        if a == 0:
            return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
        return math.nan
    except OverflowError:
        return -math.inf if a < 0 and _is_odd_integer(b) else math.inf


BINARY_OPERATION_IMPLS: dict[BinaryOperator, BinaryOperationImpl] = {
    BinaryOperator.ADD: lambda a, b: a + b,
    BinaryOperator.SUB: lambda a, b: a - b,
    BinaryOperator.MUL: lambda a, b: a * b,
    BinaryOperator.DIV: ieee_div,
    BinaryOperator.POW: ieee_pow,
}
