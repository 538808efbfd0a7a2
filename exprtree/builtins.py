import math
from typing import Callable

from exprtree.runtime import UnaryFunc

BUILTIN_FUNCS: dict[str, UnaryFunc] = dict()


def register_builtin_func(name: str) -> Callable[[UnaryFunc], UnaryFunc]:
    def decorator(fn: UnaryFunc) -> UnaryFunc:
        BUILTIN_FUNCS[name] = fn
        return fn

    return decorator


def _nan_outside_domain(fn: UnaryFunc) -> UnaryFunc:
    def wrapped(arg: float) -> float:
        try:
            return fn(arg)
        except ValueError:
            return math.nan

    return wrapped


register_builtin_func("sin")(_nan_outside_domain(math.sin))
register_builtin_func("cos")(_nan_outside_domain(math.cos))
register_builtin_func("tan")(_nan_outside_domain(math.tan))


@register_builtin_func("ln")
def ln_(arg: float) -> float:
    if arg == 0:
        return -math.inf
    if arg < 0 or math.isnan(arg):
        return math.nan
    return math.log(arg)
