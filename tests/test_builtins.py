import math

import pytest

from exprtree.builder import build_and_evaluate
from exprtree.builtins import BUILTIN_FUNCS


def test_registered_functions() -> None:
    assert set(BUILTIN_FUNCS) == {"sin", "cos", "tan", "ln"}


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("sin(0)", 0.0),
        pytest.param("cos(0)", 1.0),
        pytest.param("tan(0)", 0.0),
        pytest.param("ln(1)", 0.0),
        pytest.param("ln(0)", -math.inf),
    ],
)
def test_builtin_values(code: str, expected: float) -> None:
    assert build_and_evaluate(code, {}, BUILTIN_FUNCS) == expected


def test_out_of_domain_is_nan() -> None:
    assert math.isnan(build_and_evaluate("ln(0 - 1)", {}, BUILTIN_FUNCS))
    assert math.isnan(build_and_evaluate("sin(1 / 0)", {}, BUILTIN_FUNCS))
