import math

import pytest

from exprtree.builder import build_and_evaluate
from exprtree.builtins import BUILTIN_FUNCS
from exprtree.parser import ParseError
from exprtree.runtime import EvalError
from exprtree.tokenizer import LexError


@pytest.mark.parametrize(
    "code, expected_ret_val",
    [
        pytest.param("1", 1.0),
        pytest.param("2 + 3", 5.0),
        pytest.param("(1+2)", 3.0),
        pytest.param("(((1)))", 1.0),
        pytest.param("1 * 4 + 5", 9.0),
        pytest.param("1 + 4 * 5", 21.0),
        pytest.param("2 + 3 * 4", 14.0),
        pytest.param("(2 + 3) * 4", 20.0),
        pytest.param("8 - 3 - 2", 3.0, id="minus is left associative"),
        pytest.param("10 / 5 / 2 / 2", 0.5),
        pytest.param("2 ^ 3 ^ 2", 64.0, id="power is left associative"),
        pytest.param("2 * 3 ^ 2", 18.0),
        pytest.param("10 + 2 * (5 + 3 - 1)", 24.0),
        pytest.param("1.5 * 4", 6.0),
        # variables
        pytest.param("x + 3", 5.0),
        pytest.param("x * y - x", 6.0),
        # funcs
        pytest.param("ln(1)", 0.0),
        pytest.param("cos(0) + ln(x - 1)", 1.0),
    ],
)
def test_eval_arithmetic(code: str, expected_ret_val: float) -> None:
    variables = {"x": 2.0, "y": 4.0}
    assert build_and_evaluate(code, variables, BUILTIN_FUNCS) == expected_ret_val


def test_complex_expression() -> None:
    variables = {"x": 2.0, "y": 2.0}
    assert build_and_evaluate("2 * (x + 3) ^ (1 / y)", variables, {}) == pytest.approx(4.4721, abs=0.01)
    assert build_and_evaluate("2 * (2 + 3) ^ (1 / 2)", {}, {}) == pytest.approx(4.4721, abs=0.01)


def test_function_application() -> None:
    variables = {"pi": math.pi}
    assert build_and_evaluate("sin(pi/2)", variables, {"sin": math.sin}) == pytest.approx(1.0)


def test_same_input_gives_same_result() -> None:
    code = "sin(x) ^ 2 + cos(x) ^ 2 + x / 3"
    results = {build_and_evaluate(code, {"x": 0.7}, BUILTIN_FUNCS) for _ in range(5)}
    assert len(results) == 1


@pytest.mark.parametrize(
    "code, error_type",
    [
        pytest.param("2 $ 3", LexError),
        pytest.param("2 + * 3", ParseError),
        pytest.param("sin x", ParseError),
        pytest.param("x + 1", EvalError),
    ],
)
def test_errors_surface_from_their_stage(code: str, error_type: type) -> None:
    with pytest.raises(error_type):
        build_and_evaluate(code, {}, BUILTIN_FUNCS)


def test_undefined_variable_message() -> None:
    with pytest.raises(EvalError) as exc_info:
        build_and_evaluate("x + 1", {}, BUILTIN_FUNCS)
    assert exc_info.value.errmsg == "undefined variable: x"


def test_trailing_tokens() -> None:
    with pytest.raises(ParseError):
        build_and_evaluate("2 + 3 ) ", {}, {})
    assert build_and_evaluate("2 + 3 ) ", {}, {}, strict=False) == 5.0


def test_long_flat_sum() -> None:
    code = " + ".join(["1"] * 1500)
    assert build_and_evaluate(code, {}, BUILTIN_FUNCS) == 1500.0


def test_long_chain_with_variables_and_calls() -> None:
    code = " - ".join(["ln(x)"] * 1200)
    assert build_and_evaluate(code, {"x": 1.0}, BUILTIN_FUNCS) == 0.0


def test_moderate_nesting() -> None:
    code = "(" * 50 + "1 + 2" + ")" * 50
    assert build_and_evaluate(code, {}, BUILTIN_FUNCS) == 3.0


def test_excessive_nesting_is_a_parse_error() -> None:
    with pytest.raises(ParseError) as exc_info:
        build_and_evaluate("(" * 5000 + "1" + ")" * 5000, {}, BUILTIN_FUNCS)
    assert exc_info.value.errmsg == "expression too deeply nested"

    with pytest.raises(ParseError):
        build_and_evaluate("sin(" * 5000 + "1" + ")" * 5000, {}, BUILTIN_FUNCS)
