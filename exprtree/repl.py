import argparse
import logging
import sys
from collections.abc import Mapping, MutableMapping
from typing import Callable, Optional

from exprtree.builder import build_and_evaluate
from exprtree.builtins import BUILTIN_FUNCS
from exprtree.parser import ParseError
from exprtree.runtime import EvalError, UnaryFunc, VariableResolver
from exprtree.tokenizer import LexError

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]


def make_prompt_resolver(input_fn: InputFunc = input, output_fn: OutputFunc = print) -> VariableResolver:
    """Resolver asking the user for the value of each unbound variable"""

    def resolve(name: str) -> float:
        while True:
            raw = input_fn(f"Enter value for variable {name}: ")
            try:
                return float(raw)
            except ValueError:
                output_fn(f"Not a number: {raw!r}")

    return resolve


def run_line(
    code: str,
    variables: MutableMapping[str, float],
    functions: Mapping[str, UnaryFunc],
    resolver: Optional[VariableResolver],
    strict: bool,
    output_fn: OutputFunc = print,
) -> bool:
    try:
        result = build_and_evaluate(code, variables, functions, resolver=resolver, strict=strict)
    except (LexError, ParseError, EvalError) as e:
        output_fn(str(e))
        return False
    except (ArithmeticError, ValueError) as e:
        # raised by a registered function
        output_fn(f"Error: {e}")
        return False

    output_fn(str(result))
    return True


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate arithmetic expressions with variables and functions")
    parser.add_argument("expression", nargs="?", help="expression to evaluate once (if empty, starts interactive mode)")
    parser.add_argument(
        "--no-prompt", action="store_true", help="treat unbound variables as errors instead of asking for a value"
    )
    parser.add_argument("--permissive", action="store_true", help="ignore tokens following a complete expression")
    parser.add_argument("-v", "--verbose", action="store_true", help="log tokens and trees")
    return parser


def main(argv: Optional[list[str]] = None, input_fn: InputFunc = input, output_fn: OutputFunc = print) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    variables: dict[str, float] = dict()
    resolver = None if args.no_prompt else make_prompt_resolver(input_fn, output_fn)
    strict = not args.permissive

    if args.expression is not None:
        try:
            ok = run_line(args.expression, variables, BUILTIN_FUNCS, resolver, strict, output_fn)
        except EOFError:
            output_fn("Input ended before a value was entered")
            return 1
        return 0 if ok else 1

    while True:
        try:
            code = input_fn("> ")
        except EOFError:
            return 0

        if not code.strip():
            continue

        try:
            run_line(code, variables, BUILTIN_FUNCS, resolver, strict, output_fn)
        except EOFError:
            return 0


if __name__ == "__main__":
    sys.exit(main())
