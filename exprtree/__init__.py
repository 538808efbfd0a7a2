from exprtree.builder import build_and_evaluate, build_expression_tree
from exprtree.parser import ParseError, parse
from exprtree.runtime import EvalError, evaluate, strict_resolver
from exprtree.tokenizer import LexError, tokenize
from exprtree.utils import ExpressionError

__all__ = [
    "EvalError",
    "ExpressionError",
    "LexError",
    "ParseError",
    "build_and_evaluate",
    "build_expression_tree",
    "evaluate",
    "parse",
    "strict_resolver",
    "tokenize",
]
