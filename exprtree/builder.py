"""Text in, tree (or number) out: tokenizer, parser and evaluator glued together."""
import logging
from collections.abc import Mapping, MutableMapping
from typing import Optional

from exprtree.node import Node, render
from exprtree.parser import parse
from exprtree.runtime import UnaryFunc, VariableResolver, evaluate
from exprtree.tokenizer import tokenize, untokenize

logger = logging.getLogger(__name__)


def build_expression_tree(code: str, functions: Mapping[str, UnaryFunc], strict: bool = True) -> Node:
    tokens = tokenize(code)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tokens: %s", " ".join(str(t) for t in tokens))
    tree = parse(tokens, functions, strict=strict)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tree for %r: %s", untokenize(tokens), render(tree))
    return tree


def build_and_evaluate(
    code: str,
    variables: MutableMapping[str, float],
    functions: Mapping[str, UnaryFunc],
    resolver: Optional[VariableResolver] = None,
    strict: bool = True,
) -> float:
    """Tokenize, parse and evaluate ``code``; errors from any stage propagate unchanged"""
    tree = build_expression_tree(code, functions, strict=strict)
    return evaluate(tree, variables, functions, resolver)
