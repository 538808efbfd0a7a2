from collections.abc import Callable, Container
from dataclasses import dataclass

from exprtree.node import BinaryOperator, Node, Number, Operator, VariableOrFunction
from exprtree.tokenizer import Token, TokenType
from exprtree.utils import ExpressionError, point_at


@dataclass
class ParseError(ExpressionError):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    def __str__(self) -> str:
        code = " ".join(t.lexeme for t in self.tokens)
        error_char_idx = sum(len(t.lexeme) + 1 for t in self.tokens[: self.error_token_idx])
        return "\n".join([f"Parser error: {self.errmsg}", *point_at(code, error_char_idx)])


ADDITIVE_OPERATORS = (BinaryOperator.ADD, BinaryOperator.SUB)
MULTIPLICATIVE_OPERATORS = (BinaryOperator.MUL, BinaryOperator.DIV)
POWER_OPERATORS = (BinaryOperator.POW,)

OperandConsumer = Callable[[list[Token], int, Container[str]], tuple[Node, int]]


def parse(tokens: list[Token], functions: Container[str], strict: bool = True) -> Node:
    """Build an expression tree from tokens produced by ``tokenize``.

    ``functions`` only needs to support ``in``: an identifier found in it must be
    called with a parenthesized argument, any other identifier is a variable.

    With ``strict`` set, tokens left over after a complete expression are an
    error; otherwise they are ignored and the parsed prefix is returned.
    Nesting deeper than the interpreter stack allows raises ``ParseError``.
    """
    if not tokens or tokens[-1].type is not TokenType.EXPR_END:
        raise ParseError("Token list is not terminated by end of input", tokens=tokens, error_token_idx=len(tokens))

    try:
        result, i = _consume_expression(tokens, 0, functions)
    except RecursionError:
        raise ParseError("expression too deeply nested", tokens=tokens, error_token_idx=0) from None

    if strict and _peek(tokens, i).type is not TokenType.EXPR_END:
        raise ParseError(f"unexpected token after expression: {tokens[i].lexeme!r}", tokens=tokens, error_token_idx=i)
    return result


def _peek(tokens: list[Token], i: int) -> Token:
    if i >= len(tokens):
        raise ParseError("unexpected end of input", tokens=tokens, error_token_idx=len(tokens))
    return tokens[i]


def _operator_at(tokens: list[Token], i: int) -> BinaryOperator | None:
    token = _peek(tokens, i)
    if token.type is not TokenType.OPERATOR:
        return None
    return BinaryOperator(token.lexeme)


def _fold_left(
    tokens: list[Token],
    i: int,
    functions: Container[str],
    operators: tuple[BinaryOperator, ...],
    consume_operand: OperandConsumer,
) -> tuple[Node, int]:
    result, i = consume_operand(tokens, i, functions)
    while True:
        operator = _operator_at(tokens, i)
        if operator not in operators:
            return result, i
        right, i = consume_operand(tokens, i + 1, functions)
        result = Operator(operator=operator, left=result, right=right)


def _consume_expression(tokens: list[Token], i: int, functions: Container[str]) -> tuple[Node, int]:
    return _fold_left(tokens, i, functions, ADDITIVE_OPERATORS, _consume_term)


def _consume_term(tokens: list[Token], i: int, functions: Container[str]) -> tuple[Node, int]:
    return _fold_left(tokens, i, functions, MULTIPLICATIVE_OPERATORS, _consume_power)


def _consume_power(tokens: list[Token], i: int, functions: Container[str]) -> tuple[Node, int]:
    # folds left like the other levels: 2^3^2 is (2^3)^2
    return _fold_left(tokens, i, functions, POWER_OPERATORS, _consume_factor)


def _consume_closing_bracket(tokens: list[Token], i: int, errmsg: str) -> int:
    if _peek(tokens, i).type is not TokenType.BRACKET_CLOSE:
        raise ParseError(errmsg, tokens=tokens, error_token_idx=i)
    return i + 1


def _consume_factor(tokens: list[Token], i: int, functions: Container[str]) -> tuple[Node, int]:
    first = _peek(tokens, i)
    if first.type is TokenType.NUMBER:
        return Number(float(first.lexeme)), i + 1
    elif first.type is TokenType.VARIABLE_OR_FUNCTION:
        if first.lexeme not in functions:
            return VariableOrFunction(first.lexeme), i + 1
        if _peek(tokens, i + 1).type is not TokenType.BRACKET_OPEN:
            raise ParseError(f"Expected '(' after function name: {first.lexeme}", tokens=tokens, error_token_idx=i + 1)
        argument, i = _consume_expression(tokens, i + 2, functions)
        i = _consume_closing_bracket(tokens, i, "Expected ')' after function argument")
        return VariableOrFunction(first.lexeme, argument=argument), i
    elif first.type is TokenType.BRACKET_OPEN:
        result, i = _consume_expression(tokens, i + 1, functions)
        i = _consume_closing_bracket(tokens, i, "Expected ')'")
        return result, i
    elif first.type is TokenType.EXPR_END:
        raise ParseError("unexpected end of input", tokens=tokens, error_token_idx=i)
    else:
        raise ParseError(f"Unexpected token: {first}", tokens=tokens, error_token_idx=i)
