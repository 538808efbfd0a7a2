import enum
import re
from dataclasses import dataclass

from exprtree.utils import ExpressionError, PrintableEnum, point_at


@dataclass
class LexError(ExpressionError):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        return "\n".join([f"[Tokenizer error] {self.errmsg}", *point_at(self.code, self.error_char_idx)])


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    OPERATOR = enum.auto()
    VARIABLE_OR_FUNCTION = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    COMMA = enum.auto()
    EXPR_END = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


OPERATOR_CHARS = frozenset("+-*/^")

SINGLE_CHAR_TOKENS = {
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
    ",": TokenType.COMMA,
}


def _scan_digits(code: str, i: int) -> int:
    while i < len(code) and code[i].isdigit():
        i += 1
    return i


def _read_number(code: str, i: int) -> tuple[Token, int]:
    end_idx = _scan_digits(code, i)
    if end_idx < len(code) and code[end_idx] == ".":
        end_idx = _scan_digits(code, end_idx + 1)
    literal = code[i:end_idx]
    try:
        value = float(literal)
    except ValueError:
        raise LexError(f"invalid number literal: {literal!r}", code=code, error_char_idx=i) from None
    return Token(type=TokenType.NUMBER, lexeme=repr(value)), end_idx


def _read_identifier(code: str, i: int) -> tuple[Token, int]:
    end_idx = i
    while end_idx < len(code) and code[end_idx].isalpha():
        end_idx += 1
    if end_idx == i:
        raise LexError(f"unexpected character: {code[i]}", code=code, error_char_idx=i)
    return Token(type=TokenType.VARIABLE_OR_FUNCTION, lexeme=code[i:end_idx]), end_idx


def tokenize(code: str) -> list[Token]:
    """Split expression text into tokens, always terminated by a single EXPR_END token"""
    i = 0
    tokens: list[Token] = []
    while i < len(code):
        char = code[i]
        if char.isspace():
            i += 1
        elif char.isdigit():
            token, i = _read_number(code, i)
            tokens.append(token)
        elif char in OPERATOR_CHARS:
            tokens.append(Token(type=TokenType.OPERATOR, lexeme=char))
            i += 1
        elif char in SINGLE_CHAR_TOKENS:
            tokens.append(Token(type=SINGLE_CHAR_TOKENS[char], lexeme=char))
            i += 1
        else:
            token, i = _read_identifier(code, i)
            tokens.append(token)

    tokens.append(Token(type=TokenType.EXPR_END, lexeme=""))
    return tokens


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens).rstrip()

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)

    # sin (x) => sin(x)
    result = re.sub(r"([^\W\d_]+)\s+\(", r"\1(", result)

    # 1 , 2 => 1, 2
    result = re.sub(r"\s+,", ",", result)
    return result
