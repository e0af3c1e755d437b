"""Tokenizer for the expression language."""

from __future__ import annotations

import re

from flarkviz.expression_types import Token, TokenType

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
    | (?P<number>[0-9.]+)
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<op>==|!=|<=|>=|&&|\|\||[-+*/%(),;=<>])
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_NUMBER_PREFIX = re.compile(r"\d+\.?\d*|\.\d+")

_OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "=": TokenType.ASSIGN,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<": TokenType.LESS,
    ">": TokenType.GREATER,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
}


def _parse_number(text: str) -> float:
    """Parse the longest valid decimal prefix of a run of digits and dots."""
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid number: {text!r}")
    return float(match.group())


def tokenize(expression: str) -> list[Token]:
    """Split ``expression`` into tokens, ending with an END token.

    Unrecognised characters are skipped. A numeric run with no digits
    before its first second dot (such as ``"."``) raises ValueError.
    """
    tokens: list[Token] = []
    for match in _TOKEN_PATTERN.finditer(expression):
        kind = match.lastgroup
        text = match.group()
        if kind == "number":
            tokens.append(Token(TokenType.NUMBER, value=_parse_number(text)))
        elif kind == "ident":
            tokens.append(Token(TokenType.IDENTIFIER, text=text))
        elif kind == "op":
            tokens.append(Token(_OPERATORS[text]))
    tokens.append(Token(TokenType.END))
    return tokens