"""Tokenizer for the node query language."""

import re
from dataclasses import dataclass
from enum import Enum, auto

from .errors import QuerySyntaxError


class TokenType(Enum):
    """Token types for the query parser."""

    OR = auto()  # or
    AND = auto()  # and
    AND_NOT = auto()  # and not
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    EQ = auto()  # ==
    NAME = auto()  # name
    ATTRIBUTE_NAME = auto()  # attribute.name
    DATA = auto()  # data
    ATTRIBUTE = auto()  # attribute: or attribute:u/w/r/f
    METHOD = auto()  # u w r f t, directly before a literal
    LITERAL = auto()  # 'text'
    WORD = auto()  # any other bare word
    EOF = auto()  # End of tokens


@dataclass
class Token:
    """Token of a query, with its offset in the query text."""

    type: TokenType
    value: str | None = None
    position: int = 0


# Order matters: the first pattern that matches at a position wins, so longer
# keywords come before their prefixes.
TOKEN_PATTERNS = [
    (TokenType.AND_NOT, re.compile(r"and\s+not\b")),
    (TokenType.AND, re.compile(r"and\b")),
    (TokenType.OR, re.compile(r"or\b")),
    (TokenType.ATTRIBUTE_NAME, re.compile(r"attribute\.name\b")),
    (TokenType.ATTRIBUTE, re.compile(r"attribute:([uwrf](?=')|)")),
    (TokenType.NAME, re.compile(r"name\b")),
    (TokenType.DATA, re.compile(r"data\b")),
    (TokenType.EQ, re.compile(r"==")),
    (TokenType.LPAREN, re.compile(r"\(")),
    (TokenType.RPAREN, re.compile(r"\)")),
    (TokenType.METHOD, re.compile(r"[uwrft](?=')")),
    (TokenType.LITERAL, re.compile(r"'([^']+)'")),
    (TokenType.WORD, re.compile(r"[A-Za-z_][\w.:]*")),
]

WHITESPACE = re.compile(r"\s+")


def tokenize(query: str) -> list[Token]:
    """Split query text into tokens.

    Literal values are returned without their quotes. Literals have no
    escape mechanism, so a value cannot contain a single quote.

    Args:
        query: Query text

    Returns:
        Tokens, terminated by an EOF token

    Raises:
        QuerySyntaxError: On a character that starts no token, or an empty
                          or unterminated literal
    """
    tokens = []
    pos = 0

    while pos < len(query):
        ws = WHITESPACE.match(query, pos)
        if ws:
            pos = ws.end()
            continue

        for token_type, pattern in TOKEN_PATTERNS:
            m = pattern.match(query, pos)
            if m:
                break
        else:
            if query[pos] == "'":
                raise QuerySyntaxError("Unterminated or empty literal", pos)
            raise QuerySyntaxError(f"Unexpected character {query[pos]!r}", pos)

        if token_type in (TokenType.LITERAL, TokenType.ATTRIBUTE):
            value = m.group(1)
        elif token_type in (TokenType.METHOD, TokenType.WORD):
            value = m.group(0)
        else:
            value = None
        tokens.append(Token(token_type, value, pos))
        pos = m.end()

    tokens.append(Token(TokenType.EOF, None, len(query)))
    return tokens
