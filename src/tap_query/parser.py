"""Parser for the node query language."""

import logging

from .data import DataMethod
from .errors import QuerySyntaxError, UnknownAxisError
from .expression import (
    AndNode,
    AndNotNode,
    AttributeQuery,
    DataQuery,
    ExprNode,
    GroupNode,
    NameQuery,
    OrNode,
)
from .lexer import Token, TokenType, tokenize
from .matcher import MatchMethod, QueryType

logger = logging.getLogger(__name__)

MATCH_METHODS = {
    "u": MatchMethod.FIXED,
    "w": MatchMethod.WILDCARD,
    "r": MatchMethod.REGEX,
    "f": MatchMethod.FUZZY,
}

DATA_METHODS = {
    "t": DataMethod.TEXT,
    "r": DataMethod.REGEX,
}

AXES = {
    TokenType.NAME: QueryType.NAME,
    TokenType.ATTRIBUTE_NAME: QueryType.ATTRIBUTE_NAME,
}

CONNECTIVES = {
    TokenType.OR: OrNode,
    TokenType.AND: AndNode,
    TokenType.AND_NOT: AndNotNode,
}


class QueryParser:
    """Parser for query expressions.

    Grammar:
        query     := operand (connective operand)* EOF
        connective:= 'or' | 'and' | 'and not'
        operand   := '(' body ')' | leaf
        body      := operand (connective operand)*
        leaf      := axis '==' METHOD? LITERAL
                   | ATTRIBUTE LITERAL '==' METHOD? LITERAL
                   | 'data' '==' METHOD? LITERAL
        axis      := 'name' | 'attribute.name'

    All connectives share one precedence level and fold left to right:
    "A or B and C" is "(A or B) and C", not "A or (B and C)". Use
    parentheses to group differently.
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> ExprNode:
        """Parse tokens into expression tree.

        Returns:
            Expression tree root

        Raises:
            QuerySyntaxError: If the tokens do not form a query
            UnknownAxisError: If a leaf starts with an unknown axis word
        """
        expr = self._parse_body()
        if not self._check(TokenType.EOF):
            self._fail("Expected 'or', 'and' or 'and not'")
        return expr

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _match(self, token_type: TokenType) -> bool:
        """Check and consume token if it matches."""
        if self._check(token_type):
            self.pos += 1
            return True
        return False

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self.pos += 1
        return token

    def _fail(self, expected: str) -> None:
        token = self._current()
        raise QuerySyntaxError(f"{expected}, got {token.type.name}", token.position)

    def _expect(self, token_type: TokenType, description: str) -> Token:
        """Expect and consume a specific token type."""
        if not self._check(token_type):
            self._fail(f"Expected {description}")
        return self._advance()

    def _parse_body(self) -> ExprNode:
        """Fold connectives left to right over operands."""
        left = self._parse_operand()
        while self._current().type in CONNECTIVES:
            node_class = CONNECTIVES[self._advance().type]
            right = self._parse_operand()
            left = node_class(left, right)
        return left

    def _parse_operand(self) -> ExprNode:
        """Parse a grouped expression or a leaf."""
        if self._match(TokenType.LPAREN):
            expr = self._parse_body()
            self._expect(TokenType.RPAREN, "')'")
            return GroupNode(expr)

        token = self._current()
        if token.type in AXES:
            self._advance()
            return self._parse_name_leaf(AXES[token.type])
        if token.type == TokenType.ATTRIBUTE:
            self._advance()
            return self._parse_attribute_leaf(token)
        if token.type == TokenType.DATA:
            self._advance()
            return self._parse_data_leaf()
        if token.type == TokenType.WORD:
            raise UnknownAxisError(f"Unknown axis {token.value!r}", token.position)

        self._fail("Expected a query or '('")

    def _parse_method(self, methods: dict, default):
        """Parse an optional method letter from methods, else return default."""
        if not self._check(TokenType.METHOD):
            return default
        token = self._advance()
        if token.value not in methods:
            raise QuerySyntaxError(
                f"Match method {token.value!r} is not allowed here "
                f"(expected one of {', '.join(sorted(methods))})",
                token.position,
            )
        return methods[token.value]

    def _parse_literal(self) -> str:
        return self._expect(TokenType.LITERAL, "a quoted literal").value

    def _parse_name_leaf(self, query_type: QueryType) -> ExprNode:
        self._expect(TokenType.EQ, "'=='")
        method = self._parse_method(MATCH_METHODS, MatchMethod.FIXED)
        return NameQuery(query_type, self._parse_literal(), method)

    def _parse_attribute_leaf(self, prefix: Token) -> ExprNode:
        name_method = MATCH_METHODS[prefix.value] if prefix.value else MatchMethod.FIXED
        name = self._parse_literal()
        self._expect(TokenType.EQ, "'=='")
        value_method = self._parse_method(MATCH_METHODS, MatchMethod.FIXED)
        value = self._parse_literal()
        return AttributeQuery(name, value, name_method, value_method)

    def _parse_data_leaf(self) -> ExprNode:
        self._expect(TokenType.EQ, "'=='")
        method = self._parse_method(DATA_METHODS, DataMethod.REGEX)
        return DataQuery(self._parse_literal(), method)


def parse_query(query: str) -> ExprNode:
    """Parse query text into an expression tree.

    Raises:
        QuerySyntaxError: If query is not well formed
        UnknownAxisError: If a leaf starts with an unknown axis word
    """
    expression = QueryParser(tokenize(query)).parse()
    logger.debug("Parsed %r as %r", query, expression)
    return expression
