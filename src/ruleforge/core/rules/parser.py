"""Parser for normalized rule expressions."""

from .ast import (
    ArrayExpression,
    BinaryExpression,
    CallExpression,
    Expression,
    Identifier,
    Literal,
    UnaryExpression,
)
from .exceptions import ParseError
from .lexer import Lexer, Token, TokenType

DEFAULT_MAX_DEPTH = 64

# Binary precedence levels, loosest first. Every level is left-associative.
_BINARY_LEVELS: tuple[tuple[TokenType, ...], ...] = (
    (TokenType.OR,),
    (TokenType.AND,),
    (TokenType.EQ, TokenType.STRICT_EQ, TokenType.NEQ, TokenType.STRICT_NEQ),
    (TokenType.LT, TokenType.GT, TokenType.LTE, TokenType.GTE),
    (TokenType.PLUS, TokenType.MINUS),
    (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT),
)

_UNARY_OPERATORS = (TokenType.NOT, TokenType.MINUS, TokenType.PLUS)


class Parser:
    """Recursive descent parser for rule expressions."""

    def __init__(self, lexer: Lexer, max_depth: int = DEFAULT_MAX_DEPTH):
        self.lexer = lexer
        self.max_depth = max_depth
        self.depth = 0
        self.current_token: Token = self.lexer.get_next_token()

    def error(self, message: str) -> None:
        """Raise a parse error at the current token."""
        token = self.current_token
        fragment = None if token.value is None else str(token.value)
        raise ParseError(message, token.position, fragment)

    def consume(self, token_type: TokenType) -> None:
        """Consume the current token if it matches the expected type."""
        if self.current_token.type == token_type:
            self.current_token = self.lexer.get_next_token()
        else:
            self.error(f"Expected {token_type.name}, found {self.current_token.type.name}")

    def parse(self) -> Expression:
        """Parse the entire expression."""
        if self.current_token.type == TokenType.EOF:
            self.error("Empty expression")
        node = self.expression()
        if self.current_token.type != TokenType.EOF:
            self.error("Unexpected token after expression")
        return node

    def expression(self) -> Expression:
        """Parse a full expression starting at the loosest precedence level."""
        self.depth += 1
        if self.depth > self.max_depth:
            self.error(f"Expression nesting exceeds maximum depth of {self.max_depth}")
        try:
            return self._binary(0)
        finally:
            self.depth -= 1

    def _binary(self, level: int) -> Expression:
        """Parse one left-associative binary precedence level."""
        if level == len(_BINARY_LEVELS):
            return self.unary()

        node = self._binary(level + 1)
        while self.current_token.type in _BINARY_LEVELS[level]:
            operator = str(self.current_token.value)
            self.consume(self.current_token.type)
            right = self._binary(level + 1)
            node = BinaryExpression(operator=operator, left=node, right=right)

        return node

    def unary(self) -> Expression:
        """Parse prefix operators, which bind tightest."""
        if self.current_token.type in _UNARY_OPERATORS:
            operator = str(self.current_token.value)
            self.consume(self.current_token.type)
            self.depth += 1
            if self.depth > self.max_depth:
                self.error(f"Expression nesting exceeds maximum depth of {self.max_depth}")
            try:
                argument = self.unary()
            finally:
                self.depth -= 1
            return UnaryExpression(operator=operator, argument=argument)

        return self.atom()

    def atom(self) -> Expression:  # noqa: C901
        """Parse basic units: literals, identifiers, calls, arrays, parentheses."""
        token = self.current_token

        if token.type in (TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING, TokenType.BOOLEAN):
            self.consume(token.type)
            return Literal(token.value)

        if token.type == TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            node = self.expression()
            self.consume(TokenType.RPAREN)
            return node

        if token.type == TokenType.LBRACKET:
            self.consume(TokenType.LBRACKET)
            return ArrayExpression(self._arguments(TokenType.RBRACKET))

        if token.type == TokenType.IDENTIFIER:
            name = str(token.value)
            self.consume(TokenType.IDENTIFIER)

            if self.current_token.type == TokenType.LPAREN:
                self.consume(TokenType.LPAREN)
                return CallExpression(name, self._arguments(TokenType.RPAREN))

            return Identifier(name)

        if token.type == TokenType.EOF:
            self.error("Unexpected end of expression")
        self.error(f"Unexpected token: {token.type.name}")
        return Expression()  # Should not reach here

    def _arguments(self, closing: TokenType) -> list[Expression]:
        """Parse a comma-separated list up to and including ``closing``."""
        items: list[Expression] = []

        if self.current_token.type != closing:
            items.append(self.expression())
            while self.current_token.type == TokenType.COMMA:
                self.consume(TokenType.COMMA)
                items.append(self.expression())

        self.consume(closing)
        return items


def parse_expression(normalized: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Expression:
    """Parse a normalized rule string into a generic expression tree."""
    return Parser(Lexer(normalized), max_depth=max_depth).parse()
