"""Lexer for normalized rule expressions."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from .exceptions import ParseError


class TokenType(Enum):
    """Types of tokens in rule expressions."""
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    IDENTIFIER = auto()

    # Equality
    EQ = auto()
    STRICT_EQ = auto()
    NEQ = auto()
    STRICT_NEQ = auto()

    # Relational
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    # Logical
    AND = auto()
    OR = auto()
    NOT = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()

    EOF = auto()


@dataclass
class Token:
    """A single token in the rule expression."""
    type: TokenType
    value: str | int | float | bool | None
    position: int


# Longest symbols first so "===" is never read as "==" followed by "=".
_SYMBOLS: tuple[tuple[str, TokenType], ...] = (
    ("===", TokenType.STRICT_EQ),
    ("!==", TokenType.STRICT_NEQ),
    ("==", TokenType.EQ),
    ("!=", TokenType.NEQ),
    ("<=", TokenType.LTE),
    (">=", TokenType.GTE),
    ("&&", TokenType.AND),
    ("||", TokenType.OR),
    ("<", TokenType.LT),
    (">", TokenType.GT),
    ("!", TokenType.NOT),
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
    ("%", TokenType.PERCENT),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    ("[", TokenType.LBRACKET),
    ("]", TokenType.RBRACKET),
    (",", TokenType.COMMA),
)

# Characters that only make sense doubled
_HALF_OPERATORS = {"=": "==", "&": "&&", "|": "||"}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


class Lexer:
    """Tokenizes rule strings."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.current_char = self.text[0] if self.text else None

    def error(self, message: str, position: int | None = None) -> None:
        """Raise a parse error at ``position`` (default: the current one)."""
        pos = self.pos if position is None else position
        raise ParseError(message, pos, self.text[pos:pos + 10] or None)

    def advance(self, count: int = 1) -> None:
        """Move forward by ``count`` characters."""
        self.pos += count
        self.current_char = self.text[self.pos] if self.pos < len(self.text) else None

    def peek(self, offset: int = 1) -> str | None:
        """Look ahead without moving."""
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else None

    def skip_whitespace(self) -> None:
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def _read_while(self, predicate) -> str:
        start = self.pos
        while self.current_char is not None and predicate(self.current_char):
            self.advance()
        return self.text[start:self.pos]

    def _number(self) -> Token:
        """Integer, or float when a digit follows the decimal point."""
        start_pos = self.pos
        digits = self._read_while(str.isdigit)

        if self.current_char == "." and (self.peek() or "").isdigit():
            self.advance()
            fraction = self._read_while(str.isdigit)
            return Token(TokenType.FLOAT, float(f"{digits}.{fraction}"), start_pos)

        return Token(TokenType.INTEGER, int(digits), start_pos)

    def _string(self) -> Token:
        """Quoted string; a backslash escapes the next character."""
        start_pos = self.pos
        quote = self.current_char
        self.advance()

        chars: list[str] = []
        while self.current_char is not None and self.current_char != quote:
            if self.current_char == "\\":
                self.advance()
                if self.current_char is None:
                    break
                chars.append(_ESCAPES.get(self.current_char, self.current_char))
            else:
                chars.append(self.current_char)
            self.advance()

        if self.current_char is None:
            self.error("Unterminated string literal", start_pos)

        self.advance()
        return Token(TokenType.STRING, "".join(chars), start_pos)

    def _identifier(self) -> Token:
        """Field name, or a ``true``/``false`` boolean literal."""
        start_pos = self.pos
        name = self._read_while(lambda c: c.isalnum() or c in "_$")

        if name in ("true", "false"):
            return Token(TokenType.BOOLEAN, name == "true", start_pos)
        return Token(TokenType.IDENTIFIER, name, start_pos)

    def _symbol(self) -> Token:
        start_pos = self.pos
        for symbol, token_type in _SYMBOLS:
            if self.text.startswith(symbol, start_pos):
                self.advance(len(symbol))
                return Token(token_type, symbol, start_pos)

        char = self.current_char
        if char in _HALF_OPERATORS:
            self.error(f"Unexpected character '{char}'. Did you mean '{_HALF_OPERATORS[char]}'?")
        self.error(f"Invalid character '{char}'")
        raise AssertionError("unreachable")

    def get_next_token(self) -> Token:
        """Get the next token from input."""
        self.skip_whitespace()

        if self.current_char is None:
            return Token(TokenType.EOF, None, self.pos)
        if self.current_char.isdigit():
            return self._number()
        if self.current_char in ("'", '"'):
            return self._string()
        if self.current_char.isalpha() or self.current_char in "_$":
            return self._identifier()
        return self._symbol()

    def tokenize(self) -> Iterator[Token]:
        """Generator that yields all tokens."""
        while True:
            token = self.get_next_token()
            yield token
            if token.type == TokenType.EOF:
                break
