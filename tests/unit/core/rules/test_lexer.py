"""Tests for the rule expression lexer."""

import pytest

from ruleforge.core.rules.exceptions import ParseError
from ruleforge.core.rules.lexer import Lexer, TokenType


def _types(text: str) -> list[TokenType]:
    return [token.type for token in Lexer(text).tokenize()]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_string(self):
        lexer = Lexer("")
        assert lexer.get_next_token().type == TokenType.EOF

    def test_whitespace_only(self):
        lexer = Lexer("   \t\n  ")
        assert lexer.get_next_token().type == TokenType.EOF


class TestLexerLiterals:
    """Test lexing literal values."""

    def test_integer(self):
        token = Lexer("42").get_next_token()
        assert token.type == TokenType.INTEGER
        assert token.value == 42

    def test_float(self):
        token = Lexer("3.14").get_next_token()
        assert token.type == TokenType.FLOAT
        assert token.value == 3.14

    def test_string_single_quotes(self):
        token = Lexer("'hello world'").get_next_token()
        assert token.type == TokenType.STRING
        assert token.value == "hello world"

    def test_string_double_quotes(self):
        token = Lexer('"hello world"').get_next_token()
        assert token.type == TokenType.STRING
        assert token.value == "hello world"

    def test_string_with_escapes(self):
        token = Lexer(r'"hello \"world\""').get_next_token()
        assert token.value == 'hello "world"'

    def test_booleans(self):
        tokens = list(Lexer("true false").tokenize())
        assert tokens[0].type == TokenType.BOOLEAN
        assert tokens[0].value is True
        assert tokens[1].type == TokenType.BOOLEAN
        assert tokens[1].value is False


class TestLexerOperators:
    """Test lexing operators."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("==", TokenType.EQ),
            ("===", TokenType.STRICT_EQ),
            ("!=", TokenType.NEQ),
            ("!==", TokenType.STRICT_NEQ),
            ("<", TokenType.LT),
            ("<=", TokenType.LTE),
            (">", TokenType.GT),
            (">=", TokenType.GTE),
            ("&&", TokenType.AND),
            ("||", TokenType.OR),
            ("!", TokenType.NOT),
            ("+", TokenType.PLUS),
            ("%", TokenType.PERCENT),
        ],
    )
    def test_operator(self, text, expected):
        token = Lexer(text).get_next_token()
        assert token.type == expected
        assert token.value == text

    def test_double_greater_is_two_tokens(self):
        """There is no shift operator."""
        assert _types("a >> 30") == [
            TokenType.IDENTIFIER,
            TokenType.GT,
            TokenType.GT,
            TokenType.INTEGER,
            TokenType.EOF,
        ]


class TestLexerExpressions:
    """Test lexing complete expressions."""

    def test_normalized_rule(self):
        tokens = list(Lexer("age > 30 && department == 'Sales'").tokenize())

        assert tokens[0].value == "age"
        assert tokens[1].type == TokenType.GT
        assert tokens[2].value == 30
        assert tokens[3].type == TokenType.AND
        assert tokens[4].value == "department"
        assert tokens[5].type == TokenType.EQ
        assert tokens[6].type == TokenType.STRING
        assert tokens[6].value == "Sales"
        assert tokens[7].type == TokenType.EOF

    def test_positions(self):
        tokens = list(Lexer("age > 30").tokenize())
        assert [token.position for token in tokens] == [0, 4, 6, 8]


class TestLexerErrors:
    """Test lexer error handling."""

    def test_unterminated_string(self):
        with pytest.raises(ParseError, match="Unterminated string literal") as exc_info:
            list(Lexer("name == 'hello").tokenize())
        assert exc_info.value.position == 8

    def test_invalid_character(self):
        with pytest.raises(ParseError, match="Invalid character") as exc_info:
            list(Lexer("age # 3").tokenize())
        assert exc_info.value.position == 4
        assert exc_info.value.fragment.startswith("#")

    def test_single_equals(self):
        with pytest.raises(ParseError, match="Did you mean '=='"):
            Lexer("=").get_next_token()

    def test_single_ampersand(self):
        with pytest.raises(ParseError, match="Did you mean '&&'"):
            Lexer("&").get_next_token()

    def test_single_pipe(self):
        with pytest.raises(ParseError, match="Did you mean '\\|\\|'"):
            Lexer("|").get_next_token()

    def test_dotted_access_is_rejected(self):
        with pytest.raises(ParseError, match="Invalid character '.'"):
            list(Lexer("user.age").tokenize())
