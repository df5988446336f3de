"""Lexer/tokenizer for tpastyle custom syntax expressions.

Converts an expression string such as ``opacity(color(color-1), 0.5)`` into a
stream of tokens for the parser.

Token types:
- Literals: NUMBER, STRING, WORD (dimensions, hex colors, operators)
- Identifiers: IDENTIFIER (function names, theme keys, --custom-properties)
- Punctuation: LPAREN, RPAREN, LBRACE, RBRACE, COMMA, COLON
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from tpastyle.errors import ExpressionSyntaxError


class TokenType(Enum):
    """Types of tokens in the expression language."""

    # Literals
    NUMBER = auto()
    STRING = auto()
    WORD = auto()        # 10px, #fff, +, 50%

    # Identifiers
    IDENTIFIER = auto()

    # Punctuation
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    LBRACE = auto()      # {
    RBRACE = auto()      # }
    COMMA = auto()       # ,
    COLON = auto()       # :

    # End of input
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: The token's value (number, string content, identifier name, etc.)
        position: Character position in the source string
    """

    type: TokenType
    value: str | int | float | None
    position: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


class LexerError(ExpressionSyntaxError):
    """Error during lexical analysis."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} at position {position}")


# Token patterns (order matters - longer matches first)
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"\s+", None),

    # Punctuation
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r"\{", TokenType.LBRACE),
    (r"\}", TokenType.RBRACE),
    (r",", TokenType.COMMA),
    (r":", TokenType.COLON),

    # Strings (double or single quoted, no escapes)
    (r'"[^"]*"', TokenType.STRING),
    (r"'[^']*'", TokenType.STRING),

    # Dimensions and percentages are kept verbatim
    (r"-?(?:\d+(?:\.\d+)?|\.\d+)(?:[a-zA-Z]+|%)", TokenType.WORD),

    # Numbers (integer and float)
    (r"-?\d+\.\d+(?![\w.])", TokenType.NUMBER),
    (r"-?\.\d+(?![\w.])", TokenType.NUMBER),
    (r"-?\d+(?![\w.])", TokenType.NUMBER),

    # Identifiers, including --custom-properties and hyphenated theme keys
    (r"-{0,2}[a-zA-Z_][a-zA-Z0-9_-]*", TokenType.IDENTIFIER),

    # Hex colors
    (r"#[0-9a-fA-F]+\b", TokenType.WORD),

    # Arithmetic operators for calculate()
    (r"[-+*/]", TokenType.WORD),
]

QUOTES = "\"'"


class Lexer:
    """Tokenizer for custom syntax expressions.

    Usage:
        lexer = Lexer('opacity(color(color-1), 0.5)')
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self._compiled_patterns = [
            (re.compile(pattern), token_type)
            for pattern, token_type in TOKEN_PATTERNS
        ]

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def next_token(self) -> Token:
        """Get the next token from the source."""
        while self.position < len(self.source):
            for pattern, token_type in self._compiled_patterns:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                char = self.source[self.position]
                if char in QUOTES:
                    raise LexerError("Unterminated string literal", self.position)
                raise LexerError(f"Unexpected character '{char}'", self.position)

            value = match.group()
            start_pos = self.position
            self.position = match.end()

            # Skip whitespace
            if token_type is None:
                continue

            token_value: str | int | float = value

            if token_type == TokenType.NUMBER:
                if "." in value:
                    token_value = float(value)
                else:
                    token_value = int(value)

            elif token_type == TokenType.STRING:
                token_value = value[1:-1]

            return Token(token_type, token_value, start_pos)

        return Token(TokenType.EOF, None, self.position)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)
