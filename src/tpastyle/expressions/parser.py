"""Parser for tpastyle custom syntax expressions.

Converts a stream of tokens into a call tree.

Grammar:
    call     := identifier '(' argList? ')'
    argList  := arg (',' arg)*
    arg      := call | literal | identifier | object
    literal  := quotedString | number | word
    object   := '{' (key ':' value (',' key ':' value)*)? '}'

Calls are parsed with an explicit stack instead of recursion, so nesting
depth is bounded only by the length of the input.
"""

from dataclasses import dataclass, field
from typing import Any

from tpastyle.constants import DIRECTION_TOKENS
from tpastyle.errors import ExpressionSyntaxError
from tpastyle.expressions.lexer import Lexer, Token, TokenType


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ASTNode:
    """Base class for AST nodes."""
    pass


@dataclass(frozen=True)
class Literal(ASTNode):
    """A literal value (number or string)."""
    value: Any


@dataclass(frozen=True)
class Identifier(ASTNode):
    """A theme parameter or custom property reference."""
    name: str


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """Function call (e.g., color(color-1), opacity(red, 0.5))."""
    name: str
    arguments: tuple[ASTNode, ...]


@dataclass(frozen=True)
class ObjectLiteral(ASTNode):
    """Bare object shorthand (e.g., {theme: 'Body-M', size: 20px})."""
    pairs: tuple[tuple[str, Literal], ...]


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


class ParseError(ExpressionSyntaxError):
    """Error during parsing."""

    def __init__(self, message: str, token: Token):
        self.token = token
        super().__init__(f"{message} at position {token.position}")


@dataclass
class _PendingCall:
    """A call whose closing parenthesis has not been reached yet."""
    name: str
    arguments: list[ASTNode] = field(default_factory=list)


class Parser:
    """Iterative parser for the custom syntax call grammar.

    Usage:
        parser = Parser('opacity(color(color-1), 0.5)')
        tree = parser.parse()
    """

    def __init__(self, source: str):
        self.source = source
        self.lexer = Lexer(source)
        self.tokens = self.lexer.tokenize()
        self.position = 0

    def parse(self) -> FunctionCall:
        """Parse the expression and return the call tree root."""
        if self._is_at_end():
            raise ParseError("Empty expression", self._current())

        tree = self._parse_call()

        if not self._is_at_end():
            raise ParseError(
                f"Unexpected token '{self._current().value}'",
                self._current(),
            )

        return tree

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        """Get current token."""
        if self.position >= len(self.tokens):
            return Token(TokenType.EOF, None, len(self.source))
        return self.tokens[self.position]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at a token without consuming it."""
        pos = self.position + offset
        if pos >= len(self.tokens):
            return Token(TokenType.EOF, None, len(self.source))
        return self.tokens[pos]

    def _is_at_end(self) -> bool:
        """Check if we've consumed all tokens."""
        return self._current().type == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self.position += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self._current().type in types

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume a token of the expected type, or raise error."""
        if self._current().type == token_type:
            return self._advance()
        raise ParseError(message, self._current())

    # -------------------------------------------------------------------------
    # Parsing methods
    # -------------------------------------------------------------------------

    def _open_call(self) -> _PendingCall:
        """Consume `name(` and return the pending call."""
        if self._match(TokenType.LPAREN):
            raise ParseError("Empty function name", self._current())
        name_token = self._consume(TokenType.IDENTIFIER, "Expected function name")
        self._consume(TokenType.LPAREN, "Expected '(' after function name")
        return _PendingCall(str(name_token.value))

    def _parse_call(self) -> FunctionCall:
        """Parse a (possibly deeply nested) function call."""
        stack = [self._open_call()]

        # Empty argument list on the outermost call
        expect_argument = not self._match(TokenType.RPAREN)

        while True:
            if expect_argument:
                if self._match(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.LPAREN:
                    stack.append(self._open_call())
                    expect_argument = not self._match(TokenType.RPAREN)
                    continue
                if self._match(TokenType.LPAREN):
                    raise ParseError("Empty function name", self._current())
                stack[-1].arguments.append(self._parse_argument())

            # After an argument (or an empty list): ',' or ')'
            if self._match(TokenType.COMMA):
                self._advance()
                expect_argument = True
                continue

            self._consume(TokenType.RPAREN, "Expected ')' after arguments")
            finished = stack.pop()
            call = FunctionCall(finished.name, tuple(finished.arguments))
            if not stack:
                return call
            stack[-1].arguments.append(call)
            expect_argument = False

    def _parse_argument(self) -> ASTNode:
        """Parse a non-call argument: literal, identifier or object shorthand."""
        token = self._current()

        if token.type in (TokenType.NUMBER, TokenType.STRING, TokenType.WORD):
            self._advance()
            return Literal(token.value)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(str(token.value))

        if token.type == TokenType.LBRACE:
            return self._parse_object_literal()

        if token.type == TokenType.EOF:
            raise ParseError("Unbalanced parentheses: expected ')'", token)

        raise ParseError(f"Unexpected token '{token.value}'", token)

    def _parse_object_literal(self) -> ObjectLiteral:
        """Parse an object shorthand {key: value, ...}."""
        self._consume(TokenType.LBRACE, "Expected '{'")

        pairs: dict[str, Literal] = {}

        if not self._match(TokenType.RBRACE):
            key, value = self._parse_object_pair()
            pairs[key] = value

            while self._match(TokenType.COMMA):
                self._advance()
                key, value = self._parse_object_pair()
                pairs[key] = value

        self._consume(TokenType.RBRACE, "Expected '}' after object")

        return ObjectLiteral(tuple(pairs.items()))

    def _parse_object_pair(self) -> tuple[str, Literal]:
        """Parse a key-value pair in an object shorthand."""
        # Key can be string or identifier
        if self._match(TokenType.STRING, TokenType.IDENTIFIER):
            key = str(self._advance().value)
        else:
            raise ParseError("Expected string or identifier as object key", self._current())

        self._consume(TokenType.COLON, "Expected ':' after object key")

        # Values are raw: consecutive words are joined (e.g. `family: Arial Black`)
        parts: list[Any] = []
        while self._match(
            TokenType.STRING, TokenType.NUMBER, TokenType.WORD, TokenType.IDENTIFIER
        ):
            parts.append(self._advance().value)

        if not parts:
            raise ParseError(f"Expected value for object key '{key}'", self._current())
        if len(parts) == 1:
            return key, Literal(parts[0])
        return key, Literal(" ".join(str(part) for part in parts))


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def unquote(source: str) -> str:
    """Strip the double quotes an extracted expression is wrapped in."""
    text = source.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


def parse(source: str) -> FunctionCall:
    """Parse an expression string into a call tree.

    A surrounding pair of double quotes (the extracted form) is ignored.

    Raises:
        ExpressionSyntaxError: For malformed expressions
    """
    return Parser(unquote(source)).parse()


def parse_custom_syntax(source: str) -> FunctionCall:
    """Parse an extracted span, which may also be a bare direction token."""
    text = unquote(source)
    if text in DIRECTION_TOKENS:
        return FunctionCall("direction", (Literal(text),))
    return parse(text)


def parse_object_shorthand(source: str) -> dict[str, Any]:
    """Parse a JSON-like font override string such as "{theme: 'Body-M'}"."""
    parser = Parser(source.strip())
    obj = parser._parse_object_literal()
    if not parser._is_at_end():
        raise ParseError(
            f"Unexpected token '{parser._current().value}'", parser._current()
        )
    return {key: literal.value for key, literal in obj.pairs}


def call_depth(node: ASTNode) -> int:
    """Return the nesting depth of calls in a tree (a leaf has depth 0)."""
    deepest = 0
    pending: list[tuple[ASTNode, int]] = [(node, 0)]
    while pending:
        current, depth = pending.pop()
        if isinstance(current, FunctionCall):
            depth += 1
            deepest = max(deepest, depth)
            pending.extend((arg, depth) for arg in current.arguments)
    return deepest
