"""Expression language for tpastyle custom syntax.

This module provides:
- FunctionRegistry: Registry for expression functions
- Lexer: Tokenizes expression strings
- Parser: Produces call trees from tokens
- Evaluator: Evaluates call trees against TPAParams
"""

from tpastyle.expressions.evaluator import Evaluator, evaluate_expression
from tpastyle.expressions.functions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from tpastyle.expressions.lexer import Lexer, LexerError, Token, TokenType
from tpastyle.expressions.parser import (
    ASTNode,
    FunctionCall,
    Identifier,
    Literal,
    ObjectLiteral,
    ParseError,
    Parser,
    call_depth,
    parse,
    parse_custom_syntax,
)

__all__ = [
    # Evaluator
    "Evaluator",
    "evaluate_expression",
    # Functions
    "FunctionCategory",
    "FunctionDefinition",
    "FunctionParameter",
    "FunctionRegistry",
    # Lexer
    "Lexer",
    "LexerError",
    "Token",
    "TokenType",
    # Parser
    "ASTNode",
    "FunctionCall",
    "Identifier",
    "Literal",
    "ObjectLiteral",
    "ParseError",
    "Parser",
    "call_depth",
    "parse",
    "parse_custom_syntax",
]
