"""Evaluator for tpastyle custom syntax.

Walks the call tree bottom-up and computes the result against the theme
parameters, dispatching calls through a FunctionRegistry.
"""

from collections.abc import Mapping
from typing import Any

from tpastyle.errors import EvaluationError, StyleError
from tpastyle.expressions.functions import FunctionRegistry
from tpastyle.expressions.parser import (
    ASTNode,
    FunctionCall,
    Identifier,
    Literal,
    ObjectLiteral,
    parse_custom_syntax,
)
from tpastyle.patterns import Pattern
from tpastyle.theme.params import TPAParams

_CUSTOM_SYNTAX = [Pattern.quoted_call(), Pattern.bare_tokens()]

# Keywords that evaluate to fixed values when no theme parameter shadows them
KEYWORDS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}


def _is_custom_syntax(value: str) -> bool:
    text = value.strip()
    return any(pattern.fullmatch(text) for pattern in _CUSTOM_SYNTAX)


class Evaluator:
    """Evaluates call trees against theme parameters.

    Usage:
        evaluator = Evaluator(params, registry)
        result = evaluator.evaluate(parse('"opacity(color(color-1), 0.5)"'))

    Attributes:
        params: The active TPAParams, passed to every function call
        registry: Functions available to expressions
        css_variables: Declared custom properties (--name -> raw value)
    """

    def __init__(
        self,
        params: TPAParams,
        registry: FunctionRegistry,
        css_variables: Mapping[str, str] | None = None,
    ):
        self.params = params
        self.registry = registry
        self.css_variables = css_variables or {}
        self._resolving: list[str] = []

    def evaluate(self, node: ASTNode) -> Any:
        """Evaluate a tree and return the result.

        Calls are processed in post-order with an explicit stack, so
        arbitrarily deep trees do not exhaust the interpreter's recursion limit.
        """
        results: list[Any] = []
        stack: list[tuple[ASTNode, bool]] = [(node, False)]

        while stack:
            current, arguments_ready = stack.pop()

            if not isinstance(current, FunctionCall):
                results.append(self._eval_leaf(current))
                continue

            if arguments_ready:
                split = len(results) - len(current.arguments)
                args = results[split:]
                del results[split:]
                results.append(self._call_function(current, args))
                continue

            stack.append((current, True))
            # Pushed in reverse so arguments are evaluated left to right
            for argument in reversed(current.arguments):
                stack.append((argument, False))

        return results[0]

    # -------------------------------------------------------------------------
    # Node type evaluators
    # -------------------------------------------------------------------------

    def _eval_leaf(self, node: ASTNode) -> Any:
        method_name = f"_eval_{type(node).__name__.lower()}"
        method = getattr(self, method_name, None)

        if method is None:
            raise EvaluationError(f"Unknown node type: {type(node).__name__}")

        return method(node)

    def _eval_literal(self, node: Literal) -> Any:
        """Evaluate a literal value."""
        return node.value

    def _eval_identifier(self, node: Identifier) -> Any:
        """Evaluate an identifier (theme parameter or custom property)."""
        name = node.name

        if name.startswith("--"):
            return self._resolve_css_variable(name)

        found, value = self.params.resolve(name)
        if found:
            return value

        if name in KEYWORDS:
            return KEYWORDS[name]

        # Unresolved names are their own value (e.g. `px`, `red`, `START`)
        return name

    def _eval_objectliteral(self, node: ObjectLiteral) -> dict[str, Any]:
        """Evaluate an object shorthand into a plain dict."""
        return {key: literal.value for key, literal in node.pairs}

    def _call_function(self, node: FunctionCall, args: list[Any]) -> Any:
        """Dispatch a call through the registry with TPAParams appended."""
        try:
            return self.registry.call(node.name, args, self.params)
        except StyleError:
            raise
        except Exception as e:
            raise EvaluationError(f"Error calling {node.name}: {e}") from e

    # -------------------------------------------------------------------------
    # Custom properties
    # -------------------------------------------------------------------------

    def _resolve_css_variable(self, name: str) -> Any:
        """Resolve a --custom-property declared in the extracted sheet."""
        if name not in self.css_variables:
            return name

        raw = self.css_variables[name].strip()
        if not _is_custom_syntax(raw):
            return raw

        if name in self._resolving:
            chain = " -> ".join([*self._resolving, name])
            raise EvaluationError(f"Circular custom property reference: {chain}")

        self._resolving.append(name)
        try:
            return self.evaluate(parse_custom_syntax(raw))
        finally:
            self._resolving.pop()


def evaluate_expression(
    expression: str,
    params: TPAParams,
    registry: FunctionRegistry,
    css_variables: Mapping[str, str] | None = None,
) -> Any:
    """Parse and evaluate one extracted expression.

    This is the main entry point for expression evaluation.

    Args:
        expression: Extracted text, e.g. '"color(color-1)"' or 'START'
        params: Theme parameters
        registry: Functions available to the expression
        css_variables: Declared custom properties

    Returns:
        The raw result (string, number, or None)

    Example:
        result = evaluate_expression('"opacity(red, 0.4)"', params, registry)
        # result = "rgba(255, 0, 0, 0.4)"
    """
    tree = parse_custom_syntax(expression)
    return Evaluator(params, registry, css_variables).evaluate(tree)
