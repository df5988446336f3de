"""Function registry for tpastyle custom syntax.

Functions are callable from expressions (e.g., `opacity(color(color-1), 0.5)`).
Each function is registered with a typed parameter table. Implementations
receive the evaluated arguments followed by the active TPAParams, which the
expression author never passes explicitly.
"""

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from tpastyle.errors import EvaluationError, RegistrationError, UnknownFunctionError

logger = logging.getLogger(__name__)


class FunctionCategory(Enum):
    """Categories for organizing functions in documentation."""

    COLOR = "color"
    FONT = "font"
    TEXT = "text"
    NUMBER = "number"
    LOGIC = "logic"
    DIRECTION = "direction"


@dataclass
class FunctionParameter:
    """Definition of a function parameter.

    Attributes:
        name: Parameter name
        type: Expected type ("color", "number", "string", "font", "any")
        description: Human-readable description
        required: Whether this parameter is required
        default: Default value if not provided
        variadic: If True, this parameter accepts zero or more values
    """

    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None
    variadic: bool = False


@dataclass
class FunctionDefinition:
    """Complete definition of an expression function.

    Attributes:
        name: Function name as used in expressions
        description: Human-readable description
        category: Category for documentation organization
        parameters: Parameter definitions, excluding the implicit TPAParams
        return_type: Type of the return value
        implementation: Callable taking the arguments plus TPAParams last
        examples: Example expressions using this function
    """

    name: str
    description: str
    category: FunctionCategory
    parameters: list[FunctionParameter]
    return_type: str
    implementation: Callable[..., Any]
    examples: list[str] = field(default_factory=list)

    @property
    def is_variadic(self) -> bool:
        return bool(self.parameters) and self.parameters[-1].variadic

    @property
    def fixed_parameters(self) -> list[FunctionParameter]:
        return [p for p in self.parameters if not p.variadic]

    @property
    def min_arguments(self) -> int:
        return sum(1 for p in self.fixed_parameters if p.required)

    def to_dict(self) -> dict[str, Any]:
        """Export for documentation."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.type,
                    "description": p.description,
                    "required": p.required,
                    "variadic": p.variadic,
                }
                for p in self.parameters
            ],
            "returnType": self.return_type,
            "examples": self.examples,
        }


def _check_signature(func_def: FunctionDefinition) -> None:
    """Reject definitions whose implementation cannot take the declared arguments."""
    variadic = [p for p in func_def.parameters if p.variadic]
    if variadic and not func_def.parameters[-1].variadic:
        raise RegistrationError(
            f"Function '{func_def.name}': only the last parameter may be variadic"
        )

    try:
        signature = inspect.signature(func_def.implementation)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are trusted
        return

    fixed = len(func_def.fixed_parameters)
    # Declared arguments plus the trailing TPAParams; two variadic values check *args
    arities = [fixed + 1]
    if func_def.is_variadic:
        arities.append(fixed + 3)

    for count in arities:
        try:
            signature.bind(*([None] * count))
        except TypeError as e:
            raise RegistrationError(
                f"Function '{func_def.name}' implementation does not accept "
                f"{count} positional arguments: {e}"
            ) from e


class FunctionRegistry:
    """Registry for expression functions.

    A registry is an explicit value: build one (usually with
    create_default_registry()), optionally register extra functions, then
    share it read-only across evaluations.

    Example:
        registry = FunctionRegistry()
        registry.register(FunctionDefinition(
            name="double",
            description="Doubles a number",
            category=FunctionCategory.NUMBER,
            parameters=[FunctionParameter("value", "number", "The number")],
            return_type="number",
            implementation=lambda value, params: value * 2,
        ))

        registry.call("double", [2], params)  # Returns 4
    """

    def __init__(self) -> None:
        self._functions: dict[str, FunctionDefinition] = {}

    def register(self, func_def: FunctionDefinition) -> None:
        """Register a function definition.

        Re-registering an existing name replaces the previous entry.

        Raises:
            RegistrationError: If the implementation's signature does not
                match the declared parameters
        """
        _check_signature(func_def)
        if func_def.name in self._functions:
            logger.debug("Overriding registered function '%s'", func_def.name)
        self._functions[func_def.name] = func_def

    def get(self, name: str) -> FunctionDefinition:
        """Get a function definition by name.

        Raises:
            UnknownFunctionError: If function is not registered
        """
        if name not in self._functions:
            raise UnknownFunctionError(name)
        return self._functions[name]

    def is_registered(self, name: str) -> bool:
        """Check if a function is registered."""
        return name in self._functions

    def call(self, name: str, args: list[Any], params: Any) -> Any:
        """Call a registered function with arity checking.

        Args:
            name: Function name
            args: Evaluated arguments as written in the expression
            params: The active TPAParams, appended as the last argument

        Returns:
            Function result

        Raises:
            UnknownFunctionError: If function not registered
            EvaluationError: If the argument count does not fit the definition
        """
        func_def = self.get(name)
        fixed = func_def.fixed_parameters

        if len(args) < func_def.min_arguments:
            raise EvaluationError(
                f"Function '{name}' expects at least {func_def.min_arguments} "
                f"argument(s), got {len(args)}"
            )
        if not func_def.is_variadic and len(args) > len(fixed):
            raise EvaluationError(
                f"Function '{name}' expects at most {len(fixed)} argument(s), got {len(args)}"
            )

        padded = list(args)
        for param in fixed[len(padded):]:
            padded.append(param.default)

        return func_def.implementation(*padded, params)

    def list_all(self) -> list[FunctionDefinition]:
        """List all registered functions."""
        return list(self._functions.values())

    def list_by_category(self, category: FunctionCategory) -> list[FunctionDefinition]:
        """List functions in a specific category."""
        return [f for f in self._functions.values() if f.category == category]

    def export_documentation(self) -> dict[str, Any]:
        """Export full registry for documentation.

        Returns:
            Dict with all function definitions organized by category
        """
        by_category: dict[str, list[dict[str, Any]]] = {}
        for func_def in self._functions.values():
            by_category.setdefault(func_def.category.value, []).append(func_def.to_dict())

        return {
            "functions": {name: f.to_dict() for name, f in self._functions.items()},
            "byCategory": by_category,
        }

    def __contains__(self, name: str) -> bool:
        return self.is_registered(name)

    def __len__(self) -> int:
        return len(self._functions)
