"""Error taxonomy for tpastyle.

Every error raised while extracting, parsing or evaluating custom syntax
derives from StyleError. The runtime processor tags errors with the
expression text that produced them so strict-mode callers can report it.
"""


class StyleError(Exception):
    """Base class for all tpastyle errors."""

    def __init__(self, message: str, expression: str | None = None):
        self.message = message
        self.expression = expression
        super().__init__(message)

    def __str__(self) -> str:
        if self.expression is not None:
            return f"{self.message} (in {self.expression!r})"
        return self.message


class ConfigError(StyleError):
    """Invalid extractor or render configuration."""
    pass


class ExpressionSyntaxError(StyleError):
    """Malformed expression text: unterminated literal, unbalanced parens, empty name."""
    pass


class EvaluationError(StyleError):
    """Error during expression evaluation."""
    pass


class UnknownFunctionError(EvaluationError):
    """Call to a function name that is not registered."""

    def __init__(self, name: str, expression: str | None = None):
        self.name = name
        super().__init__(f"Unknown function: {name}", expression)


class UnparsableColorError(EvaluationError):
    """The color builtin was given a value it cannot interpret."""

    def __init__(self, value: object, expression: str | None = None):
        self.value = value
        super().__init__(f"Unparsable color {value}", expression)


class UnknownDirectionTokenError(EvaluationError):
    """The direction builtin was given a token outside the direction map."""

    def __init__(self, token: object, expression: str | None = None):
        self.token = token
        super().__init__(f"Unknown direction token: {token}", expression)


class RegistrationError(StyleError):
    """A function definition does not match its implementation's signature."""
    pass
