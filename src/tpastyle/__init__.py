"""tpastyle - build-time extraction and run-time evaluation of themeable CSS.

Style sheets embed custom syntax such as "color(color-1)" or START. At
build time extract() pulls it out into a StyleBundle; at run time render()
evaluates it against a site's theme and returns the final CSS.
"""

from tpastyle.config import ExtractorOptions, RenderOptions
from tpastyle.errors import (
    ConfigError,
    EvaluationError,
    ExpressionSyntaxError,
    RegistrationError,
    StyleError,
    UnknownDirectionTokenError,
    UnknownFunctionError,
    UnparsableColorError,
)
from tpastyle.expressions.builtins import create_default_registry
from tpastyle.extraction import ExtractionResult, StyleBundle, extract
from tpastyle.runtime import StyleProcessor, render
from tpastyle.theme import SiteStyles, TPAParams, generate_tpa_params

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EvaluationError",
    "ExpressionSyntaxError",
    "ExtractionResult",
    "ExtractorOptions",
    "RegistrationError",
    "RenderOptions",
    "SiteStyles",
    "StyleBundle",
    "StyleError",
    "StyleProcessor",
    "TPAParams",
    "UnknownDirectionTokenError",
    "UnknownFunctionError",
    "UnparsableColorError",
    "create_default_registry",
    "extract",
    "generate_tpa_params",
    "render",
]
