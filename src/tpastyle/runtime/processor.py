"""Run-time rendering of an extracted style bundle.

For one render request the processor builds TPAParams from the site data,
evaluates the expression behind each placeholder once, and substitutes the
results into the placeholders of the scoped dynamic template.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from tpastyle.config import RenderOptions
from tpastyle.errors import StyleError
from tpastyle.expressions.builtins import create_default_registry
from tpastyle.expressions.evaluator import evaluate_expression
from tpastyle.expressions.functions import FunctionRegistry
from tpastyle.extraction.bundle import StyleBundle
from tpastyle.runtime.substitution import substitute, substitute_all
from tpastyle.theme.params import SiteStyles, TPAParams, generate_tpa_params

logger = logging.getLogger(__name__)


def to_css_text(value: Any) -> str:
    """Stringify an evaluation result for insertion into CSS."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
    return str(value)


def evaluate_batch(
    expressions: list[str],
    params: TPAParams,
    registry: FunctionRegistry,
    css_variables: Mapping[str, str] | None = None,
    strict_mode: bool = True,
) -> dict[str, str]:
    """Evaluate independent expressions.

    In strict mode the first failure is raised, tagged with its expression.
    Otherwise a failing expression renders as an empty string and the rest
    of the batch proceeds.

    Returns:
        Expression text -> CSS text
    """
    results: dict[str, str] = {}

    for expression in expressions:
        if expression in results:
            continue
        try:
            value = evaluate_expression(expression, params, registry, css_variables)
        except StyleError as e:
            if e.expression is None:
                e.expression = expression
            if strict_mode:
                raise
            logger.warning("Failed to evaluate %s: %s", expression, e.message)
            value = ""
        results[expression] = to_css_text(value)

    return results


class StyleProcessor:
    """Renders one bundle for many requests.

    Usage:
        processor = StyleProcessor(bundle)
        css = processor.process(SiteStyles.from_dict(payload), RenderOptions(is_rtl=True))

    The registry is read-only once built and may be shared between processors.
    """

    def __init__(self, bundle: StyleBundle, registry: FunctionRegistry | None = None):
        self.bundle = bundle
        self.registry = registry if registry is not None else create_default_registry()

    def process(self, styles: SiteStyles, options: RenderOptions | None = None) -> str:
        """Render the dynamic sheet for one site.

        Raises:
            StyleError: In strict mode, for the first expression that fails
        """
        options = options or RenderOptions()
        bundle = self.bundle

        if bundle.is_empty:
            return bundle.static_css if options.include_static else ""

        css = bundle.css
        if bundle.compilation_hash:
            css = substitute(css, bundle.compilation_hash, options.selector_prefix)

        params = generate_tpa_params(styles, is_rtl=options.is_rtl)
        results = evaluate_batch(
            list(bundle.placeholders.values()),
            params,
            self.registry,
            bundle.css_variables,
            strict_mode=options.strict_mode,
        )

        placeholder_values = {
            placeholder: results[expression]
            for placeholder, expression in bundle.placeholders.items()
        }
        # Only placeholders are replaced; expression text elsewhere is left as is
        css = substitute_all(css, placeholder_values)

        if options.include_static and bundle.static_css:
            return f"{bundle.static_css}\n{css}"
        return css


def render(
    bundle: StyleBundle,
    styles: SiteStyles,
    options: RenderOptions | None = None,
    registry: FunctionRegistry | None = None,
) -> str:
    """Render a bundle for one request. See StyleProcessor.process()."""
    return StyleProcessor(bundle, registry).process(styles, options)
