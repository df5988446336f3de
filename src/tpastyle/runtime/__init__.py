"""Run-time evaluation and substitution of extracted custom syntax."""

from tpastyle.runtime.processor import StyleProcessor, evaluate_batch, render, to_css_text
from tpastyle.runtime.substitution import substitute, substitute_all

__all__ = [
    "StyleProcessor",
    "evaluate_batch",
    "render",
    "substitute",
    "substitute_all",
    "to_css_text",
]
