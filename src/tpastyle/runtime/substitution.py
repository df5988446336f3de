"""Literal text substitution of evaluated expressions."""

import re
from collections.abc import Mapping


def substitute(target: str, expression: str, result: str) -> str:
    """Replace every occurrence of expression's exact text in target.

    Matching is literal and case-sensitive. Text that no longer occurs is a no-op.
    """
    if not expression:
        return target
    return target.replace(expression, result)


def substitute_all(target: str, replacements: Mapping[str, str]) -> str:
    """Apply many substitutions in one pass, longest expression text first.

    All keys are combined into a single alternation ordered by decreasing
    length, so a key that is a substring of another never shadows it, and
    replaced text is never scanned again.
    """
    keys = sorted((key for key in replacements if key), key=len, reverse=True)
    if not keys:
        return target

    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda m: replacements[m.group()], target)
