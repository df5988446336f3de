"""Shared constants for extraction and evaluation."""

# Reserved boolean in TPAParams.booleans holding the active text direction
IS_RTL_PARAM = "isRTL"

# Bare direction tokens and their left-to-right / right-to-left values
DIRECTION_MAP: dict[str, dict[str, str]] = {
    "START": {"ltr": "left", "rtl": "right"},
    "END": {"ltr": "right", "rtl": "left"},
    "STARTSIGN": {"ltr": "-", "rtl": ""},
    "ENDSIGN": {"ltr": "", "rtl": "-"},
    "DEG-START": {"ltr": "0", "rtl": "180"},
    "DEG-END": {"ltr": "180", "rtl": "0"},
    "DIR": {"ltr": "ltr", "rtl": "rtl"},
}

DIRECTION_TOKENS = frozenset(DIRECTION_MAP)

# A double-quoted string whose interior looks like name(arguments)
QUOTED_CALL_PATTERN = r'"\w+\([^"]*\)"'

PLACEHOLDER_TEMPLATE = "__tpa_expr_{index}__"
