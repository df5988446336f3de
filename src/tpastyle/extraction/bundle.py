"""Serializable build output attached to a compiled asset."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tpastyle.errors import ConfigError


@dataclass
class StyleBundle:
    """Everything the runtime needs to render a sheet for one site.

    Attributes:
        css_variable_names: Custom properties referenced by dynamic declarations
        dynamic_expressions: Distinct expression texts, first-seen order
        static_css: Sheet with every dynamic declaration removed
        css: Dynamic rules, scoped by compilation_hash, with placeholders
        placeholders: Placeholder -> expression text, one per occurrence
        css_variables: Declared custom property -> raw value
        compilation_hash: Selector marker replaced by the selector prefix
    """

    css_variable_names: list[str] = field(default_factory=list)
    dynamic_expressions: list[str] = field(default_factory=list)
    static_css: str = ""
    css: str = ""
    placeholders: dict[str, str] = field(default_factory=dict)
    css_variables: dict[str, str] = field(default_factory=dict)
    compilation_hash: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.dynamic_expressions and not self.css

    def to_dict(self) -> dict[str, Any]:
        return {
            "cssVariableNames": list(self.css_variable_names),
            "dynamicExpressions": list(self.dynamic_expressions),
            "staticCssSnapshot": self.static_css,
            "css": self.css,
            "placeholders": dict(self.placeholders),
            "cssVariables": dict(self.css_variables),
            "compilationHash": self.compilation_hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StyleBundle":
        if not isinstance(data, dict):
            raise ConfigError(f"Bundle must be an object, got {type(data).__name__}")
        return cls(
            css_variable_names=list(data.get("cssVariableNames") or []),
            dynamic_expressions=list(data.get("dynamicExpressions") or []),
            static_css=data.get("staticCssSnapshot") or "",
            css=data.get("css") or "",
            placeholders=dict(data.get("placeholders") or {}),
            css_variables=dict(data.get("cssVariables") or {}),
            compilation_hash=data.get("compilationHash") or "",
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "StyleBundle":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid bundle JSON: {e}") from e
        return cls.from_dict(data)


def save_bundle(bundle: StyleBundle, path: Path) -> None:
    """Write a bundle as JSON."""
    path.write_text(bundle.to_json(), encoding="utf-8")


def load_bundle(path: Path) -> StyleBundle:
    """Read a bundle written by save_bundle()."""
    return StyleBundle.from_json(path.read_text(encoding="utf-8"))
