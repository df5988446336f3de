"""Extractor and render configuration."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from tpastyle.errors import ConfigError
from tpastyle.patterns import DEFAULT_PATTERNS, Pattern

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class ExtractorOptions:
    """Build-time extraction settings.

    Attributes:
        patterns: Matching rules in priority order
        compilation_hash: Fixed selector marker; derived from the sheet if None
    """

    patterns: tuple[Pattern, ...] = DEFAULT_PATTERNS
    compilation_hash: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtractorOptions:
        """Create options from a config mapping.

        Keys:
            quotedPatterns: list of regexes for quoted call spans
            bareTokens: list of reserved words matched as whole words
            compilationHash: fixed selector marker

        Missing pattern keys fall back to the defaults.
        """
        quoted = data.get("quotedPatterns")
        bare = data.get("bareTokens")

        patterns: list[Pattern] = []
        try:
            if quoted is None:
                patterns.append(Pattern.quoted_call())
            else:
                patterns.extend(Pattern.quoted_call(regex) for regex in quoted)

            if bare is None:
                patterns.append(Pattern.bare_tokens())
            elif bare:
                patterns.append(Pattern.bare_tokens(bare))
        except (TypeError, ValueError, re.error) as e:
            raise ConfigError(f"Invalid pattern configuration: {e}") from e

        if not patterns:
            raise ConfigError("At least one pattern must be configured")

        compilation_hash = data.get("compilationHash")
        if compilation_hash is not None and not isinstance(compilation_hash, str):
            raise ConfigError("compilationHash must be a string")

        return cls(patterns=tuple(patterns), compilation_hash=compilation_hash)

    @classmethod
    def from_yaml(cls, path: Path) -> ExtractorOptions:
        """Load options from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")
        return cls.from_dict(data)


@dataclass
class RenderOptions:
    """Run-time rendering settings.

    Attributes:
        is_rtl: Render for a right-to-left page
        selector_prefix: Replaces the compilation marker in scoped selectors
        strict_mode: Raise on the first failing expression instead of
            rendering it as an empty string
        include_static: Prepend the static sheet snapshot to the output
    """

    is_rtl: bool = False
    selector_prefix: str = ""
    strict_mode: bool = True
    include_static: bool = False

    @classmethod
    def from_env(cls) -> RenderOptions:
        """Create options from environment variables.

        Variables:
            TPASTYLE_RTL: render right-to-left (default false)
            TPASTYLE_SELECTOR_PREFIX: selector prefix (default none)
            TPASTYLE_STRICT: strict mode (default true)
        """
        return cls(
            is_rtl=_env_flag("TPASTYLE_RTL", False),
            selector_prefix=os.environ.get("TPASTYLE_SELECTOR_PREFIX", ""),
            strict_mode=_env_flag("TPASTYLE_STRICT", True),
        )
