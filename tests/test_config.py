"""Tests for extractor and render configuration."""

import pytest

from tpastyle.config import ExtractorOptions, RenderOptions
from tpastyle.errors import ConfigError, StyleError
from tpastyle.patterns import DEFAULT_PATTERNS, PatternKind


class TestExtractorOptions:
    def test_defaults(self):
        options = ExtractorOptions()

        assert options.patterns == DEFAULT_PATTERNS
        assert options.compilation_hash is None

    def test_from_empty_dict(self):
        options = ExtractorOptions.from_dict({})

        assert [p.kind for p in options.patterns] == [
            PatternKind.QUOTED_CALL,
            PatternKind.BARE_TOKEN,
        ]

    def test_custom_patterns(self):
        options = ExtractorOptions.from_dict(
            {
                "quotedPatterns": [r'"\w+\([^"]*\)"', r"'\w+\([^']*\)'"],
                "bareTokens": ["TOP", "BOTTOM"],
                "compilationHash": "__fixed__",
            }
        )

        assert len(options.patterns) == 3
        assert options.patterns[2].fullmatch("BOTTOM")
        assert not options.patterns[2].fullmatch("START")
        assert options.compilation_hash == "__fixed__"

    def test_disable_bare_tokens(self):
        options = ExtractorOptions.from_dict({"bareTokens": []})

        assert [p.kind for p in options.patterns] == [PatternKind.QUOTED_CALL]

    def test_no_patterns(self):
        with pytest.raises(ConfigError):
            ExtractorOptions.from_dict({"quotedPatterns": [], "bareTokens": []})

    def test_invalid_regex(self):
        with pytest.raises(ConfigError) as exc_info:
            ExtractorOptions.from_dict({"quotedPatterns": ["(unclosed"]})
        assert "Invalid pattern configuration" in str(exc_info.value)

    def test_invalid_compilation_hash(self):
        with pytest.raises(ConfigError):
            ExtractorOptions.from_dict({"compilationHash": 12})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "patterns.yaml"
        path.write_text(
            "bareTokens:\n"
            "  - START\n"
            "  - END\n"
            "compilationHash: __abc__\n"
        )

        options = ExtractorOptions.from_yaml(path)

        assert options.compilation_hash == "__abc__"
        assert options.patterns[1].fullmatch("END")
        assert not options.patterns[1].fullmatch("DIR")

    def test_from_empty_yaml(self, tmp_path):
        path = tmp_path / "patterns.yaml"
        path.write_text("")

        assert ExtractorOptions.from_yaml(path).patterns[0].kind == PatternKind.QUOTED_CALL

    def test_from_invalid_yaml(self, tmp_path):
        path = tmp_path / "patterns.yaml"
        path.write_text("bareTokens: [START\n")

        with pytest.raises(ConfigError):
            ExtractorOptions.from_yaml(path)

    def test_yaml_must_be_mapping(self, tmp_path):
        path = tmp_path / "patterns.yaml"
        path.write_text("- START\n")

        with pytest.raises(ConfigError):
            ExtractorOptions.from_yaml(path)


class TestRenderOptions:
    def test_defaults(self):
        options = RenderOptions()

        assert options.is_rtl is False
        assert options.selector_prefix == ""
        assert options.strict_mode is True
        assert options.include_static is False

    def test_from_env_defaults(self, monkeypatch):
        for name in ("TPASTYLE_RTL", "TPASTYLE_SELECTOR_PREFIX", "TPASTYLE_STRICT"):
            monkeypatch.delenv(name, raising=False)

        assert RenderOptions.from_env() == RenderOptions()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TPASTYLE_RTL", "true")
        monkeypatch.setenv("TPASTYLE_SELECTOR_PREFIX", ".widget-1")
        monkeypatch.setenv("TPASTYLE_STRICT", "0")

        options = RenderOptions.from_env()

        assert options.is_rtl is True
        assert options.selector_prefix == ".widget-1"
        assert options.strict_mode is False

    def test_from_env_invalid_flag(self, monkeypatch):
        monkeypatch.setenv("TPASTYLE_STRICT", "maybe")

        with pytest.raises(ConfigError) as exc_info:
            RenderOptions.from_env()
        assert "TPASTYLE_STRICT" in str(exc_info.value)


class TestErrors:
    def test_str_includes_expression(self):
        error = StyleError("boom", expression='"color(x)"')

        assert str(error) == "boom (in '\"color(x)\"')"
        assert str(StyleError("boom")) == "boom"

    def test_config_error_is_style_error(self):
        assert issubclass(ConfigError, StyleError)
