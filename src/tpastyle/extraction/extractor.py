"""Build-time extraction of custom syntax from a style sheet.

The sheet is walked with tinycss2 only to find rule and declaration
boundaries. Declarations containing custom syntax are moved out of the
static sheet into a scoped dynamic template; everything else is kept.
"""

import hashlib
import logging
import re
from dataclasses import dataclass, field

import tinycss2
from tinycss2.ast import AtRule, Declaration, ParseError, QualifiedRule

from tpastyle.config import ExtractorOptions
from tpastyle.constants import PLACEHOLDER_TEMPLATE
from tpastyle.extraction.bundle import StyleBundle
from tpastyle.patterns import Pattern, contains_match, match

logger = logging.getLogger(__name__)

# At-rules whose block holds rules rather than declarations
GROUPING_AT_RULES = frozenset({"media", "supports", "container", "layer", "document"})

CSS_VARIABLE_RE = re.compile(r"--[A-Za-z0-9_-]+")


@dataclass
class ExtractionResult:
    """Output of extract().

    Attributes:
        static_text: The sheet without dynamic declarations, safe to ship
        expressions: Distinct extracted expression texts, first-seen order
        referenced_variable_names: Custom properties named in dynamic declarations
        template: Dynamic rules with scoped selectors and placeholders
        placeholders: Placeholder -> expression text
        css_variables: Every declared custom property -> raw value
        compilation_hash: Selector marker used in the template
    """

    static_text: str
    expressions: list[str] = field(default_factory=list)
    referenced_variable_names: list[str] = field(default_factory=list)
    template: str = ""
    placeholders: dict[str, str] = field(default_factory=dict)
    css_variables: dict[str, str] = field(default_factory=dict)
    compilation_hash: str = ""

    @property
    def dynamic_text(self) -> str:
        """The extracted expressions, newline-joined."""
        return "\n".join(self.expressions)

    def to_bundle(self) -> StyleBundle:
        return StyleBundle(
            css_variable_names=list(self.referenced_variable_names),
            dynamic_expressions=list(self.expressions),
            static_css=self.static_text,
            css=self.template,
            placeholders=dict(self.placeholders),
            css_variables=dict(self.css_variables),
            compilation_hash=self.compilation_hash,
        )


def compilation_hash_for(css: str) -> str:
    """Derive a short, stable selector marker from the sheet contents."""
    digest = hashlib.md5(css.encode("utf-8")).hexdigest()
    return f"__{digest[:6]}__"


def _declaration_text(declaration: Declaration) -> str:
    value = tinycss2.serialize(declaration.value).strip()
    important = " !important" if declaration.important else ""
    return f"{declaration.name}: {value}{important}"


def _split_selectors(prelude: list) -> list[str]:
    """Split a selector list on top-level commas."""
    selectors: list[list] = [[]]
    for token in prelude:
        if token.type == "literal" and token.value == ",":
            selectors.append([])
        else:
            selectors[-1].append(token)
    return [tinycss2.serialize(tokens).strip() for tokens in selectors]


class Extractor:
    """Walks one style sheet and separates static from dynamic declarations.

    An Extractor holds per-sheet state (placeholder counter, collected
    expressions); create a new one for every sheet.
    """

    def __init__(self, patterns: tuple[Pattern, ...], compilation_hash: str):
        self.patterns = patterns
        self.compilation_hash = compilation_hash
        self.expressions: list[str] = []
        self.placeholders: dict[str, str] = {}
        self.variable_names: list[str] = []
        self.css_variables: dict[str, str] = {}

    def run(self, css: str) -> tuple[str, str]:
        """Return (static_text, template) for the sheet."""
        nodes = tinycss2.parse_stylesheet(css, skip_comments=False, skip_whitespace=False)
        return self._walk(nodes)

    # -------------------------------------------------------------------------
    # Walking
    # -------------------------------------------------------------------------

    def _walk(self, nodes: list) -> tuple[str, str]:
        static_parts: list[str] = []
        dynamic_parts: list[str] = []

        for node in nodes:
            if isinstance(node, QualifiedRule):
                static, dynamic = self._split_rule(node)
            elif isinstance(node, AtRule):
                static, dynamic = self._split_at_rule(node)
            elif isinstance(node, ParseError):
                logger.warning("Skipping unparsable CSS (%s): %s", node.kind, node.message)
                continue
            else:
                # Whitespace and comments
                static, dynamic = node.serialize(), None

            if static:
                static_parts.append(static)
            if dynamic:
                dynamic_parts.append(dynamic)

        return "".join(static_parts), "\n".join(dynamic_parts)

    def _split_rule(self, rule: QualifiedRule) -> tuple[str | None, str | None]:
        static_decls: list[str] = []
        dynamic_decls: list[str] = []

        items = tinycss2.parse_declaration_list(
            rule.content, skip_comments=True, skip_whitespace=True
        )
        for item in items:
            if isinstance(item, Declaration):
                text = _declaration_text(item)
                if item.name.startswith("--"):
                    self.css_variables[item.name] = tinycss2.serialize(item.value).strip()
                if contains_match(text, self.patterns):
                    dynamic_decls.append(self._replace_spans(text))
                else:
                    static_decls.append(text)
            elif isinstance(item, ParseError):
                logger.warning("Skipping unparsable declaration (%s): %s", item.kind, item.message)
            else:
                static_decls.append(item.serialize())

        if not dynamic_decls:
            return rule.serialize(), None

        prelude = tinycss2.serialize(rule.prelude).strip()
        static = f"{prelude} {{{'; '.join(static_decls)}}}" if static_decls else None

        scoped = ", ".join(
            f"{self.compilation_hash} {selector}" for selector in _split_selectors(rule.prelude)
        )
        dynamic = f"{scoped} {{{'; '.join(dynamic_decls)}}}"
        return static, dynamic

    def _split_at_rule(self, rule: AtRule) -> tuple[str | None, str | None]:
        if rule.content is None or rule.lower_at_keyword not in GROUPING_AT_RULES:
            return rule.serialize(), None

        children = tinycss2.parse_rule_list(
            rule.content, skip_comments=False, skip_whitespace=False
        )
        static_body, dynamic_body = self._walk(children)

        if not dynamic_body:
            return rule.serialize(), None

        head = f"@{rule.at_keyword}{tinycss2.serialize(rule.prelude)}"
        static = f"{head}{{{static_body}}}" if static_body.strip() else None
        dynamic = f"{head}{{\n{dynamic_body}\n}}"
        return static, dynamic

    # -------------------------------------------------------------------------
    # Placeholders
    # -------------------------------------------------------------------------

    def _replace_spans(self, text: str) -> str:
        """Swap every match in a dynamic declaration for a placeholder."""
        for name in CSS_VARIABLE_RE.findall(text):
            if name not in self.variable_names:
                self.variable_names.append(name)

        pieces: list[str] = []
        cursor = 0
        for span in match(text, self.patterns):
            if span.text not in self.expressions:
                self.expressions.append(span.text)
            placeholder = PLACEHOLDER_TEMPLATE.format(index=len(self.placeholders))
            self.placeholders[placeholder] = span.text
            pieces.append(text[cursor:span.start])
            pieces.append(placeholder)
            cursor = span.end
        pieces.append(text[cursor:])
        return "".join(pieces)


def extract(css: str, options: ExtractorOptions | None = None) -> ExtractionResult:
    """Extract custom syntax from a style sheet.

    Args:
        css: Style sheet text
        options: Patterns and an optional fixed compilation hash

    Returns:
        The static sheet plus everything needed to render the dynamic part

    Example:
        result = extract('.a { color: "color(color-1)"; margin: 0 }')
        result.static_text   # '.a {margin: 0}'
        result.expressions   # ['"color(color-1)"']
    """
    options = options or ExtractorOptions()
    patterns = options.patterns

    if not contains_match(css, patterns):
        return ExtractionResult(static_text=css)

    compilation_hash = options.compilation_hash or compilation_hash_for(css)
    extractor = Extractor(patterns, compilation_hash)
    static_text, template = extractor.run(css)

    logger.debug(
        "Extracted %d expression(s) from %d placeholder(s)",
        len(extractor.expressions),
        len(extractor.placeholders),
    )

    return ExtractionResult(
        static_text=static_text,
        expressions=extractor.expressions,
        referenced_variable_names=extractor.variable_names,
        template=template,
        placeholders=extractor.placeholders,
        css_variables=extractor.css_variables,
        compilation_hash=compilation_hash,
    )
