"""Render CLI commands - render a bundle for a site and list functions."""

import json
from pathlib import Path

import click
import yaml

from tpastyle.config import RenderOptions
from tpastyle.errors import ConfigError, StyleError
from tpastyle.expressions.builtins import create_default_registry
from tpastyle.expressions.functions import FunctionCategory
from tpastyle.extraction import load_bundle
from tpastyle.runtime import render as render_bundle
from tpastyle.theme import SiteStyles


def _load_styles(path: Path) -> SiteStyles:
    """Load site styles from a JSON or YAML file."""
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid styles file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain an object")
    return SiteStyles.from_dict(data)


@click.command()
@click.argument("bundle_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--styles",
    "styles_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON or YAML file with siteColors, siteTextPresets and styleParams.",
)
@click.option("--rtl", is_flag=True, default=False, help="Render for a right-to-left page.")
@click.option("--prefix", default=None, help="Selector prefix for the scoped rules.")
@click.option(
    "--lenient",
    is_flag=True,
    default=False,
    help="Render failing expressions as empty strings instead of aborting.",
)
@click.option(
    "--include-static",
    is_flag=True,
    default=False,
    help="Prepend the static sheet to the output.",
)
def render(
    bundle_path: Path,
    styles_path: Path,
    rtl: bool,
    prefix: str | None,
    lenient: bool,
    include_static: bool,
):
    """Render BUNDLE_PATH for one site and print the CSS."""
    try:
        options = RenderOptions.from_env()
        if rtl:
            options.is_rtl = True
        if prefix is not None:
            options.selector_prefix = prefix
        if lenient:
            options.strict_mode = False
        options.include_static = include_static

        bundle = load_bundle(bundle_path)
        styles = _load_styles(styles_path)
        css = render_bundle(bundle, styles, options)
    except StyleError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(css)


@click.command()
@click.option("--category", default=None, help="Only list functions in this category.")
def functions(category: str | None):
    """List the functions available to expressions."""
    registry = create_default_registry()

    if category:
        try:
            selected = FunctionCategory(category.lower())
        except ValueError:
            choices = ", ".join(c.value for c in FunctionCategory)
            click.echo(f"Unknown category '{category}'. Choose from: {choices}", err=True)
            raise SystemExit(1)
        definitions = registry.list_by_category(selected)
    else:
        definitions = registry.list_all()

    for func_def in definitions:
        doc = func_def.to_dict()
        params = ", ".join(
            ("..." if p["variadic"] else "") + p["name"] + ("" if p["required"] else "?")
            for p in doc["parameters"]
        )
        click.echo(click.style(f"{doc['name']}({params})", bold=True) + f" -> {doc['returnType']}")
        click.echo(f"    {doc['description']}")
