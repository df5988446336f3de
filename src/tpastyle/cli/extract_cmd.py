"""Extract CLI command - split a style sheet into static CSS and a bundle."""

from pathlib import Path

import click

from tpastyle.config import ExtractorOptions
from tpastyle.errors import StyleError
from tpastyle.extraction import extract as extract_css
from tpastyle.extraction import save_bundle


@click.command()
@click.argument("stylesheet", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with quotedPatterns, bareTokens and compilationHash.",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the bundle JSON here instead of stdout.",
)
@click.option(
    "--static-output",
    "static_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the static sheet (dynamic declarations removed) here.",
)
def extract(
    stylesheet: Path,
    config_path: Path | None,
    output_path: Path | None,
    static_path: Path | None,
):
    """Extract custom syntax from STYLESHEET into a render bundle."""
    try:
        options = ExtractorOptions.from_yaml(config_path) if config_path else ExtractorOptions()
        result = extract_css(stylesheet.read_text(encoding="utf-8"), options)
    except StyleError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    bundle = result.to_bundle()

    if static_path is not None:
        static_path.write_text(result.static_text, encoding="utf-8")

    if output_path is None:
        click.echo(bundle.to_json())
        return

    save_bundle(bundle, output_path)

    if not result.expressions:
        click.echo(click.style("No custom syntax found; bundle is empty.", fg="yellow"))
        return

    click.echo(
        click.style(
            f"Extracted {len(result.expressions)} expression(s) "
            f"({len(result.placeholders)} occurrence(s)) to {output_path}",
            fg="green",
        )
    )
