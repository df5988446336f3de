"""tpastyle CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """tpastyle - extract and render themeable CSS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from tpastyle.cli.extract_cmd import extract  # noqa: E402
from tpastyle.cli.render_cmd import functions, render  # noqa: E402

cli.add_command(extract)
cli.add_command(render)
cli.add_command(functions)
