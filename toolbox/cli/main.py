"""
Main CLI entry point for toolbox commands.

This module provides the main click command group and entry point
for all toolbox CLI operations.
"""

import click

from .. import __version__
from ..core.config import get_settings
from ..core.logging import setup_logging
from .commands.manifest_cmd import manifest_command
from .commands.validate_cmd import validate_command


@click.group(
    name="toolbox",
    help="Toolbox CLI for validating tool configurations and inspecting manifests."
)
@click.version_option(version=__version__, prog_name="toolbox")
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose logging output."
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Toolbox CLI main command group."""
    settings = get_settings()
    setup_logging(
        log_level="DEBUG" if verbose else settings.LOG_LEVEL,
        debug=verbose or settings.DEBUG,
        json_format=settings.LOG_FORMAT == "json" or settings.is_production(),
    )
    # Store verbose flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


# Register subcommands
cli.add_command(validate_command)
cli.add_command(manifest_command)


if __name__ == "__main__":
    cli()
