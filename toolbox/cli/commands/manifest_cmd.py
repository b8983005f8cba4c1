"""
Toolbox manifest command implementation.

Prints the discovery manifests of the tools declared in a tools file, either
the generic manifest or the MCP ``tools/list`` form.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from ...core.config import get_settings
from ...core.exceptions import ToolboxException
from ...core.loader import get_tool, initialize_tools, load_tool_configs
from ...core.registry import build_registry


@click.command(
    name="manifest",
    help="Print tool manifests for a tools file as JSON."
)
@click.argument(
    "tools_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--tool", "-t",
    "tool_name",
    default=None,
    help="Only print the manifest of this tool."
)
@click.option(
    "--mcp",
    is_flag=True,
    help="Print MCP tool manifests instead of the generic manifest."
)
def manifest_command(tools_file: Optional[Path], tool_name: Optional[str], mcp: bool) -> None:
    """
    Print generic or MCP manifests for the tools in TOOLS_FILE.

    TOOLS_FILE defaults to the TOOLBOX_TOOLS_FILE setting.
    """
    if tools_file is None:
        configured = get_settings().TOOLS_FILE
        if not configured:
            raise click.UsageError("No tools file given and TOOLBOX_TOOLS_FILE is not set.")
        tools_file = Path(configured)

    try:
        tools = initialize_tools(load_tool_configs(tools_file, build_registry()))
        if tool_name:
            tools = {tool_name: get_tool(tools, tool_name)}
    except FileNotFoundError:
        click.echo(click.style(f"Error: File not found: {tools_file}", fg='red'), err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(click.style(f"Error: Unable to read {tools_file}: {e.strerror or e}", fg='red'), err=True)
        sys.exit(1)
    except ToolboxException as e:
        click.echo(click.style(f"Error: {e.message}", fg='red'), err=True)
        sys.exit(1)

    if mcp:
        output = {"tools": [tool.mcp_manifest().to_dict() for tool in tools.values()]}
    else:
        output = {"tools": {name: tool.manifest().to_dict() for name, tool in tools.items()}}

    click.echo(json.dumps(output, indent=2))
