"""
Toolbox validate command implementation.

This command decodes every tool in one or more tools files through the tool
registry and builds their manifests, reporting every configuration error.
"""

import json
import sys
from pathlib import Path
from typing import List

import click

from ...core.exceptions import ConfigDecodeError
from ...core.loader import initialize_tools, load_tool_configs
from ...core.registry import ToolRegistry, build_registry


@click.command(
    name="validate",
    help="Validate tools files for syntax and configuration errors."
)
@click.argument(
    "tools_files",
    nargs=-1,
    required=True,
    type=click.Path(dir_okay=False, path_type=Path)
)
@click.option(
    "--strict", "-s",
    is_flag=True,
    help="Enable strict validation mode with additional checks."
)
@click.option(
    "--format", "-f",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format for validation results."
)
@click.pass_context
def validate_command(
    ctx: click.Context,
    tools_files: tuple,
    strict: bool,
    format: str
) -> None:
    """
    Validate one or more tools files.

    Exit codes:
    0 - All files valid
    1 - Validation errors found
    """
    verbose = ctx.obj.get('verbose', False) if ctx.obj else False
    registry = build_registry()

    if verbose:
        click.echo(f"Validating {len(tools_files)} tools file(s) against types: {', '.join(registry.types())}")

    results = [validate_single_file(path, registry, strict) for path in tools_files]
    overall_success = all(r["valid"] for r in results)

    if format.lower() == "json":
        click.echo(json.dumps({
            "overall_valid": overall_success,
            "validated_count": len(tools_files),
            "results": results
        }, indent=2))
    else:
        output_text_results(results, overall_success, verbose)

    sys.exit(0 if overall_success else 1)


def validate_single_file(tools_file: Path, registry: ToolRegistry, strict: bool) -> dict:
    """
    Validate a single tools file and return detailed results.

    Args:
        tools_file: Path to the tools file
        registry: Registry used to decode tool configurations
        strict: Whether to run the additional strict checks

    Returns:
        Dictionary with validation results
    """
    result = {
        "file": str(tools_file),
        "valid": False,
        "errors": [],
        "warnings": [],
        "tools": []
    }

    try:
        configs = load_tool_configs(tools_file, registry)
        tools = initialize_tools(configs)
        result["tools"] = [
            {
                "name": name,
                "type": config.type,
                "source": config.source,
                "authRequired": list(config.auth_required),
            }
            for name, config in configs.items()
        ]
        if strict:
            result["warnings"].extend(run_strict_validation(tools))
        result["valid"] = True
    except FileNotFoundError:
        result["errors"].append(f"File not found: {tools_file}")
    except OSError as e:
        result["errors"].append(f"Unable to read {tools_file}: {e.strerror or e}")
    except ConfigDecodeError as e:
        for error in e.details.get("validation_errors", []):
            loc = " -> ".join(str(x) for x in error["loc"])
            result["errors"].append(f"Validation error at {loc}: {error['msg']}")
        if not e.details.get("validation_errors"):
            result["errors"].append(e.message)
    except ValueError as e:
        result["errors"].append(f"Schema validation error: {e}")

    return result


def run_strict_validation(tools: dict) -> List[str]:
    """Return warnings for tools that are valid but likely misconfigured."""
    warnings = []
    for name, tool in tools.items():
        if len(tool.to_config().description) < 10:
            warnings.append(
                f"Tool '{name}' has a very short description. "
                f"Consider adding more detail for better usability."
            )
        if not tool.auth_required:
            warnings.append(f"Tool '{name}' can be invoked without authorization.")
    return warnings


def output_text_results(results: List[dict], overall_success: bool, verbose: bool) -> None:
    """Print one block per tools file, listing its tools and any problems."""
    for result in results:
        if result["valid"]:
            status = click.style("✓ VALID", fg='green', bold=True)
            click.echo(f"{status} {result['file']} ({len(result['tools'])} tools)")
        else:
            click.echo(f"{click.style('✗ INVALID', fg='red', bold=True)} {result['file']}")

        for error in result["errors"]:
            click.echo(f"    error: {click.style(error, fg='red')}")
        for warning in result["warnings"]:
            click.echo(f"    warning: {click.style(warning, fg='yellow')}")

        if verbose:
            for tool in result["tools"]:
                auth = ", ".join(tool["authRequired"]) or "none"
                click.echo(f"    - {tool['name']}: {tool['type']} on {tool['source']} (auth: {auth})")

    invalid = [r["file"] for r in results if not r["valid"]]
    click.echo(f"\nTotal files: {len(results)}, tools: {sum(len(r['tools']) for r in results)}")
    if overall_success:
        click.echo(click.style("✓ All tools files are valid!", fg='green', bold=True))
    else:
        click.echo(click.style(f"✗ {len(invalid)} tools file(s) have errors.", fg='red', bold=True))
