"""Configuration commands: show, init."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from unity_modules.cli.context import CLIContext
from unity_modules.cli.exit_codes import ExitCode
from unity_modules.cli.helpers import _should_json
from unity_modules.cli.output import print_error, print_json, print_line, print_success
from unity_modules.config import CONFIG_FILE_NAME, UnityModulesConfig

config_app = typer.Typer(help="Configuration commands")


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    json_flag: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show current configuration."""
    context: CLIContext = ctx.obj
    config_file = UnityModulesConfig._find_config_file()
    config = context.config

    if _should_json(context, json_flag):
        data = {"config_file": str(config_file) if config_file else None, **config.model_dump(mode="json")}
        print_json(data, None)
    else:
        entitlements = ", ".join(e.value for e in config.entitlements)
        print_line("[bold]=== unity-modules Configuration ===[/bold]")
        print_line(f"Config file: {config_file or '[dim]Not found (using defaults)[/dim]'}")
        print_line(f"GraphQL URL: {config.graphql_url}")
        print_line(f"Release API URL: {config.release_api_url}")
        print_line(f"Page URL: {config.page_url or '[dim](none, query string only)[/dim]'}")
        print_line(f"Timeout: {config.timeout}s")
        print_line(f"Platform: {config.platform.value}")
        print_line(f"Architecture: {config.architecture.value}")
        print_line(f"Stream: {config.stream.value if config.stream else '[dim](any)[/dim]'}")
        print_line(f"Entitlements: {entitlements or '[dim](none)[/dim]'}")
        print_line(f"Output: {config.output}")


@config_app.command("init")
def config_init(
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output path"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Generate default .unity-modules.toml configuration file."""
    output_path = output or Path(CONFIG_FILE_NAME)

    if output_path.exists() and not force:
        print_error(f"{output_path} already exists. Use --force to overwrite.")
        raise typer.Exit(ExitCode.USAGE_ERROR) from None

    default_config = UnityModulesConfig()
    output_path.write_text(default_config.to_toml())
    print_success(f"Created {output_path}")
