"""
unity-modules - Typer Application
=================================

Main Typer application: global options callback plus the parse,
modules, release-notes, link and config commands.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from unity_modules.cli.commands import link, modules, parse_cmd, release_notes
from unity_modules.cli.commands.config import config_app
from unity_modules.cli.context import CLIContext, _on_exchange_verbose
from unity_modules.cli.helpers import _handle_error
from unity_modules.cli.output import (
    OutputConfig,
    configure_output,
    print_line,
    resolve_output_mode,
    set_quiet,
)
from unity_modules.config import UnityModulesConfig
from unity_modules.exceptions import ConfigError
from unity_modules.logging_config import _resolve_log_level, setup_logging
from unity_modules.release_api import ReleaseQueryClient

# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    name="unity-modules",
    help="Unity release notes and Unity Hub modules.json generator",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# =============================================================================
# Global Options Callback
# =============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    graphql_url: Annotated[
        str | None,
        typer.Option(
            "--graphql-url",
            help="Unity GraphQL release endpoint",
            envvar="UNITY_MODULES_GRAPHQL_URL",
        ),
    ] = None,
    release_api_url: Annotated[
        str | None,
        typer.Option(
            "--release-api-url",
            help="Unity editor release REST endpoint",
            envvar="UNITY_MODULES_RELEASE_API_URL",
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout",
            "-t",
            help="HTTP timeout in seconds",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Path to a TOML config file",
        ),
    ] = None,
    pretty_flag: Annotated[
        bool | None,
        typer.Option(
            "--pretty/--no-pretty",
            help="Force pretty or plain output",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress success messages (errors still go to stderr)",
            envvar="UNITY_MODULES_QUIET",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Dump API requests and responses to stderr",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug logging",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write logs to this file",
        ),
    ] = None,
) -> None:
    """Unity release notes and Unity Hub modules.json generator."""
    output_mode = resolve_output_mode(pretty_flag=pretty_flag)
    configure_output(output_mode)
    set_quiet(quiet)
    setup_logging(_resolve_log_level(debug), log_file)

    try:
        config = UnityModulesConfig.load(config_path)
    except ConfigError as e:
        _handle_error(e)
        return

    try:
        if graphql_url is not None:
            config.graphql_url = graphql_url
        if release_api_url is not None:
            config.release_api_url = release_api_url
        if timeout is not None:
            config.timeout = timeout
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err["loc"])
        _handle_error(ConfigError(f"Invalid value for {field}: {err['msg']}", code="CONFIG_ERROR"))
        return

    client = ReleaseQueryClient(
        graphql_url=config.graphql_url,
        release_api_url=config.release_api_url,
        timeout=config.timeout,
        user_agent=config.user_agent,
        on_exchange=_on_exchange_verbose if verbose else None,
    )

    ctx.obj = CLIContext(
        config=config,
        client=client,
        output=OutputConfig(mode=output_mode),
        quiet=quiet,
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show CLI version."""
    try:
        ver = pkg_version("unity-modules")
    except PackageNotFoundError:
        ver = "unknown"
    print_line(f"unity-modules {ver}")


parse_cmd.register(app)
modules.register(app)
release_notes.register(app)
link.register(app)
app.add_typer(config_app, name="config")


# =============================================================================
# Entry Point
# =============================================================================


def cli_main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    cli_main()
