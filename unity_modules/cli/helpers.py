"""Shared CLI helper functions."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Annotated, Any

import typer

from unity_modules.cli.exit_codes import ExitCode, exit_code_for
from unity_modules.cli.output import (
    OutputMode,
    configure_output,
    print_error,
    print_validation_error,
)
from unity_modules.config import UnityModulesConfig
from unity_modules.exceptions import UnityModulesError
from unity_modules.models import Architecture, Entitlement, FetchReleaseOptions, Platform, Stream

from .context import CLIContext

# =============================================================================
# Error Handler
# =============================================================================


def _handle_error(e: UnityModulesError) -> None:
    """Print error and raise typer.Exit with the mapped exit code."""
    print_error(e.message, e.code)
    raise typer.Exit(exit_code_for(e)) from None


def handle_cli_errors(fn: Callable[..., None]) -> Callable[..., None]:
    """Decorator that catches UnityModulesError and exits with the mapped code."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            fn(*args, **kwargs)
        except UnityModulesError as e:
            _handle_error(e)

    return wrapper


def _exit_usage(message: str, usage: str) -> None:
    """Print a validation error and exit with USAGE_ERROR."""
    print_validation_error(message, usage)
    raise typer.Exit(ExitCode.USAGE_ERROR) from None


# =============================================================================
# Per-command JSON helper
# =============================================================================


def _should_json(context: CLIContext, json_flag: bool) -> bool:
    """Return True when output should be JSON.

    Checks per-command --json flag first, then UNITY_MODULES_JSON env via context.
    """
    if json_flag:
        configure_output(OutputMode.JSON)
        return True
    return context.output.is_json


# =============================================================================
# Release option resolution
# =============================================================================


def options_from_config(config: UnityModulesConfig, version: str) -> FetchReleaseOptions:
    """Default release filters taken from the loaded configuration."""
    return FetchReleaseOptions(
        version=version,
        platform=config.platform,
        architecture=config.architecture,
        stream=config.stream,
        entitlements=tuple(config.entitlements),
    )


def apply_option_overrides(
    base: FetchReleaseOptions,
    platform: Platform | None = None,
    architecture: Architecture | None = None,
    stream: Stream | None = None,
    entitlements: list[Entitlement] | None = None,
) -> FetchReleaseOptions:
    """Override base filters with the flags given on the command line."""
    update: dict[str, Any] = {}
    if platform is not None:
        update["platform"] = platform
    if architecture is not None:
        update["architecture"] = architecture
    if stream is not None:
        update["stream"] = stream
    if entitlements:
        update["entitlements"] = tuple(entitlements)
    return base.model_copy(update=update)


# Filter options shared by the modules and link commands
PlatformOption = Annotated[
    Platform | None,
    typer.Option("--platform", "-p", help="Download platform (default from config)"),
]
ArchitectureOption = Annotated[
    Architecture | None,
    typer.Option("--arch", "-a", help="Download architecture (default from config)"),
]
StreamOption = Annotated[
    Stream | None,
    typer.Option("--stream", "-s", help="Release stream (default: unfiltered)"),
]
EntitlementOption = Annotated[
    list[Entitlement] | None,
    typer.Option("--entitlement", "-e", help="Entitlement filter (repeatable)"),
]
