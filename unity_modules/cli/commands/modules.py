"""Module list command: fetch a release's modules and export modules.json."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any
from urllib.parse import parse_qs, urlsplit

import typer

from unity_modules.cli.context import CLIContext
from unity_modules.cli.exit_codes import ExitCode
from unity_modules.cli.helpers import (
    ArchitectureOption,
    EntitlementOption,
    PlatformOption,
    StreamOption,
    _exit_usage,
    _should_json,
    apply_option_overrides,
    handle_cli_errors,
    options_from_config,
)
from unity_modules.cli.output import print_error, print_info, print_json, print_modules_table, print_success
from unity_modules.flatten import count_nodes, flatten_modules
from unity_modules.models import FetchReleaseOptions
from unity_modules.uri import require_unityhub_uri

_USAGE = "unity-modules modules"


def _link_params(link: str) -> dict[str, str]:
    """First value of each query parameter of a share link."""
    query = parse_qs(urlsplit(link).query)
    return {key: values[0] for key, values in query.items() if values}


def write_modules_json(path: Path, data: list[dict[str, Any]]) -> None:
    """Write modules.json (UTF-8, 2-space indent)."""
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def register(app: typer.Typer) -> None:
    @app.command("modules")
    @handle_cli_errors
    def modules(
        ctx: typer.Context,
        uri: Annotated[
            str | None,
            typer.Argument(help="Unity Hub URI (unityhub://<version>/<revision>)"),
        ] = None,
        platform: PlatformOption = None,
        architecture: ArchitectureOption = None,
        stream: StreamOption = None,
        entitlements: EntitlementOption = None,
        from_link: Annotated[
            str | None,
            typer.Option("--from-link", help="Restore URI and filters from a share link"),
        ] = None,
        output: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Write modules.json to this path"),
        ] = None,
        save: Annotated[
            bool,
            typer.Option("--save", help="Write modules.json to the configured output path"),
        ] = False,
        json_flag: Annotated[
            bool,
            typer.Option("--json", help="Output as JSON"),
        ] = False,
        fields: Annotated[
            list[str] | None,
            typer.Option("--fields", "-f", help="Fields to include in JSON output"),
        ] = None,
    ) -> None:
        """Fetch the module list of a Unity release and flatten it.

        Examples:
            unity-modules modules unityhub://6000.0.63f1/9438f9b77a46 -o modules.json
            unity-modules modules unityhub://6000.0.63f1/9438f9b77a46 -p MAC_OS -a ARM64 --json
        """
        context: CLIContext = ctx.obj

        if from_link is not None:
            params = _link_params(from_link)
            if "v" not in params:
                _exit_usage("Link has no 'v' parameter", _USAGE)
            hub_uri = require_unityhub_uri(params["v"])
            base = FetchReleaseOptions.from_query_params(params, hub_uri.version)
        elif uri is not None:
            hub_uri = require_unityhub_uri(uri)
            base = options_from_config(context.config, hub_uri.version)
        else:
            _exit_usage("Missing URI argument (or --from-link)", _USAGE)
            return

        options = apply_option_overrides(base, platform, architecture, stream, entitlements)
        forest = context.client.fetch_modules(options)
        data = [module.to_dict() for module in flatten_modules(forest)]

        target = output or (Path(context.config.output) if save else None)
        if target is not None:
            try:
                write_modules_json(target, data)
            except OSError as e:
                print_error(f"Cannot write {target}: {e}")
                raise typer.Exit(ExitCode.OPERATION_ERROR) from None

        if _should_json(context, json_flag):
            print_json(data, fields)
            return

        print_modules_table(
            data,
            f"Unity {options.version} {options.platform.value}/{options.architecture.value} modules ({len(data)})",
        )
        print_info(f"{len(forest)} top-level modules, {count_nodes(forest)} in total")
        if target is not None:
            print_success(f"Wrote {len(data)} modules to {target}")
