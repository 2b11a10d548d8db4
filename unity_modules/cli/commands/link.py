"""Share link command."""

from __future__ import annotations

from typing import Annotated
from urllib.parse import urlencode

import typer

from unity_modules.cli.context import CLIContext
from unity_modules.cli.helpers import (
    ArchitectureOption,
    EntitlementOption,
    PlatformOption,
    StreamOption,
    _should_json,
    apply_option_overrides,
    handle_cli_errors,
    options_from_config,
)
from unity_modules.cli.output import print_json
from unity_modules.uri import require_unityhub_uri


def build_share_link(page_url: str, params: dict[str, str]) -> str:
    """Append params to page_url; with no page configured, return just "?<query>"."""
    separator = "&" if "?" in page_url else "?"
    return f"{page_url}{separator}{urlencode(params)}"


def register(app: typer.Typer) -> None:
    @app.command("link")
    @handle_cli_errors
    def link(
        ctx: typer.Context,
        uri: Annotated[str, typer.Argument(help="Unity Hub URI (unityhub://<version>/<revision>)")],
        platform: PlatformOption = None,
        architecture: ArchitectureOption = None,
        stream: StreamOption = None,
        entitlements: EntitlementOption = None,
        json_flag: Annotated[
            bool,
            typer.Option("--json", help="Output as JSON"),
        ] = False,
    ) -> None:
        """Build a share link carrying the URI and release filters."""
        context: CLIContext = ctx.obj
        hub_uri = require_unityhub_uri(uri)
        options = apply_option_overrides(
            options_from_config(context.config, hub_uri.version),
            platform,
            architecture,
            stream,
            entitlements,
        )
        url = build_share_link(context.config.page_url, options.to_query_params(uri))

        if _should_json(context, json_flag):
            print_json({"url": url})
        else:
            # Plain print: URLs must not go through Rich markup handling
            print(url)
