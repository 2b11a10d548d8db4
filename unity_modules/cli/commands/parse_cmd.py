"""URI parse command."""

from __future__ import annotations

from typing import Annotated

import typer

from unity_modules.cli.context import CLIContext
from unity_modules.cli.helpers import _should_json, handle_cli_errors
from unity_modules.cli.output import print_json, print_key_value
from unity_modules.uri import require_unityhub_uri


def register(app: typer.Typer) -> None:
    @app.command("parse")
    @handle_cli_errors
    def parse(
        ctx: typer.Context,
        uri: Annotated[str, typer.Argument(help="Unity Hub URI (unityhub://<version>/<revision>)")],
        json_flag: Annotated[
            bool,
            typer.Option("--json", help="Output as JSON"),
        ] = False,
    ) -> None:
        """Extract the Editor version from a unityhub:// URI.

        Example: unity-modules parse unityhub://6000.0.63f1/9438f9b77a46
        """
        context: CLIContext = ctx.obj
        hub_uri = require_unityhub_uri(uri)

        if _should_json(context, json_flag):
            print_json(hub_uri.model_dump())
        else:
            print_key_value({"version": hub_uri.version, "revision": hub_uri.revision}, "Unity Hub URI")
