"""Release notes command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from unity_modules.cli.context import CLIContext
from unity_modules.cli.exit_codes import ExitCode
from unity_modules.cli.helpers import _should_json, handle_cli_errors
from unity_modules.cli.output import print_error, print_json, print_line, print_markdown, print_success, print_warning
from unity_modules.uri import require_unityhub_uri


def register(app: typer.Typer) -> None:
    @app.command("release-notes")
    @handle_cli_errors
    def release_notes(
        ctx: typer.Context,
        uri: Annotated[str, typer.Argument(help="Unity Hub URI (unityhub://<version>/<revision>)")],
        output: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Save the Markdown to this path"),
        ] = None,
        raw: Annotated[
            bool,
            typer.Option("--raw", help="Print Markdown source instead of rendering it"),
        ] = False,
        json_flag: Annotated[
            bool,
            typer.Option("--json", help="Output as JSON"),
        ] = False,
    ) -> None:
        """Show the release notes of a Unity Editor version.

        Non-Markdown notes cannot be previewed; the original URL is printed instead.
        """
        context: CLIContext = ctx.obj
        hub_uri = require_unityhub_uri(uri)

        notes = context.client.fetch_release_notes(hub_uri.version)
        text = context.client.fetch_text(notes.url) if notes.is_markdown and notes.url else None

        if _should_json(context, json_flag):
            print_json({"version": hub_uri.version, "type": notes.type, "url": notes.url, "markdown": text})
            return

        if not text:
            print_warning("Release notes cannot be previewed here; open the original file instead")
            print(notes.url)
            return

        if output is not None:
            try:
                output.write_text(text, encoding="utf-8")
            except OSError as e:
                print_error(f"Cannot write {output}: {e}")
                raise typer.Exit(ExitCode.OPERATION_ERROR) from None
            print_success(f"Saved release notes for {hub_uri.version} to {output}")
            return

        print_line(f"[bold]Release Notes - {hub_uri.version}[/bold]")
        print_markdown(text, raw=raw)
        print_line(f"[dim]Source: {notes.url}[/dim]")
