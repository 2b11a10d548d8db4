"""Output formatting utilities for unity-modules.

Supports three modes:
  - PRETTY: Rich-based colored output (TTY default)
  - PLAIN: Tab-separated, no ANSI escapes (pipe default)
  - JSON: Machine-readable JSON

Mode resolution priority:
  --json > --pretty/--no-pretty > UNITY_MODULES_JSON/UNITY_MODULES_NO_PRETTY/NO_COLOR > isatty()
"""

from __future__ import annotations

import enum
import json
import os
import re
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table
from rich.text import Text

console = Console()
err_console = Console(stderr=True)
_quiet = False


# =============================================================================
# Output Mode
# =============================================================================


class OutputMode(enum.Enum):
    PRETTY = "pretty"
    PLAIN = "plain"
    JSON = "json"


@dataclass(frozen=True)
class OutputConfig:
    mode: OutputMode

    @property
    def is_json(self) -> bool:
        return self.mode is OutputMode.JSON

    @property
    def is_plain(self) -> bool:
        return self.mode is OutputMode.PLAIN

    @property
    def is_pretty(self) -> bool:
        return self.mode is OutputMode.PRETTY


def resolve_output_mode(
    json_flag: bool = False,
    pretty_flag: bool | None = None,
) -> OutputMode:
    """Determine output mode from flags, environment, and TTY detection.

    Priority: --json > --pretty/--no-pretty > env vars > isatty()
    """
    if json_flag:
        return OutputMode.JSON

    if pretty_flag is True:
        return OutputMode.PRETTY
    if pretty_flag is False:
        return OutputMode.PLAIN

    if os.environ.get("UNITY_MODULES_JSON", "").strip() not in ("", "0"):
        return OutputMode.JSON
    if os.environ.get("UNITY_MODULES_NO_PRETTY", "").strip() not in ("", "0"):
        return OutputMode.PLAIN
    if os.environ.get("NO_COLOR") is not None:
        return OutputMode.PLAIN

    if sys.stdout.isatty():
        return OutputMode.PRETTY
    return OutputMode.PLAIN


def configure_output(mode: OutputMode) -> None:
    """Reconfigure module-level consoles based on output mode."""
    global console, err_console

    if mode is OutputMode.PLAIN or mode is OutputMode.JSON:
        console = Console(highlight=False, no_color=True, soft_wrap=True)
        err_console = Console(stderr=True, highlight=False, no_color=True, soft_wrap=True)
    else:
        console = Console()
        err_console = Console(stderr=True)


def set_quiet(quiet: bool) -> None:
    """Suppress success/info messages (errors and data still print)."""
    global _quiet
    _quiet = quiet


# =============================================================================
# Plain-text helpers
# =============================================================================

_RICH_MARKUP_RE = re.compile(r"\[/?[a-zA-Z][^\]]*\]")


def print_line(text: str) -> None:
    """Print a line, stripping Rich markup in non-PRETTY mode."""
    if console.no_color:
        print(_RICH_MARKUP_RE.sub("", text))
    else:
        console.print(text)


def _print_plain_table(
    headers: list[str],
    rows: list[list[str]],
    title: str | None = None,
) -> None:
    """Print a tab-separated table for pipe-friendly output."""
    if title:
        print(title)
    print("\t".join(headers))
    for row in rows:
        print("\t".join(row))


def filter_fields(data: Any, fields: list[str] | None) -> Any:
    """Filter data to include only specified fields.

    Args:
        data: Dict, list of dicts, or other data
        fields: Field names to include. None or empty returns all.

    Returns:
        Filtered data with only specified fields.
    """
    if not fields:
        return data

    fields_set = set(fields)

    if isinstance(data, dict):
        return {k: v for k, v in data.items() if k in fields_set}
    if isinstance(data, list):
        return [_filter_dict(item, fields_set) for item in data]
    return data


def _filter_dict(item: Any, fields_set: set[str]) -> Any:
    if isinstance(item, dict):
        return {k: v for k, v in item.items() if k in fields_set}
    return item


def format_size(num_bytes: float) -> str:
    """Format a byte count for display (e.g., 1536 -> '1.5 KB')."""
    if num_bytes < 1024:
        return f"{int(num_bytes)} B"
    size = float(num_bytes)
    for unit in ("KB", "MB", "GB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} TB"


def print_json(data: Any, fields: list[str] | None = None) -> None:
    """Print data as JSON with optional field filtering.

    Args:
        data: Data to output
        fields: Fields to include (None for all)
    """
    filtered = filter_fields(data, fields)
    if console.no_color:
        print(json.dumps(filtered, ensure_ascii=False, indent=2))
    else:
        console.print_json(json.dumps(filtered, ensure_ascii=False))


def print_error(message: str, code: str | None = None) -> None:
    """Print error message to stderr.

    Args:
        message: Error message (will be escaped to prevent markup injection)
        code: Optional error code
    """
    if err_console.no_color:
        print(f"Error: {message}", file=sys.stderr)
        if code:
            print(f"Code: {code}", file=sys.stderr)
        return

    text = Text()
    text.append("Error: ", style="bold red")
    text.append(escape(message))
    err_console.print(text)

    if code:
        code_text = Text()
        code_text.append("Code: ", style="dim")
        code_text.append(escape(code), style="yellow")
        err_console.print(code_text)


def print_validation_error(message: str, help_command: str) -> None:
    """Print validation error with --help guidance.

    Args:
        message: Error message
        help_command: Command to show help for (e.g., "unity-modules modules")
    """
    print_error(f"{message}. Run '{help_command} --help' for usage.")


def _print_tagged(tag: str, style: str, message: str, to_stderr: bool = False) -> None:
    target = err_console if to_stderr else console
    if target.no_color:
        print(f"[{tag}] {message}", file=sys.stderr if to_stderr else sys.stdout)
        return
    target.print(Text.assemble((f"[{tag}] ", style), message))


def print_success(message: str) -> None:
    """Print success message (suppressed by --quiet)."""
    if not _quiet:
        _print_tagged("OK", "bold green", message)


def print_warning(message: str) -> None:
    """Print warning message to stderr."""
    _print_tagged("WARN", "bold yellow", message, to_stderr=True)


def print_info(message: str) -> None:
    """Print info message (suppressed by --quiet)."""
    if not _quiet:
        _print_tagged("INFO", "bold blue", message)


def print_key_value(data: dict[str, Any], title: str | None = None) -> None:
    """Print dict as key-value pairs."""
    if console.no_color:
        if title:
            print(title)
        for key, value in data.items():
            print(f"  {key}: {value}")
        return

    if title:
        console.print(f"[bold]{escape(title)}[/bold]")

    for key, value in data.items():
        console.print(f"  [cyan]{escape(str(key))}:[/cyan] {escape(str(value))}")


def print_markdown(text: str, raw: bool = False) -> None:
    """Render Markdown in PRETTY mode, print the source otherwise."""
    if raw or console.no_color:
        print(text)
        return
    console.print(Markdown(text))


# =============================================================================
# Module table
# =============================================================================


def _module_depths(modules: list[dict[str, Any]]) -> list[int]:
    """Depth of each record, recovered from its parent back-reference."""
    depth_by_id: dict[str, int] = {}
    depths: list[int] = []
    for module in modules:
        parent = module.get("parent", "")
        depth = depth_by_id[parent] + 1 if parent and parent in depth_by_id else 0
        depth_by_id.setdefault(module.get("id", ""), depth)
        depths.append(depth)
    return depths


def print_modules_table(modules: list[dict[str, Any]], title: str | None = None) -> None:
    """Print flattened modules as a formatted table."""
    if not modules:
        print_line("No modules found")
        return

    title = title or f"Modules ({len(modules)})"
    depths = _module_depths(modules)

    if console.no_color:
        headers = ["ID", "Name", "Parent", "Category", "Download", "Visible", "Selected"]
        rows: list[list[str]] = []
        for module, depth in zip(modules, depths, strict=True):
            rows.append(
                [
                    "  " * depth + module.get("id", ""),
                    module.get("name", ""),
                    module.get("parent", ""),
                    module.get("category", ""),
                    format_size(module.get("downloadSize", 0)),
                    "Yes" if module.get("visible") else "No",
                    "Yes" if module.get("selected") else "No",
                ]
            )
        _print_plain_table(headers, rows, title)
        return

    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Parent", style="dim")
    table.add_column("Category", style="magenta")
    table.add_column("Download", justify="right", style="green")
    table.add_column("Visible", justify="center")
    table.add_column("Selected", justify="center")

    for module, depth in zip(modules, depths, strict=True):
        visible = "[green]Yes[/green]" if module.get("visible") else "[dim]No[/dim]"
        selected = "[green]*[/green]" if module.get("selected") else ""
        table.add_row(
            escape("  " * depth + module.get("id", "")),
            escape(module.get("name", "")),
            escape(module.get("parent", "")),
            escape(module.get("category", "")),
            format_size(module.get("downloadSize", 0)),
            visible,
            selected,
        )

    console.print(table)
