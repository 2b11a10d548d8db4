"""CLI context object and verbose helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from unity_modules.cli.output import OutputConfig, OutputMode
from unity_modules.config import UnityModulesConfig
from unity_modules.release_api import ReleaseQueryClient

# =============================================================================
# Verbose Helpers
# =============================================================================

_VERBOSE_MAX_LEN = 4096


def _truncate_json(text: str) -> str:
    """Truncate JSON string if it exceeds the verbose limit."""
    if len(text) <= _VERBOSE_MAX_LEN:
        return text
    return text[:_VERBOSE_MAX_LEN] + f"... ({len(text)} bytes, truncated)"


def _on_exchange_verbose(request: dict[str, Any], response: Any) -> None:
    """Callback for --verbose: dump request/response to stderr."""
    import json
    import sys

    body = request.get("body")
    summary = {"method": request.get("method"), "url": request.get("url")}
    if isinstance(body, dict) and "variables" in body:
        # The GraphQL document is constant; only the variables are interesting.
        summary["variables"] = body["variables"]

    req_text = _truncate_json(json.dumps(summary, ensure_ascii=False))
    res_text = _truncate_json(json.dumps(response, ensure_ascii=False))
    sys.stderr.write(f">>> {req_text}\n")
    sys.stderr.write(f"<<< {res_text}\n")


# =============================================================================
# Context Object
# =============================================================================


@dataclass
class CLIContext:
    """Context object shared across commands via ctx.obj."""

    config: UnityModulesConfig
    client: ReleaseQueryClient
    output: OutputConfig = OutputConfig(mode=OutputMode.PRETTY)
    quiet: bool = False
