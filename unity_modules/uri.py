"""Parse unityhub:// deep links into an Editor version."""

from __future__ import annotations

import re
from typing import Any

from unity_modules.exceptions import UriFormatError
from unity_modules.models import HubUri

UNITYHUB_SCHEME = "unityhub"

# unityhub://<version>/<revision>; version has no '/', revision is the non-empty rest
_UNITYHUB_URI_RE = re.compile(rf"{UNITYHUB_SCHEME}://([^/]+)/(.+)")


def parse_unityhub_uri(uri: Any) -> HubUri | None:
    """Extract the version from a unityhub:// URI.

    Matching is exact: no trimming and no case folding.

    Args:
        uri: Candidate string (e.g., "unityhub://6000.0.63f1/9438f9b77a46")

    Returns:
        HubUri on match, None otherwise (never raises).
    """
    if not isinstance(uri, str):
        return None
    match = _UNITYHUB_URI_RE.fullmatch(uri)
    if match is None:
        return None
    return HubUri(version=match.group(1), revision=match.group(2))


def require_unityhub_uri(uri: str) -> HubUri:
    """Parse a unityhub:// URI or raise UriFormatError."""
    parsed = parse_unityhub_uri(uri)
    if parsed is None:
        raise UriFormatError(
            f"Cannot parse URI '{uri}'. Expected {UNITYHUB_SCHEME}://<version>/<revision>",
            code="INVALID_URI",
        )
    return parsed
