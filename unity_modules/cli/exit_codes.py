"""Exit code definitions for Unix-style process status reporting.

Maps UnityModulesError hierarchy to meaningful exit codes so that
shell scripts and CI pipelines can distinguish failure categories.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unity_modules.exceptions import UnityModulesError


class ExitCode(enum.IntEnum):
    SUCCESS = 0
    USAGE_ERROR = 1
    TRANSIENT_ERROR = 2
    CONNECTION_ERROR = 3
    OPERATION_ERROR = 4


_TRANSIENT_STATUSES = frozenset({408, 429})


def exit_code_for(exc: UnityModulesError) -> ExitCode:
    """Map a UnityModulesError to the appropriate exit code."""
    from unity_modules.exceptions import (
        ApiConnectionError,
        ApiError,
        ApiTimeoutError,
        ConfigError,
        UriFormatError,
    )

    if isinstance(exc, (UriFormatError, ConfigError)):
        return ExitCode.USAGE_ERROR
    if isinstance(exc, ApiConnectionError):
        return ExitCode.CONNECTION_ERROR
    if isinstance(exc, ApiTimeoutError):
        return ExitCode.TRANSIENT_ERROR
    if isinstance(exc, ApiError) and exc.status is not None:
        if exc.status in _TRANSIENT_STATUSES or exc.status >= 500:
            return ExitCode.TRANSIENT_ERROR
    return ExitCode.OPERATION_ERROR
