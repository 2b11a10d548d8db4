"""
Unity Modules Exception Classes
===============================

Exception hierarchy for unity-modules operations.

Hierarchy:
    UnityModulesError (base)
    ├── UriFormatError - unityhub:// URI could not be parsed
    ├── ModuleDataError - module forest has the wrong structure
    ├── ApiError - Unity API request failed
    │   ├── ApiConnectionError - Network failure
    │   ├── ApiTimeoutError - Request timed out
    │   ├── GraphQLError - GraphQL response carried errors
    │   ├── ResponseShapeError - Response is not the expected JSON
    │   └── ReleaseNotFoundError - No release matches the query
    └── ConfigError - Configuration file is invalid
"""

from __future__ import annotations

from typing import Any


class UnityModulesError(Exception):
    """Base exception for unity-modules operations.

    Attributes:
        code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class UriFormatError(UnityModulesError):
    """Input does not look like unityhub://<version>/<revision>.

    User-correctable; never retried.
    """

    pass


class ModuleDataError(UnityModulesError):
    """Module forest has a mismatched fundamental type.

    Raised when:
    - The forest is not a list
    - A node is not an object, or subModules is not a list
    """

    pass


class ApiError(UnityModulesError):
    """Unity API request failed.

    Attributes:
        status: HTTP status code, when the server answered
    """

    def __init__(self, message: str, code: str | None = None, status: int | None = None) -> None:
        super().__init__(message, code)
        self.status = status


class ApiConnectionError(ApiError):
    """Cannot reach the Unity API (DNS failure, connection refused)."""

    pass


class ApiTimeoutError(ApiError):
    """Unity API did not answer within the configured timeout."""

    pass


class GraphQLError(ApiError):
    """GraphQL response contained a non-empty errors array."""

    def __init__(self, message: str, errors: list[Any] | None = None) -> None:
        super().__init__(message, "GRAPHQL_ERROR")
        self.errors = errors or []


class ResponseShapeError(ApiError):
    """Response body is not JSON, or lacks the expected fields."""

    pass


class ReleaseNotFoundError(ApiError):
    """No release matched the requested version and filters."""

    pass


class ConfigError(UnityModulesError):
    """Configuration file parsed but failed validation."""

    pass
