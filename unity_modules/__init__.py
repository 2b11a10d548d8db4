"""
Unity Modules Package
=====================

Wraps Unity's public release APIs: render Editor release notes and turn a
unityhub:// URI into a flat modules.json for scripted Unity Hub installs.

Main exports:
    - parse_unityhub_uri: unityhub://<version>/<revision> -> HubUri | None
    - flatten_modules: nested module forest -> flat list of Module records
    - ReleaseQueryClient: Unity GraphQL / REST release API client
    - UnityModulesConfig: Configuration management
    - Exception classes: UnityModulesError, UriFormatError, etc.

Example:
    >>> from unity_modules import ReleaseQueryClient, FetchReleaseOptions, flatten_modules, parse_unityhub_uri
    >>> uri = parse_unityhub_uri("unityhub://6000.0.63f1/9438f9b77a46")
    >>> forest = ReleaseQueryClient().fetch_modules(FetchReleaseOptions(version=uri.version))
    >>> modules = flatten_modules(forest)
"""

from unity_modules.config import CONFIG_FILE_NAME, UnityModulesConfig
from unity_modules.exceptions import (
    ApiConnectionError,
    ApiError,
    ApiTimeoutError,
    ConfigError,
    GraphQLError,
    ModuleDataError,
    ReleaseNotFoundError,
    ResponseShapeError,
    UnityModulesError,
    UriFormatError,
)
from unity_modules.flatten import SELECTED_MODULE_ID, SYNC_PARENT_ID, count_nodes, flatten_modules
from unity_modules.models import (
    Architecture,
    Entitlement,
    FetchReleaseOptions,
    HubUri,
    Module,
    ModuleOnline,
    Platform,
    ReleaseNotes,
    Stream,
)
from unity_modules.release_api import ReleaseQueryClient
from unity_modules.uri import parse_unityhub_uri, require_unityhub_uri

__all__ = [
    # Core
    "parse_unityhub_uri",
    "require_unityhub_uri",
    "flatten_modules",
    "count_nodes",
    "SELECTED_MODULE_ID",
    "SYNC_PARENT_ID",
    # Client
    "ReleaseQueryClient",
    # Config
    "UnityModulesConfig",
    "CONFIG_FILE_NAME",
    # Models
    "HubUri",
    "Module",
    "ModuleOnline",
    "ReleaseNotes",
    "FetchReleaseOptions",
    "Platform",
    "Architecture",
    "Stream",
    "Entitlement",
    # Exceptions
    "UnityModulesError",
    "UriFormatError",
    "ModuleDataError",
    "ApiError",
    "ApiConnectionError",
    "ApiTimeoutError",
    "GraphQLError",
    "ResponseShapeError",
    "ReleaseNotFoundError",
    "ConfigError",
]


def main() -> None:
    """Entry point for unity-modules command.

    This function is called by pyproject.toml's [project.scripts]:
        unity-modules = "unity_modules:main"
    """
    from unity_modules.cli.app import cli_main

    cli_main()
