"""
Unity Modules Configuration Module
==================================

Pydantic v2 based configuration for unity-modules.
Supports TOML file loading and validation.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from unity_modules.exceptions import ConfigError
from unity_modules.models import Architecture, Entitlement, Platform, Stream

# =============================================================================
# Endpoint Constants
# =============================================================================

DEFAULT_GRAPHQL_URL = "https://live-platform-api.prd.ld.unity3d.com/graphql"
DEFAULT_RELEASE_API_URL = "https://services.api.unity.com/unity/editor/release/v1/releases"
DEFAULT_PAGE_URL = ""
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "unity-modules"
DEFAULT_OUTPUT_FILE = "modules.json"
CONFIG_FILE_NAME = ".unity-modules.toml"


def user_config_path() -> Path:
    """Per-user config file ($XDG_CONFIG_HOME/unity-modules/config.toml)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "unity-modules" / "config.toml"


# =============================================================================
# Configuration Model
# =============================================================================


class UnityModulesConfig(BaseModel):
    """Configuration for unity-modules.

    Attributes:
        graphql_url: Unity GraphQL release endpoint.
        release_api_url: Unity editor release REST endpoint.
        page_url: Page that share links point at; empty for a bare query string.
        timeout: HTTP timeout in seconds.
        user_agent: User-Agent header sent with every request.
        platform: Default download platform.
        architecture: Default download architecture.
        stream: Default release stream (None for unfiltered).
        entitlements: Default entitlements.
        output: Default modules.json output path.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        frozen=False,
        extra="ignore",
    )

    graphql_url: str = DEFAULT_GRAPHQL_URL
    release_api_url: str = DEFAULT_RELEASE_API_URL
    page_url: str = DEFAULT_PAGE_URL
    timeout: Annotated[float, Field(gt=0)] = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    platform: Platform = Platform.WINDOWS
    architecture: Architecture = Architecture.X86_64
    stream: Stream | None = None
    entitlements: list[Entitlement] = Field(default_factory=list)
    output: str = DEFAULT_OUTPUT_FILE

    @field_validator("stream", mode="before")
    @classmethod
    def validate_stream(cls, v: Any) -> Any:
        """Treat an empty string as 'no stream filter'."""
        if v == "":
            return None
        return v

    @field_validator("entitlements", mode="before")
    @classmethod
    def validate_entitlements(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """Load configuration from TOML file.

        Args:
            config_path: Path to TOML config file. If None, searches for
                         .unity-modules.toml in the current directory, then
                         the per-user config file.

        Returns:
            UnityModulesConfig instance with loaded or default values.

        Raises:
            ConfigError: File was read but contains invalid values.
        """
        toml_path = config_path if config_path and config_path.exists() else cls._find_config_file()

        if toml_path:
            try:
                with open(toml_path, "rb") as f:
                    data = tomllib.load(f)
            except (tomllib.TOMLDecodeError, OSError):
                return cls()
            try:
                return cls.model_validate(data)
            except ValidationError as e:
                raise ConfigError(f"Invalid config {toml_path}: {e.errors()[0]['msg']}", code="CONFIG_ERROR") from e

        return cls()

    @classmethod
    def _find_config_file(cls) -> Path | None:
        """Find config file in current directory or the per-user config dir.

        Returns:
            Path to config file if found, None otherwise.
        """
        config_in_cwd = Path.cwd() / CONFIG_FILE_NAME
        if config_in_cwd.exists():
            return config_in_cwd

        user_config = user_config_path()
        if user_config.exists():
            return user_config

        return None

    def to_toml(self) -> str:
        """Generate TOML string from config.

        Returns:
            TOML formatted configuration string.
        """
        entitlements_str = ", ".join(f'"{e.value}"' for e in self.entitlements)
        stream_str = f'stream = "{self.stream.value}"' if self.stream else '# stream = "LTS"'

        return f'''# unity-modules configuration

graphql_url = "{self.graphql_url}"
release_api_url = "{self.release_api_url}"
# Share-link page; leave empty to print only the query string
page_url = "{self.page_url}"
timeout = {self.timeout}
user_agent = "{self.user_agent}"

# Default release filters
platform = "{self.platform.value}"
architecture = "{self.architecture.value}"
{stream_str}
entitlements = [{entitlements_str}]

output = "{self.output}"
'''
