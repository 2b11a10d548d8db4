"""
Unity Modules Domain Models
===========================

Pydantic v2 models for the Unity release API.

Two shapes of module exist:
  - ModuleOnline: a node as received from the GraphQL API (nested, every
    field optional, unknown keys kept)
  - Module: a flattened record as written to modules.json (flat, every
    field defaulted, camelCase on the wire)
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Release filter enums
# =============================================================================


class Platform(str, enum.Enum):
    MAC_OS = "MAC_OS"
    LINUX = "LINUX"
    WINDOWS = "WINDOWS"


class Architecture(str, enum.Enum):
    X86_64 = "X86_64"
    ARM64 = "ARM64"


class Stream(str, enum.Enum):
    LTS = "LTS"
    BETA = "BETA"
    ALPHA = "ALPHA"
    TECH = "TECH"


class Entitlement(str, enum.Enum):
    XLTS = "XLTS"
    U7ALPHA = "U7ALPHA"


def _lookup(enum_cls: type[Any], raw: str | None) -> Any:
    """Return the enum member whose value is raw, or None for unknown values."""
    if not raw:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


# =============================================================================
# Parsed URI / release notes
# =============================================================================


class HubUri(BaseModel):
    """Parsed unityhub://<version>/<revision> deep link."""

    model_config = ConfigDict(frozen=True)

    version: str
    revision: str


class ReleaseNotes(BaseModel):
    """Release notes pointer returned by the release REST API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = ""
    url: str = ""

    @property
    def is_markdown(self) -> bool:
        return self.type == "MD"


# =============================================================================
# Module as received from the API
# =============================================================================


class SizeValue(BaseModel):
    """Size wrapper ({value, unit}) used by downloadSize / installedSize."""

    model_config = ConfigDict(extra="allow")

    value: int | float | None = None
    unit: str | None = None


class EulaEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str | None = None
    label: str | None = None
    message: str | None = None
    integrity: str | None = None
    type: str | None = None


class ExtractedPathRename(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None


class ModuleOnline(BaseModel):
    """Module node as returned by the GraphQL release API.

    Every field may be absent or null; deeper levels of the query select
    fewer fields. Only a wrong fundamental type (e.g. subModules that is
    not a list) fails validation.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    url: str | None = None
    integrity: str | None = None
    type: str | None = None
    id: str | None = None
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    category: str | None = None
    download_size: SizeValue | None = Field(default=None, alias="downloadSize")
    installed_size: SizeValue | None = Field(default=None, alias="installedSize")
    required: bool | None = None
    hidden: bool | None = None
    pre_selected: bool | None = Field(default=None, alias="preSelected")
    destination: str | None = None
    extracted_path_rename: ExtractedPathRename | None = Field(default=None, alias="extractedPathRename")
    eula: list[EulaEntry | None] | None = None
    # Children stay raw; the flattener validates them one node at a time.
    sub_modules: list[Any] | None = Field(default=None, alias="subModules")


# =============================================================================
# Flattened module record
# =============================================================================


class Module(BaseModel):
    """Flattened module record, one per ModuleOnline node.

    Field order matches the modules.json layout expected by Unity Hub
    install scripts.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = ""
    integrity: str = ""
    type: str = ""
    id: str = ""
    name: str = ""
    slug: str = ""
    description: str = ""
    category: str = ""
    download_size: int | float = Field(default=0, alias="downloadSize")
    installed_size: int | float = Field(default=0, alias="installedSize")
    required: bool = False
    hidden: bool = False
    extracted_path_rename: dict[str, Any] | None = Field(default=None, alias="extractedPathRename")
    pre_selected: bool = Field(default=False, alias="preSelected")
    destination: str | None = None
    eula: list[dict[str, Any] | None] | None = None
    sub_modules: list[Module] = Field(default_factory=list, alias="subModules")

    download_url: str = Field(default="", alias="downloadUrl")
    visible: bool = True
    selected: bool = False
    sync: str = ""
    parent: str = ""
    eula_url1: str = Field(default="", alias="eulaUrl1")
    eula_label1: str = Field(default="", alias="eulaLabel1")
    eula_message: str = Field(default="", alias="eulaMessage")
    rename_to: str = Field(default="", alias="renameTo")
    rename_from: str = Field(default="", alias="renameFrom")
    preselected: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase mapping written to modules.json."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Release query options
# =============================================================================


class FetchReleaseOptions(BaseModel):
    """Filters for the GraphQL getUnityReleases query.

    Attributes:
        version: Editor version (e.g., "6000.0.63f1")
        platform: Download platform
        architecture: Download architecture
        stream: Release stream, None to leave unfiltered
        entitlements: Entitlements, empty to leave unfiltered
    """

    model_config = ConfigDict(frozen=True)

    version: str
    platform: Platform = Platform.WINDOWS
    architecture: Architecture = Architecture.X86_64
    stream: Stream | None = None
    entitlements: tuple[Entitlement, ...] = ()

    def to_variables(self) -> dict[str, Any]:
        """Build GraphQL variables; stream/entitlements only when set."""
        variables: dict[str, Any] = {
            "architecture": [self.architecture.value],
            "platform": [self.platform.value],
            "version": self.version,
        }
        if self.stream is not None:
            variables["stream"] = [self.stream.value]
        if self.entitlements:
            variables["entitlements"] = [e.value for e in self.entitlements]
        return variables

    def to_query_params(self, uri: str) -> dict[str, str]:
        """Build share-link query parameters (v, platform, arch, stream, entitlements)."""
        params = {
            "v": uri,
            "platform": self.platform.value,
            "arch": self.architecture.value,
        }
        if self.stream is not None:
            params["stream"] = self.stream.value
        if self.entitlements:
            params["entitlements"] = ",".join(e.value for e in self.entitlements)
        return params

    @classmethod
    def from_query_params(cls, params: Mapping[str, str], version: str) -> Self:
        """Restore options from share-link query parameters.

        Unknown platform/arch/stream values keep the defaults; unknown
        entitlements are dropped.
        """
        entitlements: list[Entitlement] = []
        for raw in (params.get("entitlements") or "").split(","):
            ent = _lookup(Entitlement, raw.strip())
            if ent is not None:
                entitlements.append(ent)

        return cls(
            version=version,
            platform=_lookup(Platform, params.get("platform")) or Platform.WINDOWS,
            architecture=_lookup(Architecture, params.get("arch")) or Architecture.X86_64,
            stream=_lookup(Stream, params.get("stream")),
            entitlements=tuple(entitlements),
        )
