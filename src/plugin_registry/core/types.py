"""Type definitions for releases and the registry catalogs."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from plugin_registry.core.errors import BuildError
from plugin_registry.core.platforms import PlatformTarget

REGISTRY_CATALOG_KEY = "index.json"

# Order in which releases are derived from a publish request
RELEASE_ORDER: tuple[PlatformTarget, ...] = (
    PlatformTarget("darwin", "arm64"),
    PlatformTarget("darwin", "amd64"),
    PlatformTarget("windows", "arm64"),
    PlatformTarget("windows", "amd64"),
    PlatformTarget("linux", "arm64"),
    PlatformTarget("linux", "amd64"),
)


def plugin_catalog_key(plugin_id: str) -> str:
    return f"{plugin_id}/index.json"


@dataclass(frozen=True)
class BuildOutcome:
    """Result of building one platform target into its staging directory."""

    target: PlatformTarget
    staging_dir: Path
    error: BuildError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Release:
    """One (plugin, version, platform) artifact to publish."""

    plugin: str
    version: str
    os: str
    arch: str
    path: Path

    @property
    def remote_key(self) -> str:
        return f"{self.plugin}/{self.version}/{self.os}-{self.arch}.tar.gz"

    @property
    def os_arch(self) -> str:
        return f"{self.os}_{self.arch}"

    def __str__(self) -> str:
        return f"{self.plugin} [{self.os}/{self.arch}] - {self.version}"


@dataclass(frozen=True)
class PublishRequest:
    """A request to publish one version of a plugin.

    `paths` maps platform keys (e.g. "linux_amd64") to local artifact paths;
    platforms with no path or an empty path are not published.
    """

    plugin: str
    version: str
    descriptor_path: Path
    paths: dict[str, str] = field(default_factory=dict)

    def to_releases(self) -> list[Release]:
        releases: list[Release] = []
        for target in RELEASE_ORDER:
            path = self.paths.get(target.key, "")
            if not path:
                continue
            releases.append(
                Release(
                    plugin=self.plugin,
                    version=self.version,
                    os=target.os,
                    arch=target.arch,
                    path=Path(path),
                )
            )
        return releases


# Zero time (0001-01-01T00:00:00Z) for records decoded without timestamps
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)


class ArchitectureInfo(BaseModel):
    checksum: str
    download_url: str
    size: int = 0


class VersionRecord(BaseModel):
    """One published version of a plugin across its architectures."""

    metadata: dict[str, Any] = Field(default_factory=dict)
    version: str = ""
    architectures: dict[str, ArchitectureInfo] = Field(default_factory=dict)
    created: datetime = ZERO_TIME
    updated: datetime = ZERO_TIME

    @field_validator("architectures", "metadata", mode="before")
    @classmethod
    def null_as_empty_mapping(cls, v: Any) -> Any:
        return {} if v is None else v


class RegistryEntry(BaseModel):
    """Summary of one plugin as listed in the registry catalog."""

    id: str
    name: str = ""
    icon: str = ""
    description: str = ""
    official: bool = False
    latest_version: VersionRecord = Field(default_factory=VersionRecord)


class PluginCatalog(RegistryEntry):
    """Release history of a single plugin, stored at `<plugin-id>/index.json`."""

    versions: list[VersionRecord] = Field(default_factory=list)

    @field_validator("versions", mode="before")
    @classmethod
    def null_as_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def key(self) -> str:
        return plugin_catalog_key(self.id)

    @staticmethod
    def minimal(plugin_id: str) -> "PluginCatalog":
        return PluginCatalog(id=plugin_id, name=plugin_id)

    def find_version(self, version: str) -> int | None:
        for idx, record in enumerate(self.versions):
            if record.version == version:
                return idx
        return None

    def to_entry(self) -> RegistryEntry:
        return RegistryEntry(
            id=self.id,
            name=self.name,
            icon=self.icon,
            description=self.description,
            official=True,
            latest_version=self.latest_version,
        )


class RegistryCatalog(BaseModel):
    """The set of known plugins, stored at the registry root."""

    plugins: list[RegistryEntry] = Field(default_factory=list)

    @field_validator("plugins", mode="before")
    @classmethod
    def null_as_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v

    def upsert(self, entry: RegistryEntry) -> bool:
        """Replace the entry with the same id in place, or append it.

        Returns:
            True if an existing entry was replaced, False if appended
        """
        for idx, existing in enumerate(self.plugins):
            if existing.id == entry.id:
                self.plugins[idx] = entry
                return True
        self.plugins.append(entry)
        return False
