"""Supported operating-system/architecture build targets."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformTarget:
    """An operating-system/architecture pair a separate binary is built for."""

    os: str
    arch: str

    @property
    def key(self) -> str:
        return f"{self.os}_{self.arch}"

    @property
    def binary_name(self) -> str:
        if self.os == "windows":
            return "plugin.exe"
        return "plugin"

    def __str__(self) -> str:
        return self.key


SUPPORTED_PLATFORMS: tuple[PlatformTarget, ...] = (
    PlatformTarget("darwin", "amd64"),
    PlatformTarget("darwin", "arm64"),
    PlatformTarget("linux", "amd64"),
    PlatformTarget("linux", "arm64"),
    PlatformTarget("windows", "amd64"),
    PlatformTarget("windows", "arm64"),
)


def parse_platform_key(key: str) -> PlatformTarget:
    """Look up a supported platform by its `os_arch` key.

    Raises:
        ValueError: If the key does not name a supported platform
    """
    for target in SUPPORTED_PLATFORMS:
        if target.key == key:
            return target
    supported = ", ".join(t.key for t in SUPPORTED_PLATFORMS)
    raise ValueError(f"Unsupported platform '{key}' (supported: {supported})")
