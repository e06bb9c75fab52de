"""Tests for supported platform targets."""

import pytest

from plugin_registry.core.platforms import SUPPORTED_PLATFORMS, PlatformTarget, parse_platform_key


def test_key_joins_os_and_arch_with_underscore() -> None:
    assert PlatformTarget("linux", "amd64").key == "linux_amd64"
    assert str(PlatformTarget("darwin", "arm64")) == "darwin_arm64"


def test_windows_binary_has_exe_suffix() -> None:
    assert PlatformTarget("windows", "amd64").binary_name == "plugin.exe"
    assert PlatformTarget("linux", "arm64").binary_name == "plugin"


def test_supported_platforms_cover_three_os_and_two_arch() -> None:
    keys = {target.key for target in SUPPORTED_PLATFORMS}

    assert len(SUPPORTED_PLATFORMS) == 6
    assert keys == {
        "darwin_amd64",
        "darwin_arm64",
        "linux_amd64",
        "linux_arm64",
        "windows_amd64",
        "windows_arm64",
    }


def test_parse_platform_key_returns_supported_target() -> None:
    assert parse_platform_key("windows_arm64") == PlatformTarget("windows", "arm64")


def test_parse_platform_key_rejects_unknown_platform() -> None:
    with pytest.raises(ValueError, match="Unsupported platform 'plan9_mips'"):
        parse_platform_key("plan9_mips")
