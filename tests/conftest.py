"""Shared fixtures for plugin registry tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from tests.test_utils.builders import VALID_DESCRIPTOR


@pytest.fixture
def write_plugin(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a plugin source dir with a plugin.yaml under tmp_path."""

    def _write(dirname: str = "plugin", **overrides: Any) -> Path:
        plugin_dir = tmp_path / dirname
        plugin_dir.mkdir(parents=True, exist_ok=True)
        data = {**VALID_DESCRIPTOR, **overrides}
        (plugin_dir / "plugin.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")
        return plugin_dir

    return _write


@pytest.fixture
def write_artifact(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a local artifact file under tmp_path/artifacts."""

    def _write(name: str, content: bytes = b"artifact") -> Path:
        path = tmp_path / "artifacts" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _write
