"""Plugin descriptor (plugin.yaml) loading, validation, and persistence."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plugin_registry.core.errors import DescriptorError, DescriptorValidationError

DESCRIPTOR_FILENAME = "plugin.yaml"

UI_CAPABILITIES = frozenset({"ui"})
BACKEND_CAPABILITIES = frozenset({"resource", "exec", "networker", "settings"})


class Maintainer(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    email: str = ""


class ThemeColors(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str = ""
    secondary: str = ""
    tertiary: str = ""


class Theme(BaseModel):
    model_config = ConfigDict(frozen=True)

    colors: ThemeColors = Field(default_factory=ThemeColors)


class PluginDescriptor(BaseModel):
    """The plugin description file located at the root of a plugin.

    Every field has an empty default so that partially filled descriptors can
    be loaded and reported on by validate() instead of failing to parse.
    Unknown keys are kept so that rewriting the file does not drop them.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = ""
    version: str = ""
    name: str = ""
    icon: str = ""
    description: str = ""
    repository: str = ""
    website: str = ""
    maintainers: list[Maintainer] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)
    theme: Theme = Field(default_factory=Theme)

    def missing_fields(self) -> list[str]:
        """Return the required fields that are absent, in declaration order."""
        missing: list[str] = []
        for field_name in ("id", "name", "version", "description", "repository", "website"):
            if not getattr(self, field_name):
                missing.append(field_name)
        if not self.maintainers:
            missing.append("maintainers")
        if not self.capabilities:
            missing.append("capabilities")
        return missing

    def validate_required(self) -> None:
        """Check that every required field is present.

        Raises:
            DescriptorValidationError: Listing all missing fields at once
        """
        missing = self.missing_fields()
        if missing:
            raise DescriptorValidationError(missing)

    def with_version(self, version: str) -> "PluginDescriptor":
        return self.model_copy(update={"version": version})

    def has_ui_capabilities(self) -> bool:
        return any(capability in UI_CAPABILITIES for capability in self.capabilities)

    def has_backend_capabilities(self) -> bool:
        return any(capability in BACKEND_CAPABILITIES for capability in self.capabilities)

    def snapshot(self) -> dict[str, Any]:
        """JSON form embedded as the metadata of each published version."""
        return self.model_dump(mode="json", include=set(type(self).model_fields))


def load_descriptor(path: Path) -> PluginDescriptor:
    """Load a plugin descriptor from a YAML file.

    Raises:
        DescriptorError: If the file is missing, unreadable, or malformed
    """
    if not path.exists():
        raise DescriptorError(f"Plugin descriptor not found at {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise DescriptorError(f"Failed to parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DescriptorError(f"Failed to parse {path}: expected a mapping at the top level")

    try:
        return PluginDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorError(f"Invalid plugin descriptor {path}: {e}") from e


def save_descriptor(descriptor: PluginDescriptor, path: Path) -> None:
    """Write the descriptor back out as YAML, preserving unknown keys."""
    content = yaml.safe_dump(descriptor.model_dump(mode="json"), sort_keys=False)
    path.write_text(content, encoding="utf-8")
