from plugin_registry.integrations.builder.abc import Builder
from plugin_registry.integrations.builder.real import RealBuilder

__all__ = [
    "Builder",
    "RealBuilder",
]
