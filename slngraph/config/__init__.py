"""Configuration schema and loading for slngraph."""

from .loader import ConfigSource, load_build_config
from .schema import BuildConfig

__all__ = [
    "BuildConfig",
    "ConfigSource",
    "load_build_config",
]
