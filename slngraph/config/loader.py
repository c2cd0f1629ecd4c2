"""Build configuration loading.

A configuration document is either a bare mapping of ``BuildConfig``
fields or a file whose ``[slngraph]`` (or ``[tool.slngraph]``) table holds
them, so the settings can live in a shared TOML file next to a solution::

    [tool.slngraph]
    manifest_extensions = [".csproj", ".fsproj", ".vbproj"]
    max_workers = 8

Unknown keys are rejected so a misspelt extension list does not silently
fall back to the defaults.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from slngraph.config.schema import BuildConfig

logger = logging.getLogger("slngraph.config.loader")

ConfigSource = Union[str, Path, Mapping[str, Any], None]

_SECTION_KEYS = (("slngraph",), ("tool", "slngraph"))


def _parse_text(text: str, origin: str) -> Dict[str, Any]:
    is_json = text.lstrip().startswith("{")
    try:
        data = json.loads(text) if is_json else tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        kind = "JSON" if is_json else "TOML"
        raise ValueError(f"Invalid {kind} configuration in {origin}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {origin} must be a mapping")
    return data


def _select_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the slngraph table of ``data``, or ``data`` itself."""
    for keys in _SECTION_KEYS:
        section: Any = data
        for key in keys:
            section = section.get(key) if isinstance(section, Mapping) else None
        if isinstance(section, Mapping):
            return section
    return data


def _to_config(data: Mapping[str, Any], origin: str) -> BuildConfig:
    settings = _select_section(data)
    unknown = sorted(set(settings) - set(BuildConfig.model_fields))
    if unknown:
        raise ValueError(f"Unknown setting(s) in {origin}: {', '.join(unknown)}")
    config = BuildConfig.from_dict(dict(settings))
    logger.debug(
        "Configuration from %s: manifests=%s workspaces=%s workers=%d",
        origin,
        config.manifest_extensions,
        config.workspace_extensions,
        config.max_workers,
    )
    return config


def load_build_config(source: ConfigSource) -> BuildConfig:
    """Load BuildConfig from a mapping, a TOML/JSON file or an inline string.

    Args:
        source: ``None`` for the defaults, a mapping, a path to a ``.toml``
            or ``.json`` file, or inline TOML/JSON text.

    Raises:
        ValueError: If the document cannot be decoded or names unknown
            settings.
        ValidationError: If a setting is out of range or the extension
            lists overlap.
    """
    if source is None:
        return BuildConfig.default()
    if isinstance(source, Mapping):
        return _to_config(source, "mapping")

    path = Path(source)
    if path.suffix.lower() in {".toml", ".json"} or path.is_file():
        if not path.is_file():
            raise ValueError(f"Configuration file not found: {path}")
        logger.info("Loading configuration from %s", path)
        return _to_config(_parse_text(path.read_text(encoding="utf-8"), str(path)), str(path))

    return _to_config(_parse_text(str(source), "inline configuration"), "inline configuration")


__all__ = ["ConfigSource", "load_build_config"]
