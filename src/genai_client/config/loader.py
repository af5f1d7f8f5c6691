"""Settings discovery for the client and the ``genai`` CLI.

Sources are layered, later ones winning key by key:

  built-in defaults, ~/.genai/settings.yaml, ./.genai/settings.yaml, GENAI_* variables

Nested mappings are merged rather than replaced, so a project file may
override a single key of a section defined in the user file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from genai_client.config.settings import Settings

logger = logging.getLogger(__name__)

SETTINGS_DIR_NAME = ".genai"
SETTINGS_FILE_NAME = "settings.yaml"

# GENAI_* variable -> (dotted settings key, value type)
_ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "GENAI_BASE_URL": ("client.base_url", str),
    "GENAI_API_VERSION": ("client.api_version", str),
    "GENAI_TIMEOUT": ("client.timeout", float),
    "GENAI_DEFAULT_MODEL": ("models.default", str),
    "GENAI_AFC_MAX_CALLS": ("afc.maximum_remote_calls", int),
    "GENAI_AFC_DISABLE": ("afc.disable", bool),
    "GENAI_VERBOSE": ("verbose", bool),
}


def _deep_merge(lower: dict[str, Any], higher: dict[str, Any]) -> dict[str, Any]:
    merged = dict(lower)
    for key, value in higher.items():
        below = merged.get(key)
        merged[key] = _deep_merge(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return merged


def _set_nested(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    *sections, leaf = dotted_key.split(".")
    node = data
    for section in sections:
        child = node.get(section)
        if not isinstance(child, dict):
            child = node[section] = {}
        node = child
    node[leaf] = value


def _convert(raw: str, type_conv: type, env_var: str) -> Any:
    if type_conv is bool:
        return raw.lower() in ("true", "1", "yes")
    try:
        return type_conv(raw)
    except ValueError as e:
        raise ValueError(f"Invalid value for {env_var}: {raw!r}") from e


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from *path*; an empty file yields ``{}``."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping in {path}, got {type(data).__name__}")
    logger.debug("Loaded settings from %s", path)
    return data


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    result = dict(data)
    for env_var, (dotted_path, type_conv) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(result, dotted_path, _convert(value, type_conv, env_var))
    return result


def settings_file(directory: Path) -> Path:
    return directory / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


async def load_settings(
    project_dir: Path | None = None,
    user_dir: Path | None = None,
) -> Settings:
    """Return the effective :class:`Settings`.

    Either directory may be ``None`` or lack a settings file; both are
    skipped.  Raises ``ValueError`` for unreadable YAML, a bad ``GENAI_*``
    value or a field that fails validation.
    """
    merged: dict[str, Any] = {}

    for directory in (user_dir, project_dir):
        if directory is None:
            continue
        path = settings_file(directory)
        if path.exists():
            merged = _deep_merge(merged, _load_yaml_file(path))

    merged = _apply_env_overrides(merged)

    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
