# src/composegen/config/loaders.py

"""Configuration loaders for environment and files.

Each loader returns a plain dictionary of raw values; validation happens once,
in the resolver, against the ``Settings`` schema.
"""

from __future__ import annotations

import logging
import os
import tomllib
from typing import TYPE_CHECKING, Any

from . import utils

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_TOOL_NAME = "composegen"

# Meta/control variables that steer resolution but aren't config fields
META_ENV_FIELDS = {"profile", "pyproject_path", "debug_config"}


# --- Environment Loading ---


def load_env() -> Mapping[str, Any]:
    """Load configuration from ``COMPOSEGEN_*`` environment variables.

    Values are coerced to bool/int/float when the ``Settings`` field is
    annotated with one of those types; anything else is passed through as a
    string for pydantic to validate.
    """
    from .core import Settings  # local import to keep loaders import-light

    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(utils.ENV_PREFIX):
            continue
        field_name = key[len(utils.ENV_PREFIX) :].lower()
        if field_name in META_ENV_FIELDS:
            continue
        info = Settings.model_fields.get(field_name)
        target_type = info.annotation if info is not None else None
        config[field_name] = _coerce_env_value(value, target_type)
    return config


def _coerce_env_value(value: str, target_type: Any) -> Any:
    """Coerce env string to target type, falling back to the raw string."""
    if target_type is bool:
        return utils.coerce_bool(value)
    if target_type is int:
        try:
            return int(value)
        except ValueError:
            return value
    if target_type is float:
        try:
            return float(value)
        except ValueError:
            return value
    return value


# --- File Loading ---


def list_profiles() -> list[str]:
    """List profile names available in the project TOML file."""
    data = _read_toml(utils.get_pyproject_path())
    profiles = data.get("tool", {}).get(CONFIG_TOOL_NAME, {}).get("profiles", {})
    return sorted(name for name in profiles if isinstance(name, str) and name)


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file, returning an empty dict when it is missing or invalid."""
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}


def _extract_tables(data: Mapping[str, Any], profile: str | None) -> dict[str, Any]:
    """Return ``[tool.composegen]`` with ``[tool.composegen.profiles.<profile>]`` overlaid."""
    section = data.get("tool", {}).get(CONFIG_TOOL_NAME, {})
    base_config = {k: v for k, v in section.items() if k != "profiles"}
    if profile:
        profile_config = section.get("profiles", {}).get(profile)
        if profile_config is None:
            logger.warning(
                "Config profile %r not found in [tool.%s]", profile, CONFIG_TOOL_NAME
            )
        else:
            base_config.update(profile_config)
    return base_config


def load_pyproject(profile: str | None = None) -> Mapping[str, Any]:
    """Load configuration from the project ``pyproject.toml``.

    Args:
        profile: Optional profile name to overlay. If None, checks the
            ``COMPOSEGEN_PROFILE`` environment variable.
    """
    data = _read_toml(utils.get_pyproject_path())
    return _extract_tables(data, profile or utils.get_effective_profile())
