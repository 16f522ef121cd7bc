# src/composegen/config/utils.py

"""Configuration constants and path helpers.

Pure functions with no imports from the rest of the config package, so both
the loaders and the resolver can depend on them without cycles.
"""

from __future__ import annotations

import os
from pathlib import Path

# --- Constants ---

ENV_PREFIX = "COMPOSEGEN_"

PYPROJECT_PATH_VAR = "COMPOSEGEN_PYPROJECT_PATH"
PROFILE_VAR = "COMPOSEGEN_PROFILE"
DEBUG_CONFIG_VAR = "COMPOSEGEN_DEBUG_CONFIG"

_TRUTHY = {"1", "true", "yes", "on"}


# --- Path Utilities ---


def get_pyproject_path() -> Path:
    """Return the project ``pyproject.toml`` path, honoring ``COMPOSEGEN_PYPROJECT_PATH``."""
    if override := os.environ.get(PYPROJECT_PATH_VAR):
        return Path(override)
    return Path.cwd() / "pyproject.toml"


# --- Environment Utilities ---


def get_effective_profile() -> str | None:
    """Return the profile selected via ``COMPOSEGEN_PROFILE``, if any."""
    return os.environ.get(PROFILE_VAR) or None


def coerce_bool(value: str) -> bool:
    """Convert string to boolean using common conventions."""
    return value.strip().lower() in _TRUTHY


def should_emit_debug() -> bool:
    """Return True when the config audit should be printed on resolution."""
    return coerce_bool(os.environ.get(DEBUG_CONFIG_VAR, ""))


def field_spec_hint(field: str) -> str:
    """Return a compact hint for setting a config field via env or files."""
    return (
        f"Set {ENV_PREFIX}{field.upper()} or [tool.composegen] {field} "
        "in pyproject.toml."
    )
