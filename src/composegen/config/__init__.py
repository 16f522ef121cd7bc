# src/composegen/config/__init__.py

"""Configuration management for composegen.

Resolve once, freeze, then pass explicitly: configuration is resolved into an
immutable ``FrozenConfig`` that callers hand to the code that needs it.

Key exports:
- resolve_config: Main API for configuration resolution
- FrozenConfig: Immutable configuration payload
- Settings: Pydantic schema for validation and defaults
"""

# ruff: noqa: I001

from .core import (
    FrozenConfig,
    Origin,
    FieldOrigin,
    Settings,
    SourceMap,
    audit_lines,
    audit_text,
    resolve_config,
    was_field_overridden,
)
from .loaders import list_profiles
from .utils import field_spec_hint

__all__ = [  # noqa: RUF022
    # Main public API
    "resolve_config",
    "FrozenConfig",
    # Core types for typing and advanced usage
    "Settings",
    "Origin",
    "FieldOrigin",
    "SourceMap",
    # Audit helpers
    "audit_lines",
    "audit_text",
    "was_field_overridden",
    "field_spec_hint",
    "list_profiles",
]
