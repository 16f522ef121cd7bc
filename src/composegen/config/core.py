# src/composegen/config/core.py

"""Configuration schema and resolution.

Resolve once, freeze, then pass explicitly: ``resolve_config`` merges defaults,
``pyproject.toml``, ``COMPOSEGEN_*`` environment variables and programmatic
overrides, validates the result against ``Settings`` and returns an immutable
``FrozenConfig``. Nothing here is stored in module-level state; callers hand the
config (or the ``SeedPlan`` it builds) to whatever needs it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cache
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal, overload
import warnings

from pydantic import BaseModel, Field, ValidationError, field_validator

from composegen.choice import sample_bernoulli
from composegen.core.source import SeedSequenceSource
from composegen.errors import ConfigurationError
from composegen.fixtures import SeedPlan

from .utils import ENV_PREFIX, field_spec_hint, get_pyproject_path, should_emit_debug

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from composegen.core.generator import Generator
    from composegen.core.source import RandomSource

logger = logging.getLogger(__name__)

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema for configuration fields, defaults and validation."""

    #: Root seed for ``SeedPlan``; ``None`` draws fresh entropy per plan.
    seed: int | None = Field(default=None, ge=0)
    #: Inclusion probability used by ``FrozenConfig.sample_bernoulli``.
    bernoulli_probability: float = Field(default=0.5, ge=0.0, le=1.0)
    #: Attempt count used by ``FrozenConfig.generate_or_raise``.
    generate_attempts: int = Field(default=1, ge=1)

    model_config = {"extra": "allow"}  # Preserve unknown keys for extensibility

    @field_validator("seed", mode="before")
    @classmethod
    def normalize_seed(cls, v: Any) -> Any:
        """Accept numeric strings and map empty strings to None."""
        if isinstance(v, str):
            s = v.strip()
            if not s or s.lower() == "none":
                return None
            try:
                return int(s)
            except ValueError:
                return v  # Let Pydantic raise with a precise error message
        return v


@cache
def _default_settings() -> dict[str, Any]:
    return Settings().model_dump()


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable, validated configuration passed explicitly to callers."""

    seed: int | None
    bernoulli_probability: float
    generate_attempts: int
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def seed_plan(self) -> SeedPlan:
        """Return a ``SeedPlan`` for the configured seed, or a fresh one when unset."""
        if self.seed is None:
            return SeedPlan.fresh()
        return SeedPlan(seed=self.seed)

    def source(self) -> SeedSequenceSource:
        """Return the first source of ``seed_plan()``."""
        return self.seed_plan().source()

    def sample_bernoulli[A](self, values: Sequence[A]) -> Generator[list[A]]:
        """``sample_bernoulli`` using the configured ``bernoulli_probability``."""
        return sample_bernoulli(values, self.bernoulli_probability)

    def generate_or_raise[A](
        self, generator: Generator[A], source: RandomSource | None = None
    ) -> A:
        """Run ``generator`` with the configured ``generate_attempts``.

        Uses ``source()`` when no source is given.
        """
        return generator.generate_or_raise(
            source if source is not None else self.source(),
            attempts=self.generate_attempts,
        )


# --- Audit types ---


class Origin(str, Enum):
    """Source origin for configuration field values."""

    DEFAULT = "default"
    PROJECT = "project"
    ENV = "env"
    OVERRIDES = "overrides"


@dataclass(frozen=True)
class FieldOrigin:
    """Tracks the origin and context of a configuration field value."""

    origin: Origin
    env_key: str | None = None  # e.g., "COMPOSEGEN_SEED"
    file: str | None = None  # e.g., "/work/pyproject.toml"


SourceMap = dict[str, FieldOrigin]


# --- Public resolution API ---

_DOTENV_LOADED: bool = False


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    profile: str | None = ...,
    *,
    explain: Literal[True],
) -> tuple[FrozenConfig, SourceMap]: ...


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    profile: str | None = ...,
    *,
    explain: Literal[False] = ...,
) -> FrozenConfig: ...


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    profile: str | None = None,
    *,
    explain: bool = False,
) -> FrozenConfig | tuple[FrozenConfig, SourceMap]:
    """Resolve configuration from all sources into a FrozenConfig.

    Precedence, last wins: defaults < project (``[tool.composegen]``) < env
    (``COMPOSEGEN_*``) < overrides.

    Args:
        overrides: Programmatic configuration overrides.
        profile: Profile name under ``[tool.composegen.profiles]``.
        explain: If True, also return the SourceMap of field origins.

    Raises:
        ConfigurationError: If the merged values fail validation.
    """
    _load_dotenv_once()

    from .loaders import load_env, load_pyproject

    merged, sources = _resolve_layers(
        overrides=overrides or {},
        env=load_env(),
        project=load_pyproject(profile=profile),
    )

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = err.get("loc", ())
        field_name = str(loc[0]) if loc else None
        msg = err.get("msg", "invalid value")
        # Remove "Value error, " prefix if present (Pydantic standard wrapper)
        if msg.startswith("Value error, "):
            msg = msg[13:]
        raise ConfigurationError(
            f"Configuration validation failed for {field_name or 'settings'}: {msg}",
            hint=field_spec_hint(field_name) if field_name else None,
        ) from e

    frozen = _freeze(settings, merged)
    logger.debug("Resolved config: %s", frozen)
    if should_emit_debug():
        warnings.warn(
            "Config audit\n" + audit_text(frozen, sources),
            stacklevel=2,
        )

    return (frozen, sources) if explain else frozen


# --- Internal helpers ---


def _freeze(settings: Settings, merged: Mapping[str, Any]) -> FrozenConfig:
    known_fields = set(Settings.model_fields.keys())
    extra = {k: v for k, v in merged.items() if k not in known_fields}
    for name in sorted(extra):
        warnings.warn(
            f"Configuration: unknown field '{name}' is ignored",
            UserWarning,
            stacklevel=4,
        )
    return FrozenConfig(
        seed=settings.seed,
        bernoulli_probability=settings.bernoulli_probability,
        generate_attempts=settings.generate_attempts,
        extra=MappingProxyType(extra),
    )


def _resolve_layers(
    *,
    overrides: Mapping[str, Any],
    env: Mapping[str, Any],
    project: Mapping[str, Any],
) -> tuple[dict[str, Any], SourceMap]:
    """Merge layers with last-wins precedence while recording each field's origin."""
    layers = [
        (Origin.PROJECT, project),
        (Origin.ENV, env),
        (Origin.OVERRIDES, overrides),
    ]

    out: dict[str, Any] = {}
    src: SourceMap = {}

    for k, v in _default_settings().items():
        out[k] = v
        src[k] = FieldOrigin(origin=Origin.DEFAULT)

    for origin, payload in layers:
        for k, v in payload.items():
            out[k] = v
            if origin is Origin.ENV:
                src[k] = FieldOrigin(origin=origin, env_key=f"{ENV_PREFIX}{k.upper()}")
            elif origin is Origin.PROJECT:
                src[k] = FieldOrigin(origin=origin, file=str(get_pyproject_path()))
            else:
                src[k] = FieldOrigin(origin=origin)

    return out, src


# --- Audit helpers ---


def _origin_label(field_name: str, where: FieldOrigin) -> str:
    match where.origin:
        case Origin.ENV:
            return f"env:{where.env_key or f'{ENV_PREFIX}{field_name.upper()}'}"
        case Origin.PROJECT:
            return f"file:{where.file or 'pyproject.toml'}"
        case _:
            return str(where.origin.value)


def audit_lines(cfg: FrozenConfig, sources: SourceMap) -> list[str]:
    """Produce one ``field=value (origin)`` line per configuration field."""
    lines: list[str] = []
    for name in Settings.model_fields:
        fo = sources.get(name)
        if fo is None:
            continue
        lines.append(f"{name}={getattr(cfg, name)!r} ({_origin_label(name, fo)})")
    for name in sorted(cfg.extra):
        if name in sources:
            lines.append(f"{name}: {_origin_label(name, sources[name])} [ignored]")
    return lines


def audit_text(cfg: FrozenConfig, sources: SourceMap) -> str:
    """Format audit as a single string suitable for printing/logging."""
    return "\n".join(audit_lines(cfg, sources))


def was_field_overridden(sources: SourceMap, field_name: str) -> bool:
    """Return True if a field's value did not come from defaults."""
    fo = sources.get(field_name)
    return bool(fo and fo.origin is not Origin.DEFAULT)


# --- Minimal CLI entrypoint ---


def main() -> int:  # pragma: no cover - thin utility
    import argparse
    import json
    import sys

    parser = argparse.ArgumentParser("composegen-config")
    sub = parser.add_subparsers(dest="cmd", required=True)
    sub.add_parser("show")
    sub.add_parser("audit")
    args = parser.parse_args()

    if args.cmd == "show":
        cfg = resolve_config()
        payload = {name: getattr(cfg, name) for name in Settings.model_fields}
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    elif args.cmd == "audit":
        cfg, src = resolve_config(explain=True)
        sys.stdout.write(audit_text(cfg, src) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
