"""Pytest configuration and fixtures.

Provides environment isolation, seeded sources, and small random-source test
doubles. Environment fixtures are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
import logging
import os
from typing import TYPE_CHECKING

import pytest

from composegen import SeedPlan, SeedSequenceSource

if TYPE_CHECKING:
    from composegen import RandomSource

TEST_SEED = 20240417

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class CountingSource:
    """RandomSource wrapper that counts draws and splits.

    Use to assert that an operation consumed no randomness, or that a check
    happened before any draw.
    """

    inner: RandomSource
    draws: int = 0
    splits: int = 0

    def next_bounded_int(self, bound: int) -> int:
        self.draws += 1
        return self.inner.next_bounded_int(bound)

    def next_double(self) -> float:
        self.draws += 1
        return self.inner.next_double()

    def split(self) -> CountingSource:
        self.splits += 1
        return CountingSource(self.inner.split())


@dataclass
class ScriptedSource:
    """RandomSource that replays scripted values.

    Children returned by ``split`` share the parent's script, so the script is
    consumed in evaluation order across the whole generator tree.
    """

    doubles: list[float] = field(default_factory=list)
    ints: list[int] = field(default_factory=list)
    bounds: list[int] = field(default_factory=list)

    def next_bounded_int(self, bound: int) -> int:
        self.bounds.append(bound)
        value = self.ints.pop(0)
        assert 0 <= value < bound, f"scripted int {value} outside [0, {bound})"
        return value

    def next_double(self) -> float:
        return self.doubles.pop(0)

    def split(self) -> ScriptedSource:
        return self


# =============================================================================
# Sources
# =============================================================================


@pytest.fixture
def plan() -> SeedPlan:
    """Seed plan with a fixed seed for reproducible tests."""
    return SeedPlan(seed=TEST_SEED)


@pytest.fixture
def source(plan: SeedPlan) -> SeedSequenceSource:
    """A fresh seeded source."""
    return plan.source()


@pytest.fixture
def counting_source(source: SeedSequenceSource) -> CountingSource:
    return CountingSource(source)


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_composegen_env(request, monkeypatch):
    """Clear COMPOSEGEN_* env vars so configuration tests start from defaults.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("COMPOSEGEN_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Keep library debug logging out of test output unless asked for."""
    logging.getLogger("composegen").setLevel(logging.INFO)


@pytest.fixture
def scripted() -> type[ScriptedSource]:
    """Factory for sources that replay scripted doubles/ints."""
    return ScriptedSource


@pytest.fixture
def counting() -> type[CountingSource]:
    """Factory for counting wrappers around arbitrary sources."""
    return CountingSource
