"""Explicit seed plans for handing out independent random sources.

A ``SeedPlan`` replaces module-wide random state: tests and simulations build
one from a seed (usually from ``resolve_config``), pass it around explicitly,
and ask it for numbered or named sources. Every source is derived from
``(seed, path..., index)`` through ``SeedSequence`` spawn keys, so sources are
independent of each other and reproducible from the seed alone.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import logging
from typing import TYPE_CHECKING, Self

import numpy as np

from composegen.core.source import SeedSequenceSource

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedPlan:
    """Reproducible factory of independent ``SeedSequenceSource`` streams.

    Example:
        plan = SeedPlan(seed=1234)
        for source in plan.sources(100):
            value = generator.generate(source)
        accounts = plan.child("accounts").source()
    """

    seed: int
    path: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.seed < 0:
            raise ValueError(f"SeedPlan.seed must be >= 0, got {self.seed}")

    @classmethod
    def fresh(cls) -> Self:
        """Build a plan from OS entropy, logging the seed so a run can be replayed."""
        seed = int(np.random.SeedSequence().entropy)
        logger.info("Seed plan using fresh entropy seed=%d", seed)
        return cls(seed=seed)

    def source(self, index: int = 0) -> SeedSequenceSource:
        """Return the source at ``index``; the same index always yields the same stream."""
        if index < 0:
            raise ValueError(f"index must be >= 0, got {index}")
        return SeedSequenceSource(
            np.random.SeedSequence(self.seed, spawn_key=(*self.path, index))
        )

    def sources(self, count: int, *, start: int = 0) -> Iterator[SeedSequenceSource]:
        """Yield ``count`` consecutive sources beginning at ``start``."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        logger.debug(
            "Seed plan %d%s handing out sources [%d, %d)",
            self.seed,
            self.path,
            start,
            start + count,
        )
        for index in range(start, start + count):
            yield self.source(index)

    def child(self, name: str) -> SeedPlan:
        """Return a sub-plan namespaced by ``name``, independent of its siblings."""
        if not name:
            raise ValueError("child plan name must be non-empty")
        digest = hashlib.sha256(name.encode("utf-8")).digest()
        # High bit set keeps name-derived keys apart from source indices < 2**31.
        key = int.from_bytes(digest[:4], "big") | 0x8000_0000
        return SeedPlan(seed=self.seed, path=(*self.path, key))
