"""Splittable random sources.

Generators never own randomness. They draw from a ``RandomSource`` handed to
``generate`` and obtain independent streams for sub-generators via ``split``.
``SeedSequenceSource`` adapts NumPy's ``SeedSequence`` spawning and its PCG64
``Generator`` to that protocol.
"""

from __future__ import annotations

from typing import Protocol, Self, runtime_checkable

import numpy as np

# Largest bound numpy.random.Generator.integers accepts with the default int64 dtype.
_INT64_BOUND = 2**63


@runtime_checkable
class RandomSource(Protocol):
    """Duck-typed protocol for splittable pseudo-random streams."""

    def next_bounded_int(self, bound: int) -> int:
        """Return an integer uniformly drawn from ``[0, bound)``."""
        ...

    def next_double(self) -> float:
        """Return a float uniformly drawn from ``[0.0, 1.0)``."""
        ...

    def split(self) -> RandomSource:
        """Return an independent child stream.

        Splitting does not draw from this stream: the values this source
        produces afterwards are the same whether or not it was split.
        """
        ...


class SeedSequenceSource:
    """RandomSource backed by ``numpy.random.SeedSequence`` and PCG64.

    Draws come from a ``numpy.random.Generator`` seeded by the sequence;
    ``split`` spawns a child ``SeedSequence``, so children are independent of
    the parent stream and of each other. Two sources built from the same seed
    and driven through the same calls produce identical values.

    Example:
        source = SeedSequenceSource.from_seed(42)
        child = source.split()
        child.next_bounded_int(6)
    """

    __slots__ = ("_rng", "_seed_sequence")

    def __init__(self, seed_sequence: np.random.SeedSequence) -> None:
        self._seed_sequence = seed_sequence
        self._rng = np.random.default_rng(seed_sequence)

    @classmethod
    def from_seed(cls, seed: int | list[int] | None = None) -> Self:
        """Build a source from integer entropy; ``None`` draws fresh OS entropy."""
        return cls(np.random.SeedSequence(seed))

    @property
    def entropy(self) -> int | list[int] | None:
        return self._seed_sequence.entropy

    @property
    def spawn_key(self) -> tuple[int, ...]:
        return tuple(self._seed_sequence.spawn_key)

    def next_bounded_int(self, bound: int) -> int:
        if bound < 1:
            raise ValueError(f"bound must be >= 1, got {bound}")
        if bound <= _INT64_BOUND:
            return int(self._rng.integers(bound))
        return self._next_wide_int(bound)

    def next_double(self) -> float:
        return float(self._rng.random())

    def split(self) -> SeedSequenceSource:
        (child,) = self._seed_sequence.spawn(1)
        return SeedSequenceSource(child)

    def _next_wide_int(self, bound: int) -> int:
        # Rejection sampling over 64-bit words for bounds beyond int64.
        bits = (bound - 1).bit_length()
        words = -(-bits // 64)
        mask = (1 << bits) - 1
        while True:
            value = 0
            for word in self._rng.integers(0, 2**64, size=words, dtype=np.uint64):
                value = (value << 64) | int(word)
            value &= mask
            if value < bound:
                return value

    def __repr__(self) -> str:
        return (
            f"SeedSequenceSource(entropy={self.entropy!r}, "
            f"spawn_key={self.spawn_key!r})"
        )
