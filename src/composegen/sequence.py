"""Ordered sequences of generated values."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from composegen.combine import run_split
from composegen.core.generator import Generator, fail
from composegen.core.result_primitives import Failure, Success
from composegen.errors import InvalidRangeError, PropagatedError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from composegen.core.result_primitives import Result
    from composegen.core.source import RandomSource
    from composegen.errors import GenerationError


def replicate[A](n: int, generator: Generator[A]) -> Generator[list[A]]:
    """Run ``generator`` ``n`` times, each on its own child stream, in order.

    ``n == 0`` succeeds with ``[]`` without touching the source. The lowest
    index that fails is reported and the remaining elements are not generated.
    """
    if n < 0:
        return fail(InvalidRangeError(f"replicate: count must be >= 0, got {n}"))
    if n == 0:
        return Generator.from_result_function(lambda _source: Success([]))

    def run(source: RandomSource) -> Result[list[A], GenerationError]:
        return run_split([generator] * n, source, combinator="replicate")

    return Generator.from_result_function(run)


def sequence(generators: Sequence[Generator[Any]]) -> Generator[list[Any]]:
    """Run each generator on its own child stream, collecting values in order."""
    frozen = tuple(generators)
    if not frozen:
        return Generator.from_result_function(lambda _source: Success([]))

    def run(source: RandomSource) -> Result[list[Any], GenerationError]:
        return run_split(frozen, source, combinator="sequence")

    return Generator.from_result_function(run)


def replicate_poisson[A](mean: float, generator: Generator[A]) -> Generator[list[A]]:
    """Replicate ``generator`` a Poisson(``mean``)-distributed number of times.

    The count is the number of unit-rate exponential arrivals that land in
    ``[0, mean)``, drawn from the source's doubles; the elements then run on a
    child stream exactly as ``replicate`` would.
    """
    if not math.isfinite(mean) or mean < 0:
        return fail(
            InvalidRangeError(
                f"replicate_poisson: mean must be finite and >= 0, got {mean!r}"
            )
        )

    def run(source: RandomSource) -> Result[list[A], GenerationError]:
        count = _poisson_count(source, mean)
        result = replicate(count, generator).generate(source.split())
        if isinstance(result, Failure):
            return Failure(
                PropagatedError(result.error, combinator="replicate_poisson")
            )
        return result

    return Generator.from_result_function(run)


def _poisson_count(source: RandomSource, mean: float) -> int:
    count = 0
    elapsed = -math.log1p(-source.next_double())
    while elapsed < mean:
        count += 1
        elapsed -= math.log1p(-source.next_double())
    return count
