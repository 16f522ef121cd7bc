"""Uniform and weighted selection among alternatives."""

from __future__ import annotations

from bisect import bisect_right
from itertools import accumulate
import math
from typing import TYPE_CHECKING, Any

from composegen.core.generator import Generator, fail
from composegen.core.result_primitives import Failure, Success
from composegen.errors import (
    EmptyOptionsError,
    InvalidRangeError,
    InvalidWeightError,
    PropagatedError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from composegen.core.result_primitives import Result
    from composegen.core.source import RandomSource
    from composegen.errors import GenerationError

WeightedOption = tuple[float, Generator[Any]]


def choice[A](options: Sequence[Generator[A]]) -> Generator[A]:
    """Pick one generator uniformly and delegate to it.

    The selected generator continues on the same source. An empty ``options``
    fails with ``EmptyOptionsError`` without drawing.
    """
    frozen = tuple(options)
    if not frozen:
        return fail(EmptyOptionsError("choice: no options to choose from"))

    def run(source: RandomSource) -> Result[A, GenerationError]:
        index = source.next_bounded_int(len(frozen))
        return _delegate(frozen[index], source, combinator="choice", index=index)

    return Generator.from_result_function(run)


def frequency[A](options: Sequence[tuple[float, Generator[A]]]) -> Generator[A]:
    """Pick one generator with probability proportional to its weight.

    Weights are normalized by their sum and laid out as a cumulative partition
    of ``[0, 1)`` in list order. One uniform draw selects the first option
    whose closed-open interval contains it. Zero-weight options own an empty
    interval and are never chosen.
    """
    frozen = tuple(options)
    if not frozen:
        return fail(EmptyOptionsError("frequency: no options to choose from"))

    weights = [float(weight) for weight, _ in frozen]
    for index, weight in enumerate(weights):
        if not math.isfinite(weight) or weight < 0:
            return fail(
                InvalidWeightError(
                    f"frequency: weight at index {index} must be finite and >= 0, "
                    f"got {weight!r}"
                )
            )

    largest = max(weights)
    if largest == 0:
        return fail(
            EmptyOptionsError(
                "frequency: all weights are zero",
                hint="At least one option needs a positive weight.",
            )
        )

    # Scaling by the largest weight keeps the sum finite for weights near the
    # float maximum.
    scaled = [weight / largest for weight in weights]
    total = math.fsum(scaled)
    cumulative = list(accumulate(weight / total for weight in scaled))
    # Round-off can leave the last boundary just under 1.0.
    last_selectable = max(i for i, weight in enumerate(scaled) if weight > 0)
    generators = tuple(gen for _, gen in frozen)

    def run(source: RandomSource) -> Result[A, GenerationError]:
        draw = source.next_double()
        index = bisect_right(cumulative, draw)
        if index >= len(generators):
            index = last_selectable
        return _delegate(generators[index], source, combinator="frequency", index=index)

    return Generator.from_result_function(run)


def pick_one[A](values: Sequence[A]) -> Generator[A]:
    """Pick one literal value uniformly."""
    frozen = tuple(values)
    if not frozen:
        return fail(EmptyOptionsError("pick_one: no values to pick from"))

    def run(source: RandomSource) -> Result[A, GenerationError]:
        return Success(frozen[source.next_bounded_int(len(frozen))])

    return Generator.from_result_function(run)


def pick_n[A](n: int, values: Sequence[A]) -> Generator[list[A]]:
    """Pick ``n`` distinct positions uniformly, returning values in their original order."""
    frozen = tuple(values)
    if n < 0 or n > len(frozen):
        return fail(
            InvalidRangeError(
                f"pick_n: cannot pick {n} of {len(frozen)} values",
                hint="n must be between 0 and len(values).",
            )
        )

    def run(source: RandomSource) -> Result[list[A], GenerationError]:
        # Partial Fisher-Yates over positions.
        positions = list(range(len(frozen)))
        for i in range(n):
            j = i + source.next_bounded_int(len(positions) - i)
            positions[i], positions[j] = positions[j], positions[i]
        return Success([frozen[k] for k in sorted(positions[:n])])

    return Generator.from_result_function(run)


def sample_bernoulli[A](
    values: Sequence[A], probability: float = 0.5
) -> Generator[list[A]]:
    """Keep each value independently with ``probability``, preserving order.

    The result length is random in ``[0, len(values)]``; an empty list is a
    valid outcome.
    """
    frozen = tuple(values)
    invalid = _check_probability("sample_bernoulli", probability)
    if invalid is not None:
        return invalid

    def run(source: RandomSource) -> Result[list[A], GenerationError]:
        return Success([v for v in frozen if source.next_double() < probability])

    return Generator.from_result_function(run)


def boolean(probability: float = 0.5) -> Generator[bool]:
    """Succeed with ``True`` with the given probability."""
    invalid = _check_probability("boolean", probability)
    if invalid is not None:
        return invalid

    def run(source: RandomSource) -> Result[bool, GenerationError]:
        return Success(source.next_double() < probability)

    return Generator.from_result_function(run)


def _check_probability(name: str, probability: float) -> Generator[Any] | None:
    if 0.0 <= probability <= 1.0:
        return None
    return fail(
        InvalidRangeError(f"{name}: probability must be in [0, 1], got {probability!r}")
    )


def _delegate[A](
    generator: Generator[A], source: RandomSource, *, combinator: str, index: int
) -> Result[A, GenerationError]:
    result = generator.generate(source)
    if isinstance(result, Failure):
        return Failure(
            PropagatedError(result.error, combinator=combinator, index=index)
        )
    return result
