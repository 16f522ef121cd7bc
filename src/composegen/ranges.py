"""Uniform numeric ranges."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from composegen.core.generator import Generator, fail
from composegen.core.result_primitives import Success
from composegen.errors import InvalidRangeError

if TYPE_CHECKING:
    from composegen.core.result_primitives import Result
    from composegen.core.source import RandomSource
    from composegen.errors import GenerationError


def int_range(low: int, high: int) -> Generator[int]:
    """Draw an integer uniformly from ``[low, high]``, inclusive at both ends."""
    if low > high:
        return fail(_invalid("int_range", low, high))
    span = high - low + 1

    def run(source: RandomSource) -> Result[int, GenerationError]:
        return Success(low + source.next_bounded_int(span))

    return Generator.from_result_function(run)


def double_range(low: float, high: float) -> Generator[float]:
    """Draw a float uniformly from ``[low, high)``; ``low == high`` yields ``low``."""
    if not (math.isfinite(low) and math.isfinite(high)):
        return fail(
            InvalidRangeError(
                f"double_range: bounds must be finite, got [{low!r}, {high!r})"
            )
        )
    if low > high:
        return fail(_invalid("double_range", low, high))
    width = high - low
    # Finite bounds more than the float maximum apart overflow the width.
    interpolate = not math.isfinite(width)

    def run(source: RandomSource) -> Result[float, GenerationError]:
        u = source.next_double()
        if interpolate:
            value = max(low * (1.0 - u) + high * u, low)
        else:
            value = low + width * u
        # Rounding can land exactly on the open upper bound.
        if value >= high and width > 0:
            value = math.nextafter(high, low)
        return Success(value)

    return Generator.from_result_function(run)


def _invalid(name: str, low: float, high: float) -> InvalidRangeError:
    return InvalidRangeError(
        f"{name}: low bound {low!r} exceeds high bound {high!r}",
        hint="Swap the bounds or check how they were computed.",
    )
