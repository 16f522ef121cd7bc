"""Result type for generation outcomes.

Every generator returns a ``Result`` instead of raising, which keeps failures
a predictable part of the data flow and lets combinators short-circuit without
broad try/except blocks.
"""

from __future__ import annotations

import dataclasses
import typing

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A generated value."""

    value: TSuccess

    @property
    def is_success(self) -> bool:
        return True


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A generation failure, containing the error."""

    error: TFailure

    @property
    def is_success(self) -> bool:
        return False


Result = Success[TSuccess] | Failure[TFailure]
