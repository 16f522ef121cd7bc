"""Exception hierarchy for composegen.

Generation errors are never raised by combinators. They travel inside
``Failure`` values and only surface as exceptions when a caller asks for a
hard stop via ``Generator.generate_or_raise``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from composegen.core.result_primitives import Failure


class ComposegenError(Exception):
    """Base exception for all composegen errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ComposegenError):
    """Configuration validation or resolution failed."""


# --- Errors carried inside Failure values ---


class GenerationError(ComposegenError):
    """A generator could not produce a value."""


class EmptyOptionsError(GenerationError):
    """A selection combinator was given no alternatives to pick from."""


class InvalidRangeError(GenerationError):
    """A lower bound exceeds its upper bound, or a count/probability is out of range."""


class InvalidWeightError(GenerationError):
    """A frequency weight is negative or not finite."""


class CallbackError(GenerationError):
    """A user-supplied function raised while generating.

    The original exception is attached as ``__cause__`` and ``exception``.
    """

    def __init__(self, message: str, exception: BaseException) -> None:
        super().__init__(message)
        self.exception = exception
        self.__cause__ = exception


class PropagatedError(GenerationError):
    """An inner generator's failure surfaced through a combinator.

    ``combinator`` names the combinator that observed the failure and
    ``index`` the operand (or element) position that failed, when there is one.
    """

    def __init__(
        self,
        reason: GenerationError,
        *,
        combinator: str,
        index: int | None = None,
    ) -> None:
        where = combinator if index is None else f"{combinator}[{index}]"
        super().__init__(f"{where}: {reason}", hint=reason.hint)
        self.reason = reason
        self.combinator = combinator
        self.index = index

    @property
    def root(self) -> GenerationError:
        """Return the innermost error that is not itself a propagation."""
        current: GenerationError = self
        while isinstance(current, PropagatedError):
            current = current.reason
        return current

    def path(self) -> tuple[tuple[str, int | None], ...]:
        """Return ``(combinator, index)`` pairs from outermost to innermost."""
        return tuple((e.combinator, e.index) for e in _walk_propagation(self))


def _walk_propagation(err: PropagatedError) -> Iterator[PropagatedError]:
    current: GenerationError = err
    while isinstance(current, PropagatedError):
        yield current
        current = current.reason


# --- Raised errors ---


class GenerationFailedError(ComposegenError):
    """Raised by ``generate_or_raise`` when every attempt produced a Failure."""

    def __init__(self, failure: Failure[GenerationError], *, attempts: int) -> None:
        error = failure.error
        noun = "attempt" if attempts == 1 else "attempts"
        super().__init__(
            f"Generation failed after {attempts} {noun}: {error}", hint=error.hint
        )
        self.failure = failure
        self.attempts = attempts
        self.__cause__ = error
