"""Joining independent generators with a combining function.

Every combinator here splits the incoming source into one child stream per
operand, in declaration order, *before* running any operand. Operands then run
left to right on their own streams and evaluation short-circuits: the first
failing operand is reported (as a ``PropagatedError`` carrying its index) and
later operands are not run. Splitting up front keeps every operand's draws the
same whether or not an earlier operand failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from composegen.core.generator import Generator, call_safely
from composegen.core.result_primitives import Failure, Success
from composegen.errors import PropagatedError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from composegen.core.result_primitives import Result
    from composegen.core.source import RandomSource
    from composegen.errors import GenerationError


def run_split(
    generators: Sequence[Generator[Any]], source: RandomSource, *, combinator: str
) -> Result[list[Any], GenerationError]:
    """Run each generator on its own child stream, stopping at the first failure.

    Shared by ``combine``/``zip_all`` and the sequencing combinators.
    """
    streams = [source.split() for _ in generators]
    values: list[Any] = []
    for index, (generator, stream) in enumerate(zip(generators, streams, strict=True)):
        result = generator.generate(stream)
        if isinstance(result, Failure):
            return Failure(
                PropagatedError(result.error, combinator=combinator, index=index)
            )
        values.append(result.value)
    return Success(values)


def _combine_with(
    generators: tuple[Generator[Any], ...],
    fn: Callable[..., Any],
    *,
    combinator: str,
) -> Generator[Any]:
    def run(source: RandomSource) -> Result[Any, GenerationError]:
        joined = run_split(generators, source, combinator=combinator)
        if isinstance(joined, Failure):
            return joined
        return call_safely(fn, *joined.value, label=combinator)

    return Generator.from_result_function(run)


def combine[A, B, C](
    ga: Generator[A], gb: Generator[B], fn: Callable[[A, B], C]
) -> Generator[C]:
    """Run two generators on independent streams and join their values with ``fn``."""
    return _combine_with((ga, gb), fn, combinator="combine")


def combine3[A, B, C, R](
    ga: Generator[A],
    gb: Generator[B],
    gc: Generator[C],
    fn: Callable[[A, B, C], R],
) -> Generator[R]:
    return _combine_with((ga, gb, gc), fn, combinator="combine3")


def combine4[A, B, C, D, R](
    ga: Generator[A],
    gb: Generator[B],
    gc: Generator[C],
    gd: Generator[D],
    fn: Callable[[A, B, C, D], R],
) -> Generator[R]:
    return _combine_with((ga, gb, gc, gd), fn, combinator="combine4")


def combine5[A, B, C, D, E, R](
    ga: Generator[A],
    gb: Generator[B],
    gc: Generator[C],
    gd: Generator[D],
    ge: Generator[E],
    fn: Callable[[A, B, C, D, E], R],
) -> Generator[R]:
    return _combine_with((ga, gb, gc, gd, ge), fn, combinator="combine5")


def zip_all(*generators: Generator[Any]) -> Generator[tuple[Any, ...]]:
    """Combine any number of generators into a tuple of their values."""
    return _combine_with(generators, lambda *values: values, combinator="zip_all")
