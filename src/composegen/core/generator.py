"""The Generator type and its evaluator.

A ``Generator`` is an immutable description of how to turn a ``RandomSource``
into a ``Result``. Nothing runs until ``generate`` is called.

Internally a generator is a small node tree. ``map`` and ``bind`` nodes are
evaluated by an explicit work list rather than nested calls, so long chains of
dependent generators (including self-referential ones built with ``defer``)
run in constant Python stack. Combinators that fan out to several operands
(``combine``, ``replicate``) still call ``generate`` on each operand, so deeply
nested *structures* recurse; prefer ``replicate``/``sequence`` for large
repeated shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from composegen.core.result_primitives import Failure, Success
from composegen.errors import CallbackError, GenerationError, GenerationFailedError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from composegen.core.result_primitives import Result
    from composegen.core.source import RandomSource

logger = logging.getLogger(__name__)

# --- Node tree ---


@dataclass(frozen=True, slots=True)
class _Primitive:
    run: Callable[[RandomSource], Result[Any, GenerationError]]


@dataclass(frozen=True, slots=True)
class _Map:
    inner: Generator[Any]
    fn: Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class _Bind:
    inner: Generator[Any]
    fn: Callable[[Any], Generator[Any]]


@dataclass(frozen=True, slots=True)
class _Defer:
    thunk: Callable[[], Generator[Any]]


_Node = _Primitive | _Map | _Bind | _Defer


class Generator[A]:
    """Composable producer of random values of type ``A``.

    Build generators from primitives (``pure``, ``int_range``, ``choice`` ...)
    and combinators, then execute with ``generate(source)``.

    Example:
        dice = int_range(1, 6)
        pair = combine(dice, dice, lambda a, b: (a, b))
        result = pair.generate(SeedSequenceSource.from_seed(7))
    """

    __slots__ = ("_node",)

    def __init__(self, node: _Node) -> None:
        self._node = node

    # --- Constructors ---

    @classmethod
    def from_result_function(
        cls, run: Callable[[RandomSource], Result[A, GenerationError]]
    ) -> Generator[A]:
        """Wrap a function that already returns a ``Result``.

        The function must not raise; this is the seam combinators are built on.
        """
        return cls(_Primitive(run))

    @classmethod
    def from_function(cls, fn: Callable[[RandomSource], A]) -> Generator[A]:
        """Wrap a plain ``source -> value`` function.

        A ``GenerationError`` raised by ``fn`` becomes a ``Failure`` carrying it;
        any other exception becomes a ``Failure(CallbackError)``.
        """

        def run(source: RandomSource) -> Result[A, GenerationError]:
            return call_safely(fn, source, label="from_function")

        return cls(_Primitive(run))

    # --- Composition ---

    def map[B](self, fn: Callable[[A], B]) -> Generator[B]:
        """Apply ``fn`` to a generated value; failures pass through untouched."""
        return Generator(_Map(self, fn))

    def bind[B](self, fn: Callable[[A], Generator[B]]) -> Generator[B]:
        """Sequence a dependent generator chosen from this generator's value.

        The next generator runs on the same source, continuing its stream.
        On failure ``fn`` is never called.
        """
        return Generator(_Bind(self, fn))

    # --- Execution ---

    def generate(self, source: RandomSource) -> Result[A, GenerationError]:
        """Run the generator against ``source``. Never raises for generation failures."""
        return _evaluate(self._node, source)

    def generate_or_raise(self, source: RandomSource, *, attempts: int = 1) -> A:
        """Return a generated value or raise ``GenerationFailedError``.

        The first attempt runs on ``source`` itself; each retry runs on a fresh
        child stream split from it.
        """
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")

        result = self.generate(source)
        attempt = 1
        while isinstance(result, Failure) and attempt < attempts:
            logger.debug(
                "Generation attempt %d/%d failed: %s", attempt, attempts, result.error
            )
            attempt += 1
            result = self.generate(source.split())

        if isinstance(result, Failure):
            raise GenerationFailedError(result, attempts=attempt)
        return result.value

    def samples(
        self, source: RandomSource, count: int
    ) -> Iterator[Result[A, GenerationError]]:
        """Yield ``count`` results, each generated on its own split stream.

        Raises:
            ValueError: At the call, if ``count`` is negative.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        def results() -> Iterator[Result[A, GenerationError]]:
            for _ in range(count):
                yield self.generate(source.split())

        return results()


# --- Primitive constructors ---


def pure[A](value: A) -> Generator[A]:
    """Always succeed with ``value`` without drawing from the source."""
    success = Success(value)
    return Generator.from_result_function(lambda _source: success)


def fail(error: GenerationError) -> Generator[Any]:
    """Always fail with ``error``."""
    failure = Failure(error)
    return Generator.from_result_function(lambda _source: failure)


def defer[A](thunk: Callable[[], Generator[A]]) -> Generator[A]:
    """Build the generator lazily at run time.

    Enables self-referential definitions such as recursive structures:

        def tree() -> Generator[Tree]:
            return frequency([(3, leaf), (1, defer(tree).map(Node))])
    """
    return Generator(_Defer(thunk))


# --- Evaluation ---


def call_safely(
    fn: Callable[..., Any], *args: Any, label: str
) -> Result[Any, GenerationError]:
    """Call a user function, capturing exceptions as Failure values."""
    try:
        return Success(fn(*args))
    except GenerationError as exc:
        return Failure(exc)
    except Exception as exc:
        name = getattr(fn, "__qualname__", repr(fn))
        return Failure(
            CallbackError(
                f"{label} callback {name} raised {type(exc).__name__}: {exc}", exc
            )
        )


def _as_generator(
    produced: Result[Any, GenerationError], *, label: str
) -> Result[Generator[Any], GenerationError]:
    if isinstance(produced, Failure) or isinstance(produced.value, Generator):
        return produced
    value = produced.value
    return Failure(
        CallbackError(
            f"{label} callback must return a Generator, got {type(value).__name__}",
            TypeError(type(value).__name__),
        )
    )


def _evaluate(root: _Node, source: RandomSource) -> Result[Any, GenerationError]:
    """Trampolined evaluation of a node tree.

    ``frames`` holds pending map/bind continuations, innermost last. Descending
    pushes frames until a primitive produces a result; unwinding pops frames,
    applying maps in place and restarting the descent when a bind yields the
    next generator. A failure unwinds every frame without calling it.
    """
    frames: list[_Map | _Bind] = []
    node: _Node | None = root

    while node is not None:
        result: Result[Any, GenerationError]
        while True:
            match node:
                case _Map(inner=inner) | _Bind(inner=inner):
                    frames.append(node)
                    node = inner._node
                case _Defer(thunk=thunk):
                    produced = _as_generator(
                        call_safely(thunk, label="defer"), label="defer"
                    )
                    if isinstance(produced, Failure):
                        result = produced
                        break
                    node = produced.value._node
                case _Primitive(run=run):
                    result = run(source)
                    break

        node = None
        while frames:
            frame = frames.pop()
            if isinstance(result, Failure):
                continue
            if isinstance(frame, _Map):
                result = call_safely(frame.fn, result.value, label="map")
                continue
            produced = _as_generator(
                call_safely(frame.fn, result.value, label="bind"), label="bind"
            )
            if isinstance(produced, Failure):
                result = produced
                continue
            node = produced.value._node
            break

    return result
