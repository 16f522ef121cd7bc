"""Core components: the Result type, random sources, and the Generator itself."""

from .generator import Generator, defer, fail, pure
from .result_primitives import Failure, Result, Success
from .source import RandomSource, SeedSequenceSource

__all__ = [
    "Failure",
    "Generator",
    "RandomSource",
    "Result",
    "SeedSequenceSource",
    "Success",
    "defer",
    "fail",
    "pure",
]
