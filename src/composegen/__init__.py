"""composegen: composable random value generators.

Build a ``Generator`` from primitives and combinators, then run it against a
splittable random source:

    from composegen import SeedPlan, combine, int_range, pick_one

    account = combine(
        pick_one(["USD", "GBP", "CHF"]),
        int_range(1, 10_000),
        lambda currency, pennies: (currency, pennies),
    )
    for source in SeedPlan(seed=42).sources(3):
        print(account.generate(source))

Public API:
    - Generator, pure, fail, defer: the core type and primitive constructors
    - choice, frequency, pick_one, pick_n, sample_bernoulli, boolean: selection
    - combine, combine3, combine4, combine5, zip_all: arity combination
    - replicate, sequence, replicate_poisson: sequencing
    - int_range, double_range: numeric ranges
    - Success, Failure, Result: generation outcomes
    - SeedSequenceSource, RandomSource, SeedPlan: random sources
    - resolve_config, FrozenConfig: configuration
"""

from __future__ import annotations

import logging

from composegen.choice import (
    WeightedOption,
    boolean,
    choice,
    frequency,
    pick_n,
    pick_one,
    sample_bernoulli,
)
from composegen.combine import combine, combine3, combine4, combine5, zip_all
from composegen.config import FrozenConfig, resolve_config
from composegen.core.generator import Generator, defer, fail, pure
from composegen.core.result_primitives import Failure, Result, Success
from composegen.core.source import RandomSource, SeedSequenceSource
from composegen.errors import (
    CallbackError,
    ComposegenError,
    ConfigurationError,
    EmptyOptionsError,
    GenerationError,
    GenerationFailedError,
    InvalidRangeError,
    InvalidWeightError,
    PropagatedError,
)
from composegen.fixtures import SeedPlan
from composegen.ranges import double_range, int_range
from composegen.sequence import replicate, replicate_poisson, sequence

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("composegen")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("composegen").addHandler(logging.NullHandler())

__all__ = [
    "CallbackError",
    "ComposegenError",
    "ConfigurationError",
    "EmptyOptionsError",
    "Failure",
    "FrozenConfig",
    "GenerationError",
    "GenerationFailedError",
    "Generator",
    "InvalidRangeError",
    "InvalidWeightError",
    "PropagatedError",
    "RandomSource",
    "Result",
    "SeedPlan",
    "SeedSequenceSource",
    "Success",
    "WeightedOption",
    "boolean",
    "choice",
    "combine",
    "combine3",
    "combine4",
    "combine5",
    "defer",
    "double_range",
    "fail",
    "frequency",
    "int_range",
    "pick_n",
    "pick_one",
    "pure",
    "replicate",
    "replicate_poisson",
    "resolve_config",
    "sample_bernoulli",
    "sequence",
    "zip_all",
]
