"""Tests for replication and sequencing."""

from __future__ import annotations

import pytest

from composegen import (
    Failure,
    Generator,
    InvalidRangeError,
    PropagatedError,
    SeedSequenceSource,
    Success,
    fail,
    int_range,
    pure,
    replicate,
    replicate_poisson,
    sequence,
)

pytestmark = pytest.mark.unit


class TestReplicate:
    def test_zero_is_empty_and_consumes_nothing(self, counting_source):
        assert replicate(0, int_range(0, 9)).generate(counting_source) == Success([])
        assert counting_source.draws == 0
        assert counting_source.splits == 0

    def test_zero_leaves_source_stream_untouched(self):
        used = SeedSequenceSource.from_seed(6)
        fresh = SeedSequenceSource.from_seed(6)
        replicate(0, int_range(0, 9)).generate(used)
        assert used.next_double() == fresh.next_double()
        assert used.split().next_double() == fresh.split().next_double()

    def test_produces_n_values_in_order(self, source):
        result = replicate(5, int_range(0, 9)).generate(source)
        assert isinstance(result, Success)
        assert len(result.value) == 5
        assert all(0 <= v <= 9 for v in result.value)

    def test_one_split_per_element(self, counting_source):
        replicate(4, pure(1)).generate(counting_source)
        assert counting_source.splits == 4

    def test_elements_use_independent_streams(self, source):
        values = replicate(20, int_range(0, 10**9)).generate(source).value
        assert len(set(values)) == 20

    @pytest.mark.parametrize("n", [1, 3, 10])
    def test_always_failing_element_fails(self, n, source):
        err = InvalidRangeError("never")
        result = replicate(n, fail(err)).generate(source)
        assert isinstance(result, Failure)
        assert result.error.combinator == "replicate"
        assert result.error.index == 0
        assert result.error.root is err

    def test_lowest_failing_index_short_circuits(self, source):
        attempts: list[int] = []

        def third_fails(_source):
            attempts.append(len(attempts))
            if len(attempts) == 3:
                raise InvalidRangeError("third")
            return len(attempts)

        result = replicate(6, Generator.from_function(third_fails)).generate(source)
        assert result.error.index == 2
        assert attempts == [0, 1, 2]

    def test_negative_count_fails(self, source):
        assert isinstance(replicate(-1, pure(1)).generate(source).error, InvalidRangeError)


class TestSequence:
    def test_collects_values_in_order(self, source):
        gen = sequence([pure("a"), pure("b"), pure("c")])
        assert gen.generate(source) == Success(["a", "b", "c"])

    def test_empty_sequence(self, counting_source):
        assert sequence([]).generate(counting_source) == Success([])
        assert counting_source.splits == 0

    def test_reports_failing_position(self, source):
        err = InvalidRangeError("boom")
        result = sequence([pure(1), pure(2), fail(err)]).generate(source)
        assert isinstance(result.error, PropagatedError)
        assert result.error.combinator == "sequence"
        assert result.error.index == 2


class TestReplicatePoisson:
    def test_zero_mean_is_always_empty(self, plan):
        gen = replicate_poisson(0.0, pure(1))
        assert all(gen.generate(s) == Success([]) for s in plan.sources(50))

    def test_mean_length_converges(self, plan):
        gen = replicate_poisson(3.0, pure(None))
        lengths = [len(gen.generate(s).value) for s in plan.sources(4000)]
        assert abs(sum(lengths) / len(lengths) - 3.0) < 0.15

    @pytest.mark.parametrize("mean", [-1.0, float("inf"), float("nan")])
    def test_invalid_mean_fails(self, mean, counting_source):
        result = replicate_poisson(mean, pure(1)).generate(counting_source)
        assert isinstance(result.error, InvalidRangeError)
        assert counting_source.draws == 0

    def test_element_failure_is_propagated(self, plan):
        err = InvalidRangeError("element")
        gen = replicate_poisson(50.0, fail(err))
        result = gen.generate(plan.source())
        assert isinstance(result, Failure)
        assert result.error.path()[0] == ("replicate_poisson", None)
        assert result.error.root is err
