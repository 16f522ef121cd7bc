"""Tests for explicit seed plans."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from composegen import SeedPlan, int_range

pytestmark = pytest.mark.unit


def _value(source):
    return int_range(0, 10**12).generate(source).value


def test_same_index_same_stream(plan):
    assert _value(plan.source(3)) == _value(plan.source(3))


def test_indices_are_independent(plan):
    values = [_value(s) for s in plan.sources(50)]
    assert len(set(values)) == 50


def test_sources_matches_individual_indices(plan):
    from_range = [_value(s) for s in plan.sources(3, start=5)]
    assert from_range == [_value(plan.source(i)) for i in (5, 6, 7)]


def test_equal_seeds_are_reproducible():
    assert _value(SeedPlan(seed=1).source()) == _value(SeedPlan(seed=1).source())
    assert _value(SeedPlan(seed=1).source()) != _value(SeedPlan(seed=2).source())


def test_child_plans_are_namespaced(plan):
    accounts = plan.child("accounts")
    trades = plan.child("trades")
    assert accounts == plan.child("accounts")
    assert _value(accounts.source()) != _value(trades.source())
    assert _value(accounts.source()) != _value(plan.source())
    assert len(accounts.path) == 1


def test_plan_is_frozen(plan):
    with pytest.raises(dataclasses.FrozenInstanceError):
        plan.seed = 1  # type: ignore[misc]


def test_fresh_plan_logs_its_seed(caplog):
    caplog.set_level(logging.INFO, logger="composegen")
    fresh = SeedPlan.fresh()
    assert f"seed={fresh.seed}" in caplog.text


@pytest.mark.parametrize(
    "call",
    [
        lambda: SeedPlan(seed=-1),
        lambda: SeedPlan(seed=1).source(-1),
        lambda: list(SeedPlan(seed=1).sources(-1)),
        lambda: SeedPlan(seed=1).child(""),
    ],
)
def test_invalid_arguments_raise(call):
    with pytest.raises(ValueError):
        call()
