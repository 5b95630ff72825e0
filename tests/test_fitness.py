"""
Tests for the fitness types.
"""
import math

import pytest

from ealib.archive import dumps, parse
from ealib.fitness import MultiObjectiveFitness, ScalarFitness


def test_scalar_null_state():
    """
    Tests that a scalar fitness starts null and can be nullified again.
    """
    fitness = ScalarFitness()
    assert fitness.is_null()
    assert math.isnan(float(fitness))

    fitness.value = 2.0
    assert not fitness.is_null()

    fitness.nullify()
    assert fitness.is_null()


def test_scalar_ordering():
    assert ScalarFitness(1.0) < ScalarFitness(2.0)
    assert ScalarFitness(2.0) > ScalarFitness(1.0)
    assert ScalarFitness(2.0) >= ScalarFitness(2.0)
    assert ScalarFitness(2.0) == ScalarFitness(2.0)
    assert ScalarFitness(2.0) != ScalarFitness(3.0)


def test_scalar_null_ordering():
    """
    Tests that null fitness sorts below every evaluated value.
    """
    null = ScalarFitness()
    assert null < ScalarFitness(-math.inf)
    assert not ScalarFitness(-math.inf) < null
    assert null == ScalarFitness()
    assert not null < ScalarFitness()
    assert null != ScalarFitness(0.0)


def test_scalar_compares_with_numbers():
    assert ScalarFitness(0.75) >= 0.5
    assert ScalarFitness(0.25) < 1
    assert ScalarFitness(3.0) == 3


def test_scalar_archive_round_trip():
    ar = parse(dumps("fitness", ScalarFitness(0.1)), "fitness")
    loaded = ScalarFitness()
    loaded.load(ar)
    assert loaded.value == 0.1


def test_multi_objective_null_state():
    fitness = MultiObjectiveFitness()
    assert fitness.is_null()
    fitness.values["sharpe"] = 1.0
    assert not fitness.is_null()
    fitness.nullify()
    assert fitness.is_null()


def test_multi_objective_ordering():
    """
    Tests lexicographic ordering over objectives sorted by name.
    """
    a = MultiObjectiveFitness(values={"b_return": 0.9, "a_sharpe": 1.0})
    b = MultiObjectiveFitness(values={"a_sharpe": 1.0, "b_return": 1.1})
    c = MultiObjectiveFitness(values={"a_sharpe": 2.0, "b_return": 0.0})

    assert a < b < c
    assert MultiObjectiveFitness() < a
    assert a == MultiObjectiveFitness(values={"a_sharpe": 1.0, "b_return": 0.9})


def test_multi_objective_archive_round_trip():
    fitness = MultiObjectiveFitness(values={"sharpe": 1.5, "expectancy": -0.25})
    ar = parse(dumps("fitness", fitness), "fitness")
    loaded = MultiObjectiveFitness()
    loaded.load(ar)
    ar.finish()
    assert loaded.values == {"sharpe": 1.5, "expectancy": -0.25}


def test_scalar_rejects_unrelated_comparison():
    with pytest.raises(TypeError):
        ScalarFitness(1.0) < "high"


@pytest.mark.parametrize("name", ["line\rbreak", "dos\r\nname", "ctrl\x01", "back\\slash"])
def test_objective_names_round_trip(name):
    fitness = MultiObjectiveFitness(values={name: 1.0, "plain": 2.0})
    ar = parse(dumps("fitness", fitness), "fitness")
    loaded = MultiObjectiveFitness()
    loaded.load(ar)
    ar.finish()
    assert loaded.values == {name: 1.0, "plain": 2.0}
