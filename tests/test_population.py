"""
Tests for the Population object and its archive.
"""
import math

import pandas as pd
import pytest

from ealib.archive import ArchiveError
from ealib.fitness import MultiObjectiveFitness, ScalarFitness
from ealib.individual import Individual, IndividualType
from ealib.population import Population, population_load, population_save
from ealib.representations.numeric_vector import IntString, RealString

INT_TYPE = IndividualType(representation=IntString)


@pytest.fixture
def sample_population() -> Population:
    """
    Provides a population with one unevaluated member.
    """
    return Population(individuals=[
        Individual(name=1, fitness=ScalarFitness(0.4), repr=IntString([1, 0, 1])),
        Individual(name=2, fitness=ScalarFitness(0.9), repr=IntString([0, 0])),
        Individual(name=3, repr=IntString([1])),
    ])


def test_best(sample_population):
    assert sample_population.best().name == 2
    assert [ind.name for ind in sample_population.ranked()] == [2, 1, 3]


def test_best_of_empty_population():
    with pytest.raises(ValueError):
        Population().best()


def test_to_frame(sample_population):
    """
    Tests the tabular summary of a population.
    """
    df = sample_population.to_frame()

    assert isinstance(df, pd.DataFrame)
    assert list(df["name"]) == [1, 2, 3]
    assert list(df["genome_length"]) == [3, 2, 1]
    assert list(df["null_fitness"]) == [False, False, True]
    assert df["fitness"].iloc[1] == 0.9
    assert math.isnan(df["fitness"].iloc[2])


def test_to_frame_multi_objective():
    population = Population(individuals=[
        Individual(fitness=MultiObjectiveFitness(values={"sharpe": 1.2, "return": 0.3}), repr=RealString()),
    ])
    df = population.to_frame()
    assert df["fitness_sharpe"].iloc[0] == 1.2
    assert df["fitness_return"].iloc[0] == 0.3


def test_population_round_trip(sample_population, tmp_path):
    """
    Tests that a population archive preserves every member, in order.
    """
    path = tmp_path / "population.xml"
    population_save(sample_population, path)
    loaded = population_load(path, INT_TYPE)

    assert len(loaded) == 3
    assert [ind.name for ind in loaded.individuals] == [1, 2, 3]
    assert [list(ind.repr) for ind in loaded.individuals] == [[1, 0, 1], [0, 0], [1]]
    assert loaded.individuals[1].fitness.value == 0.9
    assert loaded.individuals[2].fitness.is_null()


def test_population_count_mismatch(sample_population, tmp_path):
    path = tmp_path / "population.xml"
    population_save(sample_population, path)
    path.write_text(path.read_text(encoding="utf-8").replace("<count>3</count>", "<count>4</count>"), encoding="utf-8")

    with pytest.raises(ArchiveError):
        population_load(path, INT_TYPE)
