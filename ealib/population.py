"""
The Population object for storing and summarizing collections of individuals.
"""
from typing import List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from ealib.archive import ArchiveError, ArchiveReader, ArchiveWriter, load_document, save_document
from ealib.fitness import MultiObjectiveFitness
from ealib.individual import Individual, IndividualType, Sink, Source


class Population(BaseModel):
    """
    An ordered collection of individuals.

    Args:
        individuals (List[Individual]): The members of the population.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    individuals: List[Individual] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.individuals)

    def best(self) -> Individual:
        """Returns the individual with the greatest fitness."""
        if not self.individuals:
            raise ValueError("Cannot select the best individual of an empty population.")
        return max(self.individuals)

    def ranked(self) -> List[Individual]:
        """Returns the individuals sorted from best to worst fitness."""
        return sorted(self.individuals, reverse=True)

    def to_frame(self) -> pd.DataFrame:
        """
        Summarizes the population as a DataFrame with one row per individual.

        Scalar fitness values go in a `fitness` column; multi-objective values
        are spread over `fitness_<objective>` columns. Null fitness is NaN.
        """
        rows = []
        for ind in self.individuals:
            row = {
                "name": ind.name,
                "generation": ind.generation,
                "update": ind.update,
                "null_fitness": ind.fitness.is_null(),
                "genome_length": len(ind.repr),
            }
            if isinstance(ind.fitness, MultiObjectiveFitness):
                for objective, value in ind.fitness.values.items():
                    row[f"fitness_{objective}"] = value
            else:
                row["fitness"] = float(ind.fitness)
            rows.append(row)
        return pd.DataFrame(rows)

    def save(self, ar: ArchiveWriter):
        ar.write_int("count", len(self.individuals))
        for ind in self.individuals:
            ar.write_nested("individual", ind)


class _PopulationReader:
    """Loads a population archive using a fixed individual type."""

    def __init__(self, individual_type: IndividualType):
        self.individual_type = individual_type
        self.individuals: List[Individual] = []

    def load(self, ar: ArchiveReader):
        count = ar.read_int("count")
        if count < 0:
            raise ArchiveError(f"Negative population count: {count}")
        self.individuals = [
            ar.read_nested("individual", self.individual_type.make())
            for _ in range(count)
        ]


def population_save(population: Population, out: Sink, indent: bool = True, encoding: str = "utf-8"):
    """
    Serializes a population to a text stream or a file path under the tag
    "population".
    """
    save_document("population", population, out, indent=indent, encoding=encoding)


def population_load(source: Source, individual_type: Optional[IndividualType] = None) -> Population:
    """
    Loads a previously serialized population from a stream or a file path.

    Args:
        source (Source): A path, or an open stream.
        individual_type (Optional[IndividualType]): The representation and
            fitness types of the members.

    Returns:
        Population: The loaded population, in archive order.
    """
    reader = load_document(source, "population", _PopulationReader(individual_type or IndividualType()))
    return Population(individuals=reader.individuals)
