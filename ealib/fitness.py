"""
Fitness types for individuals.

A fitness value measures the quality of an individual. Every fitness type has
a distinguished null state meaning "not yet evaluated", which it can report
(`is_null`) and enter (`nullify`), and knows how to write its non-null value
to an archive.
"""
import math
from abc import ABC, abstractmethod
from functools import total_ordering
from typing import Dict, Tuple, Type

from pydantic import BaseModel, Field

from ealib.archive import ArchiveReader, ArchiveWriter

# Registry for fitness types
FITNESS_REGISTRY: Dict[str, Type["Fitness"]] = {}


def register_fitness(name: str, fitness_class: Type["Fitness"]):
    """
    Registers a fitness type for use in configurations.

    Args:
        name (str): The identifier of the fitness type.
        fitness_class (Type[Fitness]): The fitness class to register.
    """
    if name in FITNESS_REGISTRY:
        raise ValueError(f"Fitness '{name}' is already registered.")
    FITNESS_REGISTRY[name] = fitness_class


def get_fitness(name: str) -> Type["Fitness"]:
    """
    Retrieves a fitness type from the registry.

    Args:
        name (str): The identifier of the fitness type.

    Returns:
        Type[Fitness]: The registered fitness class.
    """
    if name not in FITNESS_REGISTRY:
        raise ValueError(f"Fitness '{name}' is not registered. Available: {list(FITNESS_REGISTRY.keys())}")
    return FITNESS_REGISTRY[name]


class Fitness(BaseModel, ABC):
    """
    Abstract base class for all fitness types.

    A freshly constructed fitness with no value is null. Subclasses define the
    ordering among values, including where null values sort.
    """

    @abstractmethod
    def is_null(self) -> bool:
        """Returns True if this fitness has not been evaluated."""
        raise NotImplementedError

    @abstractmethod
    def nullify(self):
        """Puts this fitness back into the null state."""
        raise NotImplementedError

    @abstractmethod
    def save(self, ar: ArchiveWriter):
        """Writes the non-null value of this fitness to an archive."""
        raise NotImplementedError

    @abstractmethod
    def load(self, ar: ArchiveReader):
        """Reads a non-null value from an archive into this fitness."""
        raise NotImplementedError


@total_ordering
class ScalarFitness(Fitness):
    """
    A single real-valued fitness. NaN is the null state.

    Null fitness sorts below every evaluated fitness, and two null fitness
    values compare equal. Comparisons against plain numbers are allowed so
    that thresholds can be written as `ind.fitness >= 0.5`.

    Args:
        value (float): The fitness value. Defaults to NaN (null).
    """
    value: float = math.nan

    def __init__(self, value: float = math.nan, **data):
        super().__init__(value=value, **data)

    def is_null(self) -> bool:
        return math.isnan(self.value)

    def nullify(self):
        self.value = math.nan

    def save(self, ar: ArchiveWriter):
        ar.write_float("value", self.value)

    def load(self, ar: ArchiveReader):
        self.value = ar.read_float("value")

    def __float__(self) -> float:
        return self.value

    @staticmethod
    def _coerce(other):
        if isinstance(other, ScalarFitness):
            return other
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return ScalarFitness(float(other))
        return None

    def __eq__(self, other) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        if self.is_null() or other.is_null():
            return self.is_null() and other.is_null()
        return self.value == other.value

    def __lt__(self, other) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        if other.is_null():
            return False
        if self.is_null():
            return True
        return self.value < other.value


@total_ordering
class MultiObjectiveFitness(Fitness):
    """
    A set of named objective values. An empty set is the null state.

    Values are ordered lexicographically over the objectives sorted by name;
    null fitness sorts below every evaluated fitness.

    Args:
        values (Dict[str, float]): Objective values keyed by objective name.
    """
    values: Dict[str, float] = Field(default_factory=dict)

    def is_null(self) -> bool:
        return not self.values

    def nullify(self):
        self.values = {}

    def _key(self) -> Tuple[float, ...]:
        return tuple(self.values[name] for name in sorted(self.values))

    def save(self, ar: ArchiveWriter):
        ar.write_int("count", len(self.values))
        for name, value in self.values.items():
            ar.write_str("objective", name)
            ar.write_float("value", value)

    def load(self, ar: ArchiveReader):
        count = ar.read_int("count")
        values = {}
        for _ in range(count):
            name = ar.read_str("objective")
            values[name] = ar.read_float("value")
        self.values = values

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultiObjectiveFitness):
            return NotImplemented
        return self.values == other.values

    def __lt__(self, other) -> bool:
        if not isinstance(other, MultiObjectiveFitness):
            return NotImplemented
        if other.is_null():
            return False
        if self.is_null():
            return True
        return self._key() < other._key()


register_fitness("scalar", ScalarFitness)
register_fitness("multi_objective", MultiObjectiveFitness)
