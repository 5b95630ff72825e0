"""
Data structure for representing an individual in the population.

Individuals are three things: a container for a representation, a container
for a fitness, and a container for metadata. By supporting arbitrary metadata,
individuals can have location, lineage, or other information attached to
them.
"""
import copy
import logging
import os
from typing import IO, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ealib.archive import ArchiveReader, ArchiveWriter, dumps, load_document, parse, save_document
from ealib.config import Config
from ealib.fitness import Fitness, ScalarFitness, get_fitness
from ealib.meta_data import MetaData
from ealib.representations.numeric_vector import RealString, get_representation

log = logging.getLogger("ealib.individual")

R = TypeVar("R")
F = TypeVar("F", bound=Fitness)

Sink = Union[str, os.PathLike, IO[str]]
Source = Union[str, os.PathLike, IO]


class Individual(BaseModel, Generic[R, F]):
    """
    A single individual: identity, lineage markers, fitness, representation
    and metadata.

    Individuals have value semantics. Copies (`copy()`, `copy.copy`,
    `copy.deepcopy`) and `assign` never share the representation, fitness or
    metadata with their source. Individuals are ordered by fitness alone.

    Args:
        name (int): Identifier of this individual.
        generation (float): Generation of this individual.
        update (int): Update at which this individual was born.
        fitness (F): This individual's fitness. Defaults to a null ScalarFitness.
        repr (R): This individual's representation. Defaults to an empty RealString.
        md (MetaData): This individual's metadata.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: int = 0
    generation: float = 0.0
    update: int = 0
    fitness: F = Field(default_factory=ScalarFitness)
    repr: R = Field(default_factory=RealString)
    md: MetaData = Field(default_factory=MetaData)

    @field_validator("md", mode="before")
    @classmethod
    def _coerce_meta_data(cls, value):
        if isinstance(value, dict):
            return MetaData(value)
        return value

    def as_fitness(self) -> F:
        """Returns this individual's fitness, for threshold comparisons."""
        return self.fitness

    def __float__(self) -> float:
        return float(self.fitness)

    def __lt__(self, other) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return self.fitness < other.fitness

    def __gt__(self, other) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return other.fitness < self.fitness

    def __le__(self, other) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return self.fitness <= other.fitness

    def __ge__(self, other) -> bool:
        if not isinstance(other, Individual):
            return NotImplemented
        return self.fitness >= other.fitness

    def copy(self) -> "Individual[R, F]":
        """Returns a fully independent copy of this individual."""
        return self.model_copy(deep=True)

    def __copy__(self) -> "Individual[R, F]":
        return self.copy()

    def assign(self, other: "Individual[R, F]") -> "Individual[R, F]":
        """
        Replaces every field of this individual with a deep copy of the
        corresponding field of `other`. Assigning an individual to itself
        leaves it unchanged.

        Returns:
            Individual: This individual.
        """
        if other is not self:
            for field in type(self).model_fields:
                setattr(self, field, copy.deepcopy(getattr(other, field)))
        return self

    def save(self, ar: ArchiveWriter):
        """
        Writes this individual to an archive.

        Formats based on floating point cannot round-trip a NaN fitness, so a
        `null_fitness` flag is written instead of the fitness in that case.
        """
        ar.write_int("name", self.name)
        ar.write_float("generation", self.generation)
        null_fitness = self.fitness.is_null()
        ar.write_bool("null_fitness", null_fitness)
        if not null_fitness:
            ar.write_nested("fitness", self.fitness)
        ar.write_nested("representation", self.repr)
        ar.write_nested("meta_data", self.md)
        ar.write_int("update", self.update)

    def load(self, ar: ArchiveReader):
        """
        Reads this individual from an archive. Fields are only replaced once
        the whole individual has been read.
        """
        name = ar.read_int("name")
        generation = ar.read_float("generation")
        fitness = type(self.fitness)()
        if ar.read_bool("null_fitness"):
            fitness.nullify()
        else:
            ar.read_nested("fitness", fitness)
        representation = ar.read_nested("representation", type(self.repr)())
        md = ar.read_nested("meta_data", MetaData())
        update = ar.read_int("update")

        self.name = name
        self.generation = generation
        self.fitness = fitness
        self.repr = representation
        self.md = md
        self.update = update


class IndividualType(BaseModel):
    """
    The pairing of a representation type and a fitness type used by an
    experiment, along with its archive options.

    Args:
        representation (Type): The representation class.
        fitness (Type[Fitness]): The fitness class.
        indent (bool): Whether archives are pretty-printed.
        encoding (str): The encoding used when archives are written to files.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    representation: Type = RealString
    fitness: Type[Fitness] = ScalarFitness
    indent: bool = True
    encoding: str = "utf-8"

    @classmethod
    def from_config(cls, config: Config) -> "IndividualType":
        return cls(
            representation=get_representation(config.representation),
            fitness=get_fitness(config.fitness),
            indent=config.archive.indent,
            encoding=config.archive.encoding,
        )

    def make(self, representation=None) -> Individual:
        """
        Builds an individual with default name, generation, update, a null
        fitness and empty metadata.

        Args:
            representation: The representation to use. An empty one of this
                type's representation class is built when omitted.

        Returns:
            Individual: The new individual.
        """
        if representation is None:
            representation = self.representation()
        return Individual(repr=representation, fitness=self.fitness())

    def save(self, ind: Individual, out: Sink):
        individual_save(ind, out, indent=self.indent, encoding=self.encoding)

    def load(self, source: Source) -> Individual:
        return individual_load(source, self)


def individual_dumps(ind: Individual, indent: bool = True) -> str:
    """
    Serializes an individual to an archive string under the tag "individual".
    """
    return dumps("individual", ind, indent=indent)


def individual_loads(text: Union[str, bytes], individual_type: Optional[IndividualType] = None) -> Individual:
    """
    Parses one individual from an archive string.

    Args:
        text (Union[str, bytes]): The archive document.
        individual_type (Optional[IndividualType]): The representation and
            fitness types to load into. Defaults to RealString and ScalarFitness.

    Returns:
        Individual: The loaded individual.
    """
    ind = (individual_type or IndividualType()).make()
    ar = parse(text, "individual")
    ind.load(ar)
    ar.finish()
    return ind


def individual_save(ind: Individual, out: Sink, indent: bool = True, encoding: str = "utf-8"):
    """
    Serializes an individual to a text stream or a file path.

    Args:
        ind (Individual): The individual to save.
        out (Sink): A path, or an open text stream.
        indent (bool): Whether to pretty-print the archive.
        encoding (str): The file encoding, used when `out` is a path.
    """
    save_document("individual", ind, out, indent=indent, encoding=encoding)
    log.debug("Saved individual %d", ind.name)


def individual_load(source: Source, individual_type: Optional[IndividualType] = None) -> Individual:
    """
    Loads a previously serialized individual from a stream or a file path.

    Args:
        source (Source): A path, or an open stream.
        individual_type (Optional[IndividualType]): The representation and
            fitness types to load into. Defaults to RealString and ScalarFitness.

    Returns:
        Individual: The loaded individual.
    """
    ind = load_document(source, "individual", (individual_type or IndividualType()).make())
    log.debug("Loaded individual %d", ind.name)
    return ind
