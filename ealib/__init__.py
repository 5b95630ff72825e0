"""
This __init__.py file exposes the public API of ealib.
"""

from .archive import ArchiveError
from .config import ArchiveConfig, Config
from .fitness import Fitness, MultiObjectiveFitness, ScalarFitness, register_fitness
from .individual import (
    Individual,
    IndividualType,
    individual_dumps,
    individual_load,
    individual_loads,
    individual_save,
)
from .io import load_config, load_individual_type
from .meta_data import MetaData
from .population import Population, population_load, population_save
from .representations import (
    BitString,
    GenomeFormatError,
    IntString,
    NumericVector,
    RealString,
    register_representation,
)

__all__ = [
    "ArchiveConfig",
    "ArchiveError",
    "BitString",
    "Config",
    "Fitness",
    "GenomeFormatError",
    "Individual",
    "IndividualType",
    "IntString",
    "MetaData",
    "MultiObjectiveFitness",
    "NumericVector",
    "Population",
    "RealString",
    "ScalarFitness",
    "individual_dumps",
    "individual_load",
    "individual_loads",
    "individual_save",
    "load_config",
    "load_individual_type",
    "population_load",
    "population_save",
    "register_fitness",
    "register_representation",
]
