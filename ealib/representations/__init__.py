from .numeric_vector import (
    BitString,
    GenomeFormatError,
    IntString,
    NumericVector,
    RealString,
    get_representation,
    register_representation,
)

__all__ = [
    "BitString",
    "GenomeFormatError",
    "IntString",
    "NumericVector",
    "RealString",
    "get_representation",
    "register_representation",
]
