"""
Canonical numeric representations for genetic algorithms.

A numeric vector is an ordered list of codons (ints or floats). Rather than
writing one archive element per gene, the whole genome is stored as a single
string field: the element count followed by every codon, separated by single
spaces.
"""
from typing import Callable, Dict, Iterable, List, Type

import numpy as np

from ealib.archive import ArchiveError, ArchiveReader, ArchiveWriter, format_float


class GenomeFormatError(ArchiveError):
    """Raised when a genome token stream does not match its declared length."""


class NumericVector(list):
    """
    An ordered, resizable sequence of numeric codons.

    Subclasses pick the codon type by setting `codon_type`. Values added
    through the constructor or `sized` are converted to that type; the usual
    list operations (append, indexing, slicing) are left untouched.

    Args:
        values (Iterable): Initial codons, in gene order.
    """
    codon_type: Type = float

    def __init__(self, values: Iterable = ()):
        super().__init__(self.coerce_codon(v) for v in values)

    @classmethod
    def coerce_codon(cls, value):
        """
        Converts `value` to the codon type. Integer codons refuse floats with
        a fractional part rather than truncating them.
        """
        if cls.codon_type is int and isinstance(value, (float, np.floating)):
            if not float(value).is_integer():
                raise ValueError(f"Integer codon cannot hold {value!r}.")
        return cls.codon_type(value)

    @classmethod
    def sized(cls, n: int) -> "NumericVector":
        """Creates a vector of `n` default-valued codons."""
        if n < 0:
            raise ValueError(f"Vector size must be non-negative, got {n}.")
        return cls([cls.codon_type()] * n)

    @classmethod
    def format_codon(cls, value) -> str:
        if cls.codon_type is float:
            return format_float(value)
        return str(cls.codon_type(value))

    @classmethod
    def parse_codon(cls, token: str):
        return cls.codon_type(token)

    def to_genome(self) -> str:
        """
        Encodes this vector as a genome string, e.g. "4 3 -1 0 42".
        """
        return " ".join([str(len(self))] + [self.format_codon(v) for v in self])

    @classmethod
    def decode_genome(cls, genome: str) -> List:
        """
        Decodes a genome string into a list of codons.

        Args:
            genome (str): The whitespace-delimited token stream.

        Returns:
            List: The decoded codons, in gene order.

        Raises:
            GenomeFormatError: If the count is missing or invalid, if a token
                cannot be parsed, or if the number of tokens after the count
                differs from the count.
        """
        tokens = genome.split()
        if not tokens:
            raise GenomeFormatError("Empty genome: missing element count.")
        try:
            count = int(tokens[0])
        except ValueError:
            raise GenomeFormatError(f"Invalid genome element count: {tokens[0]!r}") from None
        if count < 0:
            raise GenomeFormatError(f"Negative genome element count: {count}")

        codons = tokens[1:]
        if len(codons) != count:
            raise GenomeFormatError(
                f"Genome declares {count} elements but contains {len(codons)}."
            )

        decoded = []
        for i, token in enumerate(codons):
            try:
                decoded.append(cls.parse_codon(token))
            except ValueError:
                raise GenomeFormatError(
                    f"Invalid {cls.codon_type.__name__} codon at position {i}: {token!r}"
                ) from None
        return decoded

    @classmethod
    def from_genome(cls, genome: str) -> "NumericVector":
        return cls(cls.decode_genome(genome))

    def to_array(self) -> np.ndarray:
        """Returns the codons as a numpy array of the codon dtype."""
        return np.asarray(self, dtype=np.dtype(self.codon_type))

    def save(self, ar: ArchiveWriter):
        ar.write_str("genome", self.to_genome())

    def load(self, ar: ArchiveReader):
        decoded = self.decode_genome(ar.read_str("genome"))
        self.clear()
        self.extend(decoded)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"


class IntString(NumericVector):
    """Integer-string representation."""
    codon_type = int


# Bitstrings share the integer codon type.
BitString = IntString


class RealString(NumericVector):
    """Real-string representation."""
    codon_type = float


# Registry for representation types
REPRESENTATION_REGISTRY: Dict[str, Callable[[], NumericVector]] = {}


def register_representation(name: str, representation_class: Callable):
    """
    Registers a representation type for use in configurations.

    Args:
        name (str): The identifier of the representation.
        representation_class (Callable): The representation class. It must be
            constructible without arguments and expose `save` and `load`.
    """
    if name in REPRESENTATION_REGISTRY:
        raise ValueError(f"Representation '{name}' is already registered.")
    REPRESENTATION_REGISTRY[name] = representation_class


def get_representation(name: str) -> Callable:
    """
    Retrieves a representation type from the registry.

    Args:
        name (str): The identifier of the representation.

    Returns:
        Callable: The registered representation class.
    """
    if name not in REPRESENTATION_REGISTRY:
        raise ValueError(
            f"Representation '{name}' is not registered. Available: {list(REPRESENTATION_REGISTRY.keys())}"
        )
    return REPRESENTATION_REGISTRY[name]


register_representation("bitstring", BitString)
register_representation("intstring", IntString)
register_representation("realstring", RealString)
