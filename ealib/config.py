"""
Configuration models for ealib.

This module defines the Pydantic models that select the representation and
fitness types of an experiment's individuals and control how archives are
written. Configurations are typically loaded from a YAML file.
"""
import codecs

from pydantic import BaseModel, Field, field_validator


class ArchiveConfig(BaseModel):
    """
    Configuration for archive output.

    Args:
        indent (bool): Whether archives are pretty-printed.
        encoding (str): The encoding used when archives are written to files.
    """
    indent: bool = Field(True, description="Pretty-print archives.")
    encoding: str = Field("utf-8", description="Encoding of archive files.")

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"Unknown encoding '{value}'.") from None
        return value


class Config(BaseModel):
    """
    Top-level configuration of an experiment's individuals.

    Args:
        representation (str): The registered representation name
            (e.g., 'bitstring', 'intstring', 'realstring').
        fitness (str): The registered fitness name (e.g., 'scalar').
        archive (ArchiveConfig): Archive output configuration.
    """
    representation: str = Field("realstring", description="Registered representation name.")
    fitness: str = Field("scalar", description="Registered fitness name.")
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
