"""
Loading of experiment settings from YAML.

`load_config` validates a settings file into a `Config`;
`load_individual_type` goes one step further and resolves the configured
representation and fitness names into a ready-to-use `IndividualType`.
"""
import logging
import os
from typing import Union

import yaml

from ealib.config import Config
from ealib.individual import IndividualType

log = logging.getLogger("ealib.io")

PathLike = Union[str, os.PathLike]


def load_config(path: PathLike) -> Config:
    """
    Reads a YAML settings file into a validated Config. An empty file gives
    the default settings.

    Raises:
        ValueError: If the document is not a mapping of settings.
    """
    with open(path, encoding="utf-8") as f:
        settings = yaml.safe_load(f)
    if settings is None:
        settings = {}
    if not isinstance(settings, dict):
        raise ValueError(f"Settings in {path} must be a mapping, got {type(settings).__name__}.")
    log.debug("Loaded settings from %s", path)
    return Config(**settings)


def load_individual_type(path: PathLike) -> IndividualType:
    """
    Builds the IndividualType described by a YAML settings file.

    Args:
        path (PathLike): The path to the YAML settings file.

    Returns:
        IndividualType: The configured representation and fitness classes,
        with the archive indent and encoding applied.
    """
    return IndividualType.from_config(load_config(path))
