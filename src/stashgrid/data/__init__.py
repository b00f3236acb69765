"""Bundled data: the built-in item catalog and JSON Schemas."""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

from jsonschema import Draft202012Validator

logger = logging.getLogger(__name__)

_SCHEMA_PKG = "stashgrid.data.schemas"


@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    """
    Load a bundled JSON schema by name (filename without ``.schema.json``).

    Cached since the schemas are static package data.
    """
    entry = resources.files(_SCHEMA_PKG).joinpath(f"{name}.schema.json")
    if not entry.is_file():
        raise FileNotFoundError(f"Schema not found: {name}")
    with entry.open("r", encoding="utf-8") as fh:
        schema = json.load(fh)
    logger.debug("Loaded schema '%s'", name)
    return schema


def make_validator(name: str) -> Draft202012Validator:
    return Draft202012Validator(load_schema(name))


def read_text(filename: str) -> str:
    return resources.files(__name__).joinpath(filename).read_text(encoding="utf-8")


__all__ = ["load_schema", "make_validator", "read_text"]
