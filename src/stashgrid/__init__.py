"""
stashgrid: spatial allocation engine for grid inventories.

Decides where variably sized items may sit among an actor's equipment slots
and grid containers, and resolves move/swap requests between them without
ever letting two items share a cell.
"""
from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("stashgrid")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
