"""Procedural topology design for three-dimensional mazes.

Partitions a box into rooms, finds the doorways between neighbouring rooms,
keeps compact sections of rooms and prunes their doorways while keeping every
section connected.
"""
from importlib.metadata import PackageNotFoundError, version

from .config import MazeConfig
from .designer import MazeDesign, MazeDesigner, generate, generate_from_seed
from .exceptions import ConfigError, InvariantViolation, MazeDesignError
from .geometry import Axis, Point3D
from .rooms import Doorway, Room

__all__ = [
    "__version__",
    "Axis",
    "ConfigError",
    "Doorway",
    "InvariantViolation",
    "MazeConfig",
    "MazeDesign",
    "MazeDesignError",
    "MazeDesigner",
    "Point3D",
    "Room",
    "generate",
    "generate_from_seed",
]

try:
    __version__ = version("maze-design")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
