from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

_RESOURCES = "mazedesign.resources"
_SCHEMA_FILE = "maze_config.schema.json"
_DEFAULTS_FILE = "default_maze.yaml"


@lru_cache(maxsize=1)
def _load_schema() -> Dict[str, Any]:
    """Load the bundled configuration schema (cached, the schema is static)."""
    with resources.files(_RESOURCES).joinpath(_SCHEMA_FILE).open("r", encoding="utf-8") as f:
        logger.debug("Loading maze config schema from package resources")
        return json.load(f)


def validate_config_dict(data: Mapping[str, Any]) -> None:
    """Validate a raw configuration mapping against the bundled JSON schema.

    Raises:
        ConfigError carrying every schema violation.
    """
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(dict(data)), key=lambda e: list(e.path))
    if errors:
        messages = []
        for err in errors:
            path = "/".join(str(p) for p in err.path) or "<root>"
            logger.error("Maze config validation error at %s: %s", path, err.message)
            messages.append(f"at {path}: {err.message}")
        raise ConfigError("Maze configuration failed schema validation", messages)


@dataclass(frozen=True)
class MazeConfig:
    """Dimensions and constants controlling one maze design.

    - width/height/length: extent of the volume along X, Y (vertical) and Z.
    - split_levels: maximum partition recursion depth; at most 2**split_levels rooms.
    - min_room_side/min_room_height: lower bound on room size along X/Z and Y,
      and on any doorway opening.
    - section_radius: breadth-first radius (in doorways) defining a section.
    - min_section_rooms: sections with fewer rooms are discarded.
    - door_removal_chance: probability of cutting a redundant horizontal doorway.
    """

    width: int = 34
    height: int = 20
    length: int = 34
    split_levels: int = 9
    min_room_side: int = 3
    min_room_height: int = 4
    section_radius: int = 2
    min_section_rooms: int = 5
    door_removal_chance: float = 0.5

    def __post_init__(self) -> None:
        self.validate()

    @property
    def dimensions(self) -> Tuple[int, int, int]:
        return (self.width, self.height, self.length)

    def validate(self) -> None:
        """Check that the values are mutually consistent.

        Each dimension must fit at least one room of minimum size; dimensions too
        small to split are fine, the partition simply stops there.
        """
        problems = []
        for name in ("min_room_side", "min_room_height", "min_section_rooms"):
            if getattr(self, name) < 1:
                problems.append(f"{name} must be >= 1, got {getattr(self, name)}")
        for name in ("split_levels", "section_radius"):
            if getattr(self, name) < 0:
                problems.append(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.width < self.min_room_side:
            problems.append(f"width {self.width} is smaller than min_room_side {self.min_room_side}")
        if self.length < self.min_room_side:
            problems.append(f"length {self.length} is smaller than min_room_side {self.min_room_side}")
        if self.height < self.min_room_height:
            problems.append(f"height {self.height} is smaller than min_room_height {self.min_room_height}")
        if not 0.0 <= self.door_removal_chance <= 1.0:
            problems.append(f"door_removal_chance must be within [0, 1], got {self.door_removal_chance}")
        if problems:
            for p in problems:
                logger.error("Invalid maze config: %s", p)
            raise ConfigError("Invalid maze configuration", problems)

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes: Any) -> "MazeConfig":
        return dataclasses.replace(self, **changes)

    # ------------------------ Loading & Overrides ------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional["MazeConfig"] = None) -> "MazeConfig":
        """Build a config from a mapping, overlaying ``base`` (defaults if None).

        Unknown keys are ignored.
        """
        validate_config_dict(data)
        allowed = {f.name for f in dataclasses.fields(cls)}
        ignored = sorted(k for k in data if k not in allowed)
        if ignored:
            logger.debug("Ignoring unknown maze config keys: %s", ignored)
        filtered = {k: v for k, v in data.items() if k in allowed}
        merged = (base or cls()).as_dict()
        merged.update(filtered)
        return cls(**merged)

    @classmethod
    def from_yaml(cls, path: Optional[os.PathLike | str] = None) -> "MazeConfig":
        """Load a config from YAML.

        If path is None, loads the embedded default resource
        mazedesign/resources/default_maze.yaml.
        """
        if path is None:
            text = resources.files(_RESOURCES).joinpath(_DEFAULTS_FILE).read_text(encoding="utf-8")
            logger.debug("Loaded embedded default maze config resource")
        else:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Maze config file not found: {p}")
            text = p.read_text(encoding="utf-8")
            logger.debug("Loaded maze config from path: %s", p)

        raw = yaml.safe_load(text) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Maze config must be a mapping, got {type(raw).__name__}")
        return cls.from_dict(raw)

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        base: Optional["MazeConfig"] = None,
    ) -> "MazeConfig":
        """Overlay MAZE_* environment variables onto ``base``."""
        env = os.environ if env is None else env
        mapping: Dict[str, Tuple[str, Callable[[str], Any]]] = {
            "MAZE_WIDTH": ("width", int),
            "MAZE_HEIGHT": ("height", int),
            "MAZE_LENGTH": ("length", int),
            "MAZE_SPLIT_LEVELS": ("split_levels", int),
            "MAZE_MIN_ROOM_SIDE": ("min_room_side", int),
            "MAZE_MIN_ROOM_HEIGHT": ("min_room_height", int),
            "MAZE_SECTION_RADIUS": ("section_radius", int),
            "MAZE_MIN_SECTION_ROOMS": ("min_section_rooms", int),
            "MAZE_DOOR_REMOVAL_CHANCE": ("door_removal_chance", float),
        }
        out: Dict[str, Any] = {}
        for env_key, (field_name, caster) in mapping.items():
            if env_key in env and env[env_key] != "":
                try:
                    out[field_name] = caster(env[env_key])
                except ValueError as exc:
                    logger.error("Invalid env for %s=%r: %s", env_key, env[env_key], exc)
                    raise ConfigError(f"Invalid value for {env_key}: {env[env_key]!r}") from exc
        if out:
            logger.debug("Maze config overrides from environment: %s", out)
        return cls.from_dict(out, base=base)


DEFAULT_CONFIG = MazeConfig()


__all__ = ["MazeConfig", "DEFAULT_CONFIG", "validate_config_dict"]
