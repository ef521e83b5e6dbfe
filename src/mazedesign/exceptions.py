from typing import Iterable, Optional


class MazeDesignError(Exception):
    """Base exception for the maze design package."""


class ConfigError(MazeDesignError):
    """Raised when a maze configuration is malformed or out of range."""

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            parts.append(f" - {e}")
        return "\n".join(parts)


class InvariantViolation(MazeDesignError):
    """Raised when partition tree or room graph bookkeeping is inconsistent.

    These indicate a defect, not a runtime condition to recover from.
    """
