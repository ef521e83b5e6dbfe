from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Tuple


class Axis(IntEnum):
    """Coordinate axes. Y is vertical."""

    X = 0
    Y = 1
    Z = 2


# Order in which the partition tree cycles through split axes
SPLIT_ROTATION: Tuple[Axis, Axis, Axis] = (Axis.X, Axis.Z, Axis.Y)


def next_split_axis(axis: Axis) -> Axis:
    index = SPLIT_ROTATION.index(axis)
    return SPLIT_ROTATION[(index + 1) % len(SPLIT_ROTATION)]


@dataclass(frozen=True)
class Point3D:
    x: int
    y: int
    z: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, axis: int) -> int:
        return (self.x, self.y, self.z)[axis]

    def with_axis(self, axis: Axis, value: int) -> "Point3D":
        coords = [self.x, self.y, self.z]
        coords[axis] = value
        return Point3D(*coords)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)
