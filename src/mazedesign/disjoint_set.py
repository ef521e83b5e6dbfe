from __future__ import annotations

from typing import Dict, Generic, Hashable, List, TypeVar

T = TypeVar("T", bound=Hashable)


class DisjointSet(Generic[T]):
    """Union-find over arbitrary hashable items.

    Parents and ranks are flat lists preallocated to ``capacity`` slots; they
    grow if more items are registered. ``clear()`` forgets every item but keeps
    the storage so the structure can be reused between passes.
    """

    def __init__(self, capacity: int = 128) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._parent: List[int] = list(range(capacity))
        self._rank: List[int] = [0] * capacity
        self._index: Dict[T, int] = {}

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, item: object) -> bool:
        return item in self._index

    @property
    def capacity(self) -> int:
        return len(self._parent)

    def register(self, item: T) -> bool:
        """Place ``item`` in a singleton set. Returns False if already present."""
        if item in self._index:
            return False
        slot = len(self._index)
        if slot == len(self._parent):
            self._parent.append(slot)
            self._rank.append(0)
        else:
            self._parent[slot] = slot
            self._rank[slot] = 0
        self._index[item] = slot
        return True

    def _find(self, slot: int) -> int:
        parent = self._parent
        while parent[slot] != slot:
            parent[slot] = parent[parent[slot]]
            slot = parent[slot]
        return slot

    def _slot(self, item: T) -> int:
        try:
            return self._index[item]
        except KeyError:
            raise KeyError(f"Item is not registered in the disjoint set: {item!r}") from None

    def union(self, a: T, b: T) -> bool:
        """Merge the sets holding ``a`` and ``b``.

        Returns True if two distinct sets were merged, False if they were
        already the same set.
        """
        ra = self._find(self._slot(a))
        rb = self._find(self._slot(b))
        if ra == rb:
            return False
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1
        return True

    def connected(self, a: T, b: T) -> bool:
        return self._find(self._slot(a)) == self._find(self._slot(b))

    def clear(self) -> None:
        self._index.clear()


__all__ = ["DisjointSet"]
