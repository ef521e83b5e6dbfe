from __future__ import annotations

import logging
from typing import Dict, Generic, Iterator, Optional, Tuple, TypeVar

from .exceptions import InvariantViolation

logger = logging.getLogger(__name__)

N = TypeVar("N")
E = TypeVar("E")


class Edge(Generic[N, E]):
    """Directed edge. Direction only avoids storing an adjacency twice."""

    __slots__ = ("source", "target", "data")

    def __init__(self, source: "GraphNode[N, E]", target: "GraphNode[N, E]", data: E) -> None:
        self.source = source
        self.target = target
        self.data = data

    def other(self, node: "GraphNode[N, E]") -> "GraphNode[N, E]":
        if node is self.source:
            return self.target
        if node is self.target:
            return self.source
        raise InvariantViolation("Node is not an endpoint of this edge")

    def __repr__(self) -> str:
        return f"Edge({self.source.data!r} -> {self.target.data!r}, {self.data!r})"


class GraphNode(Generic[N, E]):
    """Graph node with separate inbound and outbound edge collections.

    Dicts are used as insertion-ordered sets so traversal order is reproducible.
    """

    __slots__ = ("data", "_inbound", "_outbound")

    def __init__(self, data: N) -> None:
        self.data = data
        self._inbound: Dict[Edge[N, E], None] = {}
        self._outbound: Dict[Edge[N, E], None] = {}

    def inbound(self) -> Tuple[Edge[N, E], ...]:
        return tuple(self._inbound)

    def outbound(self) -> Tuple[Edge[N, E], ...]:
        return tuple(self._outbound)

    def edges(self) -> Iterator[Edge[N, E]]:
        yield from self._inbound
        yield from self._outbound

    def neighbors(self) -> Iterator["GraphNode[N, E]"]:
        """Neighbours over inbound edges, then outbound edges."""
        for edge in self._inbound:
            yield edge.source
        for edge in self._outbound:
            yield edge.target

    def degree(self) -> int:
        return len(self._inbound) + len(self._outbound)

    def __repr__(self) -> str:
        return f"GraphNode({self.data!r})"


class RoomGraph(Generic[N, E]):
    """Mutable directed-edge graph, traversed as undirected."""

    def __init__(self) -> None:
        self._nodes: Dict[GraphNode[N, E], None] = {}
        self._edge_count = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def nodes(self) -> Tuple[GraphNode[N, E], ...]:
        """Snapshot of the nodes in insertion order."""
        return tuple(self._nodes)

    def edges(self) -> Iterator[Edge[N, E]]:
        for node in self._nodes:
            yield from node._outbound

    def add_node(self, data: N) -> GraphNode[N, E]:
        node: GraphNode[N, E] = GraphNode(data)
        self._nodes[node] = None
        return node

    def add_edge(self, source: GraphNode[N, E], target: GraphNode[N, E], data: E) -> Edge[N, E]:
        if source not in self._nodes or target not in self._nodes:
            raise InvariantViolation("Cannot add an edge between nodes outside the graph")
        if source is target:
            raise InvariantViolation("Self-loops are not allowed")
        edge = Edge(source, target, data)
        source._outbound[edge] = None
        target._inbound[edge] = None
        self._edge_count += 1
        return edge

    def remove_edge(self, edge: Edge[N, E]) -> None:
        if edge not in edge.source._outbound or edge not in edge.target._inbound:
            raise InvariantViolation(f"Edge is not in the graph: {edge!r}")
        del edge.source._outbound[edge]
        del edge.target._inbound[edge]
        self._edge_count -= 1

    def remove_node(self, node: GraphNode[N, E]) -> None:
        if node not in self._nodes:
            raise InvariantViolation(f"Node is not in the graph: {node!r}")
        for edge in list(node.edges()):
            self.remove_edge(edge)
        del self._nodes[node]

    def find_edge(self, a: GraphNode[N, E], b: GraphNode[N, E]) -> Optional[Edge[N, E]]:
        """Return the edge joining ``a`` and ``b`` in either direction."""
        for edge in a._outbound:
            if edge.target is b:
                return edge
        for edge in a._inbound:
            if edge.source is b:
                return edge
        return None


__all__ = ["Edge", "GraphNode", "RoomGraph"]
