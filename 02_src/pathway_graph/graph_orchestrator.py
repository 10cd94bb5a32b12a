"""Identifier factory and safe mutations of pathway graph state."""

import random
import string
from dataclasses import replace
from typing import Any, Dict, Optional, Set, Tuple

from .graph_model import PathwayEdge, PathwayGraph, PathwayNode

_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
_ID_LENGTH = 6


class IdFactory:
    """Generates short unique ids for a single recovery invocation.

    Each invocation builds its own factory, so concurrent recoveries never share
    a counter. Passing a seed makes the generated ids reproducible.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)
        self._issued: Set[str] = set()

    def reserve(self, identifier: str) -> None:
        self._issued.add(identifier)

    def is_taken(self, identifier: str) -> bool:
        return identifier in self._issued

    def new_id(self, prefix: str) -> str:
        while True:
            suffix = "".join(self._random.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))
            candidate = f"{prefix}-{suffix}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate


class GraphOrchestrator:
    """Owns identifiers and safe updates of one pathway graph."""

    def __init__(self, title: str, ids: Optional[IdFactory] = None) -> None:
        self.ids = ids or IdFactory()
        self.state = PathwayGraph(title=title)
        self._node_registry: Dict[str, PathwayNode] = {}
        self._edge_registry: Dict[Tuple[str, str, Optional[str]], str] = {}
        self._edge_ids: Set[str] = set()

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_registry

    def add_node(self, node: PathwayNode) -> str:
        if not node.id or node.id in self._node_registry:
            node = replace(node, id=self.ids.new_id("node"))
        self.ids.reserve(node.id)
        self.state.nodes.append(node)
        self._node_registry[node.id] = node
        return node.id

    def add_edge(self, edge: PathwayEdge) -> str:
        if edge.source not in self._node_registry:
            raise ValueError(f"Unknown source node: {edge.source}")
        if edge.target not in self._node_registry:
            raise ValueError(f"Unknown target node: {edge.target}")

        edge_signature = (edge.source, edge.target, edge.label)
        existing_id = self._edge_registry.get(edge_signature)
        if existing_id:
            return existing_id

        if not edge.id or edge.id in self._edge_ids:
            edge = replace(edge, id=self.ids.new_id("edge"))
        self.ids.reserve(edge.id)
        self.state.edges.append(edge)
        self._edge_registry[edge_signature] = edge.id
        self._edge_ids.add(edge.id)
        return edge.id

    def link_chain(self) -> int:
        """Connects nodes in list order and returns the number of edges added."""
        added = 0
        nodes = self.state.nodes
        for previous, current in zip(nodes, nodes[1:]):
            edge = PathwayEdge(id=self.ids.new_id("edge"), source=previous.id, target=current.id)
            self.add_edge(edge)
            added += 1
        return added

    def to_json(self) -> Dict[str, Any]:
        return self.state.to_json()


def reassign_ids(graph: PathwayGraph, ids: Optional[IdFactory] = None) -> PathwayGraph:
    """Returns a copy of ``graph`` with fresh node and edge ids.

    Parent pointers and edge endpoints are remapped through the old-to-new id
    map; parent pointers naming unknown nodes are kept as they are.
    """
    ids = ids or IdFactory()
    id_map: Dict[str, str] = {}
    for node in graph.nodes:
        id_map[node.id] = ids.new_id("node")

    nodes = [
        replace(
            node,
            id=id_map[node.id],
            parent_id=id_map.get(node.parent_id, node.parent_id) if node.parent_id else None,
        )
        for node in graph.nodes
    ]
    edges = [
        replace(
            edge,
            id=ids.new_id("edge"),
            source=id_map.get(edge.source, edge.source),
            target=id_map.get(edge.target, edge.target),
        )
        for edge in graph.edges
    ]
    return PathwayGraph(title=graph.title, nodes=nodes, edges=edges)
