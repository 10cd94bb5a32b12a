"""Referential-integrity validation of normalized pathway graphs."""

import logging
from typing import Dict, Optional, Tuple

from ..graph_model import PathwayGraph
from ..graph_orchestrator import GraphOrchestrator, IdFactory
from .fallback import EMPTY_NODES_DESCRIPTION, placeholder_node
from .normalization import DEFAULT_GRAPH_TITLE

logger = logging.getLogger(__name__)


def check_integrity(
    graph: PathwayGraph,
    ids: Optional[IdFactory] = None,
) -> Tuple[PathwayGraph, Dict[str, int]]:
    """Rebuilds ``graph`` so that every edge points at an existing node.

    Dangling edges are dropped, never redirected. Duplicate node ids get a fresh
    id, exact duplicate edges are merged, a graph with several nodes and no edge
    left is chained in node order, and an empty graph gets one placeholder node
    titled after the graph.
    """
    orchestrator = GraphOrchestrator(title=graph.title or DEFAULT_GRAPH_TITLE, ids=ids)
    for node in graph.nodes:
        orchestrator.add_node(node)
    if not orchestrator.state.nodes:
        orchestrator.add_node(
            placeholder_node(orchestrator.state.title, EMPTY_NODES_DESCRIPTION, orchestrator.ids)
        )

    dropped = 0
    for edge in graph.edges:
        if orchestrator.has_node(edge.source) and orchestrator.has_node(edge.target):
            orchestrator.add_edge(edge)
        else:
            dropped += 1
            logger.debug("Dropping edge %s: %r -> %r", edge.id, edge.source, edge.target)

    synthesized = 0
    if not orchestrator.state.edges and len(orchestrator.state.nodes) > 1:
        synthesized = orchestrator.link_chain()

    stats = {"dropped_edges": dropped, "synthesized_edges": synthesized}
    return orchestrator.state, stats


def validate_graph(graph: PathwayGraph, ids: Optional[IdFactory] = None) -> PathwayGraph:
    validated, _ = check_integrity(graph, ids)
    return validated
