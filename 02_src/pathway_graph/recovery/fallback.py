"""Minimal always-valid pathway graphs."""

from typing import Any, Optional

from ..graph_model import PathwayGraph, PathwayNode, Position
from ..graph_orchestrator import IdFactory
from .normalization import DEFAULT_GRAPH_TITLE, sanitize_string

FALLBACK_NODE_TITLE = "Main Topic"
FALLBACK_DESCRIPTION = (
    "This is a placeholder node created because the AI response couldn't be properly parsed."
)
EMPTY_NODES_DESCRIPTION = "This is a default node created because no nodes were provided."


def placeholder_node(title: str, description: str, ids: Optional[IdFactory] = None) -> PathwayNode:
    ids = ids or IdFactory()
    return PathwayNode(
        id=ids.new_id("node"),
        title=title,
        description=description,
        position=Position(x=0, y=0),
    )


def build_fallback_graph(
    title: Any = None,
    ids: Optional[IdFactory] = None,
    description: str = FALLBACK_DESCRIPTION,
) -> PathwayGraph:
    """Builds the one-node graph used when nothing could be recovered.

    Only literal construction happens here, no parsing.
    """
    supplied = sanitize_string(title).strip() if title is not None else ""
    node = placeholder_node(supplied or FALLBACK_NODE_TITLE, description, ids)
    return PathwayGraph(title=supplied or DEFAULT_GRAPH_TITLE, nodes=[node], edges=[])
