"""Structural inspection of raw generator output, before any recovery."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .extraction import strip_code_fences

logger = logging.getLogger(__name__)

_CONTEXT_LIMIT = 100


@dataclass
class StructureReport:
    has_error: bool = False
    error_type: Optional[str] = None
    error_context: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "has_error": self.has_error,
            "error_type": self.error_type,
            "error_context": self.error_context,
        }


def _snippet(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)[:_CONTEXT_LIMIT]


def _failed(error_type: str, context: str) -> StructureReport:
    logger.debug("Raw output structure problem: %s", error_type)
    return StructureReport(has_error=True, error_type=error_type, error_context=context)


def inspect_structure(text: str) -> StructureReport:
    """Reports the first structural problem of the raw output, if any.

    Only strict JSON is inspected; nothing is repaired here. The checks run in
    order: title, nodes, node fields, positions, edges, edge fields, edge
    endpoints.
    """
    try:
        payload = json.loads(strip_code_fences(text or "").strip())
    except json.JSONDecodeError as error:
        return _failed("invalid_json", f"{error.msg} at {error.pos}")
    except ValueError as error:
        return _failed("invalid_json", str(error)[:_CONTEXT_LIMIT])
    if not isinstance(payload, dict):
        return _failed("invalid_json", "Top-level value is not an object")

    title = payload.get("title")
    if not isinstance(title, str) or not title:
        return _failed("missing_title", "Response is missing title or title is not a string")

    nodes = payload.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        return _failed("missing_nodes", "No nodes found in the response.")

    for node in nodes:
        if not isinstance(node, dict) or not node.get("id") or not node.get("title"):
            return _failed("invalid_node_structure", f"Node is missing required fields: {_snippet(node)}")
        position = node.get("position")
        if not isinstance(position, dict) or "x" not in position or "y" not in position:
            return _failed("missing_position", f"Node is missing position data: {_snippet(node)}")

    edges = payload.get("edges")
    if len(nodes) > 1 and (not isinstance(edges, list) or not edges):
        return _failed("missing_edges", "Multiple nodes exist but no edges are defined.")

    node_ids = [node["id"] for node in nodes]
    for edge in edges if isinstance(edges, list) else []:
        if (
            not isinstance(edge, dict)
            or not edge.get("id")
            or not edge.get("source")
            or not edge.get("target")
        ):
            return _failed("invalid_edge_structure", f"Edge is missing required fields: {_snippet(edge)}")
        if edge["source"] not in node_ids or edge["target"] not in node_ids:
            return _failed("invalid_edge_reference", f"Edge references non-existent node: {_snippet(edge)}")

    return StructureReport()
