"""Field normalization: coerce parsed pathway payloads into typed records."""

import json
import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional

from ..graph_model import (
    ExpandableContent,
    PathwayEdge,
    PathwayGraph,
    PathwayNode,
    Position,
    Reference,
    ReferenceItem,
    Resource,
)
from ..graph_orchestrator import IdFactory

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_TITLE = "Learning Pathway"
DEFAULT_NODE_TITLE = "Untitled Node"
DEFAULT_RESOURCE_TITLE = "Resource"

_ESCAPE_TOKEN_RE = re.compile(r'\\\\|\\"|\\|"')


def _escape_token(match: "re.Match[str]") -> str:
    token = match.group(0)
    if token == "\\":
        return "\\\\"
    if token == '"':
        return '\\"'
    return token


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def sanitize_string(value: Any) -> str:
    """Escapes backslashes and double quotes for storage.

    Already escaped pairs (a backslash followed by a backslash or a quote) are
    kept as they are, so sanitizing twice gives the same string.
    """
    if value is None:
        return ""
    return _ESCAPE_TOKEN_RE.sub(_escape_token, _stringify(value))


def sanitize_code(value: Any) -> str:
    return sanitize_string(value).replace("\t", "    ").replace("\r", "")


def ensure_list(value: Any) -> List[Any]:
    if value is None or value == "" or value == {}:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def string_list(value: Any, sanitize: Callable[[Any], str] = sanitize_string) -> List[str]:
    return [sanitize(item) for item in ensure_list(value) if item is not None]


def _first(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _identifier(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        text = str(value).strip()
        return text or None
    return None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, (int, float)):
        return value == 1
    return False


def layout_seed(index: int) -> Position:
    return Position(x=index * 200, y=(index // 5) * 200)


def normalize_position(value: Any, index: int) -> Position:
    seed = layout_seed(index)
    if not isinstance(value, dict):
        return seed
    x = _number(value.get("x"))
    y = _number(value.get("y"))
    return Position(x=seed.x if x is None else x, y=seed.y if y is None else y)


def normalize_resources(value: Any) -> List[Resource]:
    resources: List[Resource] = []
    for item in ensure_list(value):
        if isinstance(item, dict):
            url = sanitize_string(_first(item, "url", "link", "href"))
            title = sanitize_string(_first(item, "title", "name"))
        elif isinstance(item, str):
            looks_like_url = "http" in item or "www" in item
            url = sanitize_string(item) if looks_like_url else ""
            title = sanitize_string(item)
        else:
            continue
        resources.append(Resource(title=title or url or DEFAULT_RESOURCE_TITLE, url=url))
    return resources


def normalize_references(value: Any) -> List[ReferenceItem]:
    references: List[ReferenceItem] = []
    for item in ensure_list(value):
        if item is None:
            continue
        if isinstance(item, dict):
            kind = item.get("type")
            references.append(
                Reference(
                    title=sanitize_string(_first(item, "title", "name", "text")),
                    url=sanitize_string(_first(item, "url", "link")),
                    type=sanitize_string(kind) if isinstance(kind, str) else None,
                )
            )
        else:
            references.append(sanitize_string(item))
    return references


def normalize_expandable(value: Any) -> Optional[ExpandableContent]:
    if isinstance(value, str) and value:
        return ExpandableContent(detailed_explanation=sanitize_string(value))
    if not isinstance(value, dict) or not value:
        return None
    return ExpandableContent(
        detailed_explanation=sanitize_string(
            _first(value, "detailedExplanation", "detailed_explanation")
        ),
        applications=string_list(value.get("applications")),
        common_mistakes=string_list(_first(value, "commonMistakes", "common_mistakes")),
        mnemonics=string_list(value.get("mnemonics")),
    )


def normalize_node(
    payload: Any,
    index: int = 0,
    ids: Optional[IdFactory] = None,
) -> PathwayNode:
    """Coerces one node-shaped value into a fully typed ``PathwayNode``.

    Also used on its own when a single existing node is enhanced.
    """
    ids = ids or IdFactory()
    if isinstance(payload, str) and payload.strip():
        payload = {"title": payload}
    if not isinstance(payload, dict):
        payload = {}

    node_id = _identifier(payload.get("id"))
    if node_id is None:
        node_id = ids.new_id("node")
    else:
        ids.reserve(node_id)

    title = payload.get("title")
    if title is None or (isinstance(title, str) and not title.strip()):
        title = DEFAULT_NODE_TITLE

    return PathwayNode(
        id=node_id,
        parent_id=_identifier(_first(payload, "parentId", "parent_id")),
        title=sanitize_string(title),
        description=sanitize_string(payload.get("description")),
        position=normalize_position(payload.get("position"), index),
        topics=string_list(payload.get("topics")),
        questions=string_list(payload.get("questions")),
        resources=normalize_resources(payload.get("resources")),
        equations=string_list(payload.get("equations")),
        code_examples=string_list(_first(payload, "codeExamples", "code_examples"), sanitize_code),
        pyqs=normalize_references(payload.get("pyqs")),
        key_concepts=normalize_references(_first(payload, "keyConcepts", "key_concepts")),
        references=normalize_references(payload.get("references")),
        expandable_content=normalize_expandable(
            _first(payload, "expandableContent", "expandable_content")
        ),
    )


def normalize_edge(payload: Any, ids: Optional[IdFactory] = None) -> Optional[PathwayEdge]:
    ids = ids or IdFactory()
    if not isinstance(payload, dict):
        return None

    edge_id = _identifier(payload.get("id"))
    if edge_id is None:
        edge_id = ids.new_id("edge")
    else:
        ids.reserve(edge_id)

    label = payload.get("label")
    return PathwayEdge(
        id=edge_id,
        source=_identifier(payload.get("source")) or "",
        target=_identifier(payload.get("target")) or "",
        label=sanitize_string(label) if label not in (None, "") else None,
        animated=_boolean(payload.get("animated")),
    )


def outline_to_payload(payload: Dict[str, Any], ids: IdFactory) -> Dict[str, Any]:
    """Converts an ``outline`` tree into flat node and edge payloads.

    Children are placed one column to the right of their parent and linked to
    it by an edge.
    """
    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []

    def visit(item: Any, parent_id: Optional[str], level: int, index: int) -> Optional[str]:
        if not isinstance(item, dict):
            return None
        node_id = _identifier(item.get("id")) or ids.new_id("node")
        description = _stringify(item.get("description") or "")
        topics: List[Any] = []
        objectives = item.get("learning_objectives")
        if isinstance(objectives, list) and objectives:
            bullets = "\n".join(f"- {_stringify(objective)}" for objective in objectives)
            description += "\n\nLearning Objectives:\n" + bullets
            topics = list(objectives)
        activities = item.get("activities")

        node: Dict[str, Any] = {
            "id": node_id,
            "parentId": parent_id,
            "title": item.get("title"),
            "description": description,
            "topics": topics,
            "questions": list(activities) if isinstance(activities, list) else [],
            "resources": item.get("resources") or [],
            "equations": item.get("equations") or [],
            "codeExamples": item.get("codeExamples") or [],
            "pyqs": item.get("pyqs") or [],
            "references": item.get("references") or [],
            "keyConcepts": item.get("keyConcepts") or [],
            "position": {"x": level * 300, "y": index * 200},
        }
        expandable_keys = ("detailedExplanation", "applications", "commonMistakes", "mnemonics")
        if any(key in item for key in expandable_keys):
            node["expandableContent"] = {key: item.get(key) for key in expandable_keys}
        nodes.append(node)

        children = item.get("children")
        for child_index, child in enumerate(children if isinstance(children, list) else []):
            child_id = visit(child, node_id, level + 1, child_index)
            if child_id:
                edges.append(
                    {"id": ids.new_id("edge"), "source": node_id, "target": child_id, "animated": False}
                )
        return node_id

    for index, item in enumerate(ensure_list(payload.get("outline"))):
        visit(item, None, 0, index)
    return {"title": payload.get("title"), "nodes": nodes, "edges": edges}


def _reserve_explicit_ids(items: List[Any], ids: IdFactory) -> None:
    for item in items:
        if isinstance(item, dict):
            explicit = _identifier(item.get("id"))
            if explicit:
                ids.reserve(explicit)


def _node_items(value: Any) -> List[Any]:
    if isinstance(value, dict):
        return [value]
    return [item for item in ensure_list(value) if item is not None]


def normalize_graph(
    payload: Any,
    ids: Optional[IdFactory] = None,
    default_title: str = DEFAULT_GRAPH_TITLE,
) -> PathwayGraph:
    """Coerces a parsed payload into a ``PathwayGraph`` with typed fields.

    Referential integrity is not checked here; see ``validation``.
    """
    ids = ids or IdFactory()
    if not isinstance(payload, dict):
        payload = {}
    if payload.get("outline") and not isinstance(payload.get("nodes"), list):
        logger.debug("Converting outline payload to nodes and edges")
        payload = outline_to_payload(payload, ids)

    title = payload.get("title")
    if title is None or (isinstance(title, str) and not title.strip()):
        title = default_title

    raw_nodes = _node_items(payload.get("nodes"))
    raw_edges = ensure_list(payload.get("edges"))
    _reserve_explicit_ids(raw_nodes, ids)
    _reserve_explicit_ids(raw_edges, ids)

    nodes = [normalize_node(item, index, ids) for index, item in enumerate(raw_nodes)]
    edges: List[PathwayEdge] = []
    for item in raw_edges:
        edge = normalize_edge(item, ids)
        if edge is None:
            logger.debug("Skipping non-object edge entry: %r", item)
            continue
        edges.append(edge)
    return PathwayGraph(title=sanitize_string(title), nodes=nodes, edges=edges)
