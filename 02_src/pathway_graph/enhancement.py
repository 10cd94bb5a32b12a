"""Enhancement of a single pathway node with extra generated content."""

import logging
import re
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from .graph_model import PathwayNode
from .graph_orchestrator import IdFactory
from .recovery.normalization import DEFAULT_RESOURCE_TITLE, normalize_node
from .recovery.repair import repair_candidate, repair_with_library

logger = logging.getLogger(__name__)

# enhance type -> (wire key, PathwayNode attribute)
ENHANCE_TYPES: Dict[str, Tuple[str, str]] = {
    "questions": ("questions", "questions"),
    "resources": ("resources", "resources"),
    "equations": ("equations", "equations"),
    "codeExamples": ("codeExamples", "code_examples"),
}

_FENCED_RE = re.compile(r"```(?:json)?([\s\S]*?)```")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_CODE_BLOCK_RE = re.compile(r"```(?:\w+)?\s*([\s\S]*?)```")
_URL_RE = re.compile(r"https?://\S+")
_NUMBERING_RE = re.compile(r"^\d+\.\s*")
_PARAGRAPH_RE = re.compile(r"\n\s*\n")


def _check_type(enhance_type: str) -> None:
    if enhance_type not in ENHANCE_TYPES:
        raise ValueError(
            f"Invalid enhancement type: {enhance_type!r}; expected one of {', '.join(ENHANCE_TYPES)}"
        )


def enhancement_prompt(node: PathwayNode, enhance_type: str) -> str:
    _check_type(enhance_type)
    details = f"\n\n{node.description}" if node.description else ""
    if enhance_type == "questions":
        return (
            "Generate 3-5 relevant previous year exam or interview questions related to: "
            f'"{node.title}"{details}'
        )
    if enhance_type == "resources":
        return (
            f'Suggest 3-5 high-quality learning resources (articles, videos, books) for: "{node.title}"\n\n'
            "Provide title and URL for each resource. Return as JSON array with format: "
            '[{"title": "Resource name", "url": "https://example.com"}]'
        )
    if enhance_type == "equations":
        return f'Generate 2-3 relevant mathematical equations or formulas related to: "{node.title}"{details}'
    return f'Generate 2-3 code examples related to: "{node.title}"{details}'


def _resource_lines(text: str) -> List[Dict[str, str]]:
    resources: List[Dict[str, str]] = []
    for line in text.splitlines():
        if not line.strip() or ("http" not in line and "www" not in line):
            continue
        match = _URL_RE.search(line)
        url = match.group(0) if match else ""
        title = line.replace(url, "") if url else line
        title = _NUMBERING_RE.sub("", title.strip()).strip(" \t-:*")
        resources.append({"title": title or DEFAULT_RESOURCE_TITLE, "url": url})
    return resources


def _parse_resources(text: str) -> List[Any]:
    fenced = _FENCED_RE.search(text)
    array = fenced.group(1).strip() if fenced else ""
    if not array:
        match = _ARRAY_RE.search(text)
        array = match.group(0) if match else ""

    if array:
        payload, error = repair_candidate(array)
        if error:
            payload, error = repair_with_library(array)
        if not error and isinstance(payload, list):
            return payload
        logger.debug("Resource array could not be parsed (%s); scanning lines for URLs", error or "not a list")
    return _resource_lines(text)


def _parse_code(text: str) -> List[str]:
    blocks = [block.strip() for block in _CODE_BLOCK_RE.findall(text)]
    if blocks:
        return blocks
    return [block.strip() for block in _PARAGRAPH_RE.split(text) if block.strip()]


def _parse_lines(text: str) -> List[str]:
    return [_NUMBERING_RE.sub("", line.strip()).strip() for line in text.splitlines() if line.strip()]


def parse_enhancement(text: str, enhance_type: str) -> List[Any]:
    """Splits a generated enhancement answer into raw list items."""
    _check_type(enhance_type)
    text = text or ""
    if enhance_type == "resources":
        items = _parse_resources(text)
    elif enhance_type == "codeExamples":
        items = _parse_code(text)
    else:
        items = _parse_lines(text)
    logger.debug("Parsed %d %s item(s)", len(items), enhance_type)
    return items


def enhance_node(
    node: PathwayNode,
    text: str,
    enhance_type: str,
    ids: Optional[IdFactory] = None,
) -> PathwayNode:
    """Returns a copy of ``node`` with the parsed items appended to the chosen field.

    Items are normalized like any node field; values the node already holds
    are not added twice.
    """
    _check_type(enhance_type)
    wire_key, attribute = ENHANCE_TYPES[enhance_type]
    items = parse_enhancement(text, enhance_type)
    normalized = normalize_node({"id": node.id, "title": node.title, wire_key: items}, ids=ids)

    merged = list(getattr(node, attribute))
    for item in getattr(normalized, attribute):
        if item not in merged:
            merged.append(item)
    logger.info(
        "Enhanced node %s: %d new %s item(s)",
        node.id,
        len(merged) - len(getattr(node, attribute)),
        enhance_type,
    )
    return replace(node, **{attribute: merged})
