"""Candidate extraction: locate JSON-like objects inside free-form text."""

import json
import logging
import re
from typing import List, Optional, Tuple

from .outcome import EXTRACTION_EMPTY, JSON_DECODE_ERROR, STRUCTURALLY_INVALID, StageResult, is_recognized
from .scanner import string_end

logger = logging.getLogger(__name__)

_FENCE_MARKER_RE = re.compile(r"```[A-Za-z0-9_+\-]*")
_GREEDY_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(text: str) -> str:
    """Drops ``` fence markers and their language tags, keeping fenced content.

    Markers inside double-quoted strings are content (a code example, say) and
    are left alone.
    """
    parts: List[str] = []
    n = len(text)
    i = 0
    start = 0
    while i < n:
        if text[i] == '"':
            parts.append(_FENCE_MARKER_RE.sub("", text[start:i]))
            end = string_end(text, i, '"')
            parts.append(text[i:end])
            i = start = end
            continue
        i += 1
    parts.append(_FENCE_MARKER_RE.sub("", text[start:]))
    return "".join(parts)


def parse_direct(text: str) -> StageResult:
    stripped = text.strip()
    if not stripped:
        return None, EXTRACTION_EMPTY
    try:
        payload = json.loads(stripped)
    except json.JSONDecodeError as error:
        return None, f"{JSON_DECODE_ERROR}: {error.msg}"
    except ValueError as error:
        # e.g. integers past the interpreter's digit limit
        return None, f"{JSON_DECODE_ERROR}: {error}"
    if not is_recognized(payload):
        return None, STRUCTURALLY_INVALID
    return payload, ""


def _scan_objects(text: str) -> Tuple[List[Tuple[int, str]], Optional[Tuple[int, str]]]:
    """Returns balanced top-level objects and the unclosed trailing object, if any.

    String literals are only tracked inside an object, so quotes in surrounding
    prose do not shift the scan.
    """
    objects: List[Tuple[int, str]] = []
    n = len(text)
    depth = 0
    start = -1
    in_string = False
    i = 0
    while i < n:
        ch = text[i]
        if depth == 0:
            if ch == "{":
                depth = 1
                start = i
            i += 1
            continue
        if in_string:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                objects.append((start, text[start:i + 1]))
        i += 1
    tail = (start, text[start:]) if depth > 0 else None
    return objects, tail


def find_candidates(text: str, include_truncated: bool = False) -> List[str]:
    """Collects brace-delimited candidates, longest first.

    Candidates are the greedy span from the first "{" to the last "}" plus
    every balanced top-level object. With ``include_truncated`` the trailing
    object that never closes is added as well. Equal lengths keep scan order.
    """
    found: List[Tuple[int, str]] = []
    greedy = _GREEDY_OBJECT_RE.search(text)
    if greedy:
        found.append((greedy.start(), greedy.group(0)))

    objects, tail = _scan_objects(text)
    found.extend(objects)
    if include_truncated and tail is not None:
        found.append(tail)

    found.sort(key=lambda item: (-len(item[1]), item[0]))
    candidates = list(dict.fromkeys(candidate for _, candidate in found))
    logger.debug("Found %d candidate(s) in %d chars of text", len(candidates), len(text))
    return candidates
