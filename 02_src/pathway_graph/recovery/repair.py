"""Syntax repair passes, ordered from least to most destructive."""

import json
import logging
import re
from typing import Callable, List, Tuple

from json_repair import repair_json

from .outcome import SYNTAX_UNREPAIRABLE, StageResult
from .scanner import CODE, COMMENT, SQ_STRING, STRING, split_segments, string_terminated

logger = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][\w$\-]*)(\s*:)")
_MISSING_COMMA_RE = re.compile(r"([}\]])(\s*)([{\[])")
_PY_LITERALS = {"True": "true", "False": "false", "None": "null"}
_PY_LITERAL_RE = re.compile(r"\b(True|False|None)\b")
_WHITESPACE_RE = re.compile(r"\s+")
_ESCAPE_RE = re.compile(r"\\(.?)", re.DOTALL)
_VALID_ESCAPES = set('"\\/bfnrtu')


def _requote(chunk: str) -> str:
    """Turns a single-quoted string literal into a double-quoted one."""
    terminated = string_terminated(chunk)
    inner = chunk[1:-1] if terminated else chunk[1:]
    inner = inner.replace("\\'", "'")
    inner = re.sub(r'(?<!\\)"', '\\"', inner)
    return '"' + inner + ('"' if terminated else "")


def _drop_comments_and_requote(text: str) -> str:
    parts: List[str] = []
    for kind, chunk in split_segments(text):
        if kind == COMMENT:
            continue
        parts.append(_requote(chunk) if kind == SQ_STRING else chunk)
    return "".join(parts)


def _fix_code(chunk: str) -> str:
    chunk = _TRAILING_COMMA_RE.sub(r"\1", chunk)
    return _BARE_KEY_RE.sub(r'\1"\2"\3', chunk)


def _fix_code_aggressive(chunk: str) -> str:
    chunk = _PY_LITERAL_RE.sub(lambda match: _PY_LITERALS[match.group(1)], chunk)
    chunk = _MISSING_COMMA_RE.sub(r"\1,\2\3", chunk)
    return _fix_code(chunk)


def _fix_escapes(chunk: str) -> str:
    def double_invalid(match: "re.Match[str]") -> str:
        escaped = match.group(1)
        if escaped and escaped in _VALID_ESCAPES:
            return match.group(0)
        return "\\\\" + escaped

    return _ESCAPE_RE.sub(double_invalid, chunk)


def repair_light(text: str) -> str:
    """Removes comments and trailing commas, quotes bare keys and single-quoted strings."""
    text = _drop_comments_and_requote(text)
    return "".join(
        _fix_code(chunk) if kind == CODE else chunk for kind, chunk in split_segments(text)
    )


def repair_aggressive(text: str) -> str:
    """Light fixes plus whitespace collapsing, Python literals and invalid escapes.

    Newlines and tabs inside string values are collapsed too, which loses
    formatting but removes raw control characters that strict JSON rejects.
    """
    text = _drop_comments_and_requote(text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    parts: List[str] = []
    for kind, chunk in split_segments(text):
        if kind == CODE:
            parts.append(_fix_code_aggressive(chunk))
        elif kind == STRING:
            parts.append(_fix_escapes(chunk))
        else:
            parts.append(chunk)
    return "".join(parts)


REPAIR_PASSES: Tuple[Tuple[str, Callable[[str], str]], ...] = (
    ("repair_light", repair_light),
    ("repair_aggressive", repair_aggressive),
)


def parse_json(text: str) -> StageResult:
    try:
        return json.loads(text), ""
    except json.JSONDecodeError as error:
        return None, f"{SYNTAX_UNREPAIRABLE}: {error.msg} at {error.pos}"
    except ValueError as error:
        return None, f"{SYNTAX_UNREPAIRABLE}: {error}"


def repair_with_library(candidate: str) -> StageResult:
    """Last syntax rung: let json_repair rebuild the candidate, then reparse it.

    json_repair turns hopeless input into an empty value rather than raising;
    callers still check that the result is a pathway.
    """
    try:
        repaired = repair_json(candidate)
    except ValueError as error:
        return None, f"{SYNTAX_UNREPAIRABLE}: {error}"
    return parse_json(repaired)


def repair_candidate(candidate: str) -> StageResult:
    """Runs the repair passes in order and returns the first successful parse."""
    error = SYNTAX_UNREPAIRABLE
    for pass_name, repair in REPAIR_PASSES:
        payload, error = parse_json(repair(candidate))
        if not error:
            logger.debug("Candidate parsed after %s", pass_name)
            return payload, ""
        logger.debug("%s failed: %s", pass_name, error)
    return None, error
