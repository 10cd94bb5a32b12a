"""Truncation completion for pathway JSON cut off by output-length limits."""

import logging
from typing import Callable, List, Optional, Tuple

from .outcome import COMPLETION_FAILED, StageResult
from .repair import parse_json, repair_aggressive
from .scanner import count_unbalanced, scan_brackets

logger = logging.getLogger(__name__)

# Node-level list fields; a truncated one is closed after its last whole element.
LIST_FIELDS = frozenset(
    {
        "topics",
        "questions",
        "resources",
        "equations",
        "codeExamples",
        "pyqs",
        "keyConcepts",
        "references",
        "applications",
        "commonMistakes",
        "mnemonics",
    }
)
ROOT_ARRAYS = ("nodes", "edges")

_CLOSER_FOR = {"{": "}", "[": "]"}


def needs_completion(text: str) -> bool:
    braces, brackets = count_unbalanced(text)
    return braces != 0 or brackets != 0 or scan_brackets(text).in_string


def complete_schema(text: str) -> Optional[str]:
    """Completes a truncated pathway object with the smallest schema-consistent suffix.

    The innermost open list field (or, when none is open, the innermost
    container) is cut back to its last complete element; every open container
    is closed and the root object gets empty ``nodes``/``edges`` arrays when it
    never reached them. A string value dangling directly in the root object,
    such as a partial ``description``, is closed in place instead of dropped.
    """
    scan = scan_brackets(text)
    frames = scan.frames
    if scan.mismatched or not frames or frames[0].opener != "{":
        return None

    root = frames[0]
    if scan.in_string and len(frames) == 1 and not scan.string_is_key:
        head = text + '"'
        root.commit(len(head))
        cut_index = 0
    else:
        cut_index = len(frames) - 1
        for index in range(len(frames) - 1, 0, -1):
            frame = frames[index]
            if frame.opener == "[" and frame.key in LIST_FIELDS:
                cut_index = index
                break
        cut = frames[cut_index]
        # a list element object with no complete member is dropped, not closed as {}
        if (
            cut_index > 0
            and cut.opener == "{"
            and not cut.members
            and frames[cut_index - 1].opener == "["
        ):
            cut_index -= 1
        head = text[:frames[cut_index].safe]

    pieces: List[str] = [head.rstrip()]
    for frame in reversed(frames[1:cut_index + 1]):
        pieces.append(_CLOSER_FOR[frame.opener])

    root_keys = list(root.members)
    if cut_index >= 1 and frames[1].key:
        root_keys.append(frames[1].key)
    for key in ROOT_ARRAYS:
        if key in root_keys:
            continue
        separator = "" if "".join(pieces).rstrip().endswith("{") else ", "
        pieces.append(f'{separator}"{key}": []')
    pieces.append("}")
    return "".join(pieces)


def balance_brackets(text: str) -> Optional[str]:
    """Appends the missing closers in nesting order after tidying a dangling tail."""
    scan = scan_brackets(text)
    if scan.mismatched:
        return None
    completed = text + '"' if scan.in_string else text
    completed = completed.rstrip()
    if completed.endswith(","):
        completed = completed[:-1]
    elif completed.endswith(":"):
        completed += " null"
    closers = "".join(_CLOSER_FOR[frame.opener] for frame in reversed(scan.frames))
    return completed + closers


COMPLETION_STRATEGIES: Tuple[Tuple[str, Callable[[str], Optional[str]]], ...] = (
    ("completion_schema", complete_schema),
    ("completion_balance", balance_brackets),
)


def complete_with(strategy: Callable[[str], Optional[str]], text: str) -> StageResult:
    """Applies one strategy and returns the completed text only if it parses."""
    completed = strategy(text)
    if completed is None:
        return "", COMPLETION_FAILED
    for attempt in (completed, repair_aggressive(completed)):
        _, error = parse_json(attempt)
        if not error:
            return attempt, ""
    return "", COMPLETION_FAILED


def complete_truncated(text: str) -> StageResult:
    """Returns parseable completed text for a truncated candidate, or a failure."""
    if not needs_completion(text):
        return "", COMPLETION_FAILED
    for strategy_name, strategy in COMPLETION_STRATEGIES:
        completed, error = complete_with(strategy, text)
        if not error:
            logger.debug("Truncated candidate completed by %s", strategy_name)
            return completed, ""
    return "", COMPLETION_FAILED
