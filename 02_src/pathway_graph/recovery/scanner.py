"""String-aware scanning helpers shared by the repair and completion stages."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

CODE = "code"
STRING = "string"
SQ_STRING = "sq_string"
COMMENT = "comment"

_CLOSERS = {"}": "{", "]": "["}
_OPENERS = {"{": "}", "[": "]"}


def string_end(text: str, start: int, quote: str) -> int:
    """Index just past the closing quote, or len(text) for an unterminated string."""
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return n


def string_terminated(chunk: str) -> bool:
    """True when a string literal run (quote included) has its closing quote."""
    if len(chunk) < 2:
        return False
    quote = chunk[0]
    i = 1
    n = len(chunk)
    while i < n:
        ch = chunk[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i == n - 1
        i += 1
    return False


def split_segments(text: str) -> List[Tuple[str, str]]:
    """Splits JSON-like text into code, string, single-quoted string and comment runs.

    Strings may be unterminated at the end of ``text``; the final run then
    extends to the end.
    """
    segments: List[Tuple[str, str]] = []
    n = len(text)
    i = 0
    code_start = 0

    def flush_code(end: int) -> None:
        if end > code_start:
            segments.append((CODE, text[code_start:end]))

    while i < n:
        ch = text[i]
        if ch == '"' or ch == "'":
            flush_code(i)
            end = string_end(text, i, ch)
            segments.append((STRING if ch == '"' else SQ_STRING, text[i:end]))
            i = code_start = end
            continue
        if ch == "/" and text.startswith("/*", i):
            flush_code(i)
            close = text.find("*/", i + 2)
            end = n if close == -1 else close + 2
            segments.append((COMMENT, text[i:end]))
            i = code_start = end
            continue
        if (ch == "/" and text.startswith("//", i)) or ch == "#":
            flush_code(i)
            newline = text.find("\n", i)
            end = n if newline == -1 else newline
            segments.append((COMMENT, text[i:end]))
            i = code_start = end
            continue
        i += 1
    flush_code(n)
    return segments


@dataclass
class Frame:
    """One open container met while scanning."""

    opener: str
    start: int
    key: Optional[str]
    safe: int
    members: List[str] = field(default_factory=list)
    pending_key: Optional[str] = None
    expect_value: bool = False

    def commit(self, position: int) -> None:
        self.safe = position
        if self.opener == "{" and self.expect_value and self.pending_key is not None:
            self.members.append(self.pending_key)
            self.pending_key = None
        self.expect_value = False


@dataclass
class BracketScan:
    frames: List[Frame] = field(default_factory=list)
    in_string: bool = False
    string_start: int = -1
    string_is_key: bool = False
    mismatched: bool = False


def scan_brackets(text: str) -> BracketScan:
    """Tracks open containers of double-quoted JSON-like text.

    Each frame records the key it is the value of, the keys of its completed
    members and ``safe``: the cut position right after its last complete member.
    Scanning stops at the first closer that does not match the innermost opener.
    """
    scan = BracketScan()
    frames = scan.frames
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        if scan.in_string:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                scan.in_string = False
                if frames:
                    top = frames[-1]
                    if scan.string_is_key:
                        top.pending_key = text[scan.string_start + 1:i]
                    else:
                        top.commit(i + 1)
            i += 1
            continue

        if ch == '"':
            scan.in_string = True
            scan.string_start = i
            top = frames[-1] if frames else None
            scan.string_is_key = bool(top and top.opener == "{" and not top.expect_value)
        elif ch in _OPENERS:
            key = None
            if frames and frames[-1].opener == "{":
                key = frames[-1].pending_key
            frames.append(Frame(opener=ch, start=i, key=key, safe=i + 1))
        elif ch in _CLOSERS:
            if not frames or frames[-1].opener != _CLOSERS[ch]:
                scan.mismatched = True
                break
            frames.pop()
            if frames:
                frames[-1].commit(i + 1)
        elif ch == ":":
            if frames and frames[-1].opener == "{":
                frames[-1].expect_value = True
        elif ch == ",":
            if frames:
                frames[-1].commit(i)
        i += 1
    return scan


def count_unbalanced(text: str) -> Tuple[int, int]:
    """Returns (missing "}", missing "]") counted outside string literals."""
    braces = 0
    brackets = 0
    for kind, chunk in split_segments(text):
        if kind != CODE:
            continue
        braces += chunk.count("{") - chunk.count("}")
        brackets += chunk.count("[") - chunk.count("]")
    return braces, brackets
