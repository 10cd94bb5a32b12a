"""Failure codes and the per-call recovery report."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

EXTRACTION_EMPTY = "extraction_empty"
JSON_DECODE_ERROR = "json_decode_error"
SYNTAX_UNREPAIRABLE = "syntax_unrepairable"
COMPLETION_FAILED = "completion_failed"
STRUCTURALLY_INVALID = "structurally_invalid"

# Every stage returns (value, error); an empty error string means success.
StageResult = Tuple[Any, str]

RECOGNIZED_KEYS = ("title", "nodes", "edges", "outline")


def is_recognized(payload: Any) -> bool:
    """True when a parsed value looks like a pathway payload."""
    if not isinstance(payload, dict):
        return False
    return any(payload.get(key) for key in RECOGNIZED_KEYS)


def failure_code(error: str) -> str:
    return error.split(":", 1)[0]


@dataclass
class RecoveryReport:
    strategy: str = "fallback"
    candidate_count: int = 0
    candidate_index: Optional[int] = None
    failures: List[str] = field(default_factory=list)
    dropped_edges: int = 0
    synthesized_edges: int = 0
    used_fallback: bool = False

    def record_failure(self, error: str) -> None:
        self.failures.append(failure_code(error))

    def to_json(self) -> dict:
        return {
            "strategy": self.strategy,
            "candidate_count": self.candidate_count,
            "candidate_index": self.candidate_index,
            "failures": list(self.failures),
            "dropped_edges": self.dropped_edges,
            "synthesized_edges": self.synthesized_edges,
            "used_fallback": self.used_fallback,
        }
