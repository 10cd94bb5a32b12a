"""Recovery of pathway graphs from unreliable generator output."""

from .completion import complete_truncated
from .extraction import find_candidates, strip_code_fences
from .fallback import build_fallback_graph
from .inspection import StructureReport, inspect_structure
from .normalization import normalize_graph, normalize_node, sanitize_string
from .outcome import RecoveryReport
from .recoverer import recover_pathway, recover_pathway_with_report
from .repair import repair_candidate
from .validation import check_integrity, validate_graph

__all__ = [
    "RecoveryReport",
    "StructureReport",
    "build_fallback_graph",
    "check_integrity",
    "complete_truncated",
    "find_candidates",
    "inspect_structure",
    "normalize_graph",
    "normalize_node",
    "recover_pathway",
    "recover_pathway_with_report",
    "repair_candidate",
    "sanitize_string",
    "strip_code_fences",
    "validate_graph",
]
