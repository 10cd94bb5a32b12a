"""Recovery ladder: turn arbitrary generator text into a valid pathway graph."""

import logging
from typing import Any, Optional, Tuple

from ..graph_model import PathwayGraph
from ..graph_orchestrator import IdFactory
from .completion import COMPLETION_STRATEGIES, complete_with, needs_completion
from .extraction import find_candidates, parse_direct, strip_code_fences
from .fallback import build_fallback_graph
from .normalization import DEFAULT_GRAPH_TITLE, normalize_graph
from .outcome import (
    COMPLETION_FAILED,
    EXTRACTION_EMPTY,
    STRUCTURALLY_INVALID,
    RecoveryReport,
    is_recognized,
)
from .repair import REPAIR_PASSES, parse_json, repair_light, repair_with_library
from .validation import check_integrity

logger = logging.getLogger(__name__)


def _as_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    return ""


def _recover_candidate(candidate: str) -> Tuple[Any, str, str]:
    """Returns (payload, strategy, error) for one candidate."""
    error = ""
    for pass_name, repair in REPAIR_PASSES:
        payload, error = parse_json(repair(candidate))
        if not error:
            return payload, pass_name, ""

    repaired = repair_light(candidate)
    if needs_completion(repaired):
        for strategy_name, strategy in COMPLETION_STRATEGIES:
            completed, completion_error = complete_with(strategy, repaired)
            if completion_error:
                continue
            payload, parse_error = parse_json(completed)
            if not parse_error:
                return payload, strategy_name, ""
        error = COMPLETION_FAILED

    payload, library_error = repair_with_library(candidate)
    if not library_error:
        return payload, "repair_json", ""
    return None, "", error


def recover_payload(text: str, report: Optional[RecoveryReport] = None) -> Optional[Any]:
    """Runs extraction, repair and completion; returns the parsed payload or None."""
    report = report if report is not None else RecoveryReport()
    cleaned = strip_code_fences(text)
    if not cleaned.strip():
        report.record_failure(EXTRACTION_EMPTY)
        return None

    payload, error = parse_direct(cleaned)
    if not error:
        report.strategy = "direct"
        return payload
    report.record_failure(error)

    candidates = find_candidates(cleaned, include_truncated=True)
    report.candidate_count = len(candidates)
    if not candidates:
        report.record_failure(EXTRACTION_EMPTY)
        return None

    for index, candidate in enumerate(candidates):
        payload, strategy, error = _recover_candidate(candidate)
        if error:
            logger.debug("Candidate %d/%d failed: %s", index + 1, len(candidates), error)
            report.record_failure(error)
            continue
        if not is_recognized(payload):
            logger.debug("Candidate %d/%d parsed but is not a pathway", index + 1, len(candidates))
            report.record_failure(STRUCTURALLY_INVALID)
            continue
        report.strategy = strategy
        report.candidate_index = index
        return payload
    return None


def recover_pathway_with_report(
    raw: Any,
    topic: Optional[str] = None,
    seed: Optional[int] = None,
) -> Tuple[PathwayGraph, RecoveryReport]:
    """Recovers a pathway graph and reports how it was obtained.

    Never raises: any unexpected fault ends in the fallback graph.
    """
    ids = IdFactory(seed)
    report = RecoveryReport()
    default_title = topic.strip() if isinstance(topic, str) and topic.strip() else DEFAULT_GRAPH_TITLE
    try:
        payload = recover_payload(_as_text(raw), report)
        if payload is None:
            logger.warning(
                "No pathway could be recovered (%s); using fallback graph",
                ", ".join(report.failures) or "no input",
            )
            report.used_fallback = True
            report.strategy = "fallback"
            return build_fallback_graph(topic, ids), report

        graph = normalize_graph(payload, ids, default_title=default_title)
        graph, stats = check_integrity(graph, ids)
        report.dropped_edges = stats["dropped_edges"]
        report.synthesized_edges = stats["synthesized_edges"]
        logger.info(
            "Recovered pathway %r via %s: %d nodes, %d edges",
            graph.title,
            report.strategy,
            len(graph.nodes),
            len(graph.edges),
        )
        return graph, report
    except Exception:
        logger.exception("Pathway recovery failed unexpectedly; using fallback graph")
        report.used_fallback = True
        report.strategy = "fallback"
        return build_fallback_graph(topic, IdFactory(seed)), report


def recover_pathway(
    raw: Any,
    topic: Optional[str] = None,
    seed: Optional[int] = None,
) -> PathwayGraph:
    graph, _ = recover_pathway_with_report(raw, topic=topic, seed=seed)
    return graph
