"""Validation and QA phase."""

import logging
from typing import Any, Dict, List

from ..pipeline import PipelinePhase
from ..recovery import inspect_structure

logger = logging.getLogger(__name__)


class ValidationAndQAPhase(PipelinePhase):
    phase_name = "validation"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        graph_payload = context["graph"].to_json()
        recovery_report = context.get("recovery_report", {})
        raw_structure = inspect_structure(str(context.get("raw_text") or ""))

        warnings: List[str] = []
        if recovery_report.get("used_fallback"):
            warnings.append("Raw output could not be recovered; fallback graph used.")
        if raw_structure.has_error:
            warnings.append(f"Raw output structure: {raw_structure.error_type}")
        if recovery_report.get("dropped_edges"):
            warnings.append(f"Dropped {recovery_report['dropped_edges']} edge(s) with unknown endpoints.")
        if recovery_report.get("synthesized_edges"):
            warnings.append(f"Synthesized {recovery_report['synthesized_edges']} chain edge(s).")
        for warning in warnings:
            logger.warning(warning)

        qa_report = {
            "node_count": len(graph_payload["nodes"]),
            "edge_count": len(graph_payload["edges"]),
            "used_fallback": bool(recovery_report.get("used_fallback")),
            "dropped_edges": recovery_report.get("dropped_edges", 0),
            "synthesized_edges": recovery_report.get("synthesized_edges", 0),
            "raw_structure": raw_structure.to_json(),
            "warnings": warnings,
        }
        return {"validation_report": qa_report}
