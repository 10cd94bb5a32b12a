"""Recovery phase: raw generator text to a validated pathway graph."""

import logging
from typing import Any, Dict, Optional

from ..graph_orchestrator import IdFactory, reassign_ids
from ..pipeline import PipelinePhase
from ..recovery import recover_pathway_with_report

logger = logging.getLogger(__name__)


class PathwayRecoveryPhase(PipelinePhase):
    phase_name = "recovery"

    def __init__(self, seed: Optional[int] = None, reassign: bool = False) -> None:
        self._seed = seed
        self._reassign = reassign

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        graph, report = recover_pathway_with_report(
            context.get("raw_text", ""),
            topic=context.get("topic") or None,
            seed=self._seed,
        )
        if self._reassign:
            seed = None if self._seed is None else self._seed + 1
            graph = reassign_ids(graph, IdFactory(seed))
            logger.debug("Reassigned ids for %d nodes and %d edges", len(graph.nodes), len(graph.edges))
        return {"graph": graph, "recovery_report": report.to_json()}
