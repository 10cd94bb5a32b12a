"""Pipeline abstractions and sequential runner."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


class PipelinePhase(ABC):
    phase_name: str

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    """Runs phases in order, merging each returned dict into a shared context.

    A ``phase_trace`` entry (phase name, produced keys, duration) is appended
    to the context for every phase that ran.
    """

    def __init__(self, phases: Iterable[PipelinePhase]) -> None:
        self.phases: List[PipelinePhase] = list(phases)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        current = dict(context)
        trace: List[Dict[str, Any]] = list(current.get("phase_trace", []))
        for phase in self.phases:
            logger.debug("Running phase '%s'", phase.phase_name)
            started = time.perf_counter()
            phase_result = phase.run(current)
            if not isinstance(phase_result, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            current.update(phase_result)
            trace.append(
                {
                    "phase": phase.phase_name,
                    "keys": sorted(phase_result),
                    "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                }
            )
        current["phase_trace"] = trace
        return current
