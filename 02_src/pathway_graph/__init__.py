"""Core package for the learning pathway graph pipeline."""

from .enhancement import enhance_node, parse_enhancement
from .graph_model import PathwayEdge, PathwayGraph, PathwayNode, Position
from .graph_orchestrator import GraphOrchestrator, IdFactory, reassign_ids
from .pipeline import PipelinePhase, PipelineRunner
from .recovery import RecoveryReport, recover_pathway, recover_pathway_with_report

__all__ = [
    "Position",
    "PathwayNode",
    "PathwayEdge",
    "PathwayGraph",
    "GraphOrchestrator",
    "IdFactory",
    "reassign_ids",
    "PipelinePhase",
    "PipelineRunner",
    "RecoveryReport",
    "recover_pathway",
    "recover_pathway_with_report",
    "enhance_node",
    "parse_enhancement",
]
