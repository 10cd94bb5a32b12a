"""Pipeline phases for pathway graph generation and recovery."""

from .cache import ResponseCachePhase
from .generation import PathwayGenerationPhase
from .recovery import PathwayRecoveryPhase
from .validation import ValidationAndQAPhase

__all__ = [
    "PathwayGenerationPhase",
    "ResponseCachePhase",
    "PathwayRecoveryPhase",
    "ValidationAndQAPhase",
]
