"""End-to-end tile cutting pipeline."""

from .orchestrator import Orchestrator, TileCutResult

__all__ = [
    "Orchestrator",
    "TileCutResult",
]
