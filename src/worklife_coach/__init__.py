"""WorkLife coaching core: sessions, profile analysis, recommendations, orchestration."""

from .orchestrator import CoachingOrchestrator, CoachingRequest, CoachingResponse

__version__ = "0.1.0"

__all__ = ["CoachingOrchestrator", "CoachingRequest", "CoachingResponse"]
