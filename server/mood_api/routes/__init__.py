"""API route modules."""
from .mood import router as mood_router
from .analysis import router as analysis_router

__all__ = [
    "mood_router",
    "analysis_router",
]
