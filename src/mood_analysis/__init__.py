"""
Mood Analysis Module.

Pattern detection and statistics over daily mood entries, with an
optional externally generated narrative summary.
"""

from .entries import (
    EnergyLevel,
    FunctionalImpairment,
    GoalDirectedActivity,
    InvalidEntryError,
    MoodEntry,
    validate_entries,
)
from .episode_detector import DetectedPattern, PatternSeverity, PatternType, detect_episodes
from .completion_client import ChatCompletionClient, ExternalGeneratorUnavailable
from .engine import (
    AnalysisResult,
    PatternAnalysisEngine,
    analyze_entries,
    analyze_entries_with_summary,
    pattern_engine,
)

__all__ = [
    "EnergyLevel",
    "FunctionalImpairment",
    "GoalDirectedActivity",
    "InvalidEntryError",
    "MoodEntry",
    "validate_entries",
    "DetectedPattern",
    "PatternSeverity",
    "PatternType",
    "detect_episodes",
    "ChatCompletionClient",
    "ExternalGeneratorUnavailable",
    "AnalysisResult",
    "PatternAnalysisEngine",
    "analyze_entries",
    "analyze_entries_with_summary",
    "pattern_engine",
]
