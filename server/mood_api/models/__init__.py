"""Pydantic models for mood API requests and responses."""
from .mood import MoodEntryRecord
from .analysis import (
    AnalysisMetricsOut,
    AnalysisResponse,
    AnalyzeRequest,
    DashboardStats,
    DetectedPatternOut,
    InsightResponse,
    RiskFactorOut,
    TrendsOut,
)

__all__ = [
    "MoodEntryRecord",
    "AnalysisMetricsOut",
    "AnalysisResponse",
    "AnalyzeRequest",
    "DashboardStats",
    "DetectedPatternOut",
    "InsightResponse",
    "RiskFactorOut",
    "TrendsOut",
]
