"""Pattern analysis response models."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Literal, Optional

from .mood import MoodEntryRecord

PatternTypeName = Literal["hypomanic", "depressive"]
PatternSeverityName = Literal["moderate", "high", "severe"]


class DetectedPatternOut(BaseModel):
    """A detected run of hypomanic- or depressive-looking days."""

    model_config = ConfigDict(populate_by_name=True)

    type: PatternTypeName
    start_date: str = Field(serialization_alias="startDate")
    end_date: str = Field(serialization_alias="endDate")
    duration_days: int = Field(ge=1, serialization_alias="durationDays")
    severity: PatternSeverityName
    description: str


class AnalysisMetricsOut(BaseModel):
    """Normalized 0-100 metrics."""

    model_config = ConfigDict(populate_by_name=True)

    mood_stability: float = Field(ge=0, le=100, serialization_alias="moodStability")
    sleep_quality: float = Field(ge=0, le=100, serialization_alias="sleepQuality")
    energy_consistency: float = Field(ge=0, le=100, serialization_alias="energyConsistency")


class TrendsOut(BaseModel):
    """Week-over-week changes in percent."""

    mood: float
    sleep: float
    volatility: float
    wellness: float


class RiskFactorOut(BaseModel):
    """Days showing a risk marker."""

    factor: str
    days: int
    severity: Literal["moderate", "high"]


class AnalysisResponse(BaseModel):
    """Result of a pattern analysis request."""

    model_config = ConfigDict(populate_by_name=True)

    summary_text: str = Field(serialization_alias="summaryText")
    metrics: AnalysisMetricsOut
    patterns: list[DetectedPatternOut]
    recommendations: list[str]
    risk_factors: list[RiskFactorOut] = Field(serialization_alias="riskFactors")
    trends: Optional[TrendsOut] = None
    using_external_generator: bool = Field(serialization_alias="usingExternalGenerator")
    insufficient_data: bool = Field(serialization_alias="needsMoreData")
    external_error: Optional[str] = Field(default=None, serialization_alias="externalError")
    data_points: int = Field(serialization_alias="dataPoints")

    @classmethod
    def from_result(cls, result) -> "AnalysisResponse":
        """Build from a mood_analysis AnalysisResult."""
        data = result.to_dict()
        data["data_points"] = result.statistics.entry_count
        return cls.model_validate(data)


class AnalyzeRequest(BaseModel):
    """Entries supplied directly by the caller."""

    entries: list[MoodEntryRecord] = Field(max_length=366)
    narrative: bool = False


class DashboardStats(BaseModel):
    """Stats cards shown on the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    average_mood: float = Field(serialization_alias="averageMood")
    average_sleep: float = Field(serialization_alias="averageSleep")
    streak_days: int = Field(serialization_alias="streakDays")
    streak_milestone: bool = Field(serialization_alias="streakMilestone")
    energy_level: str = Field(serialization_alias="energyLevel")
    mood_variability: float = Field(serialization_alias="moodVariability")
    wellness_score: int = Field(ge=0, le=100, serialization_alias="wellnessScore")
    metrics: AnalysisMetricsOut
    trends: Optional[TrendsOut] = None


class InsightResponse(BaseModel):
    """Short daily insight text."""

    insight: str
    generated_at: str
