"""
Narrative text for analysis results.

Builds the deterministic rule-based summary and the structured data
summary that is handed to an external text generator.
"""

from typing import Any, Dict, List, Sequence

from .entries import MoodEntry
from .episode_detector import DetectedPattern
from .statistics import MoodStatistics, RiskFactor, detect_sleep_shifts

MIN_ENTRIES_FOR_ANALYSIS = 7

INSUFFICIENT_DATA_TEXT = (
    f"Not enough data for pattern analysis. Please continue logging "
    f"for at least {MIN_ENTRIES_FOR_ANALYSIS} days."
)
PROFESSIONAL_NOTE = "These patterns may be worth discussing with a mental health professional."


def build_summary_text(stats: MoodStatistics, patterns: Sequence[DetectedPattern]) -> str:
    """Rule-based summary of the analysed period. Never empty."""
    summary = f"Over the past {stats.entry_count} days, "

    if not patterns:
        summary += (
            f"your mood patterns appear stable, with an average mood of "
            f"{stats.average_mood:.1f} on a -5 to +5 scale and "
            f"{stats.average_sleep:.1f} hours of sleep per night. "
            f"Continue monitoring for any changes."
        )
        return summary

    summary += "I noticed some patterns in your data: "
    for index, pattern in enumerate(patterns):
        if index > 0:
            summary += " Also, "
        summary += (
            f"{pattern.description} from {pattern.start_date.isoformat()} "
            f"to {pattern.end_date.isoformat()}."
        )
    summary += f" {PROFESSIONAL_NOTE}"
    return summary


def build_structured_summary(
    entries: Sequence[MoodEntry],
    stats: MoodStatistics,
    patterns: Sequence[DetectedPattern],
    risk_factors: Sequence[RiskFactor],
) -> Dict[str, Any]:
    """
    Data summary sent to the external generator.

    Contains aggregates only, never raw notes.
    """
    return {
        "total_days": stats.entry_count,
        "mood_stats": {
            "average": round(stats.average_mood, 2),
            "volatility": round(stats.mood_volatility, 2),
            "range": {"min": stats.mood_min, "max": stats.mood_max},
            "episodes": {"high": stats.high_mood_days, "low": stats.low_mood_days},
        },
        "sleep_stats": {
            "average": round(stats.average_sleep, 2),
            "low_sleep_days": stats.low_sleep_days,
            "high_sleep_days": stats.high_sleep_days,
            "pattern": [shift.to_dict() for shift in detect_sleep_shifts(entries)],
        },
        "energy_distribution": dict(stats.energy_distribution),
        "patterns": [p.to_dict() for p in patterns],
        "risk_factors": [r.to_dict() for r in risk_factors],
    }


def build_insight_context(today: MoodEntry, previous: List[MoodEntry]) -> Dict[str, Any]:
    """Context for a short daily insight: today's entry and the recent average."""
    recent = previous[-7:]
    previous_average = 0.0
    if recent:
        previous_average = round(sum(e.mood_rating for e in recent) / len(recent), 2)

    return {
        "today": {
            "mood": today.mood_rating,
            "energy": today.energy_level.value,
            "sleep": today.sleep_hours,
        },
        "previous_average_mood": previous_average,
        "previous_days": len(recent),
    }
