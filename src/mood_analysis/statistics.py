"""
Descriptive statistics over a user's mood entries.

Covers the dashboard aggregates (averages, volatility, wellness score,
logging streak), the three normalized metrics reported with every
analysis, week-over-week trends, and the risk markers that are forwarded
to the narrative generator. Every function returns a neutral value on
empty input instead of raising.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from .entries import EnergyLevel, FunctionalImpairment, MoodEntry

logger = logging.getLogger(__name__)

# Sleep window counted as a good night
OPTIMAL_SLEEP_MIN = 7.0
OPTIMAL_SLEEP_MAX = 9.0

LOW_SLEEP_HOURS = 6.0
HIGH_SLEEP_HOURS = 9.0
SLEEP_SHIFT_HOURS = 3.0

TREND_WINDOW = 7
STREAK_MILESTONE_DAYS = 7


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std(values: Sequence[float]) -> float:
    """Standard deviation dividing by N (not N - 1); 0 for empty input."""
    if not values:
        return 0.0
    mean = _mean(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def percent_change(current: float, previous: float, absolute_base: bool = False) -> float:
    """
    Signed percentage change from previous to current, one decimal.

    Args:
        current: Value for the latest window
        previous: Value for the earlier window
        absolute_base: Divide by abs(previous), for values that can be negative

    Returns:
        The change in percent, or 0.0 when previous is zero
    """
    if previous == 0:
        return 0.0
    base = abs(previous) if absolute_base else previous
    return round((current - previous) / base * 100, 1)


@dataclass
class WellnessScore:
    """Composite 0-100 score and its three components."""

    mood_score: float
    sleep_score: float
    stability_score: float

    @property
    def total(self) -> float:
        return min(100.0, self.mood_score + self.sleep_score + self.stability_score)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "mood_score": self.mood_score,
            "sleep_score": self.sleep_score,
            "stability_score": self.stability_score,
            "total": self.total,
        }


def wellness_score(average_mood: float, average_sleep: float, mood_volatility: float) -> WellnessScore:
    """Blend mood level (40), sleep adequacy (30) and stability (30)."""
    return WellnessScore(
        mood_score=((average_mood + 5) / 10) * 40,
        sleep_score=min(average_sleep / 8, 1) * 30,
        stability_score=max(0.0, 10 - mood_volatility) * 3,
    )


@dataclass
class AnalysisMetrics:
    """Normalized 0-100 metrics."""

    mood_stability: float = 0.0
    sleep_quality: float = 0.0
    energy_consistency: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "mood_stability": self.mood_stability,
            "sleep_quality": self.sleep_quality,
            "energy_consistency": self.energy_consistency,
        }


def sleep_quality(entries: Sequence[MoodEntry]) -> float:
    """Percentage of nights within the optimal sleep window."""
    if not entries:
        return 0.0
    good_nights = sum(
        1 for e in entries if OPTIMAL_SLEEP_MIN <= e.sleep_hours <= OPTIMAL_SLEEP_MAX
    )
    return _clamp(good_nights / len(entries) * 100)


def energy_consistency(entries: Sequence[MoodEntry]) -> float:
    """100 minus the percentage of day-to-day energy category changes."""
    if len(entries) < 2:
        return 100.0
    changes = sum(
        1 for prev, cur in zip(entries, entries[1:]) if prev.energy_level != cur.energy_level
    )
    return _clamp(100 * (1 - changes / (len(entries) - 1)))


def compute_metrics(entries: Sequence[MoodEntry]) -> AnalysisMetrics:
    """Compute mood stability, sleep quality and energy consistency."""
    if not entries:
        return AnalysisMetrics()

    volatility = population_std([e.mood_rating for e in entries])
    stability_score = max(0.0, 10 - volatility) * 3

    return AnalysisMetrics(
        mood_stability=_clamp(stability_score / 30 * 100),
        sleep_quality=sleep_quality(entries),
        energy_consistency=energy_consistency(entries),
    )


def current_streak(entries: Sequence[MoodEntry]) -> int:
    """Number of consecutive calendar days logged, ending at the latest entry."""
    if not entries:
        return 0

    streak = 1
    expected = entries[-1].date - timedelta(days=1)
    for entry in reversed(entries[:-1]):
        if entry.date != expected:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def is_streak_milestone(streak: int) -> bool:
    """True on every completed week of logging."""
    return streak > 0 and streak % STREAK_MILESTONE_DAYS == 0


@dataclass
class SleepShift:
    """A night-to-night sleep change larger than SLEEP_SHIFT_HOURS."""

    date: date
    change: float

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"date": self.date.isoformat(), "change": self.change}


def detect_sleep_shifts(entries: Sequence[MoodEntry]) -> List[SleepShift]:
    """Find large changes in sleep between neighbouring entries."""
    shifts = []
    for prev, cur in zip(entries, entries[1:]):
        change = cur.sleep_hours - prev.sleep_hours
        if abs(change) > SLEEP_SHIFT_HOURS:
            shifts.append(SleepShift(date=cur.date, change=round(change, 2)))
    return shifts


@dataclass
class RiskFactor:
    """Count of days showing a risk marker."""

    factor: str
    days: int
    severity: str  # moderate, high

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"factor": self.factor, "days": self.days, "severity": self.severity}


def identify_risk_factors(entries: Sequence[MoodEntry]) -> List[RiskFactor]:
    """
    Summarize risky behaviour, impulsivity and severe impairment.

    Only factors present on at least one day are reported.
    """
    risks = []

    risky_days = sum(1 for e in entries if e.risky_behavior)
    if risky_days > 0:
        risks.append(RiskFactor("risky_behavior", risky_days, "high" if risky_days > 3 else "moderate"))

    impulsive_days = sum(1 for e in entries if e.impulsivity)
    if impulsive_days > 0:
        risks.append(RiskFactor("impulsivity", impulsive_days, "high" if impulsive_days > 5 else "moderate"))

    impaired_days = sum(1 for e in entries if e.functional_impairment == FunctionalImpairment.SEVERE)
    if impaired_days > 0:
        risks.append(RiskFactor("functional_impairment", impaired_days, "high"))

    return risks


@dataclass
class MoodStatistics:
    """Aggregates over the full entry sequence."""

    entry_count: int = 0
    average_mood: float = 0.0
    average_sleep: float = 0.0
    mood_volatility: float = 0.0
    mood_min: int = 0
    mood_max: int = 0
    high_mood_days: int = 0
    low_mood_days: int = 0
    low_sleep_days: int = 0
    high_sleep_days: int = 0
    energy_distribution: Dict[str, int] = field(
        default_factory=lambda: {level.value: 0 for level in EnergyLevel}
    )
    dominant_energy: EnergyLevel = EnergyLevel.NORMAL
    wellness: WellnessScore = field(default_factory=lambda: WellnessScore(0.0, 0.0, 0.0))
    streak_days: int = 0

    @property
    def wellness_score(self) -> float:
        return self.wellness.total

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "entry_count": self.entry_count,
            "average_mood": self.average_mood,
            "average_sleep": self.average_sleep,
            "mood_volatility": self.mood_volatility,
            "mood_range": {"min": self.mood_min, "max": self.mood_max},
            "high_mood_days": self.high_mood_days,
            "low_mood_days": self.low_mood_days,
            "low_sleep_days": self.low_sleep_days,
            "high_sleep_days": self.high_sleep_days,
            "energy_distribution": dict(self.energy_distribution),
            "dominant_energy": self.dominant_energy.value,
            "wellness": self.wellness.to_dict(),
            "wellness_score": self.wellness_score,
            "streak_days": self.streak_days,
        }


def compute_statistics(entries: Sequence[MoodEntry]) -> MoodStatistics:
    """Compute aggregate statistics; empty input yields neutral zeros."""
    if not entries:
        return MoodStatistics()

    moods = [e.mood_rating for e in entries]
    sleeps = [e.sleep_hours for e in entries]

    average_mood = _mean(moods)
    average_sleep = _mean(sleeps)
    volatility = population_std(moods)

    counts = Counter(e.energy_level for e in entries)
    distribution = {level.value: counts.get(level, 0) for level in EnergyLevel}
    # most_common keeps first-seen order on ties
    dominant = counts.most_common(1)[0][0]

    stats = MoodStatistics(
        entry_count=len(entries),
        average_mood=average_mood,
        average_sleep=average_sleep,
        mood_volatility=volatility,
        mood_min=min(moods),
        mood_max=max(moods),
        high_mood_days=sum(1 for e in entries if e.is_elevated),
        low_mood_days=sum(1 for e in entries if e.is_low),
        low_sleep_days=sum(1 for s in sleeps if s < LOW_SLEEP_HOURS),
        high_sleep_days=sum(1 for s in sleeps if s > HIGH_SLEEP_HOURS),
        energy_distribution=distribution,
        dominant_energy=dominant,
        wellness=wellness_score(average_mood, average_sleep, volatility),
        streak_days=current_streak(entries),
    )

    logger.debug(
        f"[STATS] n={stats.entry_count}, mood={average_mood:.2f}, "
        f"sleep={average_sleep:.2f}, volatility={volatility:.2f}, "
        f"wellness={stats.wellness_score:.1f}"
    )
    return stats


@dataclass
class TrendDeltas:
    """Week-over-week changes in percent (last 7 entries vs the 7 before)."""

    mood: float = 0.0
    sleep: float = 0.0
    volatility: float = 0.0
    wellness: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "mood": self.mood,
            "sleep": self.sleep,
            "volatility": self.volatility,
            "wellness": self.wellness,
        }


def compute_trends(entries: Sequence[MoodEntry]) -> Optional[TrendDeltas]:
    """
    Compare the last seven entries with the seven before them.

    Returns:
        TrendDeltas, or None when fewer than 14 entries are available
    """
    if len(entries) < TREND_WINDOW * 2:
        return None

    last = entries[-TREND_WINDOW:]
    prev = entries[-TREND_WINDOW * 2:-TREND_WINDOW]

    last_mood = _mean([e.mood_rating for e in last])
    prev_mood = _mean([e.mood_rating for e in prev])
    last_sleep = _mean([e.sleep_hours for e in last])
    prev_sleep = _mean([e.sleep_hours for e in prev])
    last_volatility = population_std([e.mood_rating for e in last])
    prev_volatility = population_std([e.mood_rating for e in prev])

    last_wellness = wellness_score(last_mood, last_sleep, last_volatility).total
    prev_wellness = wellness_score(prev_mood, prev_sleep, prev_volatility).total

    return TrendDeltas(
        mood=percent_change(last_mood, prev_mood, absolute_base=True),
        sleep=percent_change(last_sleep, prev_sleep),
        volatility=percent_change(last_volatility, prev_volatility),
        wellness=percent_change(last_wellness, prev_wellness),
    )
