"""
Episode Detection for Daily Mood Entries.

Scans a chronologically sorted sequence of entries once and reports runs
of consecutive days that satisfy an episode rule (elevated mood with high
energy and short sleep, or low mood with low energy). Each rule keeps its
own run accumulator, so hypomanic and depressive runs are tracked
independently in the same pass.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .entries import EnergyLevel, FunctionalImpairment, MoodEntry

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class PatternType(str, Enum):
    """Kind of episode a run of entries resembles."""

    HYPOMANIC = "hypomanic"
    DEPRESSIVE = "depressive"


class PatternSeverity(str, Enum):
    """Severity derived from risk markers inside the run."""

    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


@dataclass
class EpisodeRule:
    """Membership test and emission settings for one pattern type."""

    pattern_type: PatternType
    min_days: int
    is_member: Callable[[MoodEntry], bool]
    severity_of: Callable[[List[MoodEntry]], PatternSeverity]
    description: str


@dataclass
class DetectedPattern:
    """A qualifying run of entries."""

    pattern_type: PatternType
    start_date: date
    end_date: date
    duration_days: int
    severity: PatternSeverity
    description: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "type": self.pattern_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "duration_days": self.duration_days,
            "severity": self.severity.value,
            "description": self.description,
        }


def _is_hypomanic_day(entry: MoodEntry) -> bool:
    return (
        entry.mood_rating >= 3
        and entry.energy_level in (EnergyLevel.HIGH, EnergyLevel.VERY_HIGH)
        and entry.sleep_hours < 6
    )


def _is_depressive_day(entry: MoodEntry) -> bool:
    return entry.mood_rating <= -2 and entry.energy_level == EnergyLevel.LOW


def _hypomanic_severity(run: List[MoodEntry]) -> PatternSeverity:
    if any(e.risky_behavior for e in run):
        return PatternSeverity.HIGH
    return PatternSeverity.MODERATE


def _depressive_severity(run: List[MoodEntry]) -> PatternSeverity:
    if any(e.functional_impairment == FunctionalImpairment.SEVERE for e in run):
        return PatternSeverity.SEVERE
    return PatternSeverity.MODERATE


HYPOMANIC_RULE = EpisodeRule(
    pattern_type=PatternType.HYPOMANIC,
    min_days=3,
    is_member=_is_hypomanic_day,
    severity_of=_hypomanic_severity,
    description="elevated mood and energy with reduced sleep",
)

DEPRESSIVE_RULE = EpisodeRule(
    pattern_type=PatternType.DEPRESSIVE,
    min_days=5,
    is_member=_is_depressive_day,
    severity_of=_depressive_severity,
    description="low mood and low energy",
)

DEFAULT_RULES = [HYPOMANIC_RULE, DEPRESSIVE_RULE]


@dataclass
class _RunAccumulator:
    """Entries collected for one rule since the last reset."""

    rule: EpisodeRule
    run: List[MoodEntry] = field(default_factory=list)

    def extends(self, entry: MoodEntry, contiguous: bool) -> bool:
        if not self.run or not contiguous:
            return True
        return entry.date - self.run[-1].date == ONE_DAY

    def flush(self) -> Optional[DetectedPattern]:
        """Emit the run if it is long enough, then reset."""
        run, self.run = self.run, []
        if len(run) < self.rule.min_days:
            if run:
                logger.debug(
                    f"[PATTERNS] Dropped {self.rule.pattern_type.value} run of "
                    f"{len(run)} day(s) starting {run[0].date}"
                )
            return None

        duration = len(run)
        return DetectedPattern(
            pattern_type=self.rule.pattern_type,
            start_date=run[0].date,
            end_date=run[-1].date,
            duration_days=duration,
            severity=self.rule.severity_of(run),
            description=f"a {duration}-day period of {self.rule.description}",
        )


def detect_episodes(
    entries: Sequence[MoodEntry],
    rules: Optional[Sequence[EpisodeRule]] = None,
    contiguous: bool = True,
) -> List[DetectedPattern]:
    """
    Detect episode runs in a date-sorted entry sequence.

    Args:
        entries: Entries sorted ascending by date, unique per date
        rules: Episode rules to apply (defaults to hypomanic and depressive)
        contiguous: When True a missing calendar day breaks a run; when
            False neighbouring entries count as consecutive regardless of
            the dates between them

    Returns:
        Detected patterns ordered by start date
    """
    accumulators = [_RunAccumulator(rule) for rule in (rules or DEFAULT_RULES)]
    patterns: List[DetectedPattern] = []

    for entry in entries:
        for acc in accumulators:
            if acc.rule.is_member(entry):
                if not acc.extends(entry, contiguous):
                    pattern = acc.flush()
                    if pattern:
                        patterns.append(pattern)
                acc.run.append(entry)
            elif acc.run:
                pattern = acc.flush()
                if pattern:
                    patterns.append(pattern)

    for acc in accumulators:
        pattern = acc.flush()
        if pattern:
            patterns.append(pattern)

    # Stable sort keeps rule order for runs starting on the same day
    patterns.sort(key=lambda p: p.start_date)

    if patterns:
        logger.info(
            f"[PATTERNS] Detected {len(patterns)} pattern(s) in {len(entries)} entries: "
            + ", ".join(f"{p.pattern_type.value}({p.duration_days}d)" for p in patterns)
        )
    return patterns
