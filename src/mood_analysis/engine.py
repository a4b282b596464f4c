"""
Pattern Analysis Engine.

Turns a user's date-sorted mood entries into an AnalysisResult: summary
statistics, normalized metrics, detected episodes, recommendations and a
narrative summary. The narrative is rule-based unless an external text
generator is supplied and answers in time; generator failures always
degrade to the rule-based text and are never raised to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from .entries import MoodEntry, validate_entries
from .episode_detector import DetectedPattern, detect_episodes
from .narrative import (
    INSUFFICIENT_DATA_TEXT,
    MIN_ENTRIES_FOR_ANALYSIS,
    build_insight_context,
    build_structured_summary,
    build_summary_text,
)
from .recommendations import generate_recommendations
from .statistics import (
    AnalysisMetrics,
    MoodStatistics,
    RiskFactor,
    TrendDeltas,
    compute_metrics,
    compute_statistics,
    compute_trends,
    identify_risk_factors,
)

logger = logging.getLogger(__name__)

# Receives a JSON-serializable summary, returns free text
TextGenerator = Callable[[Dict[str, Any]], Awaitable[str]]

DAILY_INSIGHT_FALLBACK = "Keep tracking your mood - consistency brings awareness!"


@dataclass
class AnalysisResult:
    """Everything derived from one analysis request."""

    summary_text: str
    metrics: AnalysisMetrics
    statistics: MoodStatistics
    patterns: List[DetectedPattern] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    risk_factors: List[RiskFactor] = field(default_factory=list)
    trends: Optional[TrendDeltas] = None
    using_external_generator: bool = False
    insufficient_data: bool = False
    external_error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "summary_text": self.summary_text,
            "metrics": self.metrics.to_dict(),
            "statistics": self.statistics.to_dict(),
            "patterns": [p.to_dict() for p in self.patterns],
            "recommendations": list(self.recommendations),
            "risk_factors": [r.to_dict() for r in self.risk_factors],
            "trends": self.trends.to_dict() if self.trends else None,
            "using_external_generator": self.using_external_generator,
            "insufficient_data": self.insufficient_data,
            "external_error": self.external_error,
        }


class PatternAnalysisEngine:
    """
    Stateless analysis over one user's mood entries.

    Configuration:
        min_entries: Entries required before any pattern analysis
        generator_timeout: Seconds to wait for an external generator
        contiguous_runs: Whether a missing calendar day breaks an episode run
    """

    def __init__(
        self,
        min_entries: int = MIN_ENTRIES_FOR_ANALYSIS,
        generator_timeout: float = 30.0,
        contiguous_runs: bool = True,
    ):
        self.min_entries = min_entries
        self.generator_timeout = generator_timeout
        self.contiguous_runs = contiguous_runs

    def analyze(self, entries: Sequence[MoodEntry]) -> AnalysisResult:
        """
        Run the deterministic analysis.

        Args:
            entries: Entries sorted ascending by date, unique per date

        Returns:
            AnalysisResult with a rule-based summary

        Raises:
            InvalidEntryError: if entries are malformed, unsorted or duplicated
        """
        entries = validate_entries(entries)
        stats = compute_statistics(entries)
        metrics = compute_metrics(entries)

        if len(entries) < self.min_entries:
            logger.info(
                f"[ANALYSIS] Insufficient data: {len(entries)}/{self.min_entries} entries"
            )
            return AnalysisResult(
                summary_text=INSUFFICIENT_DATA_TEXT,
                metrics=metrics,
                statistics=stats,
                insufficient_data=True,
            )

        patterns = detect_episodes(entries, contiguous=self.contiguous_runs)

        result = AnalysisResult(
            summary_text=build_summary_text(stats, patterns),
            metrics=metrics,
            statistics=stats,
            patterns=patterns,
            recommendations=generate_recommendations(patterns),
            risk_factors=identify_risk_factors(entries),
            trends=compute_trends(entries),
        )

        logger.info(
            f"[ANALYSIS] Analyzed {stats.entry_count} entries: "
            f"{len(patterns)} pattern(s), wellness={stats.wellness_score:.1f}"
        )
        return result

    async def analyze_with_external_summary(
        self,
        entries: Sequence[MoodEntry],
        generator: Optional[TextGenerator],
    ) -> AnalysisResult:
        """
        Run the analysis and ask an external generator for the narrative.

        The generator is called once with a structured summary. If it
        fails, times out or returns nothing, the rule-based summary is kept
        and ``using_external_generator`` stays False.
        """
        entries = validate_entries(entries)
        result = self.analyze(entries)

        if result.insufficient_data:
            return result

        if generator is None:
            result.external_error = "No text generator configured"
            return result

        structured = build_structured_summary(
            entries, result.statistics, result.patterns, result.risk_factors
        )
        text, error = await self._delegate(generator, structured, "summary")

        if text is None:
            result.external_error = error
            return result

        result.summary_text = text
        result.using_external_generator = True
        return result

    async def daily_insight(
        self,
        today: MoodEntry,
        previous: Sequence[MoodEntry],
        generator: Optional[TextGenerator] = None,
    ) -> str:
        """
        Short encouragement for today's entry.

        Args:
            today: Today's entry
            previous: Earlier entries, oldest first (the last seven are used)
            generator: Optional insight generator

        Returns:
            Generated text, or a fixed encouragement when unavailable
        """
        if generator is None:
            return DAILY_INSIGHT_FALLBACK

        context = build_insight_context(today, list(previous))
        text, _ = await self._delegate(generator, context, "daily insight")
        return text or DAILY_INSIGHT_FALLBACK

    async def _delegate(
        self,
        generator: TextGenerator,
        payload: Dict[str, Any],
        label: str,
    ) -> Tuple[Optional[str], Optional[str]]:
        """Call the generator once; return (text, None) or (None, reason)."""
        try:
            text = await asyncio.wait_for(generator(payload), timeout=self.generator_timeout)
        except asyncio.TimeoutError:
            reason = f"Generator timed out after {self.generator_timeout}s"
            logger.warning(f"[NARRATIVE] {label} fallback: {reason}")
            return None, reason
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"[NARRATIVE] {label} fallback: {reason}")
            return None, reason

        if not isinstance(text, str) or not text.strip():
            logger.warning(f"[NARRATIVE] {label} fallback: empty response")
            return None, "Empty response from generator"

        logger.info(f"[NARRATIVE] Using generated {label}")
        return text.strip(), None


# Global singleton instance
pattern_engine = PatternAnalysisEngine()


def analyze_entries(entries: Sequence[MoodEntry]) -> AnalysisResult:
    """Convenience wrapper around the shared engine."""
    return pattern_engine.analyze(entries)


async def analyze_entries_with_summary(
    entries: Sequence[MoodEntry],
    generator: Optional[TextGenerator],
) -> AnalysisResult:
    """Convenience wrapper around the shared engine with a narrative generator."""
    return await pattern_engine.analyze_with_external_summary(entries, generator)
