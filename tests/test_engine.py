"""
Unit tests for the Pattern Analysis Engine.

These tests verify:
1. Short histories return the fixed not-enough-data result
2. Rule-based analysis (patterns, summary text, recommendations)
3. External summary delegation and every fallback path
4. Daily insight generation
5. Entry validation at the engine boundary

These tests never touch the network; generators are mocks.

Usage:
    pytest tests/test_engine.py -v
"""
import asyncio
import pytest
from unittest.mock import AsyncMock

from conftest import DEPRESSIVE_DAY, HYPOMANIC_DAY, NEUTRAL_DAY
from mood_analysis import (
    ExternalGeneratorUnavailable,
    InvalidEntryError,
    MoodEntry,
    PatternAnalysisEngine,
    PatternType,
    analyze_entries,
    detect_episodes,
)
from mood_analysis.engine import DAILY_INSIGHT_FALLBACK
from mood_analysis.narrative import INSUFFICIENT_DATA_TEXT, build_summary_text
from mood_analysis.recommendations import (
    DEPRESSIVE_ADVICE,
    DEPRESSIVE_SEVERE_ADVICE,
    DISCLAIMER,
    HYPOMANIC_ADVICE,
    HYPOMANIC_HIGH_RISK_ADVICE,
    KEEP_TRACKING_ADVICE,
    generate_recommendations,
)


@pytest.fixture
def engine():
    return PatternAnalysisEngine(generator_timeout=1.0)


# ============================================================================
# Rule-based Analysis
# ============================================================================


class TestInsufficientData:
    """Test the short-history result."""

    @pytest.mark.parametrize("count", range(7))
    def test_fewer_than_seven_entries(self, engine, make_series, count):
        """Fewer than 7 entries: fixed text, no patterns, no recommendations."""
        result = engine.analyze(make_series([HYPOMANIC_DAY] * count))

        assert result.insufficient_data
        assert result.summary_text == INSUFFICIENT_DATA_TEXT
        assert result.patterns == []
        assert result.recommendations == []
        assert not result.using_external_generator

    def test_statistics_still_reported(self, engine, make_series):
        """Averages are still available for short histories."""
        result = engine.analyze(make_series([NEUTRAL_DAY] * 3))

        assert result.statistics.entry_count == 3
        assert result.metrics.mood_stability == 100.0

    def test_seven_entries_are_enough(self, engine, make_series):
        """Exactly seven entries run the full analysis."""
        result = engine.analyze(make_series([NEUTRAL_DAY] * 7))

        assert not result.insufficient_data
        assert result.recommendations[-1] == DISCLAIMER


class TestAnalyze:
    """Test full rule-based analysis."""

    def test_hypomanic_example(self, engine, make_series):
        """Four elevated days then six neutral days: one hypomanic pattern."""
        result = engine.analyze(make_series([HYPOMANIC_DAY] * 4 + [NEUTRAL_DAY] * 6))

        assert len(result.patterns) == 1
        assert result.patterns[0].pattern_type == PatternType.HYPOMANIC
        assert result.patterns[0].duration_days == 4
        assert result.recommendations == [HYPOMANIC_ADVICE, DISCLAIMER]
        assert "a 4-day period of elevated mood" in result.summary_text
        assert "2024-03-01 to 2024-03-04" in result.summary_text

    def test_flat_month(self, engine, make_series):
        """Thirty neutral days: no patterns, full stability, wellness 80."""
        result = engine.analyze(make_series([NEUTRAL_DAY] * 30))

        assert result.patterns == []
        assert result.recommendations == [KEEP_TRACKING_ADVICE, DISCLAIMER]
        assert result.statistics.mood_volatility == 0.0
        assert result.metrics.mood_stability == 100.0
        assert result.statistics.wellness_score == pytest.approx(80.0)
        assert "appear stable" in result.summary_text
        assert result.trends is not None
        assert result.trends.mood == 0.0

    def test_both_pattern_types(self, engine, make_series):
        """Both advisories fire, in order, before the disclaimer."""
        specs = [DEPRESSIVE_DAY] * 5 + [NEUTRAL_DAY] + [HYPOMANIC_DAY] * 3
        result = engine.analyze(make_series(specs))

        assert [p.pattern_type for p in result.patterns] == [
            PatternType.DEPRESSIVE, PatternType.HYPOMANIC
        ]
        assert result.recommendations == [HYPOMANIC_ADVICE, DEPRESSIVE_ADVICE, DISCLAIMER]
        assert " Also, " in result.summary_text

    def test_risk_factors_included(self, engine, make_series):
        """Risk markers anywhere in the window are summarized."""
        specs = [NEUTRAL_DAY] * 6 + [{**NEUTRAL_DAY, "risky_behavior": True}]

        result = engine.analyze(make_series(specs))

        assert [r.factor for r in result.risk_factors] == ["risky_behavior"]

    def test_convenience_function(self, make_series):
        """The module-level helper uses the shared engine."""
        result = analyze_entries(make_series([NEUTRAL_DAY] * 8))

        assert result.statistics.entry_count == 8

    def test_to_dict(self, engine, make_series):
        """Results serialize to plain values."""
        data = engine.analyze(make_series([HYPOMANIC_DAY] * 3 + [NEUTRAL_DAY] * 4)).to_dict()

        assert data["patterns"][0]["type"] == "hypomanic"
        assert data["metrics"]["mood_stability"] <= 100
        assert data["trends"] is None
        assert data["using_external_generator"] is False


class TestRecommendations:
    """Test advisory generation."""

    def test_disclaimer_always_last(self, engine, make_series):
        """Every non-empty recommendation list ends with the disclaimer."""
        for specs in (
            [NEUTRAL_DAY] * 7,
            [HYPOMANIC_DAY] * 7,
            [DEPRESSIVE_DAY] * 7,
            [DEPRESSIVE_DAY] * 5 + [HYPOMANIC_DAY] * 3,
        ):
            recommendations = engine.analyze(make_series(specs)).recommendations
            assert recommendations[-1] == DISCLAIMER

    def test_high_risk_wording(self, make_series):
        """High and severe patterns get stronger advice."""
        specs = (
            [{**HYPOMANIC_DAY, "risky_behavior": True}] * 3
            + [{**DEPRESSIVE_DAY, "functional_impairment": "severe"}] * 5
        )
        recommendations = generate_recommendations(detect_episodes(make_series(specs)))

        assert recommendations == [
            HYPOMANIC_HIGH_RISK_ADVICE,
            DEPRESSIVE_SEVERE_ADVICE,
            DISCLAIMER,
        ]

    def test_no_patterns(self):
        """No patterns means keep tracking."""
        assert generate_recommendations([]) == [KEEP_TRACKING_ADVICE, DISCLAIMER]


class TestValidation:
    """Test entry validation at the engine boundary."""

    def test_unsorted_entries_rejected(self, engine, make_series):
        """Entries must be sorted ascending by date."""
        entries = make_series([NEUTRAL_DAY] * 8)
        entries[2], entries[5] = entries[5], entries[2]

        with pytest.raises(InvalidEntryError, match="sorted"):
            engine.analyze(entries)

    def test_duplicate_dates_rejected(self, engine, make_series):
        """Dates must be unique."""
        entries = make_series([NEUTRAL_DAY] * 8, days=[0, 1, 2, 3, 3, 4, 5, 6])

        with pytest.raises(InvalidEntryError, match="Duplicate"):
            engine.analyze(entries)

    @pytest.mark.parametrize("overrides", [
        {"mood_rating": 6},
        {"mood_rating": -6},
        {"sleep_hours": 25},
        {"irritability": 9},
        {"energy_level": "manic"},
        {"functional_impairment": "extreme"},
        {"notes": "x" * 501},
        {"date": "not-a-date"},
        {"risky_behavior": "no"},
        {"risky_behavior": 1},
        {"impulsivity": "false"},
    ])
    def test_field_constraints(self, make_entry, overrides):
        """Out-of-range fields raise InvalidEntryError."""
        with pytest.raises(InvalidEntryError):
            make_entry(0, **overrides)

    def test_dict_entries_accepted(self, engine):
        """Plain mappings are converted to MoodEntry."""
        rows = [
            {"date": f"2024-05-{day:02d}", "mood_rating": 1, "energy_level": "normal", "sleep_hours": 7.5}
            for day in range(1, 9)
        ]

        result = engine.analyze(rows)

        assert result.statistics.entry_count == 8
        assert result.statistics.average_mood == pytest.approx(1.0)

    def test_string_flags_in_mapping_rejected(self):
        """Text flags are not coerced with truthiness."""
        row = {"date": "2024-05-01", "mood_rating": 4, "energy_level": "high",
               "sleep_hours": 4, "risky_behavior": "false"}

        with pytest.raises(InvalidEntryError, match="risky_behavior"):
            MoodEntry.from_dict(row)

    def test_null_flags_in_mapping_are_false(self):
        row = {"date": "2024-05-01", "mood_rating": 0, "energy_level": "normal",
               "sleep_hours": 8, "risky_behavior": None, "impulsivity": True}

        entry = MoodEntry.from_dict(row)

        assert entry.risky_behavior is False
        assert entry.impulsivity is True

    def test_missing_field_in_mapping(self):
        """Missing required keys are reported by name."""
        with pytest.raises(InvalidEntryError, match="mood_rating"):
            MoodEntry.from_dict({"date": "2024-05-01", "energy_level": "low", "sleep_hours": 8})


# ============================================================================
# External Summary
# ============================================================================


class TestExternalSummary:
    """Test delegation to an external text generator."""

    @pytest.mark.asyncio
    async def test_generator_text_replaces_summary(self, engine, make_series):
        """A successful generator provides the summary text."""
        generator = AsyncMock(return_value="  A gentle narrative.  ")
        entries = make_series([HYPOMANIC_DAY] * 4 + [NEUTRAL_DAY] * 6)

        result = await engine.analyze_with_external_summary(entries, generator)

        assert result.using_external_generator
        assert result.summary_text == "A gentle narrative."
        assert result.external_error is None
        assert len(result.patterns) == 1
        generator.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_structured_summary_contents(self, engine, make_series):
        """The generator receives aggregates, patterns and risk factors, never notes."""
        generator = AsyncMock(return_value="ok")
        specs = [{**HYPOMANIC_DAY, "risky_behavior": True, "notes": "private"}] * 3 + [NEUTRAL_DAY] * 5

        await engine.analyze_with_external_summary(make_series(specs), generator)

        summary = generator.await_args.args[0]
        assert summary["total_days"] == 8
        assert summary["mood_stats"]["range"] == {"min": 0, "max": 4}
        assert summary["mood_stats"]["episodes"] == {"high": 3, "low": 0}
        assert summary["sleep_stats"]["low_sleep_days"] == 3
        assert summary["sleep_stats"]["pattern"] == [{"date": "2024-03-04", "change": 4.0}]
        assert summary["energy_distribution"]["very_high"] == 3
        assert summary["patterns"][0]["severity"] == "high"
        assert summary["risk_factors"] == [{"factor": "risky_behavior", "days": 3, "severity": "moderate"}]
        assert "private" not in str(summary)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ExternalGeneratorUnavailable("API key not configured"),
        RuntimeError("connection reset"),
        ValueError("bad payload"),
    ])
    async def test_generator_failure_falls_back(self, engine, make_series, error):
        """Any generator exception yields the rule-based result."""
        generator = AsyncMock(side_effect=error)
        entries = make_series([NEUTRAL_DAY] * 10)

        result = await engine.analyze_with_external_summary(entries, generator)

        assert not result.using_external_generator
        assert result.summary_text == engine.analyze(entries).summary_text
        assert result.summary_text
        assert result.recommendations[-1] == DISCLAIMER
        assert result.external_error == str(error)

    @pytest.mark.asyncio
    async def test_generator_timeout_falls_back(self, make_series):
        """A slow generator is abandoned after the timeout."""
        engine = PatternAnalysisEngine(generator_timeout=0.05)

        async def slow_generator(summary):
            await asyncio.sleep(5)
            return "too late"

        result = await engine.analyze_with_external_summary(make_series([NEUTRAL_DAY] * 7), slow_generator)

        assert not result.using_external_generator
        assert "timed out" in result.external_error
        assert result.summary_text

    @pytest.mark.asyncio
    async def test_empty_generator_text_falls_back(self, engine, make_series):
        """Blank generator output is treated as unavailable."""
        generator = AsyncMock(return_value="   ")

        result = await engine.analyze_with_external_summary(make_series([NEUTRAL_DAY] * 7), generator)

        assert not result.using_external_generator
        assert "appear stable" in result.summary_text

    @pytest.mark.asyncio
    async def test_no_generator(self, engine, make_series):
        """Without a generator the rule-based summary is used."""
        result = await engine.analyze_with_external_summary(make_series([NEUTRAL_DAY] * 7), None)

        assert not result.using_external_generator
        assert result.external_error == "No text generator configured"

    @pytest.mark.asyncio
    async def test_insufficient_data_skips_generator(self, engine, make_series):
        """No external call is made for short histories."""
        generator = AsyncMock(return_value="should not be used")

        result = await engine.analyze_with_external_summary(make_series([NEUTRAL_DAY] * 6), generator)

        assert result.insufficient_data
        assert result.summary_text == INSUFFICIENT_DATA_TEXT
        generator.assert_not_awaited()


class TestDailyInsight:
    """Test daily insight generation."""

    @pytest.mark.asyncio
    async def test_generated_insight(self, engine, make_series):
        """The generator receives today's entry and the recent average."""
        entries = make_series([{**NEUTRAL_DAY, "mood_rating": m} for m in (1, 2, 3, -1, 0, 1, 2, 3, 4)])
        generator = AsyncMock(return_value="Nice steady week!")

        insight = await engine.daily_insight(entries[-1], entries[:-1], generator)

        assert insight == "Nice steady week!"
        context = generator.await_args.args[0]
        assert context["today"] == {"mood": 4, "energy": "normal", "sleep": 8.0}
        assert context["previous_days"] == 7
        # Last seven previous moods sum to 10
        assert context["previous_average_mood"] == pytest.approx(round(10 / 7, 2))

    @pytest.mark.asyncio
    async def test_failed_insight_uses_fallback(self, engine, make_entry):
        """Failures produce the fixed encouragement."""
        generator = AsyncMock(side_effect=ExternalGeneratorUnavailable("down"))

        insight = await engine.daily_insight(make_entry(0), [], generator)

        assert insight == DAILY_INSIGHT_FALLBACK

    @pytest.mark.asyncio
    async def test_no_generator(self, engine, make_entry):
        """Without a generator the fixed encouragement is returned."""
        assert await engine.daily_insight(make_entry(0), []) == DAILY_INSIGHT_FALLBACK


class TestSummaryText:
    """Test the rule-based summary wording."""

    def test_stable_summary_mentions_averages(self, engine, make_series):
        """Stable periods report average mood and sleep."""
        result = engine.analyze(make_series([{**NEUTRAL_DAY, "mood_rating": 2, "sleep_hours": 7.5}] * 7))

        text = build_summary_text(result.statistics, result.patterns)

        assert text.startswith("Over the past 7 days, ")
        assert "average mood of 2.0" in text
        assert "7.5 hours of sleep" in text
