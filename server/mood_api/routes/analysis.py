"""Pattern analysis API routes.

Rule-based analysis is always available. The AI analysis and daily
insight endpoints delegate narrative text to the configured chat
completion API and fall back to deterministic text when it fails.
"""
import logging
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mood_analysis import ChatCompletionClient, InvalidEntryError, pattern_engine
from mood_analysis.statistics import (
    compute_metrics,
    compute_statistics,
    compute_trends,
    is_streak_milestone,
)
from ..config import get_settings
from ..models.analysis import (
    AnalysisMetricsOut,
    AnalysisResponse,
    AnalyzeRequest,
    DashboardStats,
    InsightResponse,
    TrendsOut,
)
from .mood import fetch_entries

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["Pattern Analysis"])

NO_ENTRY_TODAY_INSIGHT = "Log today's mood to receive a personalized insight!"


@lru_cache
def get_text_generator() -> ChatCompletionClient:
    """Chat completion client built once from settings."""
    settings = get_settings()
    return ChatCompletionClient(
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        api_url=settings.llm_api_url,
        timeout=settings.llm_timeout_seconds,
    )


@router.get("/patterns", response_model=AnalysisResponse, response_model_by_alias=True)
async def get_pattern_analysis(
    user_id: str = Query(min_length=1),
    days: Optional[int] = Query(default=None, ge=1, le=90, description="Analysis window in days"),
):
    """Rule-based pattern analysis over the user's recent entries."""
    entries = fetch_entries(user_id, days)
    result = pattern_engine.analyze(entries)
    return AnalysisResponse.from_result(result)


@router.get("/ai-analysis", response_model=AnalysisResponse, response_model_by_alias=True)
async def get_ai_analysis(
    user_id: str = Query(min_length=1),
    days: Optional[int] = Query(default=None, ge=1, le=90, description="Analysis window in days"),
    generator: ChatCompletionClient = Depends(get_text_generator),
):
    """
    Pattern analysis with an AI-written summary.

    Falls back to the rule-based summary when the completion API is not
    configured or fails; check ``usingExternalGenerator`` in the response.
    """
    entries = fetch_entries(user_id, days)
    result = await pattern_engine.analyze_with_external_summary(entries, generator)
    return AnalysisResponse.from_result(result)


@router.post("/analyze", response_model=AnalysisResponse, response_model_by_alias=True)
async def analyze_submitted_entries(
    request: AnalyzeRequest,
    generator: ChatCompletionClient = Depends(get_text_generator),
):
    """
    Analyze entries supplied in the request body.

    Entries are sorted by date before analysis; duplicate dates are rejected.
    """
    records = sorted(request.entries, key=lambda r: r.date)

    try:
        entries = [r.to_entry() for r in records]
        if request.narrative:
            result = await pattern_engine.analyze_with_external_summary(entries, generator)
        else:
            result = pattern_engine.analyze(entries)
    except InvalidEntryError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return AnalysisResponse.from_result(result)


@router.get("/dashboard", response_model=DashboardStats, response_model_by_alias=True)
async def get_dashboard_stats(
    user_id: str = Query(min_length=1),
    days: Optional[int] = Query(default=None, ge=1, le=90, description="Analysis window in days"),
):
    """Stats cards: averages, streak, dominant energy, wellness score and trends."""
    entries = fetch_entries(user_id, days)
    stats = compute_statistics(entries)
    metrics = compute_metrics(entries)
    trends = compute_trends(entries)

    return DashboardStats(
        average_mood=round(stats.average_mood, 1),
        average_sleep=round(stats.average_sleep, 1),
        streak_days=stats.streak_days,
        streak_milestone=is_streak_milestone(stats.streak_days),
        energy_level=stats.dominant_energy.value,
        mood_variability=round(stats.mood_volatility, 1),
        wellness_score=round(stats.wellness_score),
        metrics=AnalysisMetricsOut(**metrics.to_dict()),
        trends=TrendsOut(**trends.to_dict()) if trends else None,
    )


@router.get("/daily-insight", response_model=InsightResponse)
async def get_daily_insight(
    user_id: str = Query(min_length=1),
    generator: ChatCompletionClient = Depends(get_text_generator),
):
    """Short encouragement based on today's entry and the previous week."""
    entries = fetch_entries(user_id, 8)
    today = date.today()
    generated_at = datetime.now(timezone.utc).isoformat()

    if not entries or entries[-1].date != today:
        return InsightResponse(insight=NO_ENTRY_TODAY_INSIGHT, generated_at=generated_at)

    insight = await pattern_engine.daily_insight(
        entries[-1], entries[:-1], generator.daily_insight
    )
    log.info(f"[ANALYSIS] Daily insight generated for {user_id}")
    return InsightResponse(insight=insight, generated_at=generated_at)
