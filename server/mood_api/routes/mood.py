"""Mood entry API routes."""
import logging
import sqlite3
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from mood_analysis import InvalidEntryError, MoodEntry
from ..config import get_settings
from .. import database
from ..models.mood import MoodEntryRecord

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mood", tags=["Mood Entries"])

ISO_DATE_GLOB = "[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]"

TRUE_FLAGS = ("1", "1.0", "true", "yes")
FALSE_FLAGS = ("", "0", "0.0", "false", "no")


def _to_bool(val, field: str) -> bool:
    """SQLite stores flags as TEXT ('1', 'true', ...); NULL means not set."""
    if val is None:
        return False
    text = str(val).strip().lower()
    if text in TRUE_FLAGS:
        return True
    if text in FALSE_FLAGS:
        return False
    raise InvalidEntryError(f"{field} is not a boolean flag: {val!r}")


def _to_float(val, field: str) -> float:
    """Parse a numeric TEXT column; NULL and empty values are rejected."""
    if val is None or str(val).strip() == "":
        raise InvalidEntryError(f"{field} is missing")
    try:
        return float(val)
    except ValueError:
        raise InvalidEntryError(f"{field} is not a number: {val!r}") from None


def _to_int(val, field: str) -> int:
    """Parse an integer TEXT column, accepting float strings like '3.0' only."""
    number = _to_float(val, field)
    if not number.is_integer():
        raise InvalidEntryError(f"{field} must be a whole number: {val!r}")
    return int(number)


def _parse_date(val) -> Optional[date]:
    try:
        return datetime.strptime(val, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def _row_to_entry(row) -> MoodEntry:
    """Convert SQLite row to MoodEntry, raising InvalidEntryError for bad values."""
    irritability = row["irritability"]
    return MoodEntry(
        date=row["date"],
        mood_rating=_to_int(row["mood_rating"], "mood_rating"),
        energy_level=row["energy_level"],
        sleep_hours=_to_float(row["sleep_hours"], "sleep_hours"),
        # Irritability is optional and defaults to 0 when not recorded
        irritability=0 if irritability in (None, "") else _to_int(irritability, "irritability"),
        risky_behavior=_to_bool(row["risky_behavior"], "risky_behavior"),
        impulsivity=_to_bool(row["impulsivity"], "impulsivity"),
        goal_directed_activity=row["goal_directed_activity"] or "normal",
        functional_impairment=row["functional_impairment"] or "none",
        notes=row["notes"] or "",
    )


def fetch_entries(user_id: str, days: Optional[int] = None) -> list[MoodEntry]:
    """
    Load a user's entries for the analysis window, oldest first.

    The window ends at the user's most recent entry with a valid date.
    Rows that fail validation are skipped; if a date appears twice the
    later row wins.
    """
    days = days or get_settings().analysis_window_days

    try:
        with database.db_manager.get_mood_conn() as conn:
            cursor = conn.cursor()

            # Use the most recent parseable date as reference point
            cursor.execute(
                f"""
                SELECT DISTINCT date FROM {database.MOOD_TABLE}
                WHERE user_id = ? AND date GLOB ?
                ORDER BY date DESC
                """,
                (user_id, ISO_DATE_GLOB),
            )
            max_date = next(
                (d for d in (_parse_date(r["date"]) for r in cursor.fetchall()) if d), None
            )

            if max_date is None:
                return []

            cutoff_date = max_date - timedelta(days=days - 1)

            cursor.execute(
                f"""
                SELECT * FROM {database.MOOD_TABLE}
                WHERE user_id = ? AND date GLOB ? AND date >= ? AND date <= ?
                ORDER BY date ASC, rowid ASC
                """,
                (user_id, ISO_DATE_GLOB, str(cutoff_date), str(max_date)),
            )
            rows = cursor.fetchall()
    except sqlite3.OperationalError as e:
        log.error(f"[ENTRIES] Mood database unavailable: {e}")
        raise HTTPException(status_code=503, detail="Mood database unavailable")

    by_date: dict = {}
    for row in rows:
        try:
            entry = _row_to_entry(row)
        except ValueError as e:
            log.warning(f"[ENTRIES] Skipping invalid entry for {user_id} on {row['date']}: {e}")
            continue
        by_date[entry.date] = entry

    return list(by_date.values())


@router.get("/entries", response_model=list[MoodEntryRecord], response_model_by_alias=True)
async def get_mood_entries(
    user_id: str = Query(min_length=1, description="User whose entries to return"),
    days: int = Query(default=30, ge=1, le=90, description="Number of days of history"),
):
    """Get mood entries for the specified number of days, newest first."""
    entries = fetch_entries(user_id, days)
    return [MoodEntryRecord.from_entry(e) for e in reversed(entries)]
