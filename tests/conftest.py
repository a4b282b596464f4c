"""
Pytest fixtures for Mood Tracker tests.
"""
import sys
import random
import pytest
from pathlib import Path
from datetime import date, timedelta
from dotenv import load_dotenv

# Ensure src/ and the project root are on sys.path so tests can import
# mood_analysis and the server package without installation.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
SCRIPTS = ROOT / "scripts"
for path in (SRC, ROOT, SCRIPTS):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from mood_analysis import MoodEntry  # noqa: E402


# ============================================================================
# Entry Fixtures
# ============================================================================

START_DATE = date(2024, 3, 1)

NEUTRAL_DAY = {"mood_rating": 0, "energy_level": "normal", "sleep_hours": 8.0}
HYPOMANIC_DAY = {"mood_rating": 4, "energy_level": "very_high", "sleep_hours": 4.0}
DEPRESSIVE_DAY = {"mood_rating": -3, "energy_level": "low", "sleep_hours": 9.5}


def build_entry(day: int = 0, **overrides) -> MoodEntry:
    """Entry on START_DATE + day, neutral unless overridden."""
    fields = {"date": START_DATE + timedelta(days=day), **NEUTRAL_DAY}
    fields.update(overrides)
    return MoodEntry(**fields)


@pytest.fixture
def make_entry():
    """Factory for a single entry: make_entry(day, **fields)."""
    return build_entry


@pytest.fixture
def make_series():
    """
    Factory for consecutive daily entries.

    Accepts a list of field dicts (one per day, starting at START_DATE)
    and an optional list of day offsets for sequences with gaps.
    """
    def _make(specs: list, days: list = None) -> list:
        offsets = days if days is not None else range(len(specs))
        return [build_entry(day, **spec) for day, spec in zip(offsets, specs)]

    return _make


# ============================================================================
# Database Fixtures
# ============================================================================

DEMO_USER = "demo-user"


@pytest.fixture
def mood_db(tmp_path):
    """
    Create a demo mood.db in a temporary directory.

    Uses the populate script so the schema matches what the API reads.
    Returns the directory holding the database.
    """
    from populate_database import build_demo_entries, populate_database

    entries = build_demo_entries(DEMO_USER, 30, date.today(), random.Random(7))
    populate_database(tmp_path / "mood.db", entries)
    return tmp_path
