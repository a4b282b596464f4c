#!/usr/bin/env python3
"""
Populate a demo SQLite mood database.

Creates mood.db with a month of entries for a demo user, including one
elevated stretch and one low stretch so the pattern analysis has
something to find. Columns are stored as TEXT, matching what the
tracking application writes.

Usage:
    python scripts/populate_database.py [--user demo-user] [--days 30]
"""
import argparse
import os
import random
import sqlite3
import uuid
from datetime import date, timedelta
from pathlib import Path


# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
DB_FILE = "mood.db"
TABLE_NAME = "mood_entries"

COLUMNS = [
    "entry_id",
    "user_id",
    "date",
    "mood_rating",
    "energy_level",
    "sleep_hours",
    "irritability",
    "risky_behavior",
    "impulsivity",
    "goal_directed_activity",
    "functional_impairment",
    "notes",
]


def build_demo_entries(user_id: str, days: int, end: date, rng: random.Random) -> list[dict]:
    """
    Generate one entry per day ending at ``end``.

    Days 10-13 look hypomanic and days 19-24 look depressive (counted
    from the start of the window) when the window is long enough.
    """
    start = end - timedelta(days=days - 1)
    entries = []

    for offset in range(days):
        day = start + timedelta(days=offset)
        entry = {
            "entry_id": str(uuid.UUID(int=rng.getrandbits(128))),
            "user_id": user_id,
            "date": day.isoformat(),
            "mood_rating": rng.choice([-1, 0, 0, 1, 1, 2]),
            "energy_level": rng.choice(["normal", "normal", "high", "low"]),
            "sleep_hours": round(rng.uniform(6.5, 8.5), 1),
            "irritability": rng.randint(0, 2),
            "risky_behavior": 0,
            "impulsivity": 0,
            "goal_directed_activity": "normal",
            "functional_impairment": "none",
            "notes": "",
        }

        if 10 <= offset <= 13:
            entry.update(
                mood_rating=rng.choice([3, 4]),
                energy_level="very_high",
                sleep_hours=round(rng.uniform(3.5, 5.5), 1),
                impulsivity=1,
                risky_behavior=1 if offset == 12 else 0,
                goal_directed_activity="high",
                notes="Racing thoughts, started three new projects",
            )
        elif 19 <= offset <= 24:
            entry.update(
                mood_rating=rng.choice([-3, -2]),
                energy_level="low",
                sleep_hours=round(rng.uniform(9.0, 11.0), 1),
                irritability=rng.randint(3, 4),
                goal_directed_activity="low",
                functional_impairment="moderate",
                notes="Hard to get out of bed",
            )

        entries.append(entry)

    return entries


def populate_database(db_path: Path, entries: list[dict]) -> int:
    """
    Create the mood_entries table and insert entries.

    Returns:
        Number of rows in the table
    """
    # Remove existing database file
    if db_path.exists():
        os.remove(db_path)
        print(f"  Removed existing: {db_path.name}")

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    columns = ["id INTEGER PRIMARY KEY AUTOINCREMENT"] + [f"{col} TEXT" for col in COLUMNS]
    cursor.execute(f"CREATE TABLE {TABLE_NAME} ({', '.join(columns)})")
    cursor.execute(f"CREATE INDEX idx_{TABLE_NAME}_user_date ON {TABLE_NAME} (user_id, date)")

    placeholders = ", ".join(["?"] * len(COLUMNS))
    insert_sql = f"INSERT INTO {TABLE_NAME} ({', '.join(COLUMNS)}) VALUES ({placeholders})"
    cursor.executemany(insert_sql, [[str(e[col]) for col in COLUMNS] for e in entries])
    conn.commit()

    cursor.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}")
    count = cursor.fetchone()[0]

    conn.close()
    return count


def main():
    """Populate the demo mood database."""
    parser = argparse.ArgumentParser(description="Populate demo mood database")
    parser.add_argument("--user", default="demo-user", help="User id for the demo entries")
    parser.add_argument("--days", type=int, default=30, help="Number of days to generate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    print("=" * 60)
    print("Mood Tracker Database Population Script")
    print("=" * 60)

    db_path = BASE_DIR / DB_FILE
    entries = build_demo_entries(args.user, args.days, date.today(), random.Random(args.seed))
    count = populate_database(db_path, entries)

    print(f"\nCreated table: {TABLE_NAME}")
    print(f"Rows inserted: {count}")
    size_kb = db_path.stat().st_size / 1024
    print(f"Database file: {db_path} ({size_kb:.1f} KB)")


if __name__ == "__main__":
    main()
