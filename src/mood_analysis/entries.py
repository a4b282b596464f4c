"""
Daily mood entry model.

Entries are produced by the surrounding application (already sorted by
date and unique per user). Field constraints are enforced here so the
analysis code never has to second-guess its input.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Union

logger = logging.getLogger(__name__)

MAX_NOTES_LENGTH = 500


class InvalidEntryError(ValueError):
    """A mood entry (or a sequence of entries) violates its constraints."""


class EnergyLevel(str, Enum):
    """Self-reported energy, ordered from low to very high."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    VERY_HIGH = "very_high"


class GoalDirectedActivity(str, Enum):
    """How much goal-directed activity the user reported."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class FunctionalImpairment(str, Enum):
    """Impact on daily functioning, ordered from none to severe."""

    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


def _coerce_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidEntryError(
            f"{field_name} must be one of: {allowed} (got {value!r})"
        ) from None


def _flag(data: Dict[str, Any], key: str):
    """Missing or null flags mean false; anything else is checked by MoodEntry."""
    value = data.get(key)
    return False if value is None else value


@dataclass
class MoodEntry:
    """One day of self-reported mood and behaviour."""

    date: date
    mood_rating: int
    energy_level: EnergyLevel
    sleep_hours: float
    irritability: int = 0
    risky_behavior: bool = False
    impulsivity: bool = False
    goal_directed_activity: GoalDirectedActivity = GoalDirectedActivity.NORMAL
    functional_impairment: FunctionalImpairment = FunctionalImpairment.NONE
    notes: str = ""

    def __post_init__(self):
        if isinstance(self.date, str):
            try:
                self.date = date.fromisoformat(self.date)
            except ValueError:
                raise InvalidEntryError(f"date is not an ISO date: {self.date!r}") from None

        if isinstance(self.mood_rating, bool) or not isinstance(self.mood_rating, int):
            raise InvalidEntryError(f"mood_rating must be an integer (got {self.mood_rating!r})")
        if not -5 <= self.mood_rating <= 5:
            raise InvalidEntryError(f"mood_rating must be in [-5, 5] (got {self.mood_rating})")

        if isinstance(self.irritability, bool) or not isinstance(self.irritability, int):
            raise InvalidEntryError(f"irritability must be an integer (got {self.irritability!r})")
        if not 0 <= self.irritability <= 5:
            raise InvalidEntryError(f"irritability must be in [0, 5] (got {self.irritability})")

        for flag in ("risky_behavior", "impulsivity"):
            value = getattr(self, flag)
            if not isinstance(value, bool):
                raise InvalidEntryError(f"{flag} must be true or false (got {value!r})")

        try:
            self.sleep_hours = float(self.sleep_hours)
        except (TypeError, ValueError):
            raise InvalidEntryError(f"sleep_hours must be a number (got {self.sleep_hours!r})") from None
        if not 0 <= self.sleep_hours <= 24:
            raise InvalidEntryError(f"sleep_hours must be in [0, 24] (got {self.sleep_hours})")

        self.energy_level = _coerce_enum(EnergyLevel, self.energy_level, "energy_level")
        self.goal_directed_activity = _coerce_enum(
            GoalDirectedActivity, self.goal_directed_activity, "goal_directed_activity"
        )
        self.functional_impairment = _coerce_enum(
            FunctionalImpairment, self.functional_impairment, "functional_impairment"
        )

        self.notes = self.notes or ""
        if len(self.notes) > MAX_NOTES_LENGTH:
            raise InvalidEntryError(
                f"notes must be at most {MAX_NOTES_LENGTH} characters (got {len(self.notes)})"
            )

    @property
    def is_elevated(self) -> bool:
        """Mood at or above the hypomanic threshold."""
        return self.mood_rating >= 3

    @property
    def is_low(self) -> bool:
        """Mood at or below the depressive threshold."""
        return self.mood_rating <= -2

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "date": self.date.isoformat(),
            "mood_rating": self.mood_rating,
            "energy_level": self.energy_level.value,
            "sleep_hours": self.sleep_hours,
            "irritability": self.irritability,
            "risky_behavior": self.risky_behavior,
            "impulsivity": self.impulsivity,
            "goal_directed_activity": self.goal_directed_activity.value,
            "functional_impairment": self.functional_impairment.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoodEntry":
        """Build an entry from a plain mapping, ignoring unknown keys."""
        try:
            return cls(
                date=data["date"],
                mood_rating=data["mood_rating"],
                energy_level=data["energy_level"],
                sleep_hours=data["sleep_hours"],
                irritability=data.get("irritability", 0),
                risky_behavior=_flag(data, "risky_behavior"),
                impulsivity=_flag(data, "impulsivity"),
                goal_directed_activity=data.get("goal_directed_activity", "normal"),
                functional_impairment=data.get("functional_impairment", "none"),
                notes=data.get("notes") or "",
            )
        except KeyError as e:
            raise InvalidEntryError(f"Missing required field: {e.args[0]}") from None


def validate_entries(entries: Iterable[Union[MoodEntry, Dict[str, Any]]]) -> List[MoodEntry]:
    """
    Check that entries are in strictly ascending date order.

    Mappings are converted to MoodEntry. Gaps between dates are allowed;
    duplicate or out-of-order dates are not.

    Raises:
        InvalidEntryError: if an entry is malformed or the order is wrong
    """
    validated = []
    previous = None

    for item in entries:
        entry = item if isinstance(item, MoodEntry) else MoodEntry.from_dict(item)

        if previous is not None:
            if entry.date == previous.date:
                raise InvalidEntryError(f"Duplicate entry for {entry.date.isoformat()}")
            if entry.date < previous.date:
                raise InvalidEntryError(
                    f"Entries must be sorted by date: {entry.date.isoformat()} "
                    f"follows {previous.date.isoformat()}"
                )

        validated.append(entry)
        previous = entry

    logger.debug(f"[ENTRIES] Validated {len(validated)} entries")
    return validated
