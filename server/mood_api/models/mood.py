"""Mood entry data models."""
import datetime
from pydantic import BaseModel, Field, ConfigDict
from typing import Literal

from mood_analysis import MoodEntry

EnergyLevelName = Literal["low", "normal", "high", "very_high"]
ActivityLevelName = Literal["low", "normal", "high"]
ImpairmentName = Literal["none", "mild", "moderate", "severe"]


class MoodEntryRecord(BaseModel):
    """Daily mood entry as sent and returned by the API (camelCase or snake_case accepted)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    date: datetime.date
    mood_rating: int = Field(ge=-5, le=5, alias="moodRating")
    energy_level: EnergyLevelName = Field(alias="energyLevel")
    sleep_hours: float = Field(ge=0, le=24, alias="sleepHours")
    irritability: int = Field(default=0, ge=0, le=5)
    risky_behavior: bool = Field(default=False, alias="riskyBehavior")
    impulsivity: bool = False
    goal_directed_activity: ActivityLevelName = Field(default="normal", alias="goalDirectedActivity")
    functional_impairment: ImpairmentName = Field(default="none", alias="functionalImpairment")
    notes: str = Field(default="", max_length=500)

    def to_entry(self) -> MoodEntry:
        """Convert to the analysis engine's entry type."""
        return MoodEntry(
            date=self.date,
            mood_rating=self.mood_rating,
            energy_level=self.energy_level,
            sleep_hours=self.sleep_hours,
            irritability=self.irritability,
            risky_behavior=self.risky_behavior,
            impulsivity=self.impulsivity,
            goal_directed_activity=self.goal_directed_activity,
            functional_impairment=self.functional_impairment,
            notes=self.notes,
        )

    @classmethod
    def from_entry(cls, entry: MoodEntry) -> "MoodEntryRecord":
        return cls.model_validate(entry.to_dict())
