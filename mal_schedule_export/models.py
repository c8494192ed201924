"""Pydantic models for schedule data.

Attribute names are Pythonic; aliases are the JSON keys served by the API
(``members``, ``imageUrl``, ``day``, ``aired``, ``episodes``, ``duration``).
"""

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_TITLE = "Unknown Title"


class Record(BaseModel):
    """One program entry from a day column of the schedule page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = None  # digits from /anime/<id>/ in the title link
    title: str
    score: float | None = None
    audience: int | None = Field(default=None, alias="members")
    image_url: str | None = Field(default=None, alias="imageUrl")
    group: str = Field(alias="day")  # label of the owning day group
    air_date: str | None = Field(default=None, alias="aired")  # e.g. "Oct 6, 2025"
    episode_count: str | None = Field(default=None, alias="episodes")  # digits or "?"
    episode_duration: str | None = Field(default=None, alias="duration")  # "<N> min"

    @property
    def has_title(self) -> bool:
        return bool(self.title) and self.title != FALLBACK_TITLE


class ScheduleGroup(BaseModel):
    """A day bucket and its records, in document order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(alias="day")
    records: tuple[Record, ...] = Field(default=(), alias="anime")


class Schedule(BaseModel):
    """Non-empty day groups in fixed bucket order."""

    model_config = ConfigDict(frozen=True)

    groups: tuple[ScheduleGroup, ...] = ()

    @property
    def total(self) -> int:
        return sum(len(g.records) for g in self.groups)

    def to_payload(self, last_updated: int) -> dict:
        """Render the API response body."""
        return {
            "lastUpdated": last_updated,
            "total": self.total,
            "schedule": [g.model_dump(by_alias=True, mode="json") for g in self.groups],
        }
