from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SubjectKind(str, Enum):
    venue = "venue"
    menu_item = "menu_item"


class HeartAction(str, Enum):
    like = "like"
    unlike = "unlike"


class LedgerKind(str, Enum):
    daily = "daily"
    historical = "historical"


class HeartEvent(BaseModel):
    """A single heart, stamped with the wall-clock context it was given in."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    subject_id: int | str
    venue_id: int | None = None
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday")
    time_of_day: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    date_created: date
    timestamp: datetime

    @classmethod
    def create(
        cls,
        user_id: str,
        subject_id: int | str,
        venue_id: int | None,
        now: datetime,
    ) -> HeartEvent:
        return cls(
            user_id=user_id,
            subject_id=subject_id,
            venue_id=venue_id,
            day_of_week=now.isoweekday() % 7,
            time_of_day=now.strftime("%H:%M"),
            date_created=now.date(),
            timestamp=now,
        )


class _HeartCollections(BaseModel):
    venue_hearts: list[HeartEvent] = Field(default_factory=list)
    menu_item_hearts: list[HeartEvent] = Field(default_factory=list)

    def collection(self, kind: SubjectKind) -> list[HeartEvent]:
        if kind is SubjectKind.venue:
            return self.venue_hearts
        return self.menu_item_hearts

    def replace_collection(self, kind: SubjectKind, hearts: list[HeartEvent]) -> None:
        if kind is SubjectKind.venue:
            self.venue_hearts = hearts
        else:
            self.menu_item_hearts = hearts

    def for_user(self, user_id: str, kind: SubjectKind) -> list[HeartEvent]:
        return [h for h in self.collection(kind) if h.user_id == user_id]


class DailyLedger(_HeartCollections):
    last_transfer_date: date

    def is_empty(self) -> bool:
        return not self.venue_hearts and not self.menu_item_hearts


class HistoricalArchive(_HeartCollections):
    last_merged_date: date | None = None


# ── Operation results ────────────────────────────────────────────────────


class HeartResult(BaseModel):
    success: bool
    is_liked: bool


class DailyHearts(BaseModel):
    venue_ids: set[int] = Field(default_factory=set)
    menu_item_ids: set[str] = Field(default_factory=set)


class HistoricalHearts(BaseModel):
    venue_hearts: list[HeartEvent] = Field(default_factory=list)
    menu_item_hearts: list[HeartEvent] = Field(default_factory=list)


class RemovalResult(BaseModel):
    success: bool


# ── HTTP payloads ────────────────────────────────────────────────────────


class VenueHeartRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    venue_id: int
    action: HeartAction


class MenuItemHeartRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    menu_item_id: str = Field(..., min_length=1)
    action: HeartAction
    venue_id: int | None = Field(
        default=None, description="Venue the menu item was on when it was liked"
    )


class DailyHeartsResponse(BaseModel):
    venue_ids: list[int]
    menu_item_ids: list[str]


class RolloverResponse(BaseModel):
    rolled_over: bool
