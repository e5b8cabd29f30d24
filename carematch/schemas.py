"""Pydantic schemas shared across the library."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


def _uuid() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


class UserType(str, Enum):
    PARENT = "parent"
    NANNY = "nanny"

    @property
    def opposite(self) -> "UserType":
        return UserType.NANNY if self is UserType.PARENT else UserType.PARENT


class Account(BaseModel):
    username: str
    email: str
    password: str
    user_type: UserType


class Session(BaseModel):
    logged_in: bool = False
    user_type: Optional[UserType] = None
    logged_in_email: Optional[str] = None


class Profile(BaseModel):
    id: str = Field(default_factory=_uuid)
    user_type: UserType
    email: Optional[str] = None
    name: str = ""
    age: int = Field(default=0, ge=0)
    description: str = ""
    image_refs: List[str] = Field(default_factory=list)


class NannyExtras(BaseModel):
    experience: int = 0
    hourly_rate: float = 0.0
    location: str = ""
    languages: List[str] = Field(default_factory=list)
    available_days: List[str] = Field(default_factory=list)
    weekend_availability: bool = False


class ParentExtras(BaseModel):
    number_of_children: int = 0
    children_ages: str = ""
    location: str = ""
    preferred_rate: Optional[float] = None
    needs_weekends: bool = False


class ChildGender(str, Enum):
    BOY = "boy"
    GIRL = "girl"


class ChildProfile(BaseModel):
    id: str = Field(default_factory=_uuid)
    name: str
    age: int = Field(default=5, ge=0)
    gender: ChildGender = ChildGender.BOY
    allergies: List[str] = Field(default_factory=list)
    favorite_activities: List[str] = Field(default_factory=list)
    special_notes: str = ""
    image_ref: Optional[str] = None


class Message(BaseModel):
    sender: Optional[str] = None
    text: str
    sent_at: Optional[datetime] = None


class WidgetType(str, Enum):
    REMINDERS = "reminders"
    SCHEDULE = "schedule"
    CHILD_LOG = "child_log"
    WEATHER = "weather"
    NOTES = "notes"
    EMERGENCY_CONTACTS = "emergency_contacts"


WIDGET_TITLES = {
    WidgetType.REMINDERS: "Reminders",
    WidgetType.SCHEDULE: "Schedule",
    WidgetType.CHILD_LOG: "Child Log",
    WidgetType.WEATHER: "Weather",
    WidgetType.NOTES: "Notes",
    WidgetType.EMERGENCY_CONTACTS: "Emergency",
}


class WidgetSize(str, Enum):
    SMALL = "small"
    LARGE = "large"


class LogCategory(str, Enum):
    FOOD = "food"
    SLEEP = "sleep"
    PLAY = "play"
    MEDICINE = "medicine"
    MOOD = "mood"


class ScheduleItem(BaseModel):
    id: str = Field(default_factory=_uuid)
    time: str
    activity: str = ""
    icon: str = ""


class LogEntry(BaseModel):
    id: str = Field(default_factory=_uuid)
    category: LogCategory
    note: str = ""
    timestamp: datetime = Field(default_factory=_now)


class RemindersData(BaseModel):
    kind: Literal["reminders"] = "reminders"
    items: List[str] = Field(default_factory=list)


class ScheduleData(BaseModel):
    kind: Literal["schedule"] = "schedule"
    entries: List[ScheduleItem] = Field(default_factory=list)


class ChildLogData(BaseModel):
    kind: Literal["child_log"] = "child_log"
    entries: List[LogEntry] = Field(default_factory=list)


class WeatherData(BaseModel):
    kind: Literal["weather"] = "weather"
    temperature: str = ""
    summary: str = ""


class NotesData(BaseModel):
    kind: Literal["notes"] = "notes"
    text: str = ""


class EmergencyData(BaseModel):
    kind: Literal["emergency_contacts"] = "emergency_contacts"
    contacts: List[str] = Field(default_factory=list)


WidgetData = Annotated[
    Union[RemindersData, ScheduleData, ChildLogData, WeatherData, NotesData, EmergencyData],
    Field(discriminator="kind"),
]


class Widget(BaseModel):
    id: str = Field(default_factory=_uuid)
    type: WidgetType
    size: WidgetSize = WidgetSize.LARGE
    position: int = 0
    is_enabled: bool = True
    last_updated: datetime = Field(default_factory=_now)
    data: WidgetData

    @model_validator(mode="after")
    def _data_matches_type(self) -> "Widget":
        if self.data.kind != self.type.value:
            raise ValueError(f"{self.type.value} widget cannot hold {self.data.kind} data")
        return self


class LegacyWidget(BaseModel):
    id: str = Field(default_factory=_uuid)
    title: str
    items: List[str] = Field(default_factory=list)
    size: WidgetSize
