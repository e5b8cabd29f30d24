"""Dashboard widgets: typed per-account widgets plus the pre-login legacy set."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from . import profiles
from .context import AppContext
from .errors import ValidationError
from .schemas import (
    WIDGET_TITLES,
    ChildLogData,
    EmergencyData,
    LegacyWidget,
    LogCategory,
    LogEntry,
    NotesData,
    RemindersData,
    ScheduleData,
    ScheduleItem,
    UserType,
    WeatherData,
    Widget,
    WidgetSize,
    WidgetType,
)

logger = logging.getLogger(__name__)

LEGACY_WIDGETS_KEY = "extraWidgets"
DEFAULT_REMINDER = "Lunch 12 PM"
DEFAULT_SCHEDULE = [("9:00", "🎓"), ("3:30", "🏀"), ("7:00", "🏥")]
DEFAULT_NOTE = "Leave a note..."
DEFAULT_EMERGENCY_CONTACTS = ["Dr. Smith: (555) 123-4567", "Emergency: 911"]
LOG_CATEGORY_ICONS = {
    LogCategory.FOOD: "🍎",
    LogCategory.SLEEP: "🛏️",
    LogCategory.PLAY: "⚽",
    LogCategory.MEDICINE: "💊",
    LogCategory.MOOD: "😊",
}

_EMPTY_DATA = {
    WidgetType.REMINDERS: RemindersData,
    WidgetType.SCHEDULE: ScheduleData,
    WidgetType.CHILD_LOG: ChildLogData,
    WidgetType.WEATHER: WeatherData,
    WidgetType.NOTES: NotesData,
    WidgetType.EMERGENCY_CONTACTS: EmergencyData,
}


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def widgets_key(email: str) -> str:
    return f"widgets_{email}"


def new_widget(widget_type: WidgetType, *, size: WidgetSize = WidgetSize.LARGE, position: int = 0) -> Widget:
    return Widget(type=widget_type, size=size, position=position, data=_EMPTY_DATA[widget_type]())


def load_widgets(ctx: AppContext, email: str) -> List[Widget]:
    if not email:
        return []
    raw = ctx.store.get(widgets_key(email), [])
    if not isinstance(raw, list):
        return []
    try:
        return [Widget.model_validate(item) for item in raw]
    except PydanticValidationError:
        logger.warning("Discarding undecodable widgets for %s", email)
        return []


def save_widgets(ctx: AppContext, email: str, widgets: List[Widget]) -> None:
    if not email:
        logger.warning("Cannot save widgets without a logged-in email")
        return
    ctx.store.set(widgets_key(email), [widget.model_dump(mode="json") for widget in widgets])


def toggle_widget(
    ctx: AppContext,
    email: str,
    user_type: UserType,
    widget_type: WidgetType,
    *,
    size: WidgetSize = WidgetSize.LARGE,
) -> List[Widget]:
    """Add a widget of ``widget_type`` or remove the one already present."""
    if not profiles.is_complete(profiles.load(ctx, user_type, email)):
        raise ValidationError("Complete your profile before adding widgets.")

    widgets = load_widgets(ctx, email)
    existing = next((index for index, widget in enumerate(widgets) if widget.type == widget_type), None)
    if existing is not None:
        widgets.pop(existing)
    else:
        widgets.append(new_widget(widget_type, size=size, position=len(widgets)))
    save_widgets(ctx, email, widgets)
    return widgets


def remove_widget(ctx: AppContext, email: str, widget_id: str) -> List[Widget]:
    widgets = [widget for widget in load_widgets(ctx, email) if widget.id != widget_id]
    save_widgets(ctx, email, widgets)
    return widgets


def get_widget(ctx: AppContext, email: str, widget_id: str) -> Widget:
    for widget in load_widgets(ctx, email):
        if widget.id == widget_id:
            return widget
    raise ValueError(f"Widget {widget_id} not found")


def update_widget(ctx: AppContext, email: str, updated: Widget) -> Widget:
    widgets = load_widgets(ctx, email)
    for index, widget in enumerate(widgets):
        if widget.id == updated.id:
            updated = updated.model_copy(update={"last_updated": _now()})
            widgets[index] = updated
            save_widgets(ctx, email, widgets)
            return updated
    raise ValueError(f"Widget {updated.id} not found")


def _expect(widget: Widget, data_type):
    if not isinstance(widget.data, data_type):
        raise ValidationError(f"{WIDGET_TITLES[widget.type]} widget does not support this change.")
    return widget.data


def add_reminder(widget: Widget, text: Optional[str] = None) -> Widget:
    data = _expect(widget, RemindersData)
    item = (text or "").strip() or DEFAULT_REMINDER
    return widget.model_copy(update={"data": data.model_copy(update={"items": [*data.items, item]})})


def add_schedule_entry(widget: Widget, time: str, activity: str = "", icon: str = "") -> Widget:
    data = _expect(widget, ScheduleData)
    if not time.strip():
        raise ValidationError("Schedule entries need a time.")
    entry = ScheduleItem(time=time.strip(), activity=activity.strip(), icon=icon)
    return widget.model_copy(update={"data": data.model_copy(update={"entries": [*data.entries, entry]})})


def add_log_entry(widget: Widget, category: LogCategory, note: str = "") -> Widget:
    data = _expect(widget, ChildLogData)
    entry = LogEntry(category=category, note=note.strip())
    return widget.model_copy(update={"data": data.model_copy(update={"entries": [*data.entries, entry]})})


def set_forecast(widget: Widget, temperature: str, summary: str = "") -> Widget:
    data = _expect(widget, WeatherData)
    return widget.model_copy(update={"data": data.model_copy(update={"temperature": temperature, "summary": summary})})


def set_note(widget: Widget, text: str) -> Widget:
    data = _expect(widget, NotesData)
    return widget.model_copy(update={"data": data.model_copy(update={"text": text})})


def add_emergency_contact(widget: Widget, contact: str) -> Widget:
    data = _expect(widget, EmergencyData)
    if not contact.strip():
        raise ValidationError("Emergency contacts cannot be empty.")
    return widget.model_copy(update={"data": data.model_copy(update={"contacts": [*data.contacts, contact.strip()]})})


def _render_reminders(data: RemindersData) -> List[str]:
    return list(data.items) or ["No reminders"]


def _render_schedule(data: ScheduleData) -> List[str]:
    if not data.entries:
        return [f"{icon} {time}" for time, icon in DEFAULT_SCHEDULE]
    return [" ".join(part for part in (item.icon, item.time, item.activity) if part) for item in data.entries]


def _render_child_log(data: ChildLogData) -> List[str]:
    if not data.entries:
        return ["No recent entries"]
    return [f"{LOG_CATEGORY_ICONS[entry.category]} {entry.note}".rstrip() for entry in data.entries]


def _render_weather(data: WeatherData) -> List[str]:
    return [data.temperature or "72°F", data.summary or "Partly Cloudy"]


def _render_notes(data: NotesData) -> List[str]:
    return [data.text or DEFAULT_NOTE]


def _render_emergency(data: EmergencyData) -> List[str]:
    return list(data.contacts) or list(DEFAULT_EMERGENCY_CONTACTS)


_RENDERERS: Dict[str, Callable] = {
    "reminders": _render_reminders,
    "schedule": _render_schedule,
    "child_log": _render_child_log,
    "weather": _render_weather,
    "notes": _render_notes,
    "emergency_contacts": _render_emergency,
}


def render(widget: Widget) -> List[str]:
    """Title line followed by the variant's body lines."""
    return [WIDGET_TITLES[widget.type].upper(), *_RENDERERS[widget.data.kind](widget.data)]


def load_legacy_widgets(ctx: AppContext) -> List[LegacyWidget]:
    raw = ctx.store.get(LEGACY_WIDGETS_KEY, [])
    if not isinstance(raw, list):
        return []
    try:
        return [LegacyWidget.model_validate(item) for item in raw]
    except PydanticValidationError:
        return []


def _save_legacy_widgets(ctx: AppContext, widgets: List[LegacyWidget]) -> None:
    ctx.store.set(LEGACY_WIDGETS_KEY, [widget.model_dump(mode="json") for widget in widgets])


def add_legacy_widget(ctx: AppContext, size: WidgetSize) -> LegacyWidget:
    widget = LegacyWidget(title="Widget 1" if size == WidgetSize.SMALL else "Widget 2", size=size)
    widgets = load_legacy_widgets(ctx)
    widgets.append(widget)
    _save_legacy_widgets(ctx, widgets)
    return widget


def delete_legacy_widget(ctx: AppContext, widget_id: str) -> List[LegacyWidget]:
    widgets = [widget for widget in load_legacy_widgets(ctx) if widget.id != widget_id]
    _save_legacy_widgets(ctx, widgets)
    return widgets
