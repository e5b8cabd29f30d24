from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from .. import widgets
from ..context import AppContext
from ..deps import get_context, resolve_email, resolve_user_type
from ..errors import ValidationError
from ..layout import layout_rows
from ..schemas import LegacyWidget, LogCategory, UserType, Widget, WidgetSize, WidgetType

router = APIRouter(prefix="/api/v1", tags=["widgets"])
logger = logging.getLogger(__name__)


class TogglePayload(BaseModel):
    type: WidgetType
    size: WidgetSize = WidgetSize.LARGE
    user_type: Optional[UserType] = None


class WidgetUpdatePayload(BaseModel):
    """One field per widget variant; only the one matching the widget is read."""

    reminder: Optional[str] = None
    schedule_time: Optional[str] = None
    schedule_activity: str = ""
    schedule_icon: str = ""
    log_category: Optional[LogCategory] = None
    log_note: str = ""
    temperature: Optional[str] = None
    forecast: str = ""
    note: Optional[str] = None
    contact: Optional[str] = None


class WidgetOut(BaseModel):
    widget: Widget
    lines: List[str]


class LayoutRowOut(BaseModel):
    widgets: List[WidgetOut]
    empty_slot: bool = False


class LegacyLayoutRowOut(BaseModel):
    widgets: List[LegacyWidget]
    empty_slot: bool = False


class LegacyWidgetPayload(BaseModel):
    size: WidgetSize = Field(default=WidgetSize.SMALL)


def _out(widget: Widget) -> WidgetOut:
    return WidgetOut(widget=widget, lines=widgets.render(widget))


@router.get("/widgets", response_model=List[WidgetOut])
async def list_widgets_endpoint(
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[WidgetOut]:
    return [_out(widget) for widget in widgets.load_widgets(ctx, resolve_email(ctx, email))]


@router.post("/widgets/toggle", response_model=List[WidgetOut])
async def toggle_widget_endpoint(
    payload: TogglePayload,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[WidgetOut]:
    owner = resolve_email(ctx, email)
    user_type = resolve_user_type(ctx, payload.user_type)
    try:
        updated = widgets.toggle_widget(ctx, owner, user_type, payload.type, size=payload.size)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return [_out(widget) for widget in updated]


@router.get("/widgets/layout", response_model=List[LayoutRowOut])
async def widget_layout_endpoint(
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[LayoutRowOut]:
    rows = layout_rows(widgets.load_widgets(ctx, resolve_email(ctx, email)))
    return [
        LayoutRowOut(widgets=[_out(widget) for widget in row.widgets], empty_slot=row.has_empty_slot)
        for row in rows
    ]


@router.patch("/widgets/{widget_id}", response_model=WidgetOut)
async def update_widget_endpoint(
    widget_id: str,
    payload: WidgetUpdatePayload,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> WidgetOut:
    owner = resolve_email(ctx, email)
    try:
        widget = widgets.get_widget(ctx, owner, widget_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    try:
        if widget.type == WidgetType.REMINDERS:
            widget = widgets.add_reminder(widget, payload.reminder)
        elif widget.type == WidgetType.SCHEDULE:
            widget = widgets.add_schedule_entry(
                widget, payload.schedule_time or "", payload.schedule_activity, payload.schedule_icon
            )
        elif widget.type == WidgetType.CHILD_LOG:
            if payload.log_category is None:
                raise ValidationError("log_category is required")
            widget = widgets.add_log_entry(widget, payload.log_category, payload.log_note)
        elif widget.type == WidgetType.WEATHER:
            widget = widgets.set_forecast(widget, payload.temperature or "", payload.forecast)
        elif widget.type == WidgetType.NOTES:
            widget = widgets.set_note(widget, payload.note or "")
        else:
            widget = widgets.add_emergency_contact(widget, payload.contact or "")
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return _out(widgets.update_widget(ctx, owner, widget))


@router.delete("/widgets/{widget_id}", response_model=List[WidgetOut])
async def delete_widget_endpoint(
    widget_id: str,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[WidgetOut]:
    return [_out(widget) for widget in widgets.remove_widget(ctx, resolve_email(ctx, email), widget_id)]


@router.get("/legacy-widgets/layout", response_model=List[LegacyLayoutRowOut])
async def legacy_layout_endpoint(ctx: AppContext = Depends(get_context)) -> List[LegacyLayoutRowOut]:
    rows = layout_rows(widgets.load_legacy_widgets(ctx))
    return [LegacyLayoutRowOut(widgets=row.widgets, empty_slot=row.has_empty_slot) for row in rows]


@router.post("/legacy-widgets", response_model=LegacyWidget)
async def add_legacy_widget_endpoint(
    payload: LegacyWidgetPayload,
    ctx: AppContext = Depends(get_context),
) -> LegacyWidget:
    if ctx.session.logged_in:
        logger.warning("legacy widget added while logged in")
    return widgets.add_legacy_widget(ctx, payload.size)


@router.delete("/legacy-widgets/{widget_id}", response_model=List[LegacyWidget])
async def delete_legacy_widget_endpoint(widget_id: str, ctx: AppContext = Depends(get_context)) -> List[LegacyWidget]:
    return widgets.delete_legacy_widget(ctx, widget_id)
