"""Two-party chat rooms backed by the key/value store."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .context import AppContext
from .schemas import Message


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def room_id(participant_a: str, participant_b: str) -> str:
    """Canonical room identifier for an unordered pair of participants."""
    return "_".join(sorted([participant_a, participant_b]))


def messages_key(room: str) -> str:
    return f"chat_{room}"


def preview_key(room: str) -> str:
    return f"chatPreview_{room}"


def _decode_record(record) -> Optional[Message]:
    if isinstance(record, str):
        # Older logs stored "sender:text" strings.
        sender, sep, text = record.partition(":")
        if not sep:
            return Message(sender=None, text=record)
        return Message(sender=sender, text=text)
    if isinstance(record, dict):
        try:
            return Message.model_validate(record)
        except PydanticValidationError:
            return None
    return None


def load_messages(ctx: AppContext, room: str) -> List[Message]:
    raw = ctx.store.get(messages_key(room), [])
    if not isinstance(raw, list):
        return []
    messages = []
    for record in raw:
        message = _decode_record(record)
        if message is not None:
            messages.append(message)
    return messages


def send_message(ctx: AppContext, room: str, sender_id: str, text: str) -> Optional[Message]:
    if not text.strip():
        return None
    message = Message(sender=sender_id, text=text, sent_at=_now())
    raw = ctx.store.get(messages_key(room), [])
    if not isinstance(raw, list):
        raw = []
    raw.append(message.model_dump(mode="json"))
    ctx.store.set(messages_key(room), raw)
    ctx.store.set(preview_key(room), text)
    return message


def preview(ctx: AppContext, room: str) -> str:
    stored = ctx.store.get(preview_key(room))
    if isinstance(stored, str):
        return stored
    return ctx.config.chat_preview_placeholder


def delete_chat(ctx: AppContext, room: str) -> None:
    ctx.store.delete(messages_key(room), preview_key(room), last_message_key(room))


def unread_key(reader: str, sender: str) -> str:
    return f"unread_{reader}_{sender}"


def last_message_key(room: str) -> str:
    return f"lastmsg_{room}"


def unread_count(ctx: AppContext, reader: str, sender: str) -> int:
    """Messages from ``sender`` that ``reader`` has not opened yet."""
    value = ctx.store.get(unread_key(reader, sender), 0)
    return value if isinstance(value, int) else 0


def mark_read(ctx: AppContext, reader: str, sender: str) -> None:
    ctx.store.set(unread_key(reader, sender), 0)


def last_message_at(ctx: AppContext, room: str) -> float:
    value = ctx.store.get(last_message_key(room), 0.0)
    return float(value) if isinstance(value, (int, float)) else 0.0


def send_to(ctx: AppContext, sender_email: str, recipient_email: str, text: str) -> Optional[Message]:
    """Send within the pair's room and count it as unread for the recipient."""
    room = room_id(sender_email, recipient_email)
    message = send_message(ctx, room, sender_email, text)
    if message is None:
        return None
    stamp = message.sent_at.timestamp() if message.sent_at else _now().timestamp()
    unread = unread_count(ctx, recipient_email, sender_email) + 1
    ctx.store.set(unread_key(recipient_email, sender_email), unread)
    ctx.store.set(last_message_key(room), stamp)
    return message


def forget_conversation(ctx: AppContext, email: str, other_email: str) -> None:
    """Drop the pair's log, preview and unread counters."""
    delete_chat(ctx, room_id(email, other_email))
    ctx.store.delete(unread_key(email, other_email), unread_key(other_email, email))


def sort_conversations(ctx: AppContext, viewer: str, emails: Iterable[str]) -> List[str]:
    """Most unread first, then most recent activity."""
    return sorted(
        emails,
        key=lambda other: (
            unread_count(ctx, viewer, other),
            last_message_at(ctx, room_id(viewer, other)),
        ),
        reverse=True,
    )
