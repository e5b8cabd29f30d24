from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from .. import chat, matching
from ..context import AppContext
from ..deps import get_context, resolve_email
from ..schemas import Message

router = APIRouter(prefix="/api/v1", tags=["chats"])


class SendMessagePayload(BaseModel):
    sender_id: str = Field(..., alias="senderId")
    text: str

    model_config = ConfigDict(populate_by_name=True)


class DirectMessagePayload(BaseModel):
    recipient: str
    text: str
    sender: Optional[str] = None


class ConversationOut(BaseModel):
    email: str
    room_id: str
    preview: str
    unread: int


@router.get("/chats/room")
async def room_endpoint(
    a: str = Query(..., description="First participant"),
    b: str = Query(..., description="Second participant"),
) -> dict:
    return {"room_id": chat.room_id(a, b)}


@router.get("/chats/{room_id}/messages", response_model=List[Message])
async def list_messages_endpoint(room_id: str, ctx: AppContext = Depends(get_context)) -> List[Message]:
    return chat.load_messages(ctx, room_id)


@router.post("/chats/{room_id}/messages", response_model=Optional[Message])
async def send_message_endpoint(
    room_id: str,
    payload: SendMessagePayload,
    ctx: AppContext = Depends(get_context),
) -> Optional[Message]:
    return chat.send_message(ctx, room_id, payload.sender_id, payload.text)


@router.get("/chats/{room_id}/preview")
async def preview_endpoint(room_id: str, ctx: AppContext = Depends(get_context)) -> dict:
    return {"room_id": room_id, "preview": chat.preview(ctx, room_id)}


@router.post("/chats/direct", response_model=Optional[Message])
async def direct_message_endpoint(
    payload: DirectMessagePayload,
    ctx: AppContext = Depends(get_context),
) -> Optional[Message]:
    sender = resolve_email(ctx, payload.sender)
    return chat.send_to(ctx, sender, payload.recipient, payload.text)


@router.get("/chats", response_model=List[ConversationOut])
async def list_conversations_endpoint(
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> List[ConversationOut]:
    me = resolve_email(ctx, email)
    conversations = []
    for other in chat.sort_conversations(ctx, me, matching.matches(ctx, me)):
        room = chat.room_id(me, other)
        conversations.append(
            ConversationOut(
                email=other,
                room_id=room,
                preview=chat.preview(ctx, room),
                unread=chat.unread_count(ctx, me, other),
            )
        )
    return conversations


@router.post("/chats/{other_email}/read")
async def mark_read_endpoint(
    other_email: str,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> dict:
    chat.mark_read(ctx, resolve_email(ctx, email), other_email)
    return {"email": other_email, "unread": 0}


@router.delete("/chats/{other_email}")
async def delete_chat_endpoint(
    other_email: str,
    email: Optional[str] = Query(None),
    ctx: AppContext = Depends(get_context),
) -> dict:
    me = resolve_email(ctx, email)
    room = chat.room_id(me, other_email)
    chat.forget_conversation(ctx, me, other_email)
    matching.unmatch(ctx, me, other_email)
    return {"deleted": room}
