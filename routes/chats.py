from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.Chat import Chat, ChatMember
from models.Message import Message
from models.User import User
from schemas import ChatWrite, MessageWrite, MessageRead
from utils.auth import SessionUser, get_current_user

router = APIRouter(prefix="/chats", tags=["Chats"])

MESSAGE_PAGE_SIZE = 200


def _get_chat(db: Session, chat_id: int) -> Chat:
    chat = db.query(Chat).filter(Chat.id == chat_id).first()
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")
    return chat


def _require_member(db: Session, chat_id: int, user_id: int):
    member = db.query(ChatMember).filter(
        ChatMember.chat_id == chat_id,
        ChatMember.user_id == user_id
    ).first()
    if not member:
        raise HTTPException(status_code=403, detail="Not a member of this chat")


def _find_direct_chat(db: Session, user_ids: set) -> Optional[Chat]:
    """An existing two-person chat between exactly these users."""
    first, second = sorted(user_ids)
    candidates = (
        db.query(Chat)
        .join(ChatMember, ChatMember.chat_id == Chat.id)
        .filter(Chat.is_group.is_(False), ChatMember.user_id == first)
        .all()
    )
    for chat in candidates:
        if {m.user_id for m in chat.members} == {first, second}:
            return chat
    return None


@router.get("")
def list_chats(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    chats = (
        db.query(Chat)
        .options(joinedload(Chat.members).joinedload(ChatMember.user))
        .join(ChatMember, ChatMember.chat_id == Chat.id)
        .filter(ChatMember.user_id == current_user.id)
        .order_by(Chat.updated_at.desc(), Chat.id.desc())
        .all()
    )

    result = []
    for chat in chats:
        last = (
            db.query(Message)
            .filter(Message.chat_id == chat.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .first()
        )
        result.append({
            "id": chat.id,
            "name": chat.name,
            "is_group": chat.is_group,
            "updated_at": chat.updated_at,
            "members": [
                {"id": m.user.id, "name": m.user.name, "avatar": m.user.avatar}
                for m in chat.members
            ],
            "last_message": {
                "id": last.id,
                "content": last.content,
                "sender_id": last.sender_id,
                "created_at": last.created_at,
            } if last else None,
        })
    return result


@router.post("", status_code=status.HTTP_201_CREATED)
def create_chat(
    payload: ChatWrite,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not payload.member_ids:
        raise HTTPException(status_code=400, detail="member_ids is required")

    member_ids = set(payload.member_ids) | {current_user.id}
    if len(member_ids) < 2:
        raise HTTPException(status_code=400, detail="A chat needs at least one other member")

    found = db.query(User.id).filter(User.id.in_(member_ids)).count()
    if found != len(member_ids):
        raise HTTPException(status_code=404, detail="User not found")

    is_group = len(member_ids) > 2
    if not is_group:
        existing = _find_direct_chat(db, member_ids)
        if existing:
            return {"chat_id": existing.id}

    chat = Chat(name=payload.name, is_group=is_group)
    db.add(chat)
    db.flush()
    for user_id in sorted(member_ids):
        db.add(ChatMember(chat_id=chat.id, user_id=user_id))
    db.commit()

    return {"chat_id": chat.id}


@router.get("/{chat_id}/messages")
def list_messages(
    chat_id: int,
    after: Optional[datetime] = None,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Messages in creation order, at most one page.
    Pass the returned `now` back as `after` to poll for newer ones. When a
    page is full, `now` is the last message's timestamp so the rest follows.
    """
    chat = _get_chat(db, chat_id)
    _require_member(db, chat.id, current_user.id)

    now = datetime.now(timezone.utc)
    query = db.query(Message).filter(Message.chat_id == chat.id)
    if after is not None:
        if after.tzinfo is None:
            after = after.replace(tzinfo=timezone.utc)
        else:
            after = after.astimezone(timezone.utc)
        query = query.filter(Message.created_at > after)
    messages = (
        query.order_by(Message.created_at.asc(), Message.id.asc())
        .limit(MESSAGE_PAGE_SIZE)
        .all()
    )

    if len(messages) == MESSAGE_PAGE_SIZE:
        now = messages[-1].created_at
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

    return {
        "messages": [MessageRead.model_validate(m) for m in messages],
        "now": now,
    }


@router.post("/{chat_id}/messages", status_code=status.HTTP_201_CREATED)
def post_message(
    chat_id: int,
    payload: MessageWrite,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    content = (payload.content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message content is required")

    chat = _get_chat(db, chat_id)
    _require_member(db, chat.id, current_user.id)

    msg = Message(chat_id=chat.id, sender_id=current_user.id, content=content)
    db.add(msg)
    chat.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(msg)

    return {"id": msg.id}
