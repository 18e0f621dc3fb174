from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.BuddyRequest import BuddyRequest, BuddyRequestStatus
from models.User import User, UserType
from schemas import (
    BuddyRequestWrite,
    BuddyRequestAction,
    BuddyRequestRead,
    BuddyProfile,
    BuddyMatch,
    PendingBuddyRequests,
)
from services.fcm_service import notify_buddy_request, notify_buddy_accepted
from services.matchmaking import buddy_card, find_matches, trips_created_counts
from utils.auth import SessionUser, get_current_user
from utils.logger import setup_api_logger

router = APIRouter(prefix="/buddies", tags=["Buddies"])
chat_buddies_router = APIRouter(prefix="/chat-buddies", tags=["Buddies"])
logger = setup_api_logger()

SEARCH_LIMIT = 20


def _request_to_read(req: BuddyRequest) -> dict:
    return {
        "id": req.id,
        "requester_id": req.requester_id,
        "receiver_id": req.receiver_id,
        "status": req.status.value,
        "created_at": req.created_at,
    }


def find_request(db: Session, requester_id: int, receiver_id: int) -> Optional[BuddyRequest]:
    return db.query(BuddyRequest).filter(
        BuddyRequest.requester_id == requester_id,
        BuddyRequest.receiver_id == receiver_id
    ).first()


def _get_request(db: Session, request_id: int) -> BuddyRequest:
    req = db.query(BuddyRequest).filter(BuddyRequest.id == request_id).first()
    if not req:
        raise HTTPException(status_code=404, detail="Buddy request not found")
    return req


def accepted_buddies(db: Session, user_id: int) -> List[User]:
    """Counterparts of ACCEPTED requests in either direction, one entry per user."""
    requests = (
        db.query(BuddyRequest)
        .options(joinedload(BuddyRequest.requester), joinedload(BuddyRequest.receiver))
        .filter(
            BuddyRequest.status == BuddyRequestStatus.ACCEPTED,
            or_(BuddyRequest.requester_id == user_id, BuddyRequest.receiver_id == user_id),
        )
        .order_by(BuddyRequest.id)
        .all()
    )
    seen = {}
    for req in requests:
        other = req.counterpart_of(user_id)
        seen.setdefault(other.id, other)
    return list(seen.values())


def _cancel(req: BuddyRequest, current_user: SessionUser, db: Session):
    if req.requester_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the requester can cancel this request")
    if req.status != BuddyRequestStatus.PENDING:
        raise HTTPException(status_code=409, detail="Buddy request is no longer pending")
    request_id = req.id
    db.delete(req)
    db.commit()
    logger.info("Buddy request %s cancelled by %s", request_id, current_user.id)


@router.get("", response_model=List[BuddyProfile])
def search_buddies(
    search: Optional[str] = None,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = db.query(User).filter(User.type == UserType.CUSTOMER, User.id != current_user.id)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.name.ilike(pattern), User.interests.ilike(pattern)))
    users = query.order_by(User.id).limit(SEARCH_LIMIT).all()

    counts = trips_created_counts(db, [u.id for u in users])
    return [buddy_card(u, counts.get(u.id, 0)) for u in users]


@router.get("/matchmaking", response_model=List[BuddyMatch])
def matchmaking(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return find_matches(db, current_user.id)


@router.post("/requests", response_model=BuddyRequestRead, status_code=status.HTTP_201_CREATED)
def send_request(
    payload: BuddyRequestWrite,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if payload.receiver_id is None:
        raise HTTPException(status_code=400, detail="receiver_id is required")
    if payload.receiver_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot send a buddy request to yourself")

    receiver = db.query(User).filter(User.id == payload.receiver_id).first()
    if not receiver:
        raise HTTPException(status_code=404, detail="User not found")

    if find_request(db, current_user.id, receiver.id):
        raise HTTPException(status_code=400, detail="Buddy request already sent")

    req = BuddyRequest(
        requester_id=current_user.id,
        receiver_id=receiver.id,
        status=BuddyRequestStatus.PENDING,
    )
    db.add(req)
    db.commit()
    db.refresh(req)
    logger.info("Buddy request %s sent from %s to %s", req.id, current_user.id, receiver.id)

    if receiver.fcm_token:
        notify_buddy_request(receiver, current_user.name, req.id)

    return _request_to_read(req)


@router.get("/requests", response_model=List[BuddyProfile])
def list_buddies(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    buddies = accepted_buddies(db, current_user.id)
    counts = trips_created_counts(db, [b.id for b in buddies])
    return [buddy_card(b, counts.get(b.id, 0)) for b in buddies]


@router.get("/requests/pending", response_model=PendingBuddyRequests)
def pending_requests(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    pending = (
        db.query(BuddyRequest)
        .options(joinedload(BuddyRequest.requester), joinedload(BuddyRequest.receiver))
        .filter(
            BuddyRequest.status == BuddyRequestStatus.PENDING,
            or_(BuddyRequest.requester_id == current_user.id, BuddyRequest.receiver_id == current_user.id),
        )
        .order_by(BuddyRequest.created_at.desc(), BuddyRequest.id.desc())
        .all()
    )
    counts = trips_created_counts(db, [r.counterpart_of(current_user.id).id for r in pending])

    incoming, outgoing = [], []
    for req in pending:
        other = req.counterpart_of(current_user.id)
        user = buddy_card(other, counts.get(other.id, 0))
        user["bio"] = other.bio or ""
        is_incoming = req.receiver_id == current_user.id
        item = {
            "id": req.id,
            "type": "incoming" if is_incoming else "outgoing",
            "user": user,
            "created_at": req.created_at,
            "status": req.status.value,
        }
        (incoming if is_incoming else outgoing).append(item)

    return {
        "incoming": incoming,
        "outgoing": outgoing,
        "incoming_count": len(incoming),
        "outgoing_count": len(outgoing),
    }


@router.patch("/requests/{request_id}")
def respond_to_request(
    request_id: int,
    payload: BuddyRequestAction,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Accept or decline (receiver) or cancel (requester) a pending request"""
    req = _get_request(db, request_id)

    if payload.action == "cancel":
        _cancel(req, current_user, db)
        return {"message": "Buddy request cancelled"}

    if req.receiver_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the receiver can respond to this request")
    if req.status != BuddyRequestStatus.PENDING:
        raise HTTPException(status_code=409, detail="Buddy request is no longer pending")

    if payload.action == "accept":
        req.status = BuddyRequestStatus.ACCEPTED
    else:
        req.status = BuddyRequestStatus.REJECTED
    db.commit()
    db.refresh(req)
    logger.info("Buddy request %s %s by %s", req.id, req.status.value, current_user.id)

    if req.status == BuddyRequestStatus.ACCEPTED and req.requester.fcm_token:
        notify_buddy_accepted(req.requester, current_user.name, req.id)

    message = "Buddy request accepted" if payload.action == "accept" else "Buddy request declined"
    return {"message": message, "request": _request_to_read(req)}


@router.delete("/requests/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_request(
    request_id: int,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    req = _get_request(db, request_id)
    _cancel(req, current_user, db)
    return None


@chat_buddies_router.get("")
def chat_buddies(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return [
        {"id": b.id, "name": b.name, "email": b.email, "avatar": b.avatar}
        for b in accepted_buddies(db, current_user.id)
    ]
