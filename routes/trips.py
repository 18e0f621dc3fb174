from datetime import date
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.TodoItem import TodoItem
from models.Trip import (
    Trip,
    TripStatus,
    DEFAULT_MAX_PARTICIPANTS,
    MIN_PARTICIPANTS,
    MAX_PARTICIPANTS,
)
from models.TripParticipant import TripParticipant, ParticipantRole
from models.User import User
from schemas import TripWrite, TripStatusUpdate, TodoItemWrite, TodoItemRead
from services.mailer import send_trip_creation_email
from utils.auth import SessionUser, get_current_user, get_optional_user
from utils.logger import setup_api_logger

router = APIRouter(prefix="/trips", tags=["Trips"])
logger = setup_api_logger()


def get_trip_or_404(db: Session, trip_id: int) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


def find_participant(db: Session, trip_id: int, user_id: int) -> Optional[TripParticipant]:
    return db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.user_id == user_id
    ).first()


def require_participant(db: Session, trip_id: int, user_id: int, detail: str) -> TripParticipant:
    participant = find_participant(db, trip_id, user_id)
    if not participant:
        raise HTTPException(status_code=403, detail=detail)
    return participant


def _user_summary(user: User) -> dict:
    return {"id": user.id, "name": user.name, "avatar": user.avatar}


def _participant_to_read(p: TripParticipant) -> dict:
    return {
        "id": p.user.id,
        "name": p.user.name,
        "avatar": p.user.avatar,
        "role": p.role.value,
        "joined_at": p.joined_at,
    }


def _trip_to_read(trip: Trip) -> dict:
    return {
        "id": trip.id,
        "destination": trip.destination,
        "description": trip.description,
        "start_date": trip.start_date,
        "end_date": trip.end_date,
        "budget": trip.budget,
        "is_public": trip.is_public,
        "max_participants": trip.max_participants,
        "status": trip.status.value,
        "creator": _user_summary(trip.creator),
        "created_at": trip.created_at,
    }


def _todo_stats(trip: Trip) -> dict:
    total = len(trip.todo_items)
    completed = sum(1 for t in trip.todo_items if t.completed)
    return {"completed": completed, "total": total}


def _progress(stats: dict) -> int:
    if stats["total"] == 0:
        return 0
    return round(stats["completed"] * 100 / stats["total"])


def categorize_trips(trips: list, today: date) -> dict:
    """Split formatted trips by role and by where today falls in their date range."""
    return {
        "created": [t for t in trips if t["is_creator"]],
        "joined": [t for t in trips if not t["is_creator"]],
        "upcoming": [t for t in trips if t["start_date"] > today],
        "ongoing": [t for t in trips if t["start_date"] <= today <= t["end_date"]],
        "completed": [t for t in trips if t["end_date"] < today],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_trip(
    payload: TripWrite,
    background_tasks: BackgroundTasks,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    destination = (payload.destination or "").strip()
    if not destination or payload.start_date is None or payload.end_date is None or payload.budget is None:
        raise HTTPException(status_code=400, detail="Destination, start date, end date and budget are required")

    max_participants = payload.max_participants
    if max_participants is None:
        max_participants = DEFAULT_MAX_PARTICIPANTS
    if not MIN_PARTICIPANTS <= max_participants <= MAX_PARTICIPANTS:
        raise HTTPException(
            status_code=400,
            detail=f"Max participants must be between {MIN_PARTICIPANTS} and {MAX_PARTICIPANTS}"
        )

    if payload.end_date < payload.start_date:
        raise HTTPException(status_code=400, detail="End date cannot be before start date")

    trip = Trip(
        creator_id=current_user.id,
        destination=destination,
        description=payload.description or "",
        start_date=payload.start_date,
        end_date=payload.end_date,
        budget=payload.budget,
        is_public=True if payload.is_public is None else payload.is_public,
        max_participants=max_participants,
        status=TripStatus.OPEN,
    )
    db.add(trip)
    db.flush()
    db.add(TripParticipant(trip_id=trip.id, user_id=current_user.id, role=ParticipantRole.CREATOR))
    db.commit()
    db.refresh(trip)
    logger.info("Trip %s created by %s", trip.id, current_user.id)

    # the trip stands even if the e-mail fails
    background_tasks.add_task(
        send_trip_creation_email, current_user.email, current_user.name, trip.description
    )

    data = _trip_to_read(trip)
    data["participant_count"] = 1
    return data


@router.get("")
def list_trips(
    current_user: Optional[SessionUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    trips = (
        db.query(Trip)
        .filter(Trip.is_public.is_(True))
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )
    ids = [t.id for t in trips]

    counts = {}
    if ids:
        counts = dict(
            db.query(TripParticipant.trip_id, func.count(TripParticipant.id))
            .filter(TripParticipant.trip_id.in_(ids))
            .group_by(TripParticipant.trip_id)
            .all()
        )

    mine = {}
    if current_user and ids:
        rows = (
            db.query(TripParticipant)
            .filter(TripParticipant.user_id == current_user.id, TripParticipant.trip_id.in_(ids))
            .all()
        )
        mine = {p.trip_id: p for p in rows}

    result = []
    for trip in trips:
        data = _trip_to_read(trip)
        data["participant_count"] = counts.get(trip.id, 0)
        own = mine.get(trip.id)
        data["participants"] = [_participant_to_read(own)] if own else []
        data["is_participant"] = own is not None
        result.append(data)
    return {"trips": result}


@router.get("/my")
def my_trips(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    trips = (
        db.query(Trip)
        .options(
            joinedload(Trip.participants).joinedload(TripParticipant.user),
            joinedload(Trip.todo_items),
        )
        .join(TripParticipant, TripParticipant.trip_id == Trip.id)
        .filter(TripParticipant.user_id == current_user.id)
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )

    formatted = []
    for trip in trips:
        own = next(p for p in trip.participants if p.user_id == current_user.id)
        stats = _todo_stats(trip)
        data = _trip_to_read(trip)
        data.update({
            "participants": [_participant_to_read(p) for p in trip.participants],
            "participant_count": len(trip.participants),
            "user_role": own.role.value,
            "is_creator": trip.creator_id == current_user.id,
            "progress": _progress(stats),
            "todo_stats": stats,
        })
        formatted.append(data)

    categories = categorize_trips(formatted, date.today())
    stats = {name: len(items) for name, items in categories.items()}
    stats["total"] = len(formatted)

    return {"trips": formatted, "categories": categories, "stats": stats}


@router.get("/{trip_id}")
def get_trip(
    trip_id: int,
    current_user: Optional[SessionUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    trip = get_trip_or_404(db, trip_id)

    own = find_participant(db, trip.id, current_user.id) if current_user else None
    if not trip.is_public and not own:
        raise HTTPException(status_code=403, detail="Trip is not public")

    data = _trip_to_read(trip)
    data.update({
        "participants": [_participant_to_read(p) for p in trip.participants],
        "participant_count": len(trip.participants),
        "todos": [TodoItemRead.model_validate(t) for t in trip.todo_items],
        "is_participant": own is not None,
        "is_creator": current_user is not None and trip.creator_id == current_user.id,
    })
    return data


@router.post("/{trip_id}/join")
def join_trip(
    trip_id: int,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    trip = get_trip_or_404(db, trip_id)

    if not trip.is_public:
        raise HTTPException(status_code=403, detail="Trip is not public")

    count = db.query(func.count(TripParticipant.id)).filter(TripParticipant.trip_id == trip.id).scalar()
    if count >= trip.max_participants:
        raise HTTPException(status_code=400, detail="Trip is full")

    if find_participant(db, trip.id, current_user.id):
        raise HTTPException(status_code=400, detail="Already a participant")

    db.add(TripParticipant(trip_id=trip.id, user_id=current_user.id, role=ParticipantRole.PARTICIPANT))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Already a participant")

    logger.info("User %s joined trip %s", current_user.id, trip.id)
    return {"message": "Successfully joined the trip", "participant_count": count + 1}


@router.patch("/{trip_id}/status")
def update_trip_status(
    trip_id: int,
    payload: TripStatusUpdate,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        new_status = TripStatus(payload.status)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid status")

    trip = get_trip_or_404(db, trip_id)
    if trip.creator_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the trip creator can change its status")

    if not trip.can_move_to(new_status):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot move trip from {trip.status.value} back to {new_status.value}"
        )

    if trip.status != new_status:
        old_status = trip.status
        trip.status = new_status
        db.commit()
        db.refresh(trip)
        logger.info("Trip %s status %s -> %s", trip.id, old_status.value, new_status.value)

    return {"id": trip.id, "status": trip.status.value}


@router.post("/{trip_id}/todos", response_model=TodoItemRead, status_code=status.HTTP_201_CREATED)
def create_todo(
    trip_id: int,
    payload: TodoItemWrite,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    trip = get_trip_or_404(db, trip_id)
    require_participant(db, trip.id, current_user.id, "Only trip participants can add todos")

    text = (payload.text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Todo text is required")

    todo = TodoItem(trip_id=trip.id, created_by=current_user.id, text=text, completed=False)
    db.add(todo)
    db.commit()
    db.refresh(todo)
    return todo
