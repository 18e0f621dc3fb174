from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.User import User, UserType
from schemas import AdminUserRead, AdminUserUpdate
from services.matchmaking import trips_created_counts
from utils.auth import SessionUser, require_admin
from utils.logger import setup_api_logger

router = APIRouter(prefix="/admin/users", tags=["Admin"], dependencies=[Depends(require_admin)])
logger = setup_api_logger()

USER_FILTERS = ("all", "premium", "regular")


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _user_to_read(user: User, trips_completed: int) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "type": user.type.value,
        "is_premium": user.is_premium,
        "join_date": user.created_at,
        "trips_completed": trips_completed,
        "status": "active",
    }


@router.get("", response_model=List[AdminUserRead])
def list_users(
    search: Optional[str] = None,
    user_filter: str = Query("all", alias="filter"),
    db: Session = Depends(get_db)
):
    if user_filter not in USER_FILTERS:
        raise HTTPException(status_code=400, detail="Invalid filter")

    query = db.query(User).filter(User.type == UserType.CUSTOMER)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    if user_filter == "premium":
        query = query.filter(User.is_premium.is_(True))
    elif user_filter == "regular":
        query = query.filter(User.is_premium.is_(False))

    users = query.order_by(User.created_at.desc(), User.id.desc()).all()
    counts = trips_created_counts(db, [u.id for u in users])
    return [_user_to_read(u, counts.get(u.id, 0)) for u in users]


@router.patch("/{user_id}", response_model=AdminUserRead)
def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    current_user: SessionUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = _get_user(db, user_id)
    user.is_premium = payload.is_premium
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set premium=%s for user %s", current_user.id, user.is_premium, user.id)

    counts = trips_created_counts(db, [user.id])
    return _user_to_read(user, counts.get(user.id, 0))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: SessionUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", current_user.id, user_id)
