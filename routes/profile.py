from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.BuddyReview import BuddyReview
from models.Trip import Trip, TripStatus
from models.TripParticipant import TripParticipant
from models.TripReview import TripReview
from models.User import User
from schemas import UserRead, ProfileUpdate, PasswordChange, FCMTokenUpdate
from utils import get_password_hash, verify_password
from utils.auth import SessionUser, get_current_user

router = APIRouter(prefix="/profile", tags=["Profile"])


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=UserRead)
def get_profile(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_user(db, current_user.id)


@router.patch("", response_model=UserRead)
def update_profile(
    payload: ProfileUpdate,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the signed-in user's profile.
    Only fields that are provided and non-empty are changed.
    """
    user = _get_user(db, current_user.id)

    update_data = payload.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        setattr(user, key, value.strip() if isinstance(value, str) else value)

    db.commit()
    db.refresh(user)
    return user


@router.patch("/password")
def change_password(
    payload: PasswordChange,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not payload.current_password or not payload.new_password:
        raise HTTPException(status_code=400, detail="Current and new password are required")

    user = _get_user(db, current_user.id)
    if not verify_password(payload.current_password, user.password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password = get_password_hash(payload.new_password)
    db.commit()
    return {"message": "Password updated successfully"}


@router.put("/fcm-token", status_code=status.HTTP_200_OK)
def update_fcm_token(
    payload: FCMTokenUpdate,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Register the device token used for push notifications"""
    user = _get_user(db, current_user.id)
    user.fcm_token = payload.fcm_token
    db.commit()
    return {"message": "FCM token updated", "user_id": user.id}


@router.get("/trips")
def completed_trips(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Ended trips the caller took part in, with the caller's own ratings."""
    trips = (
        db.query(Trip)
        .options(joinedload(Trip.participants).joinedload(TripParticipant.user))
        .join(TripParticipant, TripParticipant.trip_id == Trip.id)
        .filter(TripParticipant.user_id == current_user.id, Trip.status == TripStatus.ENDED)
        .order_by(Trip.end_date.desc(), Trip.id.desc())
        .all()
    )
    if not trips:
        return []

    trip_ids = [t.id for t in trips]
    trip_ratings = dict(
        db.query(TripReview.trip_id, TripReview.rating)
        .filter(TripReview.reviewer_id == current_user.id, TripReview.trip_id.in_(trip_ids))
        .all()
    )
    buddy_ratings = {
        (trip_id, buddy_id): rating
        for trip_id, buddy_id, rating in db.query(BuddyReview.trip_id, BuddyReview.buddy_id, BuddyReview.rating)
        .filter(BuddyReview.reviewer_id == current_user.id, BuddyReview.trip_id.in_(trip_ids))
        .all()
    }

    result = []
    for trip in trips:
        result.append({
            "id": trip.id,
            "destination": trip.destination,
            "date": trip.end_date,
            "rating": trip_ratings.get(trip.id, 0),
            "participants": [
                {
                    "id": p.user.id,
                    "name": p.user.name,
                    "avatar": p.user.avatar,
                    "rating": buddy_ratings.get((trip.id, p.user_id), 0),
                }
                for p in trip.participants
                if p.user_id != current_user.id
            ],
        })
    return result
