from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.BuddyReview import BuddyReview
from models.TripReview import TripReview
from schemas import ReviewWrite, ReviewRead
from routes.trips import find_participant, get_trip_or_404, require_participant
from utils.auth import SessionUser, get_current_user
from utils.logger import setup_api_logger

router = APIRouter(prefix="/reviews", tags=["Reviews"])
logger = setup_api_logger()


def _upsert_trip_review(db: Session, trip_id: int, reviewer_id: int, rating: int, comment: str) -> TripReview:
    review = db.query(TripReview).filter(
        TripReview.trip_id == trip_id,
        TripReview.reviewer_id == reviewer_id
    ).first()
    if review:
        review.rating = rating
        review.comment = comment
    else:
        review = TripReview(trip_id=trip_id, reviewer_id=reviewer_id, rating=rating, comment=comment)
        db.add(review)
    db.commit()
    db.refresh(review)
    return review


def _upsert_buddy_review(
    db: Session, trip_id: int, reviewer_id: int, buddy_id: int, rating: int, comment: str
) -> BuddyReview:
    review = db.query(BuddyReview).filter(
        BuddyReview.trip_id == trip_id,
        BuddyReview.reviewer_id == reviewer_id,
        BuddyReview.buddy_id == buddy_id
    ).first()
    if review:
        review.rating = rating
        review.comment = comment
    else:
        review = BuddyReview(
            trip_id=trip_id, reviewer_id=reviewer_id, buddy_id=buddy_id, rating=rating, comment=comment
        )
        db.add(review)
    db.commit()
    db.refresh(review)
    return review


@router.post("", response_model=ReviewRead)
def submit_review(
    payload: ReviewWrite,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record a trip or buddy review.
    Submitting again for the same trip (and buddy) overwrites rating and comment.
    """
    trip = get_trip_or_404(db, payload.trip_id)
    require_participant(db, trip.id, current_user.id, "Only trip participants can leave reviews")

    comment = payload.comment or ""

    if payload.review_type == "TRIP":
        review = _upsert_trip_review(db, trip.id, current_user.id, payload.rating, comment)
        logger.info("Trip review %s saved for trip %s", review.id, trip.id)
        return {
            "id": review.id,
            "trip_id": review.trip_id,
            "reviewer_id": review.reviewer_id,
            "buddy_id": None,
            "rating": review.rating,
            "comment": review.comment,
            "review_type": "TRIP",
        }

    if payload.reviewed_user_id is None:
        raise HTTPException(status_code=400, detail="reviewed_user_id is required for buddy reviews")
    if payload.reviewed_user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot review yourself")
    if not find_participant(db, trip.id, payload.reviewed_user_id):
        raise HTTPException(status_code=403, detail="Reviewed user did not take part in this trip")

    review = _upsert_buddy_review(
        db, trip.id, current_user.id, payload.reviewed_user_id, payload.rating, comment
    )
    logger.info("Buddy review %s saved for trip %s", review.id, trip.id)
    return {
        "id": review.id,
        "trip_id": review.trip_id,
        "reviewer_id": review.reviewer_id,
        "buddy_id": review.buddy_id,
        "rating": review.rating,
        "comment": review.comment,
        "review_type": "BUDDY",
    }
