"""
Buddy matchmaking.

A candidate matches when they liked or wishlisted at least one blog the
current user also liked or wishlisted. Candidates are ranked by how many
such blogs they share.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Set

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models.BuddyRequest import BuddyRequest, BuddyRequestStatus
from models.Like import Like
from models.Trip import Trip
from models.User import User, UserType
from models.Wishlist import Wishlist
from utils import split_interests

DEFAULT_AVATAR = "/placeholder.svg"
DEFAULT_LOCATION = "Location not set"


def interest_blog_ids(db: Session, user_ids: Iterable[int]) -> Dict[int, Set[int]]:
    """Liked-or-wishlisted blog ids per user, in two queries."""
    user_ids = list(user_ids)
    result: Dict[int, Set[int]] = defaultdict(set)
    if not user_ids:
        return result

    for model in (Like, Wishlist):
        rows = db.query(model.user_id, model.blog_id).filter(model.user_id.in_(user_ids)).all()
        for user_id, blog_id in rows:
            result[user_id].add(blog_id)
    return result


def accepted_buddy_ids(db: Session, user_id: int) -> Set[int]:
    rows = (
        db.query(BuddyRequest.requester_id, BuddyRequest.receiver_id)
        .filter(
            BuddyRequest.status == BuddyRequestStatus.ACCEPTED,
            or_(BuddyRequest.requester_id == user_id, BuddyRequest.receiver_id == user_id),
        )
        .all()
    )
    return {receiver if requester == user_id else requester for requester, receiver in rows}


def rank_candidates(mine: Set[int], candidates: Dict[int, Set[int]]) -> List[tuple]:
    """
    Score each candidate by the size of the overlap with `mine`.

    Returns (candidate_id, overlap) pairs with overlap > 0, highest first.
    Ties keep the order of `candidates`.
    """
    if not mine:
        return []
    scored = []
    for candidate_id, theirs in candidates.items():
        overlap = len(mine & theirs)
        if overlap > 0:
            scored.append((candidate_id, overlap))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored


def trips_created_counts(db: Session, user_ids: Iterable[int]) -> Dict[int, int]:
    user_ids = list(user_ids)
    if not user_ids:
        return {}
    rows = (
        db.query(Trip.creator_id, func.count(Trip.id))
        .filter(Trip.creator_id.in_(user_ids))
        .group_by(Trip.creator_id)
        .all()
    )
    return dict(rows)


def buddy_card(user: User, trips_completed: int) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "avatar": user.avatar or DEFAULT_AVATAR,
        "location": user.location or DEFAULT_LOCATION,
        "trips_completed": trips_completed,
        "interests": split_interests(user.interests),
    }


def find_matches(db: Session, user_id: int) -> List[dict]:
    mine = interest_blog_ids(db, [user_id]).get(user_id, set())
    if not mine:
        return []

    excluded = accepted_buddy_ids(db, user_id) | {user_id}
    users = (
        db.query(User)
        .filter(User.type == UserType.CUSTOMER, User.id.notin_(excluded))
        .order_by(User.id)
        .all()
    )
    by_id = {u.id: u for u in users}

    interests = interest_blog_ids(db, by_id.keys())
    candidates = {uid: interests.get(uid, set()) for uid in by_id}
    ranked = rank_candidates(mine, candidates)

    trip_counts = trips_created_counts(db, [uid for uid, _ in ranked])

    matches = []
    for candidate_id, overlap in ranked:
        user = by_id[candidate_id]
        card = buddy_card(user, trip_counts.get(user.id, 0))
        card["common_interests"] = overlap
        card["is_match"] = True
        matches.append(card)
    return matches
