import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, func, Float, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from database import Base


class TripStatus(str, enum.Enum):
    OPEN = "OPEN"
    ONGOING = "ONGOING"
    ENDED = "ENDED"


# Forward-only order for status changes
TRIP_STATUS_ORDER = [TripStatus.OPEN, TripStatus.ONGOING, TripStatus.ENDED]

DEFAULT_MAX_PARTICIPANTS = 6
MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 20


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    destination = Column(String(150), nullable=False)
    description = Column(Text, default="", nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    budget = Column(Float, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False)
    max_participants = Column(Integer, default=DEFAULT_MAX_PARTICIPANTS, nullable=False)
    status = Column(SQLEnum(TripStatus), default=TripStatus.OPEN, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    creator = relationship("User", back_populates="trips", lazy="joined")
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    todo_items = relationship(
        "TodoItem", back_populates="trip", cascade="all, delete-orphan", order_by="TodoItem.id"
    )
    trip_reviews = relationship("TripReview", back_populates="trip", cascade="all, delete-orphan")
    buddy_reviews = relationship("BuddyReview", back_populates="trip", cascade="all, delete-orphan")

    def can_move_to(self, new_status: TripStatus) -> bool:
        return TRIP_STATUS_ORDER.index(new_status) >= TRIP_STATUS_ORDER.index(self.status)
