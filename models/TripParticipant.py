import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum, func
from sqlalchemy.orm import relationship
from database import Base


class ParticipantRole(str, enum.Enum):
    CREATOR = "CREATOR"
    PARTICIPANT = "PARTICIPANT"


class TripParticipant(Base):
    __tablename__ = "trip_participants"
    __table_args__ = (
        UniqueConstraint("user_id", "trip_id", name="uq_trip_participant"),
    )

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(SQLEnum(ParticipantRole), default=ParticipantRole.PARTICIPANT, nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="participants")
    user = relationship("User", back_populates="participations")
