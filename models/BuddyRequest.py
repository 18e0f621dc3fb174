from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum as SQLEnum, func, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
import enum


class BuddyRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class BuddyRequest(Base):
    __tablename__ = "buddy_requests"
    __table_args__ = (
        UniqueConstraint("requester_id", "receiver_id", name="uq_buddy_request"),
    )

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(BuddyRequestStatus), default=BuddyRequestStatus.PENDING, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    requester = relationship("User", foreign_keys=[requester_id], back_populates="sent_requests")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_requests")

    def counterpart_of(self, user_id: int):
        """The other side of the request as seen from `user_id`."""
        return self.receiver if self.requester_id == user_id else self.requester
