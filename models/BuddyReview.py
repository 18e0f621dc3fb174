from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base


class BuddyReview(Base):
    __tablename__ = "buddy_reviews"
    __table_args__ = (
        UniqueConstraint("trip_id", "reviewer_id", "buddy_id", name="uq_buddy_review"),
    )

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    buddy_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    trip = relationship("Trip", back_populates="buddy_reviews")
    reviewer = relationship("User", foreign_keys=[reviewer_id], back_populates="buddy_reviews_given")
    buddy = relationship("User", foreign_keys=[buddy_id], back_populates="buddy_reviews_received")
