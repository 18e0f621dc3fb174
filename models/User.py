import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum as SQLEnum, func
from sqlalchemy.orm import relationship
from database import Base


class UserType(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # passlib hash
    type = Column(SQLEnum(UserType), default=UserType.CUSTOMER, nullable=False, index=True)
    is_premium = Column(Boolean, default=False, nullable=False)
    phone = Column(String(40), nullable=True)
    interests = Column(Text, nullable=True)  # comma separated
    avatar = Column(String(500), nullable=True)
    location = Column(String(150), nullable=True)
    bio = Column(Text, nullable=True)
    fcm_token = Column(String(500), nullable=True)  # Firebase Cloud Messaging token
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    blogs = relationship("Blog", back_populates="author", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
    wishlists = relationship("Wishlist", back_populates="user", cascade="all, delete-orphan")
    trips = relationship("Trip", back_populates="creator", cascade="all, delete-orphan")
    participations = relationship("TripParticipant", back_populates="user", cascade="all, delete-orphan")
    sent_requests = relationship(
        "BuddyRequest", foreign_keys="BuddyRequest.requester_id", back_populates="requester", cascade="all, delete-orphan"
    )
    received_requests = relationship(
        "BuddyRequest", foreign_keys="BuddyRequest.receiver_id", back_populates="receiver", cascade="all, delete-orphan"
    )
    chat_memberships = relationship("ChatMember", back_populates="user", cascade="all, delete-orphan")
    messages = relationship("Message", back_populates="sender", cascade="all, delete-orphan")
    groups = relationship("Group", back_populates="creator", cascade="all, delete-orphan")
    group_posts = relationship("GroupPost", back_populates="author", cascade="all, delete-orphan")
    trip_reviews = relationship("TripReview", back_populates="reviewer", cascade="all, delete-orphan")
    buddy_reviews_given = relationship(
        "BuddyReview", foreign_keys="BuddyReview.reviewer_id", back_populates="reviewer", cascade="all, delete-orphan"
    )
    buddy_reviews_received = relationship(
        "BuddyReview", foreign_keys="BuddyReview.buddy_id", back_populates="buddy", cascade="all, delete-orphan"
    )
    todo_items = relationship("TodoItem", back_populates="author", cascade="all, delete-orphan")
