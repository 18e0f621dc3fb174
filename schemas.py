# schemas.py (Pydantic v2)
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List, Literal
from datetime import date, datetime


# ---------- Auth ----------
class SignUpRequest(BaseModel):
    name: str = ""
    email: Optional[EmailStr] = None
    password: str = ""

class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""

class PasswordChange(BaseModel):
    current_password: str = ""
    new_password: str = ""


# ---------- Users ----------
class UserRead(BaseModel):
    id: int
    name: str
    email: EmailStr
    type: str
    is_premium: bool
    phone: Optional[str] = None
    interests: Optional[str] = None
    avatar: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ProfileUpdate(BaseModel):
    """Partial update for the signed-in user's profile"""
    name: Optional[str] = None
    phone: Optional[str] = None
    interests: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None

class FCMTokenUpdate(BaseModel):
    fcm_token: str

class UserSummary(BaseModel):
    id: int
    name: str
    avatar: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------- Blogs ----------
class BlogWrite(BaseModel):
    title: str = ""
    content: str = ""
    location: Optional[str] = None
    publish_date: Optional[datetime] = None

class BlogRead(BaseModel):
    id: int
    title: str
    preview: str
    location: Optional[str] = None
    tags: List[str] = []
    images: List[str] = []
    publish_date: datetime
    author: str
    likes: int
    is_liked: bool = False
    is_wishlisted: bool = False

class BlogDetail(BlogRead):
    content: str

class WishlistItem(BaseModel):
    id: int
    title: str
    preview: str
    location: Optional[str] = None
    images: List[str] = []
    added_date: datetime


# ---------- Buddies ----------
class BuddyRequestWrite(BaseModel):
    receiver_id: Optional[int] = None

class BuddyRequestAction(BaseModel):
    action: Literal["accept", "decline", "cancel"]

class BuddyRequestRead(BaseModel):
    id: int
    requester_id: int
    receiver_id: int
    status: str
    created_at: datetime

class BuddyProfile(BaseModel):
    id: int
    name: str
    avatar: str
    location: str
    trips_completed: int
    interests: List[str] = []

class BuddyMatch(BuddyProfile):
    common_interests: int
    is_match: bool = True

class PendingBuddyUser(BuddyProfile):
    bio: str

class PendingBuddyRequest(BaseModel):
    id: int
    type: Literal["incoming", "outgoing"]
    user: PendingBuddyUser
    created_at: datetime
    status: str

class PendingBuddyRequests(BaseModel):
    incoming: List[PendingBuddyRequest] = []
    outgoing: List[PendingBuddyRequest] = []
    incoming_count: int
    outgoing_count: int


# ---------- Trips ----------
class TripWrite(BaseModel):
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = None
    description: Optional[str] = ""
    is_public: Optional[bool] = True
    max_participants: Optional[int] = None

class TripStatusUpdate(BaseModel):
    status: str


# ---------- Todo Items ----------
class TodoItemWrite(BaseModel):
    text: str = ""

class TodoItemUpdate(BaseModel):
    """Partial update (PATCH) - all fields optional"""
    completed: Optional[bool] = None
    text: Optional[str] = None

class TodoItemRead(BaseModel):
    id: int
    trip_id: int
    text: str
    completed: bool
    created_by: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------- Reviews ----------
class ReviewWrite(BaseModel):
    trip_id: int
    rating: int = Field(..., ge=1, le=5)
    review_type: Literal["TRIP", "BUDDY"]
    comment: Optional[str] = ""
    reviewed_user_id: Optional[int] = None

class ReviewRead(BaseModel):
    id: int
    trip_id: int
    reviewer_id: int
    buddy_id: Optional[int] = None
    rating: int
    comment: Optional[str] = None
    review_type: str


# ---------- Chats ----------
class ChatWrite(BaseModel):
    member_ids: List[int] = []
    name: Optional[str] = None

class MessageWrite(BaseModel):
    content: str = ""

class MessageRead(BaseModel):
    id: int
    chat_id: int
    content: str
    created_at: datetime
    sender: UserSummary

    model_config = ConfigDict(from_attributes=True)


# ---------- Groups ----------
class GroupWrite(BaseModel):
    name: str = ""

class GroupPostWrite(BaseModel):
    title: str = ""
    content: str = ""
    location: Optional[str] = None
    post_date: Optional[datetime] = None

class GroupPostRead(BaseModel):
    id: int
    title: str
    content: str
    location: Optional[str] = None
    post_date: datetime
    author: UserSummary
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class GroupRead(BaseModel):
    id: int
    name: str
    creator: UserSummary
    post_count: int = 0
    created_at: datetime


# ---------- Admin ----------
class AdminUserUpdate(BaseModel):
    is_premium: bool

class AdminUserRead(BaseModel):
    id: int
    name: str
    email: str
    type: str
    is_premium: bool
    join_date: datetime
    trips_completed: int
    status: str = "active"


# ---------- Destinations / Hotels ----------
class DestinationSuggestion(BaseModel):
    destination: str
    description: str
