"""
Token auth for the API.

Tokens are HS256 JWTs carrying the user id, e-mail, account type and premium
flag. They are read from the `Authorization: Bearer` header and fall back to
the `auth-token` cookie. Handlers receive the signed-in user as an explicit
`SessionUser` through dependency injection.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from sqlalchemy.orm import Session

from config import (
    AUTH_COOKIE_NAME,
    JWT_ALGORITHM,
    JWT_EXPIRE_DAYS,
    JWT_SECRET,
    PROTECTED_PREFIXES,
)
from database import get_db
from models.User import User, UserType

security = HTTPBearer(auto_error=False)


class SessionUser(BaseModel):
    id: int
    email: str
    name: str
    type: str
    is_premium: bool

    @property
    def is_admin(self) -> bool:
        return self.type == UserType.ADMIN.value


def create_access_token(user: User) -> str:
    payload = {
        "id": user.id,
        "email": user.email,
        "type": user.type.value,
        "is_premium": user.is_premium,
        "exp": datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry. Raises jwt.InvalidTokenError."""
    payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    if "id" not in payload:
        raise jwt.InvalidTokenError("Token has no user id")
    return payload


def extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return request.cookies.get(AUTH_COOKIE_NAME)


def _resolve_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    cookie_token: Optional[str],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return cookie_token


def _load_session_user(token: str, db: Session) -> SessionUser:
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.query(User).filter(User.id == payload["id"]).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return SessionUser(
        id=user.id,
        email=user.email,
        name=user.name,
        type=user.type.value,
        is_premium=user.is_premium,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> SessionUser:
    token = _resolve_token(credentials, auth_token)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return _load_session_user(token, db)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> Optional[SessionUser]:
    """Like get_current_user, but anonymous or bad tokens yield None."""
    token = _resolve_token(credentials, auth_token)
    if not token:
        return None
    try:
        return _load_session_user(token, db)
    except HTTPException:
        return None


def require_admin(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Not authorized")
    return current_user


def require_premium(current_user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if not current_user.is_premium:
        raise HTTPException(status_code=403, detail="Community access is available for premium users only")
    return current_user


def is_protected_path(path: str, prefixes=None) -> bool:
    prefixes = PROTECTED_PREFIXES if prefixes is None else prefixes
    return any(path == p or path.startswith(f"{p}/") for p in prefixes)


async def auth_gateway(request: Request, call_next):
    """Reject requests to protected prefixes that carry no valid token."""
    if request.method != "OPTIONS" and is_protected_path(request.url.path):
        token = extract_token(request)
        if not token:
            return JSONResponse(status_code=401, content={"detail": "Not authenticated"})
        try:
            decode_access_token(token)
        except jwt.InvalidTokenError:
            return JSONResponse(status_code=401, content={"detail": "Invalid or expired token"})
    return await call_next(request)
