from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from config import AUTH_COOKIE_NAME, ENVIRONMENT, JWT_EXPIRE_DAYS
from database import get_db
from models.User import User, UserType
from schemas import SignUpRequest, SignInRequest, UserRead
from utils import get_password_hash, verify_password
from utils.auth import create_access_token
from utils.logger import setup_api_logger

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = setup_api_logger()


def _set_auth_cookie(response: Response, token: str):
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=ENVIRONMENT == "production",
        samesite="lax",
        max_age=JWT_EXPIRE_DAYS * 24 * 60 * 60,
    )


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignUpRequest, response: Response, db: Session = Depends(get_db)):
    name = (payload.name or "").strip()
    email = (payload.email or "").strip().lower()
    if not name or not email or not payload.password:
        raise HTTPException(status_code=400, detail="Name, email and password are required")

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        name=name,
        email=email,
        password=get_password_hash(payload.password),
        type=UserType.CUSTOMER,
        is_premium=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    token = create_access_token(user)
    _set_auth_cookie(response, token)
    logger.info("User %s signed up", user.id)

    return {
        "user": UserRead.model_validate(user),
        "token": token,
        "message": "User created successfully",
    }


@router.post("/signin")
def signin(payload: SignInRequest, response: Response, db: Session = Depends(get_db)):
    email = (payload.email or "").strip().lower()
    if not email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(user)
    _set_auth_cookie(response, token)

    return {"user": UserRead.model_validate(user), "token": token}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE_NAME)
    return {"message": "Logged out successfully"}
