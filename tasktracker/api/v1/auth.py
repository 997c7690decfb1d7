"""Registration and login endpoints issuing bearer tokens"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from tasktracker.database import get_db, store_write
from tasktracker.dependencies import get_current_user
from tasktracker.errors import InvalidInput, Unauthenticated
from tasktracker.models import User
from tasktracker.schemas import AuthPayload, Envelope, UserLogin, UserRegister, UserResponse, envelope
from tasktracker.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_payload(user: User) -> AuthPayload:
    return AuthPayload(token=create_access_token(user.id), user=UserResponse.model_validate(user))


@router.post("/register", response_model=Envelope[AuthPayload], status_code=status.HTTP_201_CREATED)
def register(user_in: UserRegister, db: Session = Depends(get_db)):
    existing = (
        db.query(User)
        .filter(or_(User.email == user_in.email, User.username == user_in.username))
        .first()
    )
    if existing:
        raise InvalidInput("User already exists")

    user = User(
        username=user_in.username,
        email=user_in.email,
        password_hash=get_password_hash(user_in.password),
    )
    with store_write(db, "register user"):
        db.add(user)
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return envelope(_auth_payload(user))


@router.post("/login", response_model=Envelope[AuthPayload])
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not verify_password(credentials.password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return envelope(_auth_payload(user))


@router.get("/me", response_model=Envelope[UserResponse])
def read_current_user(current_user: User = Depends(get_current_user)):
    return envelope(UserResponse.model_validate(current_user))
