"""Request-scoped dependencies shared by the API routers."""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tasktracker.database import get_db
from tasktracker.errors import Unauthenticated
from tasktracker.models import User
from tasktracker.security import decode_access_token

logger = logging.getLogger(__name__)

# auto_error is off so a missing header yields our 401 envelope rather than a bare 403.
bearer_scheme = HTTPBearer(auto_error=False)


def resolve_user(db: Session, token: Optional[str]) -> User:
    """Resolve the caller identity behind a bearer token or fail with Unauthenticated."""
    if not token:
        raise Unauthenticated("Not authorized, no token")

    user_id = decode_access_token(token)
    if user_id is None:
        logger.debug("Rejected bearer token that failed verification")
        raise Unauthenticated("Not authorized, token failed")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("Not authorized, user not found")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials if credentials else None
    return resolve_user(db, token)
