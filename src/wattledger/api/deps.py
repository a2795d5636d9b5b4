"""Shared request dependencies."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Role, User
from ..services.auth import authenticate
from ..services.ledger_store import LedgerStore

security = HTTPBasic()


def get_store(session: Session = Depends(get_session)) -> LedgerStore:
    """Ledger store bound to the request's session."""
    return LedgerStore(session)


def get_current_user(
    credentials: HTTPBasicCredentials = Depends(security),
    session: Session = Depends(get_session),
) -> User:
    """Resolve HTTP Basic credentials to a user."""
    user = authenticate(session, credentials.username, credentials.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Reject non-admin users."""
    if user.role != Role.ADMIN:
        raise HTTPException(status_code=403, detail="Admin-only operation")
    return user
