"""Username/password authentication for the API."""

import hashlib
import hmac
import logging
import secrets

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Role, User

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "pbkdf2_sha256"
HASH_ITERATIONS = 260_000


def hash_password(password: str, salt: str | None = None) -> str:
    """Salted PBKDF2 hash in `algorithm$iterations$salt$hex` form."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode(),
        salt.encode(),
        HASH_ITERATIONS,
    ).hex()
    return f"{HASH_ALGORITHM}${HASH_ITERATIONS}${salt}${digest}"


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash."""
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode(),
        salt.encode(),
        int(iterations),
    ).hex()
    return hmac.compare_digest(digest, expected)


def authenticate(session: Session, username: str, password: str) -> User | None:
    """Return the user if the credentials match, else None."""
    user = session.scalars(select(User).where(User.username == username)).one_or_none()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def ensure_user(session: Session, username: str, password: str, role: Role) -> User:
    """Create the user, or reset its password and role."""
    user = session.scalars(select(User).where(User.username == username)).one_or_none()
    if user is None:
        user = User(username=username)
        session.add(user)
        logger.info(f"Creating {role.value} user {username!r}")

    user.password_hash = hash_password(password)
    user.role = role
    session.commit()
    return user
