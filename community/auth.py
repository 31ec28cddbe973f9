"""
Authentication module for session-based access control.

Sessions live server-side in the ``session`` table. The browser only holds a
cookie whose value is the session id signed with itsdangerous, so a forged
or tampered cookie never reaches the database lookup.

Passwords are hashed with passlib's bcrypt scheme.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, Response, status
from itsdangerous import BadSignature, URLSafeTimedSerializer
from passlib.context import CryptContext

from .config import config, get_db
from .database import Database, DBUser

logger = logging.getLogger(__name__)

# Session id serializer for signed cookies
_serializer: Optional[URLSafeTimedSerializer] = None

# Password hashing context
_pwd_context: Optional[CryptContext] = None


def get_serializer() -> URLSafeTimedSerializer:
    """Get the session serializer, creating it if needed."""
    global _serializer
    if _serializer is None:
        if not config.SESSION_SECRET:
            raise HTTPException(
                status_code=500,
                detail="SESSION_SECRET not configured"
            )
        _serializer = URLSafeTimedSerializer(config.SESSION_SECRET, salt="session")
    return _serializer


def get_password_context() -> CryptContext:
    """Get the passlib context, creating it if needed."""
    global _pwd_context
    if _pwd_context is None:
        _pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=config.BCRYPT_ROUNDS,
        )
    return _pwd_context


def hash_password(password: str) -> str:
    return get_password_context().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        return get_password_context().verify(password, password_hash)
    except ValueError:
        return False


# ─────────────────────────────────────────────────────────────
# Session cookie handling
# ─────────────────────────────────────────────────────────────

def login_user(db: Database, user: DBUser, response: Response) -> str:
    """Create a session for the user and set the signed session cookie."""
    sid = db.create_session({"user_id": user.id}, config.SESSION_MAX_AGE)
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=get_serializer().dumps(sid),
        max_age=config.SESSION_MAX_AGE,
        httponly=True,
        secure=config.SESSION_SECURE,
        samesite="lax",
        path="/",
    )
    return sid


def get_session_id(request: Request) -> Optional[str]:
    """Extract and verify the session id from the request cookie."""
    cookie = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not cookie:
        return None

    try:
        return get_serializer().loads(cookie, max_age=config.SESSION_MAX_AGE)
    except BadSignature:
        # SignatureExpired is a BadSignature too
        logger.warning("Invalid session cookie signature")
        return None


def logout_user(db: Database, request: Request, response: Response) -> None:
    """Destroy the current session row and clear the cookie."""
    sid = get_session_id(request)
    if sid:
        db.destroy_session(sid)

    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=config.SESSION_SECURE,
        samesite="lax",
    )


# ─────────────────────────────────────────────────────────────
# Dependencies
# ─────────────────────────────────────────────────────────────

def get_current_user(
    request: Request,
    db: Annotated[Database, Depends(get_db)]
) -> Optional[DBUser]:
    """
    Resolve the session cookie to a user.

    Returns None when there is no cookie, the signature is bad, the session
    has expired, or the user no longer exists or has been deactivated.
    """
    sid = get_session_id(request)
    if not sid:
        return None

    session = db.get_session(sid)
    if not session or "user_id" not in session:
        return None

    user = db.get_user_by_id(session["user_id"])
    if not user or not user.is_active:
        return None
    return user


def require_login(
    user: Annotated[Optional[DBUser], Depends(get_current_user)]
) -> DBUser:
    """
    Require an authenticated user.

    Raises 401 if not authenticated.
    Used as a FastAPI dependency for protected routes.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


CurrentUser = Annotated[DBUser, Depends(require_login)]
