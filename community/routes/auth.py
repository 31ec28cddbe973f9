"""
Account routes: register, login, logout, current user.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..auth import (
    CurrentUser,
    hash_password,
    login_user,
    logout_user,
    require_login,
    verify_password,
)
from ..config import get_db
from ..database import Database
from ..exceptions import DuplicateEmailError
from ..schemas import LoginRequest, RegisterRequest, UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    response: Response,
    db: Annotated[Database, Depends(get_db)]
) -> UserResponse:
    """Create an account and sign the new user in."""
    if db.get_user_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        user = db.create_user(
            email=request.email,
            password_hash=hash_password(request.password),
            full_name=request.full_name,
            phone=request.phone,
        )
    except DuplicateEmailError:
        # Lost a race with a concurrent registration for the same email
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info(f"Registered user {user.id}")
    login_user(db, user, response)
    return UserResponse.from_db(user)


@router.post("/login")
async def login(
    request: LoginRequest,
    response: Response,
    db: Annotated[Database, Depends(get_db)]
) -> UserResponse:
    """Verify credentials and start a session."""
    user = db.get_user_by_email(request.email)
    if not user or not verify_password(request.password, user.password):
        logger.warning("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled",
        )

    login_user(db, user, response)
    logger.info(f"User {user.id} logged in")
    return UserResponse.from_db(user)


@router.post("/logout", dependencies=[Depends(require_login)])
async def logout(
    request: Request,
    response: Response,
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """End the current session."""
    logout_user(db, request, response)
    return {"success": True}


@router.get("/me")
async def get_me(user: CurrentUser) -> UserResponse:
    """Get the signed-in user."""
    return UserResponse.from_db(user)


@router.patch("/me")
async def update_me(
    user: CurrentUser,
    request: UserUpdateRequest,
    db: Annotated[Database, Depends(get_db)]
) -> UserResponse:
    """Update the signed-in user's profile. Only provided fields change."""
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        return UserResponse.from_db(user)

    updated = db.update_user(user.id, **changes)
    return UserResponse.from_db(updated)
