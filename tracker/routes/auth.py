from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker import config
from tracker.auth import credentials
from tracker.auth import (
    SessionRegistry,
    SessionUser,
    get_current_user,
    get_session_registry,
)
from tracker.database.config import get_db
from tracker.schemas import (
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterResponse,
    UserCredentials,
    UserResponse,
)

router = APIRouter(tags=["users"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserCredentials, db: AsyncSession = Depends(get_db)):
    """Register a new user"""
    user_id = await credentials.register(db, payload.username, payload.password)
    return {"message": "User registered successfully!", "user_id": user_id}


@router.post("/login", response_model=LoginResponse)
async def login_user(
    payload: UserCredentials,
    response: Response,
    db: AsyncSession = Depends(get_db),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Check credentials and open a session.

    The token is set as an HTTP-only cookie and also returned in the body for
    clients that send it as a bearer header instead.
    """
    user = await credentials.verify(db, payload.username, payload.password)
    token = await registry.create(user)

    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=registry.ttl_seconds,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return {
        "message": "Session created successfully!",
        "user": UserResponse.model_validate(user),
        "session_token": token,
    }


@router.delete("/logout", response_model=MessageResponse)
async def logout_user(
    request: Request,
    response: Response,
    user: SessionUser = Depends(get_current_user),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Destroy the current session. Requires a valid session."""
    await registry.destroy(request.state.session_token)
    response.delete_cookie(config.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully!"}


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: SessionUser = Depends(get_current_user)):
    """Return the user attached to the current session."""
    return {
        "message": "Current user profile retrieved successfully.",
        "user": {"id": user.id, "username": user.username},
    }
