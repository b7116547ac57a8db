"""Authentication routes (register, login, me)."""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_user_repo
from api.models import (
    ClaimResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserSummaryResponse,
)
from api.security import get_current_claim
from config.settings import Settings, get_settings
from domain.model.token import IdentityClaim
from port.user_repository import UserRepository
from services import auth_service, token_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserSummaryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Returns:
        The created user's id, email and role (never the password hash)

    Raises:
        400 if email/password are missing, the role is unknown,
        or the email is already registered
    """
    # bcrypt is CPU-bound; keep it off the event loop
    return await asyncio.to_thread(
        auth_service.register, repo, request.email, request.password, request.role
    )


@router.post("/login", response_model=TokenResponse, responses={401: {"model": ErrorResponse}})
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and return a signed bearer token.

    Raises:
        401 for an unknown email or a wrong password (same body for both)
    """
    identity = await asyncio.to_thread(
        auth_service.authenticate, repo, request.email, request.password
    )
    token = token_service.issue_token(identity, settings)
    return TokenResponse(token=token)


@router.get("/me", response_model=ClaimResponse, responses={401: {"model": ErrorResponse}})
async def get_me(claim: IdentityClaim = Depends(get_current_claim)):
    """Return the decoded claim of the presented bearer token."""
    return claim.to_payload()
