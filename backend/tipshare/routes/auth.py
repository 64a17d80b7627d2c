"""
TipShare Backend: Auth Route Handlers
=======================================

What:  POST /auth/register and POST /auth/login.
How:   Thin handlers. Validation, uniqueness and credential checks live in
       IdentityService; errors become responses in the global handlers.
Who:   Called by the browser client's login and sign-up forms.
"""

import logging

from fastapi import APIRouter, Depends

from tipshare.dependencies import get_identity_service
from tipshare.schemas.auth import (
    LoginRequest,
    LoginResult,
    RegisterRequest,
    RegisterResponse,
)
from tipshare.schemas.common import ErrorResponse
from tipshare.services.auth_service import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        201: {"description": "User created", "model": RegisterResponse},
        400: {"description": "Missing fields or username already taken", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    body: RegisterRequest,
    service: IdentityService = Depends(get_identity_service),
) -> RegisterResponse:
    """
    Create an account. The response never contains the password.

    Error responses:
        HTTP 400: username/password missing (ValidationError)
        HTTP 400: username already taken (ConflictError)
    """
    user = await service.register(
        username=body.username,
        password=body.password,
        profile_picture=body.profile_picture,
    )
    return RegisterResponse(user=user)


@router.post(
    "/login",
    response_model=LoginResult,
    responses={
        200: {"description": "Token issued", "model": LoginResult},
        400: {"description": "Missing fields", "model": ErrorResponse},
        401: {"description": "Invalid username or password", "model": ErrorResponse},
    },
    summary="Log in and obtain a bearer token",
)
async def login(
    body: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
) -> LoginResult:
    return await service.login(username=body.username, password=body.password)
