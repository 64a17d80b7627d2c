"""
TipShare Backend: FastAPI Dependencies
========================================

What:  Resolves per-app services and the caller's identity for route handlers.
How:   create_app() stores the store, token signer and services on
       `app.state`; the dependencies below read them back from the request.
       This lets tests build apps with their own data file and secret.

Bearer handling:
    Missing header, or a scheme other than Bearer → 401
        "Missing or invalid Authorization header"
    Bearer token that fails verification          → 401 "Invalid token"
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tipshare.database import DocumentStore
from tipshare.exceptions import UnauthorizedError
from tipshare.security import Identity, TokenSigner
from tipshare.services.auth_service import IdentityService
from tipshare.services.tip_service import TipService

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


def get_identity_service(request: Request) -> IdentityService:
    return request.app.state.identity_service


def get_tip_service(request: Request) -> TipService:
    return request.app.state.tip_service


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    signer: TokenSigner = Depends(get_token_signer),
) -> Identity:
    """
    Dependency that authenticates the request from its bearer token.

    Raises:
        UnauthorizedError: header absent/malformed, or token invalid/expired.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(message="Missing or invalid Authorization header")

    identity = signer.verify(credentials.credentials)
    if identity is None:
        raise UnauthorizedError(message="Invalid token")
    return identity
