"""
TipShare Backend: Auth Request/Response Schemas
=================================================

What:  API contract for POST /auth/register and POST /auth/login.
How:   Request fields are optional at the schema level so that a missing
       field reaches the service and produces the documented 400 message
       instead of FastAPI's generic 422.

Security contract:
    PublicUser has no password field. Every user that leaves the service is
    built through PublicUser.from_record(), so a password can never be
    serialized by accident.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tipshare.models import User


class RegisterRequest(BaseModel):
    """Body of POST /auth/register."""

    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = Field(default=None, examples=["alice"])
    password: Optional[str] = Field(default=None, examples=["pw123"])
    profile_picture: Optional[str] = Field(
        default=None,
        alias="profilePicture",
        description="Image URL or data URI; stored as an empty string when omitted",
    )


class LoginRequest(BaseModel):
    """Body of POST /auth/login."""

    username: Optional[str] = Field(default=None, examples=["alice"])
    password: Optional[str] = Field(default=None, examples=["pw123"])


class PublicUser(BaseModel):
    """
    What:  The only user representation ever returned to clients.
    Who:   Returned by register and login.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Opaque unique user id")
    username: str
    profile_picture: str = Field(default="", alias="profilePicture")

    @classmethod
    def from_record(cls, user: User) -> "PublicUser":
        return cls(id=user.id, username=user.username, profile_picture=user.profile_picture)


class RegisterResponse(BaseModel):
    """201 body of POST /auth/register."""

    user: PublicUser


class LoginResult(BaseModel):
    """
    What:  Successful login: a bearer token plus the caller's public profile.
    Who:   Returned by IdentityService.login() and by POST /auth/login as-is.
    """

    token: str = Field(description="HS256 identity token, valid for one hour by default")
    user: PublicUser
