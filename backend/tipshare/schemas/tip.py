"""
TipShare Backend: Tip Request/Response Schemas
================================================

What:  API contract for the /tips endpoints.

Request bodies:
    POST   /tips   {title}
    PUT    /tips   {id, title}
    DELETE /tips   {id}

The list endpoint returns every tip joined to its author's public profile.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TipCreateRequest(BaseModel):
    title: Optional[str] = Field(default=None, examples=["Drink water"])


class TipUpdateRequest(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None


class TipDeleteRequest(BaseModel):
    id: Optional[str] = None


class TipView(BaseModel):
    """
    What:  A tip as shown in the shared feed.
    How:   `username` / `profilePicture` are looked up from the owning user.
           A tip whose owner no longer exists shows "Unknown" and "".
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    user_id: str = Field(alias="userId")
    username: str
    profile_picture: str = Field(default="", alias="profilePicture")


class TipListResponse(BaseModel):
    """200 body of GET /tips."""

    model_config = ConfigDict(populate_by_name=True)

    results: List[TipView]
    current_user_id: str = Field(
        alias="currentUserId",
        description="Id of the caller, used by the client to show edit controls",
    )


class TipCreatedResponse(BaseModel):
    """201 body of POST /tips."""

    id: str
    success: str = "Tip created successfully"


class SuccessResponse(BaseModel):
    """200 body of PUT and DELETE /tips."""

    success: str
