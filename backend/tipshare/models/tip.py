"""
TipShare Backend: Tip Record
==============================

What:  A short text record owned by exactly one user, visible to everyone.

States:
    active  → deleted (terminal; the record is removed, no tombstone)

`user_id` is a plain back-reference to User.id. Nothing prevents it from
dangling; readers must tolerate a missing owner.
"""

from pydantic import BaseModel, ConfigDict, Field


class Tip(BaseModel):
    """Stored tip record. On disk: {"id": "...", "title": "...", "userId": "..."}."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str
    user_id: str = Field(alias="userId")

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
