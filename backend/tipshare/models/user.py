"""
TipShare Backend: User Record
===============================

What:  A registered account as stored in the `users` collection.
Who:   Created by IdentityService.register(); read by login and by the tip feed.
When:  Immutable after creation. There is no update or delete path.

On-disk shape:
    {"id": "...", "username": "alice", "password": "pw123", "profilePicture": ""}

The password is stored and compared in plain text. Hashing is outside the
scope of this service; the public projection (schemas.auth.PublicUser) is the
only shape that ever leaves the process.
"""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """
    Stored user record.

    Lifecycle:
        1. Built once at registration with a fresh UUID id
        2. Appended to StoreDocument.users and persisted
        3. Never modified or removed afterwards

    Unknown keys found on disk are kept (extra="allow") so that a load/save
    cycle does not strip fields written by another version of the client.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    username: str
    password: str
    profile_picture: str = Field(default="", alias="profilePicture")
