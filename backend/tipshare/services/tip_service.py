"""
TipShare Backend: Tip Service
===============================

What:  Create, list, update and delete tips with ownership enforcement.
How:   Every mutation runs load → locate → mutate → save inside the store's
       write lock. Lookups for update/delete match id AND owner together.
Who:   Called by routes/tips.py with the identity taken from the bearer token.

Ownership rule:
    A tip owned by another user is treated exactly like a tip that does not
    exist: the operation returns False and nothing is written. The caller
    learns nothing about which case applied.
"""

import logging
import uuid
from typing import List, Optional

from tipshare.database import DocumentStore
from tipshare.exceptions import ValidationError
from tipshare.models import StoreDocument, Tip
from tipshare.schemas.tip import TipView

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"


def join_authors(document: StoreDocument) -> List[TipView]:
    """
    Attach each tip's author profile, in store order.

    Dangling `userId` references resolve to "Unknown" with an empty picture.
    """
    users_by_id = {user.id: user for user in document.users}
    views = []
    for tip in document.tips:
        author = users_by_id.get(tip.user_id)
        views.append(
            TipView(
                id=tip.id,
                title=tip.title,
                user_id=tip.user_id,
                username=author.username if author else UNKNOWN_AUTHOR,
                profile_picture=author.profile_picture if author else "",
            )
        )
    return views


class TipService:
    """
    Business logic for tips.

    Methods:
        - list_tips(): raw tips, unfiltered
        - list_feed(): tips joined to author profiles (one load)
        - create_tip(): append and return the new id
        - update_tip() / delete_tip(): owner-only, return success as bool
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_tips(self) -> List[Tip]:
        document = await self.store.load()
        return list(document.tips)

    async def list_feed(self) -> List[TipView]:
        document = await self.store.load()
        return join_authors(document)

    async def create_tip(self, title: Optional[str], user_id: str) -> str:
        """
        Append a new tip owned by `user_id`.

        Raises:
            ValidationError: title missing or empty.
        """
        if not title:
            raise ValidationError(message="title is required", field="title")

        tip = Tip(id=str(uuid.uuid4()), title=title, user_id=user_id)
        async with self.store.write_lock():
            document = await self.store.load()
            document.tips.append(tip)
            await self.store.save(document)

        logger.info("Tip %s created by user %s", tip.id, user_id)
        return tip.id

    async def update_tip(self, tip_id: Optional[str], title: Optional[str], user_id: str) -> bool:
        """
        Change the title of a tip owned by `user_id`.

        Returns:
            True if updated; False if the tip is absent or owned by someone else.

        Raises:
            ValidationError: id or title missing or empty.
        """
        if not tip_id or not title:
            raise ValidationError(message="id and title are required")

        async with self.store.write_lock():
            document = await self.store.load()
            index = document.find_owned_tip_index(tip_id, user_id)
            if index is None:
                logger.info("Update denied: tip %s not found for user %s", tip_id, user_id)
                return False

            document.tips[index].title = title
            await self.store.save(document)

        logger.info("Tip %s updated by user %s", tip_id, user_id)
        return True

    async def delete_tip(self, tip_id: Optional[str], user_id: str) -> bool:
        """
        Remove a tip owned by `user_id`.

        Returns:
            True if removed; False if the tip is absent or owned by someone else.

        Raises:
            ValidationError: id missing or empty.
        """
        if not tip_id:
            raise ValidationError(message="id is required", field="id")

        async with self.store.write_lock():
            document = await self.store.load()
            index = document.find_owned_tip_index(tip_id, user_id)
            if index is None:
                logger.info("Delete denied: tip %s not found for user %s", tip_id, user_id)
                return False

            del document.tips[index]
            await self.store.save(document)

        logger.info("Tip %s deleted by user %s", tip_id, user_id)
        return True
