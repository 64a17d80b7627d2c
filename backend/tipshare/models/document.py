"""
TipShare Backend: Store Document
==================================

What:  The whole datastore: one ordered list of users and one of tips.
How:   Loaded in full and written back in full on every mutation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from tipshare.models.tip import Tip
from tipshare.models.user import User


class StoreDocument(BaseModel):
    """
    In-memory copy of the JSON document.

    Each service call works on its own instance returned by
    DocumentStore.load(); mutating it has no effect until save() is called.
    """

    users: List[User] = Field(default_factory=list)
    tips: List[Tip] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "StoreDocument":
        return cls()

    def find_user_by_username(self, username: str) -> Optional[User]:
        """Case-sensitive exact match on username."""
        for user in self.users:
            if user.username == username:
                return user
        return None

    def find_owned_tip_index(self, tip_id: str, user_id: str) -> Optional[int]:
        """
        Position of the tip matching BOTH id and owner, or None.

        A tip that exists under another owner yields None, exactly like a
        tip that does not exist at all.
        """
        for index, tip in enumerate(self.tips):
            if tip.id == tip_id and tip.is_owned_by(user_id):
                return index
        return None

    def to_json_dict(self) -> Dict[str, Any]:
        """Serializable form using the on-disk camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
