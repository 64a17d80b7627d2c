"""
TipShare Backend: Identity Service
====================================

What:  Registers users and authenticates them, issuing identity tokens.
How:   One store load per call; registration adds one save under the
       store's write lock so the username check and the append cannot
       interleave with another registration in this process.
Who:   Called by routes/auth.py.

Invariants:
    - Usernames are unique (case-sensitive exact match).
    - Nothing returned by this service carries a password.
    - Failures never mutate the store.
"""

import hmac
import logging
import uuid
from typing import Optional

from tipshare.database import DocumentStore
from tipshare.exceptions import ConflictError, UnauthorizedError, ValidationError
from tipshare.models import User
from tipshare.schemas.auth import LoginResult, PublicUser
from tipshare.security import TokenSigner

logger = logging.getLogger(__name__)


def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
    if not username or not password:
        raise ValidationError(
            message="username and password are required",
            context={"has_username": bool(username), "has_password": bool(password)},
        )


def _password_matches(stored: str, supplied: str) -> bool:
    """Plaintext comparison in constant time."""
    return hmac.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


class IdentityService:
    """
    Registration and login against the persisted store.

    Args:
        store: Where users are read from and appended to.
        signer: Issues the token returned by login(). Holds the secret.
    """

    def __init__(self, store: DocumentStore, signer: TokenSigner):
        self.store = store
        self.signer = signer

    async def register(
        self,
        username: Optional[str],
        password: Optional[str],
        profile_picture: Optional[str] = None,
    ) -> PublicUser:
        """
        Create a new user.

        Returns:
            PublicUser (id, username, profilePicture).

        Raises:
            ValidationError: username or password missing/empty.
            ConflictError: username already taken. Nothing is written.
            StoreError: the store could not be read or written.
        """
        _require_credentials(username, password)

        async with self.store.write_lock():
            document = await self.store.load()

            if document.find_user_by_username(username) is not None:
                logger.info("Registration rejected: username %r already taken", username)
                raise ConflictError(context={"username": username})

            user = User(
                id=str(uuid.uuid4()),
                username=username,
                password=password,
                profile_picture=profile_picture or "",
            )
            document.users.append(user)
            await self.store.save(document)

        logger.info("Registered user %s (%s)", user.id, user.username)
        return PublicUser.from_record(user)

    async def login(self, username: Optional[str], password: Optional[str]) -> LoginResult:
        """
        Authenticate by exact username and password.

        Raises:
            ValidationError: username or password missing/empty.
            UnauthorizedError: no user with that username/password pair.
        """
        _require_credentials(username, password)

        document = await self.store.load()
        user = document.find_user_by_username(username)

        if user is None or not _password_matches(user.password, password):
            logger.warning("Failed login for username %r", username)
            raise UnauthorizedError(
                message="Invalid username or password",
                context={"username": username},
            )

        token = self.signer.issue(user_id=user.id, username=user.username)
        logger.info("User %s logged in", user.id)
        return LoginResult(token=token, user=PublicUser.from_record(user))
