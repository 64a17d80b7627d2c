"""
TipShare Backend: Persisted Store
===================================

What:  Loads and saves the single JSON document that holds all users and tips.
How:   Whole-document read on every load, whole-document atomic replace on
       every save. Async file I/O via aiofiles keeps the event loop free.
Who:   IdentityService and TipService, through the DocumentStore interface.
When:  Exactly one load per service operation, plus one save if it mutates.

Document states on disk:
    absent / empty / whitespace  → empty store (the file is NOT created)
    JSON object                  → {users: obj.users or [], tips: obj.tips or []}
    JSON array (legacy format)   → empty store; the old content is discarded
    anything else                → StoreError (never silently ignored)

Atomic replace:
    save() writes the new document to a uniquely named temp file in the same
    directory and then os.replace()s it over the target. A reader sees either
    the old document or the new one, never a partial write.

Concurrency policy:
    serialized      One asyncio.Lock per store guards load → mutate → save.
                    Concurrent writers in this process cannot lose updates.
    unsynchronized  No lock. Two writers that load the same state both save,
                    and the second save silently discards the first.
    Read-only operations never take the lock.
"""

import asyncio
import json
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError as PydanticValidationError

from tipshare.exceptions import StoreError
from tipshare.models import StoreDocument

logger = logging.getLogger(__name__)

SERIALIZED = "serialized"
UNSYNCHRONIZED = "unsynchronized"
CONCURRENCY_POLICIES = (SERIALIZED, UNSYNCHRONIZED)


class DocumentStore(ABC):
    """
    Narrow persistence contract used by every service.

    Contract:
        - load() returns a fresh, independent StoreDocument
        - save() replaces the persisted document in full
        - write_lock() wraps a load → mutate → save sequence according to the
          configured concurrency policy
        - Failures surface as StoreError; nothing is swallowed

    Implementations:
        - JsonFileStore: flat JSON file (default)
    """

    def __init__(self, concurrency_policy: str = SERIALIZED):
        if concurrency_policy not in CONCURRENCY_POLICIES:
            raise ValueError(
                f"Unknown concurrency policy '{concurrency_policy}'. "
                f"Must be one of: {CONCURRENCY_POLICIES}"
            )
        self.concurrency_policy = concurrency_policy
        self._lock = None
        if concurrency_policy == SERIALIZED:
            self._lock = asyncio.Lock()

    @abstractmethod
    async def load(self) -> StoreDocument:
        """Read the full document. Raises StoreError on any read failure."""
        ...

    @abstractmethod
    async def save(self, document: StoreDocument) -> None:
        """Overwrite the full document atomically. Raises StoreError on failure."""
        ...

    @asynccontextmanager
    async def write_lock(self) -> AsyncIterator[None]:
        """
        Serialization point for mutating operations.

        Usage:
            async with store.write_lock():
                document = await store.load()
                ...mutate...
                await store.save(document)
        """
        if self._lock is None:
            yield
            return
        async with self._lock:
            yield

    async def health_check(self) -> bool:
        """True if the document can currently be loaded."""
        try:
            await self.load()
        except StoreError as e:
            logger.warning("Store health check failed: %s | Context: %s", e.message, e.context)
            return False
        return True


class JsonFileStore(DocumentStore):
    """
    DocumentStore backed by one JSON file.

    Args:
        path: Location of the document. Its parent directory is created on
              the first save if it does not exist.
        concurrency_policy: "serialized" or "unsynchronized".
        indent: Pretty-print indentation for the written JSON.
    """

    def __init__(
        self,
        path: str,
        concurrency_policy: str = SERIALIZED,
        indent: Optional[int] = 2,
    ):
        super().__init__(concurrency_policy)
        self.path = Path(path).resolve()
        self.indent = indent
        logger.info(
            "JsonFileStore initialized with path=%s, concurrency=%s",
            self.path,
            concurrency_policy,
        )

    async def load(self) -> StoreDocument:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return StoreDocument.empty()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read store at %s: %s", self.path, str(e))
            raise StoreError(context={"path": str(self.path), "error": str(e)})

        return self._parse(raw)

    def _parse(self, raw: str) -> StoreDocument:
        if not raw.strip():
            return StoreDocument.empty()

        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.error("Store at %s is not valid JSON: %s", self.path, str(e))
            raise StoreError(context={"path": str(self.path), "error": str(e)})

        if isinstance(parsed, list):
            # Legacy format: a bare array. Its entries are dropped, and the
            # next save overwrites the file with the current shape.
            logger.warning(
                "Store at %s uses the legacy array format; discarding %d entries",
                self.path,
                len(parsed),
            )
            return StoreDocument.empty()

        if not isinstance(parsed, dict):
            logger.error(
                "Store at %s has unexpected top-level type %s",
                self.path,
                type(parsed).__name__,
            )
            raise StoreError(
                context={"path": str(self.path), "top_level_type": type(parsed).__name__}
            )

        users = parsed.get("users")
        tips = parsed.get("tips")
        try:
            return StoreDocument.model_validate({
                "users": users if users is not None else [],
                "tips": tips if tips is not None else [],
            })
        except PydanticValidationError as e:
            logger.error("Store at %s has malformed records: %s", self.path, str(e))
            raise StoreError(
                context={"path": str(self.path), "error_count": e.error_count()}
            )

    async def save(self, document: StoreDocument) -> None:
        payload = json.dumps(document.to_json_dict(), indent=self.indent, ensure_ascii=False)
        tmp_path = self.path.with_name(f"{self.path.name}.{uuid.uuid4().hex[:8]}.tmp")

        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
                await f.flush()
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to write store at %s: %s", self.path, str(e))
            await self._discard_temp(tmp_path)
            raise StoreError(context={"path": str(self.path), "os_error": str(e)})

        logger.debug(
            "Store saved: %d users, %d tips",
            len(document.users),
            len(document.tips),
        )

    async def _discard_temp(self, tmp_path: Path) -> None:
        """Remove a leftover temp file after a failed save."""
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove temp file %s: %s", tmp_path, str(e))
