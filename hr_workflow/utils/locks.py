"""Advisory locks stored in MongoDB.

A lock is a document in the ``locks`` collection whose ``_id`` is the lock
key. The unique ``_id`` makes acquisition atomic; ``expires_at`` bounds how
long a crashed holder can block others (a TTL index reaps stale documents,
and an expired lease can be taken over immediately).
"""
import asyncio
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from pymongo.errors import DuplicateKeyError

from hr_workflow.config import settings
from hr_workflow.errors import ConflictError

logger = logging.getLogger(__name__)


class AdvisoryLock:
    """Lease lock with a short bounded wait, used as an async context manager."""

    def __init__(
        self,
        collection,
        key: str,
        lease_seconds: Optional[int] = None,
        retry_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        """Initialize lock for ``key`` in the given collection."""
        self.collection = collection
        self.key = key
        self.lease_seconds = lease_seconds or settings.lock_lease_seconds
        self.retry_attempts = max(
            retry_attempts if retry_attempts is not None else settings.lock_retry_attempts, 1
        )
        self.retry_delay = retry_delay if retry_delay is not None else settings.lock_retry_delay_seconds
        self.token = uuid.uuid4().hex

    async def acquire(self) -> None:
        """
        Take the lock, retrying briefly while another holder has it.

        Raises:
            ConflictError: If the lock is still held after the last attempt
        """
        for attempt in range(1, self.retry_attempts + 1):
            if await self._try_acquire():
                return
            if attempt < self.retry_attempts:
                await asyncio.sleep(self.retry_delay)

        logger.warning("Lock %s still held after %d attempts", self.key, self.retry_attempts)
        raise ConflictError("Another request for this employee is being processed, please retry")

    async def _try_acquire(self) -> bool:
        now = datetime.utcnow()
        expires_at = now + timedelta(seconds=self.lease_seconds)

        try:
            await self.collection.insert_one({
                "_id": self.key,
                "token": self.token,
                "expires_at": expires_at,
            })
            return True
        except DuplicateKeyError:
            pass

        # Take over a lease whose holder never released it
        taken = await self.collection.find_one_and_update(
            {"_id": self.key, "expires_at": {"$lte": now}},
            {"$set": {"token": self.token, "expires_at": expires_at}},
        )
        return taken is not None

    async def release(self) -> None:
        """Release the lock if this instance still holds it."""
        await self.collection.delete_one({"_id": self.key, "token": self.token})

    async def __aenter__(self) -> "AdvisoryLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()


def employee_lock(db, scope: str, user_id: str) -> AdvisoryLock:
    """
    Lock serializing one kind of write for one employee.

    Example:
        async with employee_lock(db, "time_off", principal.id):
            ...check and insert...
    """
    return AdvisoryLock(db["locks"], f"{scope}:{user_id}")
