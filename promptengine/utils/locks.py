"""
Per-user generation locks: one blueprint generation per user at a time
"""
import asyncio
import time
import logging
from typing import Dict, Set
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class GenerationInProgress(RuntimeError):
    """Raised when the user already has a generation running"""
    pass


class UserGenerationLock:
    """
    Tracks which users have a generation running.
    Stale bookkeeping is dropped periodically.
    """
    def __init__(self, cleanup_interval: int = 300):
        """
        Args:
            cleanup_interval: Seconds between cleanup cycles (default: 5 minutes)
        """
        self._processing: Set[int] = set()
        self._main_lock = asyncio.Lock()
        self._last_seen: Dict[int, float] = {}
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = time.time()

    async def _cleanup_stale_entries(self):
        now = time.time()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        async with self._main_lock:
            stale = [
                user_id for user_id, ts in self._last_seen.items()
                if now - ts > self._cleanup_interval and user_id not in self._processing
            ]
            for user_id in stale:
                del self._last_seen[user_id]
            self._last_cleanup = now

            if stale:
                logger.info(f"Lock cleanup: dropped {len(stale)} stale entries, processing: {len(self._processing)}")

    @asynccontextmanager
    async def acquire(self, user_id: int):
        """
        Mark user as generating for the duration of the block.

        Args:
            user_id: Telegram user ID

        Raises:
            GenerationInProgress: If the user already has a generation running
        """
        await self._cleanup_stale_entries()

        async with self._main_lock:
            if user_id in self._processing:
                raise GenerationInProgress(f"Generation already running for user {user_id}")
            self._processing.add(user_id)
            self._last_seen[user_id] = time.time()

        try:
            yield
        finally:
            async with self._main_lock:
                self._processing.discard(user_id)
                self._last_seen[user_id] = time.time()

    def is_processing(self, user_id: int) -> bool:
        """Check if user currently has a generation running"""
        return user_id in self._processing

    def get_stats(self) -> Dict:
        """Lock statistics for monitoring"""
        return {
            "processing_users": len(self._processing),
            "tracked_users": len(self._last_seen),
            "cleanup_interval": self._cleanup_interval,
            "time_since_cleanup": time.time() - self._last_cleanup
        }


# Global instance
user_generation_lock = UserGenerationLock()
