"""
Stale upload session reaper.

Runs UploadSessionManager.reap_stale on a fixed interval as an asyncio
task, independent of any single upload's lifecycle.

Dependencies: asyncio (stdlib)
System role: Background reclamation of abandoned uploads
"""

import asyncio
import logging

from docchat.core.uploads.session_store import UploadSessionManager

logger = logging.getLogger(__name__)


class UploadReaper:
    """Periodic background sweep of stale upload sessions."""

    def __init__(
        self,
        manager: UploadSessionManager,
        interval_seconds: float | None = None,
    ) -> None:
        """
        Initialize reaper.

        Args:
            manager: Session manager to sweep
            interval_seconds: Sweep interval (defaults to reap_interval_seconds)
        """
        self._manager = manager
        self._interval = (
            manager.settings.reap_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> list[str]:
        """Run one sweep off the event loop and return the removed session ids."""
        return await asyncio.to_thread(self._manager.reap_stale)

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"{__name__}:_loop - Reaper sweep failed: {e}", exc_info=True)
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start the background loop; no-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="upload-reaper")
        logger.info(f"{__name__}:start - Upload reaper started (interval={self._interval}s)")

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"{__name__}:stop - Upload reaper stopped")
