"""
Due-entry promoter with background polling.

Runs a daemon thread that, every poll interval, publishes each
SCHEDULED entry whose scheduled_at has passed. `trigger_now` performs
one pass synchronously, for cron-style use and for tests.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from contentkit.domain.entities import ContentEntry

logger = logging.getLogger(__name__)

# Publishes every entry due at the given time (or now) and returns them
PromoteDue = Callable[[datetime | None], list[ContentEntry]]


class DuePromoter:
    """Background scheduler for promoting due entries."""

    def __init__(
        self,
        promote_due: PromoteDue,
        poll_interval_seconds: float = 60.0,
    ) -> None:
        """
        Initialize promoter.

        Args:
            promote_due: Callback doing one promotion pass.
            poll_interval_seconds: Interval between polls.
        """
        self._promote_due = promote_due
        self._poll_interval = poll_interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> None:
        """Start the background loop."""
        if self._running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop, name="contentkit-due-promoter", daemon=True
        )
        self._thread.start()
        self._running = True
        logger.info("Due promoter started (poll interval: %.1fs)", self._poll_interval)

    def stop(self) -> None:
        """Stop the loop gracefully."""
        if not self._running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._running = False
        logger.info("Due promoter stopped")

    def trigger_now(self, now: datetime | None = None) -> list[ContentEntry]:
        """Run one promotion pass immediately."""
        return self._promote_due(now)

    @property
    def is_running(self) -> bool:
        return self._running

    def _poll_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._poll_interval):
            try:
                promoted = self._promote_due(None)
                if promoted:
                    logger.info("Due promoter published %d entries", len(promoted))
            except Exception:
                logger.exception("Error in due promoter poll loop")
