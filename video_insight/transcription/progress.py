"""One-way progress channel for speech-to-text queue notifications."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    """A single queue status notification."""

    status: str
    logs: tuple[str, ...] = ()
    request_id: str | None = None


ProgressCallback = Callable[[ProgressUpdate], None]


def log_progress(update: ProgressUpdate) -> None:
    """Default subscriber: write provider log lines to the application log."""
    if update.status == "IN_PROGRESS":
        logger.info("Transcription %s in progress...", update.request_id)
    for line in update.logs:
        logger.info("[%s] %s", update.request_id, line)


class ProgressChannel:
    """Fan-out of progress updates to subscribers.

    ``publish`` only schedules delivery on the running loop and returns at
    once. Subscriber errors are logged and dropped, so delivery can neither
    block nor fail the job being observed.
    """

    def __init__(self) -> None:
        self._subscribers: list[ProgressCallback] = []

    def subscribe(self, callback: ProgressCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: ProgressCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, update: ProgressUpdate) -> None:
        loop = asyncio.get_running_loop()
        for callback in list(self._subscribers):
            loop.call_soon(self._deliver, callback, update)

    @staticmethod
    def _deliver(callback: ProgressCallback, update: ProgressUpdate) -> None:
        try:
            callback(update)
        except Exception:
            logger.exception("Progress subscriber %r failed", callback)
