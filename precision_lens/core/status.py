"""Application context: the single observable status string and review surface."""

from __future__ import annotations

from typing import Callable, Optional

from .logging_utils import get_module_logger

logger = get_module_logger("Status")

StatusCallback = Callable[[str], None]


class AppContext:
    """Owns the process-wide ``AppStatus`` value and the preview surface state.

    The status is a last-writer-wins string. Components write through
    :meth:`publish`; the UI reads :attr:`status` or subscribes for changes.
    The review surface holds the stored image shown in place of the live
    preview, if any.
    """

    def __init__(self, initial_status: str = "Not Active") -> None:
        self._status = initial_status
        self._review_image: Optional[str] = None
        self._subscribers: list[StatusCallback] = []

    @property
    def status(self) -> str:
        """Current status string."""
        return self._status

    @property
    def review_image(self) -> Optional[str]:
        """Data URL currently shown on the review surface, or None for live preview."""
        return self._review_image

    def publish(self, status: str) -> None:
        """Replace the current status and notify subscribers."""
        self._status = status
        logger.info("%s", status)
        self._notify()

    def subscribe(self, callback: StatusCallback) -> None:
        """Subscribe to status changes; the callback receives the current value immediately."""
        self._subscribers.append(callback)
        callback(self._status)

    def unsubscribe(self, callback: StatusCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self) -> None:
        for sub in list(self._subscribers):
            try:
                sub(self._status)
            except Exception as e:
                logger.error("Subscriber error: %s", e)

    # ------------------------------------------------------------------
    # Review surface

    def show_review(self, image_data_url: str) -> None:
        self._review_image = image_data_url

    def clear_review(self) -> None:
        self._review_image = None


__all__ = ["AppContext", "StatusCallback"]
