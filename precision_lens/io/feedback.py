"""Capture feedback for headless hosts."""

from ..core.logging_utils import get_module_logger

logger = get_module_logger("Feedback")


class LoggingFeedback:
    """Stands in for the shutter flash and sound by logging each capture."""

    def __init__(self) -> None:
        self.flashes = 0

    def flash(self) -> None:
        self.flashes += 1
        logger.info("Shutter")
