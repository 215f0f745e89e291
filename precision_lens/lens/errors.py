"""Exception types raised across the lens components."""


class LensError(Exception):
    """Base class for every Precision Lens error."""


class AcquisitionError(LensError):
    """The media capability refused or failed to deliver a stream."""

    def __init__(self, reason: str, message: str = "") -> None:
        super().__init__(message or reason)
        self.reason = reason


class CaptureError(LensError):
    """A frame could not be cropped, resampled or encoded."""


class StorageError(LensError):
    """The plain storage capability failed to read or write."""


class BridgeUnavailableError(LensError):
    """The analysis bridge could not accept a request."""
