"""Capture pipeline - freeze, crop, encode, store and dispatch one frame."""

from __future__ import annotations

import asyncio
from typing import Optional

import cv2
import numpy as np

from ..core.logging_utils import get_module_logger
from ..core.status import AppContext
from .capabilities import CaptureFeedback, PlainStorage
from .dispatcher import AnalysisDispatcher
from .errors import CaptureError, StorageError
from .session import CameraSession
from .state import CapturedImage, CropRect, LensSettings

logger = get_module_logger("CapturePipeline")


def compute_crop(width: float, height: float, zoom: float) -> CropRect:
    """Centered source region that reproduces a ``zoom``x preview at full resolution."""
    if zoom <= 0:
        raise ValueError(f"zoom must be positive, got {zoom}")
    src_width = width / zoom
    src_height = height / zoom
    return CropRect(
        x=(width - src_width) / 2,
        y=(height - src_height) / 2,
        width=src_width,
        height=src_height,
    )


def render_capture(
    frame: np.ndarray,
    zoom: float,
    output_size: tuple[int, int],
    quality: int = 92,
) -> bytes:
    """Resample the zoom crop of ``frame`` into ``output_size`` and encode it as JPEG.

    The crop is mapped onto the output with a single affine transform, so
    fractional crop offsets are honoured instead of being rounded to pixels.
    """
    if frame is None or frame.ndim < 2 or frame.size == 0:
        raise CaptureError("empty frame")

    native_height, native_width = frame.shape[:2]
    out_width, out_height = output_size
    crop = compute_crop(native_width, native_height, zoom)

    scale_x = out_width / crop.width
    scale_y = out_height / crop.height
    matrix = np.array(
        [
            [scale_x, 0.0, -crop.x * scale_x],
            [0.0, scale_y, -crop.y * scale_y],
        ],
        dtype=np.float64,
    )

    try:
        resampled = cv2.warpAffine(
            frame,
            matrix,
            (out_width, out_height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_REPLICATE,
        )
        ok, encoded = cv2.imencode(".jpg", resampled, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    except cv2.error as e:
        raise CaptureError(f"OpenCV failed: {e}") from e

    if not ok:
        raise CaptureError("JPEG encoding failed")
    return encoded.tobytes()


class CapturePipeline:
    """Runs at most one capture at a time against the camera session."""

    def __init__(
        self,
        session: CameraSession,
        dispatcher: AnalysisDispatcher,
        context: AppContext,
        settings: Optional[LensSettings] = None,
        *,
        storage: Optional[PlainStorage] = None,
        feedback: Optional[CaptureFeedback] = None,
    ) -> None:
        self._session = session
        self._dispatcher = dispatcher
        self._context = context
        self._settings = settings or LensSettings()
        self._storage = storage
        self._feedback = feedback
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def storage_key(self) -> str:
        return self._settings.storage_key

    async def capture_and_dispatch(self) -> Optional[CapturedImage]:
        """Capture the current frame, persist it and send it for analysis.

        Returns the captured image, or None when the trigger was rejected
        or the capture failed.
        """
        if not self._session.is_active:
            self._context.publish("Launch camera first!")
            return None

        if self._busy:
            logger.info("Capture already in progress - trigger ignored")
            return None

        self._busy = True
        try:
            return await self._run_capture()
        finally:
            self._busy = False

    async def _run_capture(self) -> Optional[CapturedImage]:
        self._signal_feedback()

        frame = self._session.read_frame()
        if frame is None:
            self._context.publish("Camera not ready.")
            return None

        zoom = self._session.zoom
        facing = self._session.facing
        try:
            jpeg = await asyncio.to_thread(
                render_capture,
                frame,
                zoom,
                self._settings.output_size,
                self._settings.jpeg_quality,
            )
        except CaptureError as e:
            logger.error("Capture failed: %s", e)
            self._context.publish(f"Capture failed: {e}")
            return None

        image = CapturedImage(jpeg=jpeg, zoom=zoom, facing=facing)
        logger.info("Captured %d bytes at zoom %.1fx (%s)", len(jpeg), zoom, facing.value)
        self._context.publish("Captured. Storing and Sending to LLM...")

        await self._store(image)
        await self._dispatcher.dispatch(image.base64)
        return image

    def _signal_feedback(self) -> None:
        if self._feedback is None:
            return
        try:
            self._feedback.flash()
        except Exception as e:
            logger.debug("Capture feedback failed: %s", e)

    async def _store(self, image: CapturedImage) -> None:
        if self._storage is None:
            logger.debug("No plain storage configured - capture not persisted")
            return
        try:
            await self._storage.set_item(self._settings.storage_key, image.data_url)
        except StorageError as e:
            logger.error("Plain storage error: %s", e)
            return
        logger.info("Image stored in plain storage under '%s'", self._settings.storage_key)

    # ------------------------------------------------------------------
    # Review

    async def last_capture(self) -> Optional[str]:
        """Stored data URL of the last capture, or None."""
        if self._storage is None:
            return None
        return await self._storage.get_item(self._settings.storage_key)

    async def review_last_capture(self) -> bool:
        """Show the stored capture in place of the live preview."""
        if self._storage is None:
            self._context.publish("Storage API not available.")
            return False

        try:
            image = await self._storage.get_item(self._settings.storage_key)
        except StorageError as e:
            logger.error("Plain storage error: %s", e)
            self._context.publish("Storage API not available.")
            return False

        if not image:
            self._context.publish("No photo found in storage.")
            return False

        await self._session.stop()
        self._context.show_review(image)
        self._context.publish("Reviewing Last Captured Photo.")
        return True


__all__ = ["CapturePipeline", "compute_crop", "render_capture"]
