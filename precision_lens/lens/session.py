"""Camera session - stream lifecycle, facing and digital zoom."""

from __future__ import annotations

import asyncio
from typing import Optional

import numpy as np

from ..core.logging_utils import get_module_logger
from ..core.status import AppContext
from .capabilities import MediaSource, StreamHandle
from .errors import AcquisitionError
from .state import Facing, LensSettings, Phase, SessionSnapshot

logger = get_module_logger("CameraSession")

ZOOM_PRECISION = 6


class CameraSession:
    """Owns the single active video stream.

    The stream handle is present iff the phase is ``ACTIVE``. Facing and zoom
    survive stop/start. ``start`` on an active session toggles it off; use
    :meth:`restart` to reopen with a different facing.
    """

    def __init__(
        self,
        media: MediaSource,
        context: AppContext,
        settings: Optional[LensSettings] = None,
        *,
        facing: Facing = Facing.ENVIRONMENT,
    ) -> None:
        self._media = media
        self._context = context
        self._settings = settings or LensSettings()

        self._phase = Phase.IDLE
        self._facing = facing
        self._zoom = self._settings.min_zoom
        self._stream: Optional[StreamHandle] = None
        self._lifecycle_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Accessors

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_active(self) -> bool:
        return self._phase is Phase.ACTIVE

    @property
    def facing(self) -> Facing:
        return self._facing

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def min_zoom(self) -> float:
        return self._settings.min_zoom

    @property
    def max_zoom(self) -> float:
        return self._settings.max_zoom

    def snapshot(self) -> SessionSnapshot:
        frame_size = None
        if self._stream is not None:
            frame_size = (self._stream.width, self._stream.height)
        return SessionSnapshot(
            phase=self._phase,
            facing=self._facing,
            zoom=self._zoom,
            frame_size=frame_size,
        )

    def read_frame(self) -> Optional[np.ndarray]:
        """Latest frame of the active stream, or None."""
        if self._stream is None:
            return None
        return self._stream.read_frame()

    # ------------------------------------------------------------------
    # Lifecycle

    async def start(self, facing: Optional[Facing] = None) -> bool:
        """Start the camera, or stop it if it is already running.

        Returns True when the session is active afterwards.
        """
        if self._phase is Phase.STARTING:
            logger.warning("Start ignored: camera is still starting")
            return False

        async with self._lifecycle_lock:
            if self._phase is Phase.ACTIVE:
                await self._stop_locked()
                return False
            return await self._start_locked(facing or self._facing)

    async def restart(self, facing: Optional[Facing] = None) -> bool:
        """Stop (if running) and start again with ``facing``."""
        async with self._lifecycle_lock:
            await self._stop_locked()
            return await self._start_locked(facing or self._facing)

    async def stop(self) -> None:
        """Release the stream. No-op when already stopped."""
        async with self._lifecycle_lock:
            await self._stop_locked()

    async def switch_facing(self) -> bool:
        """Restart with the opposite facing. No-op when inactive."""
        if not self.is_active:
            logger.debug("Switch facing ignored: camera inactive")
            return False
        return await self.restart(self._facing.opposite())

    async def _start_locked(self, facing: Facing) -> bool:
        self._phase = Phase.STARTING
        self._context.clear_review()
        logger.info("Acquiring camera (facing=%s)", facing.value)

        try:
            stream = await self._media.acquire(facing)
        except AcquisitionError as e:
            self._phase = Phase.IDLE
            logger.error("Camera access error: %s", e)
            self._context.publish(f"Camera Error: {e.reason}. Tap Start to try again.")
            return False

        self._stream = stream
        self._facing = facing
        self._phase = Phase.ACTIVE
        logger.info("Camera active: facing=%s, frame=%dx%d", facing.value, stream.width, stream.height)
        self._apply_zoom()
        return True

    async def _stop_locked(self) -> None:
        stream = self._stream
        if stream is None:
            return

        self._stream = None
        self._phase = Phase.IDLE
        await asyncio.to_thread(stream.stop)
        logger.info("Camera stopped")
        self._context.publish("Camera stopped.")

    # ------------------------------------------------------------------
    # Digital zoom

    def zoom_in(self) -> float:
        return self._step_zoom(self._settings.zoom_step)

    def zoom_out(self) -> float:
        return self._step_zoom(-self._settings.zoom_step)

    def _step_zoom(self, delta: float) -> float:
        if not self.is_active:
            return self._zoom
        target = min(self._settings.max_zoom, max(self._settings.min_zoom, self._zoom + delta))
        self._zoom = round(target, ZOOM_PRECISION)
        self._apply_zoom()
        return self._zoom

    def _apply_zoom(self) -> None:
        self._context.publish(self.describe())

    def describe(self) -> str:
        return f"Facing: {self._facing.value} / Zoom: {self._zoom:.1f}x"


__all__ = ["CameraSession"]
