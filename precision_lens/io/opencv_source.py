"""Media acquisition backed by OpenCV ``VideoCapture``."""

import os
import sys

# Disable MSMF hardware transforms on Windows to fix slow camera initialization.
# See: https://github.com/opencv/opencv/issues/17687
if sys.platform == "win32":
    os.environ.setdefault("OPENCV_VIDEOIO_MSMF_ENABLE_HW_TRANSFORMS", "0")

import asyncio
import threading
import time
from typing import Optional

import cv2
import numpy as np

from ..core.logging_utils import get_module_logger
from ..lens.errors import AcquisitionError
from ..lens.state import Facing

logger = get_module_logger("OpenCVSource")

FIRST_FRAME_TIMEOUT = 3.0


class OpenCVStream:
    """One opened capture device with a reader thread keeping the latest frame.

    The reader runs at hardware speed and only ever keeps the newest frame;
    older frames are dropped.
    """

    def __init__(self, device: int | str, resolution: Optional[tuple[int, int]] = None) -> None:
        self._device = device
        self._requested_resolution = resolution

        self._cap: Optional[cv2.VideoCapture] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._frame_lock = threading.Lock()
        self._first_frame = threading.Event()
        self._latest: Optional[np.ndarray] = None
        self._frame_count = 0
        self._resolution = resolution or (0, 0)

    def open(self) -> bool:
        """Open the device and start the reader thread. Returns True on success."""
        device = self._device
        if isinstance(device, str) and device.isdigit():
            device = int(device)

        start_time = time.time()
        if sys.platform == "win32":
            self._cap = cv2.VideoCapture(device, cv2.CAP_MSMF)
        else:
            self._cap = cv2.VideoCapture(device)
        logger.debug("cv2.VideoCapture(%s) took %.2f seconds", device, time.time() - start_time)

        if not self._cap or not self._cap.isOpened():
            logger.error("Failed to open camera: %s", self._device)
            self._release_capture()
            return False

        if self._requested_resolution:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._requested_resolution[0])
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._requested_resolution[1])

        # Reduce internal buffer to minimize latency
        self._cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._resolution = (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

        self._running = True
        self._thread = threading.Thread(target=self._capture_loop, name=f"lens-capture-{device}", daemon=True)
        self._thread.start()
        logger.info("Camera opened: device=%s, resolution=%dx%d", self._device, *self._resolution)
        return True

    def wait_first_frame(self, timeout: float) -> bool:
        return self._first_frame.wait(timeout)

    def _capture_loop(self) -> None:
        while self._running and self._cap is not None and self._cap.isOpened():
            ret, frame = self._cap.read()
            if not ret or frame is None:
                time.sleep(0.005)
                continue
            with self._frame_lock:
                self._latest = frame
                self._frame_count += 1
            if not self._first_frame.is_set():
                self._resolution = (frame.shape[1], frame.shape[0])
                self._first_frame.set()

        logger.debug("Capture loop ended: frames=%d", self._frame_count)

    # ------------------------------------------------------------------
    # StreamHandle interface

    @property
    def width(self) -> int:
        return self._resolution[0]

    @property
    def height(self) -> int:
        return self._resolution[1]

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def read_frame(self) -> Optional[np.ndarray]:
        with self._frame_lock:
            return self._latest

    def stop(self) -> None:
        """Stop the reader thread and release the device."""
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        self._release_capture()
        with self._frame_lock:
            self._latest = None
        logger.info("Camera released: device=%s", self._device)

    def _release_capture(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


class OpenCVMediaSource:
    """Maps a facing to a capture device index and opens it off the event loop."""

    def __init__(
        self,
        environment_device: int | str = 0,
        user_device: int | str = 1,
        *,
        resolution: Optional[tuple[int, int]] = None,
        first_frame_timeout: float = FIRST_FRAME_TIMEOUT,
    ) -> None:
        self._devices = {Facing.ENVIRONMENT: environment_device, Facing.USER: user_device}
        self._resolution = resolution
        self._first_frame_timeout = first_frame_timeout

    def device_for(self, facing: Facing) -> int | str:
        return self._devices[facing]

    async def acquire(self, facing: Facing) -> OpenCVStream:
        device = self.device_for(facing)
        stream = OpenCVStream(device, self._resolution)

        logger.info("Opening camera %s for facing=%s (this may take a moment)...", device, facing.value)
        opened = await asyncio.to_thread(stream.open)
        if not opened:
            raise AcquisitionError("NotFoundError", f"camera device {device} is unavailable")

        got_frame = await asyncio.to_thread(stream.wait_first_frame, self._first_frame_timeout)
        if not got_frame:
            await asyncio.to_thread(stream.stop)
            raise AcquisitionError("NotReadableError", f"camera device {device} delivered no frames")

        return stream


__all__ = ["OpenCVMediaSource", "OpenCVStream"]
