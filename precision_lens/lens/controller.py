"""Lens controller - composes the session, pipeline, dispatcher and router."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from ..core.logging_utils import get_module_logger
from ..core.status import AppContext
from .capabilities import AnalysisBridge, CaptureFeedback, MediaSource, PlainStorage, Scheduler
from .dispatcher import AnalysisDispatcher
from .gestures import GestureDisambiguator
from .pipeline import CapturePipeline
from .router import HardwareEvent, InputRouter
from .session import CameraSession
from .state import GestureAction, LensSettings

logger = get_module_logger("LensController")


class LensController:
    """Owns one instance of every lens component and the shared AppContext.

    Capabilities are injected; ``None`` for storage, bridge or feedback means
    the host does not offer them. The scheduler defaults to the running event
    loop and is resolved lazily so the controller can be built before the loop
    starts.
    """

    def __init__(
        self,
        media: MediaSource,
        settings: Optional[LensSettings] = None,
        *,
        storage: Optional[PlainStorage] = None,
        bridge: Optional[AnalysisBridge] = None,
        feedback: Optional[CaptureFeedback] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        context: Optional[AppContext] = None,
    ) -> None:
        self.settings = settings or LensSettings()
        self.context = context or AppContext()
        self._scheduler = scheduler
        self._clock = clock

        self.session = CameraSession(media, self.context, self.settings)
        self.dispatcher = AnalysisDispatcher(
            self.context,
            bridge,
            send_timeout=self.settings.send_timeout,
            result_timeout=self.settings.analysis_timeout,
        )
        self.pipeline = CapturePipeline(
            self.session,
            self.dispatcher,
            self.context,
            self.settings,
            storage=storage,
            feedback=feedback,
        )
        self.router = InputRouter(self.session, self.pipeline, self._build_gestures)
        logger.info(
            "Lens ready (click policy=%s, window=%.0fms, bridge=%s, storage=%s)",
            self.settings.click_policy.value,
            self.settings.double_click_window * 1000,
            "yes" if bridge is not None else "no",
            "yes" if storage is not None else "no",
        )

    def _build_gestures(self, on_action: Callable[[GestureAction], None]) -> GestureDisambiguator:
        kwargs: dict[str, Any] = {
            "policy": self.settings.click_policy,
            "window": self.settings.double_click_window,
        }
        if self._clock is not None:
            kwargs["clock"] = self._clock
        return GestureDisambiguator(on_action, _LazyLoopScheduler(self._scheduler), **kwargs)

    # ------------------------------------------------------------------
    # Convenience surface used by the API layer

    def handle_hardware(self, event: HardwareEvent, timestamp: Optional[float] = None) -> None:
        self.router.handle_hardware(event, timestamp)

    def on_analysis_result(self, message: Any) -> None:
        self.dispatcher.on_result(message)

    def describe(self) -> dict[str, Any]:
        return {
            "status": self.context.status,
            "session": self.session.snapshot().to_dict(),
            "reviewing": self.context.review_image is not None,
            "capture_in_progress": self.pipeline.busy,
            "awaiting_analysis": self.dispatcher.awaiting_result,
            "click_policy": self.settings.click_policy.value,
        }

    async def shutdown(self) -> None:
        logger.info("Shutting down lens controller")
        await self.router.shutdown()
        self.dispatcher.close()
        await self.session.stop()


class _LazyLoopScheduler:
    """Uses the given scheduler, or the running loop at call time."""

    def __init__(self, scheduler: Optional[Scheduler]) -> None:
        self._scheduler = scheduler

    def call_later(self, delay: float, callback: Callable[..., object], *args: object):
        target = self._scheduler or asyncio.get_running_loop()
        return target.call_later(delay, callback, *args)


__all__ = ["LensController"]
