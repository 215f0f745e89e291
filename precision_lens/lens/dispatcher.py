"""Analysis dispatcher - outbound requests and inbound results of the LLM bridge."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional, Union

from ..core.logging_utils import get_module_logger
from ..core.status import AppContext
from .capabilities import AnalysisBridge
from .errors import BridgeUnavailableError
from .state import AnalysisRequest, AnalysisResult, RawText

logger = get_module_logger("AnalysisDispatcher")

ANALYSIS_INSTRUCTION = (
    "Analyze this image and provide a concise description, a potential use, "
    "and respond ONLY with valid JSON in this format: "
    '{"title":"...","use":"...","description":"..."}'
)
RAW_TEXT_PREVIEW_CHARS = 30
UNKNOWN_TITLE = "Unknown Object"


def parse_analysis(data: Any) -> Union[AnalysisResult, RawText]:
    """Interpret one analysis answer.

    ``data`` is either an already-decoded mapping or text expected to hold a
    JSON object. Anything that does not decode to an object comes back as
    :class:`RawText`; this function never raises.
    """
    parsed: Any = data
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8", errors="replace")
        parsed = data
    if isinstance(data, str):
        try:
            parsed = json.loads(data)
        except ValueError:
            return RawText(data)

    if not isinstance(parsed, dict):
        return RawText(data if isinstance(data, str) else json.dumps(data, default=str))

    def field(name: str) -> str:
        value = parsed.get(name)
        return "" if value is None else str(value)

    return AnalysisResult(
        title=field("title") or UNKNOWN_TITLE,
        use=field("use"),
        description=field("description"),
    )


def describe_result(result: Union[AnalysisResult, RawText]) -> str:
    if isinstance(result, AnalysisResult):
        return f"Analysis: {result.title}"
    return f"LLM Text: {result.text[:RAW_TEXT_PREVIEW_CHARS]}..."


class AnalysisDispatcher:
    """Sends captures to the analysis bridge and routes its answers to the status.

    Results arrive through :meth:`on_result`, registered once as the bridge's
    inbound handler. Requests and results are not correlated, so with several
    requests outstanding any answer settles the latest one.
    """

    def __init__(
        self,
        context: AppContext,
        bridge: Optional[AnalysisBridge] = None,
        *,
        instruction: str = ANALYSIS_INSTRUCTION,
        send_timeout: float = 10.0,
        result_timeout: Optional[float] = 30.0,
    ) -> None:
        self._context = context
        self._bridge = bridge
        self._instruction = instruction
        self._send_timeout = send_timeout
        self._result_timeout = result_timeout
        self._watchdog: Optional[asyncio.TimerHandle] = None
        self._last_result: Optional[Union[AnalysisResult, RawText]] = None

    @property
    def available(self) -> bool:
        return self._bridge is not None

    @property
    def awaiting_result(self) -> bool:
        return self._watchdog is not None

    @property
    def last_result(self) -> Optional[Union[AnalysisResult, RawText]]:
        return self._last_result

    async def dispatch(self, image_base64: str) -> bool:
        """Send one image for analysis. Returns True when the bridge accepted it."""
        if self._bridge is None:
            self._context.publish("Analysis service not available.")
            return False

        request = AnalysisRequest(instruction=self._instruction, image_base64=image_base64)
        # Armed before sending: the result may arrive while send is still pending.
        self._arm_watchdog()
        try:
            await asyncio.wait_for(self._bridge.send(request), timeout=self._send_timeout)
        except asyncio.TimeoutError:
            self._cancel_watchdog()
            logger.error("Analysis bridge did not accept the request within %.1fs", self._send_timeout)
            self._context.publish("Analysis service not available.")
            return False
        except BridgeUnavailableError as e:
            self._cancel_watchdog()
            logger.error("Analysis bridge unavailable: %s", e)
            self._context.publish("Analysis service not available.")
            return False
        except asyncio.CancelledError:
            self._cancel_watchdog()
            raise

        logger.info("Image sent for analysis (%d base64 chars)", len(image_base64))
        return True

    def on_result(self, message: Any) -> Union[AnalysisResult, RawText, None]:
        """Handle an inbound bridge message.

        Mappings carry the answer under ``"data"``; a mapping without it is a
        completion notice. Bare text or bytes is the answer itself.
        """
        self._cancel_watchdog()
        logger.debug("Analysis response received: %r", message)

        data = message.get("data") if isinstance(message, dict) else message
        if not data:
            self._context.publish("Analysis complete.")
            return None

        result = parse_analysis(data)
        if isinstance(result, RawText):
            logger.warning("Analysis response is not structured JSON - showing raw text")
        self._last_result = result
        self._context.publish(describe_result(result))
        return result

    def close(self) -> None:
        self._cancel_watchdog()

    # ------------------------------------------------------------------
    # Result watchdog

    def _arm_watchdog(self) -> None:
        self._cancel_watchdog()
        if not self._result_timeout or self._result_timeout <= 0:
            return
        loop = asyncio.get_running_loop()
        self._watchdog = loop.call_later(self._result_timeout, self._on_result_timeout)

    def _cancel_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None

    def _on_result_timeout(self) -> None:
        self._watchdog = None
        logger.warning("No analysis result after %.1fs", self._result_timeout)
        self._context.publish("Analysis timed out.")


__all__ = [
    "ANALYSIS_INSTRUCTION",
    "AnalysisDispatcher",
    "describe_result",
    "parse_analysis",
]
