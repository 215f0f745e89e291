"""Analysis bridge that forwards requests to an HTTP webhook."""

from __future__ import annotations

import asyncio
from typing import Optional

import aiohttp

from ..core.logging_utils import get_module_logger
from ..lens.errors import BridgeUnavailableError
from ..lens.state import AnalysisRequest

logger = get_module_logger("WebhookBridge")


class WebhookAnalysisBridge:
    """One-way sender: POSTs the request payload as JSON to ``url``.

    The answer is not read from the HTTP response; the analysis service
    pushes it later to the inbound result endpoint.
    """

    def __init__(self, url: str, *, timeout: float = 10.0) -> None:
        self.url = url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def send(self, request: AnalysisRequest) -> None:
        session = await self._get_session()
        try:
            async with session.post(self.url, json=request.to_payload()) as resp:
                if resp.status >= 400:
                    raise BridgeUnavailableError(f"bridge returned HTTP {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BridgeUnavailableError(str(e) or type(e).__name__) from e
        logger.debug("Request posted to %s", self.url)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


__all__ = ["WebhookAnalysisBridge"]
