"""Pytest fixtures for API unit tests.

Provides a real LensController wired to mock capabilities, and helpers to
run requests against it through the aiohttp test client.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, TypeVar

import pytest
from aiohttp import web

from precision_lens.api.server import create_app
from precision_lens.lens.controller import LensController
from precision_lens.lens.state import LensSettings
from tests.infrastructure.mocks.lens_mocks import ManualScheduler


T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine synchronously for testing."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def create_test_app(controller: LensController) -> web.Application:
    """Create a test application; the test client connects from localhost anyway."""
    return create_app(controller, localhost_only=False)


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def lens_controller(media, storage, bridge, feedback, manual_scheduler) -> LensController:
    """LensController with mock capabilities and analysis watchdog disabled."""
    return LensController(
        media,
        LensSettings(analysis_timeout=0),
        storage=storage,
        bridge=bridge,
        feedback=feedback,
        scheduler=manual_scheduler,
        clock=manual_scheduler.clock,
    )
