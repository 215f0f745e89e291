"""Unit test fixtures for isolated, fast test execution.

The root conftest provides the mock capabilities and the wired-up lens
components. This file adds helpers that only unit tests need.
"""

from __future__ import annotations

from typing import Callable, List

import pytest

from precision_lens.core.status import AppContext


# =============================================================================
# Status Recording
# =============================================================================

@pytest.fixture
def published(context: AppContext) -> List[str]:
    """Every status published after the fixture was requested, in order."""
    seen: List[str] = []
    context.subscribe(seen.append)
    seen.clear()  # drop the value delivered on subscribe
    return seen


@pytest.fixture
def wait_until() -> Callable:
    """Poll an async predicate until it holds or a timeout elapses."""
    import asyncio

    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait
