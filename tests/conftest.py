"""Shared pytest configuration and fixtures for the Precision Lens test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from precision_lens.core.status import AppContext
from precision_lens.lens.dispatcher import AnalysisDispatcher
from precision_lens.lens.pipeline import CapturePipeline
from precision_lens.lens.session import CameraSession
from precision_lens.lens.state import LensSettings
from tests.infrastructure.mocks.lens_mocks import (
    ManualScheduler,
    MemoryStorage,
    MockBridge,
    MockFeedback,
    MockMediaSource,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that require a physical camera",
    )


def pytest_collection_modifyitems(config, items):
    """Skip hardware tests unless --run-hardware is specified."""
    if config.getoption("--run-hardware"):
        return

    skip_hardware = pytest.mark.skip(reason="Need --run-hardware option to run")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings() -> LensSettings:
    return LensSettings()


@pytest.fixture
def context() -> AppContext:
    return AppContext()


@pytest.fixture
def media() -> MockMediaSource:
    return MockMediaSource()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def bridge() -> MockBridge:
    return MockBridge()


@pytest.fixture
def feedback() -> MockFeedback:
    return MockFeedback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def session(media, context, settings) -> CameraSession:
    return CameraSession(media, context, settings)


@pytest.fixture
def dispatcher(context, bridge) -> AnalysisDispatcher:
    return AnalysisDispatcher(context, bridge, result_timeout=None)


@pytest.fixture
def pipeline(session, dispatcher, context, settings, storage, feedback) -> CapturePipeline:
    return CapturePipeline(
        session,
        dispatcher,
        context,
        settings,
        storage=storage,
        feedback=feedback,
    )
