"""Input disambiguation, camera session and capture pipeline."""

from .controller import LensController
from .dispatcher import ANALYSIS_INSTRUCTION, AnalysisDispatcher, parse_analysis
from .errors import AcquisitionError, BridgeUnavailableError, CaptureError, LensError, StorageError
from .gestures import GestureDisambiguator
from .pipeline import CapturePipeline, compute_crop, render_capture
from .router import HardwareEvent, InputRouter
from .session import CameraSession
from .state import (
    AnalysisRequest,
    AnalysisResult,
    CapturedImage,
    ClickPolicy,
    CropRect,
    Facing,
    GestureAction,
    LensSettings,
    Phase,
    RawText,
    SessionSnapshot,
    settings_from_config,
)

__all__ = [
    "ANALYSIS_INSTRUCTION",
    "AcquisitionError",
    "AnalysisDispatcher",
    "AnalysisRequest",
    "AnalysisResult",
    "BridgeUnavailableError",
    "CameraSession",
    "CaptureError",
    "CapturePipeline",
    "CapturedImage",
    "ClickPolicy",
    "CropRect",
    "Facing",
    "GestureAction",
    "GestureDisambiguator",
    "HardwareEvent",
    "InputRouter",
    "LensController",
    "LensError",
    "LensSettings",
    "Phase",
    "RawText",
    "SessionSnapshot",
    "StorageError",
    "compute_crop",
    "parse_analysis",
    "render_capture",
    "settings_from_config",
]
