"""State definitions for the camera session, capture and analysis components."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Union

from ..core.config_manager import get_config_manager


class Facing(Enum):
    """Camera orientation."""

    ENVIRONMENT = "environment"
    USER = "user"

    def opposite(self) -> "Facing":
        return Facing.USER if self is Facing.ENVIRONMENT else Facing.ENVIRONMENT

    @classmethod
    def parse(cls, value: Union[str, "Facing", None], default: "Facing") -> "Facing":
        if value is None:
            return default
        if isinstance(value, Facing):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown facing '{value}' (expected 'environment' or 'user')") from None


class Phase(Enum):
    """Camera session lifecycle phase."""

    IDLE = auto()
    STARTING = auto()
    ACTIVE = auto()


class GestureAction(Enum):
    """Semantic action resolved from PTT presses."""

    SINGLE = "single"
    DOUBLE = "double"


class ClickPolicy(Enum):
    """How PTT presses are classified."""

    SINGLE_ONLY = "single"  # every press is an immediate SINGLE
    DOUBLE_CLICK = "double"  # time-window double-click detection


@dataclass(frozen=True)
class CropRect:
    """Source region of a native frame, in (sub-)pixels."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class CapturedImage:
    """Immutable JPEG produced from one video frame."""

    jpeg: bytes
    zoom: float
    facing: Facing

    @property
    def base64(self) -> str:
        return base64.b64encode(self.jpeg).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:image/jpeg;base64,{self.base64}"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the camera session for UI surfaces."""

    phase: Phase
    facing: Facing
    zoom: float
    frame_size: Optional[tuple[int, int]] = None

    @property
    def is_active(self) -> bool:
        return self.phase is Phase.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.name.lower(),
            "active": self.is_active,
            "facing": self.facing.value,
            "zoom": self.zoom,
            "frame_size": list(self.frame_size) if self.frame_size else None,
        }


@dataclass(frozen=True)
class AnalysisRequest:
    """One outbound request to the analysis bridge."""

    instruction: str
    image_base64: str

    def to_payload(self) -> dict[str, Any]:
        # Key names are the ones the host bridge reads.
        return {
            "message": self.instruction,
            "useLLM": True,
            "imageBase64": self.image_base64,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Structured answer from the analysis service."""

    title: str
    use: str = ""
    description: str = ""


@dataclass(frozen=True)
class RawText:
    """Unstructured answer that could not be parsed as an AnalysisResult."""

    text: str


@dataclass(frozen=True)
class LensSettings:
    """User settings - immutable."""

    click_policy: ClickPolicy = ClickPolicy.SINGLE_ONLY
    double_click_window: float = 0.35  # seconds
    zoom_step: float = 0.2
    min_zoom: float = 1.0
    max_zoom: float = 3.0
    output_size: tuple[int, int] = (240, 282)  # (width, height)
    jpeg_quality: int = 92
    storage_key: str = "last_capture"
    storage_path: str = ""
    analysis_timeout: float = 30.0
    send_timeout: float = 10.0
    bridge_url: str = ""
    environment_device: int = 0
    user_device: int = 1
    api_host: str = "127.0.0.1"
    api_port: int = 8765


# ---------------------------------------------------------------------------
# Settings loading helpers
# ---------------------------------------------------------------------------


def settings_from_config(
    data: dict[str, Any],
    defaults: Optional[LensSettings] = None,
) -> LensSettings:
    """Build LensSettings from a parsed config file.

    Args:
        data: Dict of string values loaded from ``config.txt``.
        defaults: Settings to use for missing or malformed values.

    Returns:
        LensSettings with values from data, falling back to defaults.
    """
    if defaults is None:
        defaults = LensSettings()

    config = get_config_manager()

    def get_int(key: str, default: int) -> int:
        return config.get_int(data, key, default)

    def get_float(key: str, default: float) -> float:
        return config.get_float(data, key, default)

    def get_str(key: str, default: str) -> str:
        val = data.get(key)
        return default if val is None else str(val).strip()

    try:
        policy = ClickPolicy(get_str("click_policy", defaults.click_policy.value).lower())
    except ValueError:
        policy = defaults.click_policy

    min_zoom = get_float("min_zoom", defaults.min_zoom)
    max_zoom = get_float("max_zoom", defaults.max_zoom)
    if max_zoom < min_zoom:
        min_zoom, max_zoom = defaults.min_zoom, defaults.max_zoom

    window_ms = get_float("double_click_window_ms", defaults.double_click_window * 1000.0)

    return LensSettings(
        click_policy=policy,
        double_click_window=max(0.0, window_ms) / 1000.0,
        zoom_step=abs(get_float("zoom_step", defaults.zoom_step)),
        min_zoom=min_zoom,
        max_zoom=max_zoom,
        output_size=(
            max(1, get_int("output_width", defaults.output_size[0])),
            max(1, get_int("output_height", defaults.output_size[1])),
        ),
        jpeg_quality=min(100, max(1, get_int("jpeg_quality", defaults.jpeg_quality))),
        storage_key=get_str("storage_key", defaults.storage_key) or defaults.storage_key,
        storage_path=get_str("storage_path", defaults.storage_path),
        analysis_timeout=get_float("analysis_timeout", defaults.analysis_timeout),
        send_timeout=get_float("send_timeout", defaults.send_timeout),
        bridge_url=get_str("bridge_url", defaults.bridge_url),
        environment_device=get_int("environment_device", defaults.environment_device),
        user_device=get_int("user_device", defaults.user_device),
        api_host=get_str("api_host", defaults.api_host) or defaults.api_host,
        api_port=get_int("api_port", defaults.api_port),
    )
