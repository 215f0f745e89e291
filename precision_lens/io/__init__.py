"""Concrete adapters for the host capabilities."""

from .bridge import WebhookAnalysisBridge
from .feedback import LoggingFeedback
from .opencv_source import OpenCVMediaSource, OpenCVStream
from .storage import FilePlainStorage

__all__ = [
    "FilePlainStorage",
    "LoggingFeedback",
    "OpenCVMediaSource",
    "OpenCVStream",
    "WebhookAnalysisBridge",
]
