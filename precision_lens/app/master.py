"""Entry point: parse arguments, build the lens controller and serve it."""

import argparse
import asyncio
import contextlib
import signal
from pathlib import Path
from typing import Optional

from ..api import APIServer
from ..core.config_manager import get_config_manager
from ..core.logging_config import configure_logging
from ..core.logging_utils import get_module_logger
from ..core.paths import CONFIG_PATH, DEFAULT_STORAGE_PATH, ensure_directories
from ..io import FilePlainStorage, LoggingFeedback, OpenCVMediaSource, WebhookAnalysisBridge
from ..lens import LensController, LensSettings, settings_from_config
from ..lens.state import ClickPolicy


logger = get_module_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; unset values fall back to the config file."""
    parser = argparse.ArgumentParser(
        description="Precision Lens - PTT camera capture controller with LLM analysis"
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help="Path to config.txt (default: repository config.txt)"
    )

    parser.add_argument(
        "--log-level",
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        default=None,
        help="Logging level (default: from config, else info)"
    )

    parser.add_argument(
        "--click-policy",
        choices=[p.value for p in ClickPolicy],
        default=None,
        help="PTT policy: single (every press captures) or double (double press toggles the camera)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port of the local REST surface"
    )

    parser.add_argument(
        "--bridge-url",
        default=None,
        help="Webhook URL of the analysis bridge (empty disables analysis)"
    )

    parser.add_argument(
        "--no-console",
        dest="console_output",
        action="store_false",
        default=None,
        help="Log to file only"
    )

    return parser.parse_args(argv)


async def load_settings(args: argparse.Namespace) -> tuple[LensSettings, dict[str, str]]:
    """Merge config file values and command-line overrides."""
    config = await get_config_manager().read_config_async(args.config)
    overrides = {
        "click_policy": args.click_policy,
        "api_port": args.port,
        "bridge_url": args.bridge_url,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = str(value)
    return settings_from_config(config), config


def build_controller(settings: LensSettings) -> tuple[LensController, Optional[WebhookAnalysisBridge]]:
    media = OpenCVMediaSource(settings.environment_device, settings.user_device)
    storage = FilePlainStorage(Path(settings.storage_path) if settings.storage_path else DEFAULT_STORAGE_PATH)
    bridge = WebhookAnalysisBridge(settings.bridge_url, timeout=settings.send_timeout) if settings.bridge_url else None
    controller = LensController(
        media,
        settings,
        storage=storage,
        bridge=bridge,
        feedback=LoggingFeedback(),
    )
    return controller, bridge


async def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    settings, config = await load_settings(args)

    config_manager = get_config_manager()
    log_level = args.log_level or config_manager.get_str(config, "log_level", default="info")
    console = args.console_output
    if console is None:
        console = config_manager.get_bool(config, "console_output", default=True)

    ensure_directories()
    configure_logging(log_level, console=console)
    logger.info("Starting Precision Lens (config=%s)", args.config)

    controller, bridge = build_controller(settings)
    server = APIServer(controller, host=settings.api_host, port=settings.api_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    await server.start()
    try:
        await stop_event.wait()
    finally:
        logger.info("Shutdown requested")
        await server.stop()
        await controller.shutdown()
        if bridge is not None:
            await bridge.close()
        logger.info("Precision Lens stopped")
