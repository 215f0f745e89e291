"""
Lens Routes - the UI buttons, hardware events and the analysis inbound path.

Provides endpoints for:
- Status (status text, session snapshot, review flag)
- The three UI buttons: start/stop, switch facing, review
- Manual capture
- Hardware events (PTT, scroll wheel, long press)
- Inbound analysis results
- The last stored capture
"""

from aiohttp import web

from ..lens.controller import LensController
from ..lens.router import HardwareEvent
from .middleware import create_error_response, parse_json_body


def setup_lens_routes(app: web.Application) -> None:
    """Register all lens routes."""
    app.router.add_get("/api/v1/status", get_status_handler)

    app.router.add_post("/api/v1/camera/toggle", toggle_camera_handler)
    app.router.add_post("/api/v1/camera/facing", switch_facing_handler)
    app.router.add_post("/api/v1/camera/review", review_handler)
    app.router.add_post("/api/v1/camera/capture", capture_handler)

    app.router.add_post("/api/v1/hardware/{event}", hardware_event_handler)

    app.router.add_post("/api/v1/analysis/result", analysis_result_handler)

    app.router.add_get("/api/v1/capture/last", last_capture_handler)


def _controller(request: web.Request) -> LensController:
    return request.app["controller"]


async def get_status_handler(request: web.Request) -> web.Response:
    """GET /api/v1/status - Current status and session snapshot."""
    return web.json_response(_controller(request).describe())


async def toggle_camera_handler(request: web.Request) -> web.Response:
    """POST /api/v1/camera/toggle - Start/Stop button."""
    controller = _controller(request)
    active = await controller.router.press_start_stop()
    return web.json_response({"active": active, "status": controller.context.status})


async def switch_facing_handler(request: web.Request) -> web.Response:
    """POST /api/v1/camera/facing - Switch facing button."""
    controller = _controller(request)
    switched = await controller.router.press_switch_facing()
    return web.json_response({
        "switched": switched,
        "facing": controller.session.facing.value,
        "status": controller.context.status,
    })


async def review_handler(request: web.Request) -> web.Response:
    """POST /api/v1/camera/review - Review last photo button."""
    controller = _controller(request)
    reviewing = await controller.router.press_review()
    return web.json_response({"reviewing": reviewing, "status": controller.context.status})


async def capture_handler(request: web.Request) -> web.Response:
    """POST /api/v1/camera/capture - Capture, store and analyze now."""
    controller = _controller(request)
    image = await controller.pipeline.capture_and_dispatch()
    body = {"captured": image is not None, "status": controller.context.status}
    if image is not None:
        body.update({"bytes": len(image.jpeg), "zoom": image.zoom, "facing": image.facing.value})
    return web.json_response(body)


async def hardware_event_handler(request: web.Request) -> web.Response:
    """POST /api/v1/hardware/{event} - Deliver one physical event."""
    name = request.match_info["event"]
    try:
        event = HardwareEvent(name)
    except ValueError:
        return create_error_response(
            "UNKNOWN_EVENT",
            f"Unknown hardware event '{name}'",
            status=404,
            details={"valid_events": [e.value for e in HardwareEvent]},
        )

    body, _ = await parse_json_body(request, required=False)
    timestamp = body.get("timestamp") if isinstance(body, dict) else None
    if timestamp is not None:
        timestamp = float(timestamp)

    controller = _controller(request)
    controller.handle_hardware(event, timestamp)
    return web.json_response({"accepted": event.value, "status": controller.context.status}, status=202)


async def analysis_result_handler(request: web.Request) -> web.Response:
    """POST /api/v1/analysis/result - Inbound message from the analysis bridge."""
    controller = _controller(request)
    if request.content_type == "application/json":
        body, error = await parse_json_body(request)
        if error:
            return error
    else:
        body = {"data": await request.text()}

    controller.on_analysis_result(body)
    return web.json_response({"status": controller.context.status})


async def last_capture_handler(request: web.Request) -> web.Response:
    """GET /api/v1/capture/last - Stored data URL of the last capture."""
    image = await _controller(request).pipeline.last_capture()
    if not image:
        return create_error_response("NOT_FOUND", "No photo found in storage.", status=404)
    return web.json_response({"image": image})
