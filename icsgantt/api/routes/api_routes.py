"""JSON API routes: load, list, edit, remove and export."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ...config_manager import get_config_value
from ...exceptions import EmptyInputError, FetchError, LoadInProgressError, ParseError
from ...models import (
    DEFAULT_OFFSET_END,
    DEFAULT_OFFSET_START,
    MAX_OFFSET_DAYS,
    MIN_OFFSET_DAYS,
    LoadRequest,
    TaskDates,
    TaskUpdate,
)
from ...serializer import EXPORT_CONTENT_TYPE, EXPORT_FILENAME
from ...session import TimelineSession

logger = logging.getLogger(__name__)

NO_EVENTS_MESSAGE = "No events found in the ICS file."


def _validation_details(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into readable strings."""
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in exc.errors()
    ]


def register_api_routes(app: Any, config: Any, session: TimelineSession) -> None:
    """Register the JSON API routes.

    Args:
        app: aiohttp web application
        config: Application configuration (dict or attribute object)
        session: Session owning the task list the routes operate on
    """
    from aiohttp import web

    default_offset_start = int(get_config_value(config, "offset_start", DEFAULT_OFFSET_START))
    default_offset_end = int(get_config_value(config, "offset_end", DEFAULT_OFFSET_END))

    async def _read_json(request: Any) -> Any:
        try:
            return await request.json()
        except ValueError:
            return None

    def _task_not_found(task_id: str) -> Any:
        return web.json_response({"error": "task not found", "task_id": task_id}, status=404)

    def _tasks_payload() -> list[dict[str, Any]]:
        return [task.to_widget() for task in session.tasks]

    async def health_check(_request: Any) -> Any:
        return web.json_response(
            {
                "status": "ok",
                "task_count": len(session.tasks),
                "loading": session.is_loading,
            }
        )

    async def get_config(_request: Any) -> Any:
        """Defaults and bounds for the offset sliders."""
        return web.json_response(
            {
                "offset_start": default_offset_start,
                "offset_end": default_offset_end,
                "offset_min": MIN_OFFSET_DAYS,
                "offset_max": MAX_OFFSET_DAYS,
                "default_url": get_config_value(config, "default_url", "") or "",
            }
        )

    async def load_calendar(request: Any) -> Any:
        """Load a calendar URL and replace the session's events and tasks."""
        data = await _read_json(request)
        if not isinstance(data, dict):
            return web.json_response({"error": "invalid json"}, status=400)

        body = {"offset_start": default_offset_start, "offset_end": default_offset_end, **data}
        try:
            load_request = LoadRequest.model_validate(body)
        except ValidationError as e:
            return web.json_response(
                {"error": "invalid request", "details": _validation_details(e)}, status=400
            )

        try:
            await session.load(load_request.url, load_request.offset)
        except LoadInProgressError as e:
            return web.json_response({"error": e.message}, status=409)
        except FetchError as e:
            logger.warning("Fetch failed for %s: %s", load_request.url, e.message)
            return web.json_response(
                {"error": e.message, "status_code": e.status_code}, status=502
            )
        except ParseError as e:
            logger.warning("Parse failed for %s: %s", load_request.url, e.message)
            return web.json_response({"error": e.message}, status=422)

        payload: dict[str, Any] = {
            "source_url": session.source_url,
            "offset": session.offset.model_dump(),
            "events": [event.model_dump(mode="json") for event in session.events],
            "tasks": _tasks_payload(),
        }
        if not session.events:
            payload["message"] = NO_EVENTS_MESSAGE
        return web.json_response(payload)

    async def list_events(_request: Any) -> Any:
        return web.json_response(
            {"events": [event.model_dump(mode="json") for event in session.events]}
        )

    async def list_tasks(_request: Any) -> Any:
        return web.json_response({"tasks": _tasks_payload()})

    async def put_task_dates(request: Any) -> Any:
        """Date-change callback from the timeline widget."""
        task_id = request.match_info["task_id"]
        data = await _read_json(request)
        if not isinstance(data, dict):
            return web.json_response({"error": "invalid json"}, status=400)

        try:
            dates = TaskDates.model_validate(data)
        except ValidationError as e:
            return web.json_response(
                {"error": "invalid request", "details": _validation_details(e)}, status=400
            )

        outcome = session.update_dates(task_id, dates.start, dates.end)
        if not outcome.found:
            return _task_not_found(task_id)

        return web.json_response({"outcome": outcome.value, "tasks": _tasks_payload()})

    async def patch_task(request: Any) -> Any:
        """Manual field-by-field edit of a task."""
        task_id = request.match_info["task_id"]
        data = await _read_json(request)
        if not isinstance(data, dict):
            return web.json_response({"error": "invalid json"}, status=400)

        try:
            update = TaskUpdate.model_validate(data)
        except ValidationError as e:
            return web.json_response(
                {"error": "invalid request", "details": _validation_details(e)}, status=400
            )

        outcome = session.update_fields(task_id, update)
        if not outcome.found:
            return _task_not_found(task_id)

        return web.json_response({"outcome": outcome.value, "tasks": _tasks_payload()})

    async def delete_task(request: Any) -> Any:
        task_id = request.match_info["task_id"]
        outcome = session.remove(task_id)
        if not outcome.found:
            return _task_not_found(task_id)

        return web.json_response({"outcome": outcome.value, "tasks": _tasks_payload()})

    async def export_calendar(request: Any) -> Any:
        """Download the edited task list as updated.ics."""
        origin_host = get_config_value(config, "origin_host") or request.host
        try:
            ics_text = session.export(origin_host)
        except EmptyInputError as e:
            return web.json_response({"error": e.message}, status=400)

        logger.info("Exported %d tasks as %s", len(session.tasks), EXPORT_FILENAME)
        return web.Response(
            text=ics_text,
            headers={
                "Content-Type": EXPORT_CONTENT_TYPE,
                "Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"',
            },
        )

    app.router.add_get("/api/health", health_check)
    app.router.add_get("/api/config", get_config)
    app.router.add_post("/api/load", load_calendar)
    app.router.add_get("/api/events", list_events)
    app.router.add_get("/api/tasks", list_tasks)
    app.router.add_put("/api/tasks/{task_id}/dates", put_task_dates)
    app.router.add_patch("/api/tasks/{task_id}", patch_task)
    app.router.add_delete("/api/tasks/{task_id}", delete_task)
    app.router.add_get("/api/export", export_calendar)

    logger.debug("API routes registered")
