import time
from typing import Callable

from fastapi import Request, Response
from fastapi.routing import APIRoute
from starlette.background import BackgroundTask, BackgroundTasks

from recipebox.lib.logging.canonical import log_request
from recipebox.lib.logging.context import save_to_logging_context


def _chain_background(response: Response, task: BackgroundTask) -> None:
    existing = response.background
    if existing is None:
        response.background = task
        return

    if not isinstance(existing, BackgroundTasks):
        tasks = BackgroundTasks()
        tasks.add_task(existing)
        existing = tasks

    existing.add_task(task)
    response.background = existing


class LoggedRoute(APIRoute):
    """
    Route class which emits one canonical log line per request after the response has been sent.
    """

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def logged_handler(request: Request) -> Response:
            save_to_logging_context({"time_ns": time.time_ns()})
            response = await handler(request)
            _chain_background(response, BackgroundTask(log_request, request, response, time.time_ns()))
            return response

        return logged_handler
