"""
Request-scoped logging context.

Each request handled by the API carries a dictionary of facts (who is asking, which resource, what the
permission engine decided) which is attached to every log message emitted while serving that request and
flushed as a single canonical log line once the response is sent. Outside of a request (scripts, tests
calling library code directly) the helpers in this module quietly do nothing.
"""

import logging
import os
import sys
import time
import traceback
from typing import Any, Union

from starlette.requests import HTTPConnection, Request
from starlette_context import context
from starlette_context.middleware import RawContextMiddleware

from recipebox import __project__, __version__
from recipebox.lib.logging.models import Source

FRONTEND_URL = os.getenv("FRONTEND_URL", "")
API_URL = os.getenv("API_URL", "")
SHARE_TOKEN_HEADER = "X-Share-Token"
SHARE_TOKEN_QUERY_PARAM = "share_token"

logger = logging.getLogger(__name__)


def _request_source(request: Union[Request, HTTPConnection]) -> Source:
    if FRONTEND_URL and request.headers.get("origin") == FRONTEND_URL:
        return Source.web
    if request.headers.get("referer") == f"{API_URL}/docs":
        return Source.docs
    return Source.other


class PopulatedRawContextMiddleware(RawContextMiddleware):
    async def set_context(self, request: Union[Request, HTTPConnection]) -> dict:
        ctx: dict[str, Any] = {
            "request_ns": time.time_ns(),
            "path": request.url.path,
            "method": request.scope.get("method"),
            "source": _request_source(request),
            "application": __project__,
            "version": __version__,
            # Never log the token itself, only whether one was presented.
            "share_link_presented": (
                SHARE_TOKEN_HEADER in request.headers or SHARE_TOKEN_QUERY_PARAM in request.query_params
            ),
        }

        plugin_ctx = {plugin.key: await plugin.process_request(request) for plugin in self.plugins}
        return {**ctx, **plugin_ctx}


def save_to_logging_context(ctx: dict) -> dict:
    if not context.exists():
        return {}

    for key, value in ctx.items():
        if key not in context:
            context[key] = value
        # Repeated keys accumulate into a list rather than overwriting earlier values.
        elif isinstance(context[key], list):
            context[key].append(value)
        else:
            context[key] = [context[key], value]

    return context.data


def logging_context() -> dict:
    return context.data if context.exists() else {}


def format_raised_exception_info_as_dict(err: BaseException) -> dict:
    info: dict[str, Any] = {"type": err.__class__.__name__, "string": str(err)}

    # Point at the innermost frame from our own package, skipping library code.
    frames = [fs for fs in traceback.extract_tb(err.__traceback__ or sys.exc_info()[2]) if "/recipebox/" in fs.filename]
    if frames:
        info.update({"file": frames[-1].filename, "line": frames[-1].lineno, "func": frames[-1].name})

    return {"captured_exception_info": info}
