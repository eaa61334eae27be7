import logging
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from recipebox.lib.logging.context import logging_context, save_to_logging_context
from recipebox.lib.logging.models import LogType

logger = logging.getLogger(__name__)


def log_request(request: Request, response: Response, end: int) -> None:
    start: Optional[int] = logging_context().get("time_ns", logging_context().get("request_ns"))
    save_to_logging_context(
        {
            "log_type": LogType.api_request,
            "response_code": response.status_code,
            "canonical": True,
            **({"duration_ns": end - start} if isinstance(start, int) else {}),
        }
    )

    level = logging.INFO
    if response.status_code >= 500:
        level = logging.ERROR
    elif response.status_code >= 400:
        level = logging.WARNING

    logger.log(level, "Request completed.", extra=logging_context())
