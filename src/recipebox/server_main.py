import logging
import os
import time

import uvicorn
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from humps import camelize
from sqlalchemy.orm import configure_mappers
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette_context.plugins import CorrelationIdPlugin, RequestIdPlugin, UserAgentPlugin

from recipebox import __version__
from recipebox.lib.exceptions import NonexistentResourceError, ShareError, StorageUnavailable
from recipebox.lib.logging.canonical import log_request
from recipebox.lib.logging.context import (
    PopulatedRawContextMiddleware,
    format_raised_exception_info_as_dict,
    logging_context,
    save_to_logging_context,
)
from recipebox.lib.permissions import PermissionException
from recipebox.models import *  # noqa: F403
from recipebox.routers import binders, permissions, recipes, shares, users

FRONTEND_URL = os.getenv("FRONTEND_URL")

logger = logging.getLogger(__name__)

# Create backref attributes on every model class up front rather than on first instantiation.
configure_mappers()

app = FastAPI(openapi_tags=[recipes.metadata, binders.metadata, shares.metadata, permissions.metadata, users.metadata])
app.add_middleware(
    PopulatedRawContextMiddleware,
    plugins=(
        CorrelationIdPlugin(force_new_uuid=True),
        RequestIdPlugin(force_new_uuid=True),
        UserAgentPlugin(),
    ),
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL] if FRONTEND_URL else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(binders.router)
app.include_router(permissions.router)
app.include_router(recipes.router)
app.include_router(shares.router)
app.include_router(users.router)


@app.exception_handler(PermissionException)
async def permission_exception_handler(request: Request, exc: PermissionException):
    response = JSONResponse({"detail": exc.message}, status_code=exc.http_code)
    save_to_logging_context(format_raised_exception_info_as_dict(exc))
    log_request(request, response, time.time_ns())
    return response


@app.exception_handler(ShareError)
async def share_error_exception_handler(request: Request, exc: ShareError):
    response = JSONResponse({"detail": exc.message}, status_code=exc.http_code)
    save_to_logging_context(format_raised_exception_info_as_dict(exc))
    log_request(request, response, time.time_ns())
    return response


@app.exception_handler(NonexistentResourceError)
async def nonexistent_resource_exception_handler(request: Request, exc: NonexistentResourceError):
    response = JSONResponse({"detail": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)
    save_to_logging_context(format_raised_exception_info_as_dict(exc))
    log_request(request, response, time.time_ns())
    return response


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_exception_handler(request: Request, exc: StorageUnavailable):
    response = JSONResponse({"detail": str(exc)}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    save_to_logging_context(format_raised_exception_info_as_dict(exc))
    log_request(request, response, time.time_ns())
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    response = JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({"detail": [customize_validation_error(error) for error in exc.errors()]}),
    )
    save_to_logging_context(format_raised_exception_info_as_dict(exc))
    log_request(request, response, time.time_ns())
    return response


def customize_validation_error(error):
    # Report field locations the way clients send them.
    loc = [camelize(part) if isinstance(part, str) else part for part in error["loc"]]
    return {"loc": loc, "msg": error["msg"], "type": error["type"]}


@app.exception_handler(Exception)
async def exception_handler(request, err):
    save_to_logging_context(format_raised_exception_info_as_dict(err))
    response = JSONResponse(status_code=500, content={"detail": "Internal server error"})

    try:
        logger.error(msg="Uncaught exception.", extra=logging_context(), exc_info=err)
    finally:
        log_request(request, response, time.time_ns())

    return response


def customize_openapi_schema():
    title = "Recipebox API"
    version = __version__
    openapi_schema = get_openapi(title=title, version=version, routes=app.routes, tags=app.openapi_tags)
    openapi_schema["info"] = {
        "title": title,
        "version": version,
        "description": "Recipes, binders of recipes, and sharing them with other cooks.",
    }
    app.openapi_schema = openapi_schema
    return app.openapi_schema


customize_openapi_schema()


# If the application is not already being run within a uvicorn server, start uvicorn here.
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
