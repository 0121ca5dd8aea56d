"""
FastAPI binding for generated route.py files.

    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(router)   # router from app/api/posts/[postId]/route.py

Endpoints leave RequestValidationError to the app: without
install_exception_handlers it surfaces as a 500 through Starlette's
default error path.
"""

import logging
from typing import Any, Iterable, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from route_action_gen.errors import RequestValidationError
from route_action_gen.runtime.process import process_request
from route_action_gen.runtime.request import HandlerResponse, RouteDescriptor, validation_error_body

logger = logging.getLogger(__name__)


class StarletteTransport:
    """TransportRequest over a Starlette/FastAPI Request."""

    def __init__(self, request: Request) -> None:
        self._request = request

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def content_type(self) -> Optional[str]:
        return self._request.headers.get("content-type")

    def header_items(self) -> Iterable[Tuple[str, str]]:
        return self._request.headers.items()

    def query_items(self) -> Iterable[Tuple[str, str]]:
        return self._request.query_params.multi_items()

    async def json(self) -> Any:
        return await self._request.json()

    async def form(self) -> Iterable[Tuple[str, Any]]:
        form = await self._request.form()
        return form.multi_items()

    async def text(self) -> str:
        return (await self._request.body()).decode("utf-8", errors="replace")


def to_json_response(response: HandlerResponse) -> JSONResponse:
    return JSONResponse(response.to_body(), status_code=response.status_code)


def create_route(descriptor: RouteDescriptor):
    """FastAPI endpoint running descriptor through the request pipeline."""
    run = process_request(descriptor)

    async def endpoint(request: Request) -> JSONResponse:
        params = dict(request.path_params) or None
        return to_json_response(await run(StarletteTransport(request), params))

    if descriptor.method:
        endpoint.__name__ = f"{descriptor.method}_endpoint"
    return endpoint


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("%s %s rejected: invalid %s", request.method, request.url.path, exc.facet)
    return JSONResponse(validation_error_body(exc), status_code=400)


def install_exception_handlers(app: FastAPI) -> None:
    """Map RequestValidationError to 400 {message, statusCode, errors}."""
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
