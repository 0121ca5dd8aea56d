"""
The request pipeline shared by every generated dispatcher.

    identity -> facet validation (concurrent, all settle) -> handler -> response

Three entry shapes feed the same core and differ only in where raw facet
values come from:

    process_request(d)(request, params)        full transport request
    process_form_action(d)(form_items, headers) flat form submission
    process_server_function(d)(payload)         direct in-process call, no headers

A RequestValidationError is not caught here; dispatchers decide what to do
with it.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

from route_action_gen.domain.models import BODY_METHODS, VALIDATED_FACETS, Facet
from route_action_gen.runtime.form_data import FormItems, parse_form_data
from route_action_gen.runtime.request import (
    ErrorResponse,
    HandlerResponse,
    IdentityResolver,
    RequestData,
    RequestValidator,
    RouteDescriptor,
    unauthorized,
)
from route_action_gen.runtime.transport import RawItems, TransportRequest, collapse_headers, collapse_query

logger = logging.getLogger(__name__)

# Raw value source per facet, awaited only after identity succeeded.
RawSource = Callable[[], Awaitable[Any]]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _check_signature(resolver: IdentityResolver, args: Tuple[Any, ...]) -> None:
    try:
        signature = inspect.signature(resolver)
    except (TypeError, ValueError):
        return
    # a resolver that cannot take these arguments is a bug, not a rejection
    signature.bind(*args)


async def authenticate(
    resolver: Optional[IdentityResolver], request: Optional[TransportRequest] = None
) -> Tuple[Any, Optional[ErrorResponse]]:
    """
    (identity, None) on success, (None, Unauthorized) when the resolver raises.
    No resolver means an anonymous request with identity None.

    The resolver gets the request when there is one and no arguments
    otherwise. A signature that does not fit raises TypeError.
    """
    if resolver is None:
        return None, None
    args = (request,) if request is not None else ()
    _check_signature(resolver, args)
    try:
        identity = await _maybe_await(resolver(*args))
    except Exception:
        # the resolver's message is not exposed to the caller
        logger.info("identity resolver rejected the request")
        return None, unauthorized()
    return identity, None


async def parse_body(request: TransportRequest) -> Any:
    """Decode the body by content type; unknown types yield None."""
    content_type = (request.content_type or "").lower()
    if "application/json" in content_type:
        return await request.json()
    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        return dict(await request.form())
    if "text/plain" in content_type:
        return await request.text()
    return None


def _constant(value: Any) -> RawSource:
    async def source() -> Any:
        return value

    return source


async def validate_facets(validator: RequestValidator, sources: Mapping[Facet, RawSource]) -> Dict[str, Any]:
    """
    Validate every declared facet that has a raw source. All validations run
    to completion; the first failure in facet order is raised afterwards.
    Declared facets without a source, and undeclared facets, resolve to None.
    """

    async def one(facet: Facet) -> Any:
        source = sources.get(facet)
        if source is None or not validator.declares(facet):
            return None
        return validator.validate(facet, await source())

    results = await asyncio.gather(*(one(f) for f in VALIDATED_FACETS), return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return {facet.value: value for facet, value in zip(VALIDATED_FACETS, results)}


async def call_handler(descriptor: RouteDescriptor, data: RequestData) -> HandlerResponse:
    return await _maybe_await(descriptor.handler(data))


async def _process(
    descriptor: RouteDescriptor,
    request: Optional[TransportRequest],
    sources: Callable[[], Mapping[Facet, RawSource]],
) -> HandlerResponse:
    validator = descriptor.request_validator
    identity, rejection = await authenticate(validator.identity, request)
    if rejection is not None:
        return rejection

    values = await validate_facets(validator, sources())
    return await call_handler(descriptor, RequestData(identity=identity, **values))


def process_request(
    descriptor: RouteDescriptor,
) -> Callable[[TransportRequest, Optional[Mapping[str, Any]]], Awaitable[HandlerResponse]]:
    async def run(request: TransportRequest, params: Optional[Mapping[str, Any]] = None) -> HandlerResponse:
        def sources() -> Dict[Facet, RawSource]:
            out: Dict[Facet, RawSource] = {
                Facet.HEADERS: _constant(collapse_headers(request.header_items())),
                Facet.QUERY: _constant(collapse_query(request.query_items())),
            }
            if request.method.lower() in BODY_METHODS:
                out[Facet.BODY] = lambda: parse_body(request)
            if params is not None:
                out[Facet.PARAMS] = _constant(dict(params))
            return out

        return await _process(descriptor, request, sources)

    return run


def _payload_sources(payload: Mapping[str, Any]) -> Dict[Facet, RawSource]:
    out: Dict[Facet, RawSource] = {Facet.BODY: _constant(payload.get("body"))}
    for facet in (Facet.PARAMS, Facet.QUERY):
        if payload.get(facet.value) is not None:
            out[facet] = _constant(payload[facet.value])
    return out


def process_form_action(
    descriptor: RouteDescriptor,
) -> Callable[..., Awaitable[HandlerResponse]]:
    async def run(form_items: FormItems, headers: Optional[RawItems] = None) -> HandlerResponse:
        def sources() -> Dict[Facet, RawSource]:
            out = _payload_sources(parse_form_data(form_items))
            out[Facet.HEADERS] = _constant(collapse_headers(headers or {}))
            return out

        return await _process(descriptor, None, sources)

    return run


def process_server_function(
    descriptor: RouteDescriptor,
) -> Callable[[Mapping[str, Any]], Awaitable[HandlerResponse]]:
    async def run(payload: Mapping[str, Any]) -> HandlerResponse:
        return await _process(descriptor, None, lambda: _payload_sources(payload or {}))

    return run
