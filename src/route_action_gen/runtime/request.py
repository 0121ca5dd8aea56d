"""
Descriptor building blocks used inside route.<method>.config.py files:

    from pydantic import BaseModel
    from route_action_gen.runtime.request import (
        RequestData, create_request_validator, error_response, success_response,
    )

    class Params(BaseModel):
        postId: str

    request_validator = create_request_validator(params=Params)
    response_validator = dict

    async def handler(data: RequestData):
        return success_response({"id": data.params.postId})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from route_action_gen.domain.models import Facet
from route_action_gen.errors import RequestValidationError

_ANY: TypeAdapter[Any] = TypeAdapter(Any)

IdentityResolver = Callable[..., Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class RequestValidator:
    """
    The facets a descriptor declares. A facet left as None is not validated
    and reaches the handler as None.
    """

    body: Any = None
    params: Any = None
    headers: Any = None
    query: Any = None
    identity: Optional[IdentityResolver] = None

    _adapters: Dict[Facet, TypeAdapter] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for facet in (Facet.BODY, Facet.PARAMS, Facet.HEADERS, Facet.QUERY):
            schema = getattr(self, facet.value)
            if schema is not None:
                self._adapters[facet] = TypeAdapter(schema)

    @property
    def facets(self) -> frozenset[Facet]:
        declared = set(self._adapters)
        if self.identity is not None:
            declared.add(Facet.IDENTITY)
        return frozenset(declared)

    def declares(self, facet: Facet) -> bool:
        return facet in self.facets

    def validate(self, facet: Facet, raw: Any) -> Any:
        """Validate raw input for one declared facet; raises RequestValidationError."""
        adapter = self._adapters[facet]
        try:
            return adapter.validate_python(raw)
        except ValidationError as exc:
            raise RequestValidationError(facet.value, issues_from_pydantic(exc)) from exc


def create_request_validator(
    *,
    body: Any = None,
    params: Any = None,
    headers: Any = None,
    query: Any = None,
    identity: Optional[IdentityResolver] = None,
) -> RequestValidator:
    """
    Declare the inputs of one route handler. Each schema is anything pydantic
    can validate against (a BaseModel subclass, create_model(...), dict[str, str]).

    identity is called before validation as identity(request) for HTTP
    requests and identity() for server functions and form actions, so give it
    an optional parameter: def current_user(request=None). Return the
    caller's identity, or None to let anonymous requests through; raise to
    reject with 401.
    """
    return RequestValidator(body=body, params=params, headers=headers, query=query, identity=identity)


@dataclass(frozen=True)
class RequestData:
    """Validated input handed to the handler."""

    body: Any = None
    headers: Any = None
    params: Any = None
    query: Any = None
    identity: Any = None


@dataclass(frozen=True)
class SuccessResponse:
    data: Any
    input: Any = None
    status_code: int = 200
    ok: bool = field(default=True, init=False)

    def to_body(self) -> Any:
        return to_jsonable(self.data)


@dataclass(frozen=True)
class ErrorResponse:
    message: str
    status_code: int = 500
    object: Optional[Dict[str, Any]] = None
    ok: bool = field(default=False, init=False)

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "statusCode": self.status_code}


HandlerResponse = Union[SuccessResponse, ErrorResponse]
Handler = Callable[[RequestData], Awaitable[HandlerResponse]]


@dataclass(frozen=True)
class RouteDescriptor:
    """A loaded route.<method>.config.py: what the pipeline runs for one verb."""

    request_validator: RequestValidator
    response_validator: Any
    handler: Handler
    method: str = ""


def success_response(data: Any, input: Any = None) -> SuccessResponse:
    return SuccessResponse(data=data, input=input)


def error_response(message: str, object: Optional[Dict[str, Any]] = None, status_code: int = 500) -> ErrorResponse:
    return ErrorResponse(message=message, status_code=status_code, object=object)


UNAUTHORIZED_MESSAGE = "Unauthorized"
UNAUTHORIZED_STATUS = 401


def unauthorized() -> ErrorResponse:
    return error_response(UNAUTHORIZED_MESSAGE, status_code=UNAUTHORIZED_STATUS)


@dataclass(frozen=True)
class ValidationIssue:
    name: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "message": self.message, "code": self.code}


def issues_from_pydantic(exc: ValidationError) -> List[ValidationIssue]:
    """
    One issue per pydantic error: name is the dotted location, code is
    validation:<error type>.
    """
    return [
        ValidationIssue(
            name=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
            code=f"validation:{err['type']}",
        )
        for err in exc.errors()
    ]


def validation_error_body(exc: RequestValidationError) -> Dict[str, Any]:
    return {"message": "Validation error", "statusCode": 400, "errors": exc.to_list()}


def to_jsonable(value: Any) -> Any:
    """Handler payloads may hold pydantic models, dates or UUIDs; dump them for JSON transports."""
    return _ANY.dump_python(value, mode="json")
