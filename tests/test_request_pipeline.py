import asyncio

import pytest
from pydantic import BaseModel, field_validator

from route_action_gen.domain.models import Facet
from route_action_gen.errors import RequestValidationError
from route_action_gen.runtime.actions import create_form_action, create_server_function
from route_action_gen.runtime.process import (
    authenticate,
    parse_body,
    process_form_action,
    process_request,
    process_server_function,
    validate_facets,
)
from route_action_gen.runtime.request import (
    ErrorResponse,
    RequestData,
    RouteDescriptor,
    SuccessResponse,
    create_request_validator,
    error_response,
    success_response,
    to_jsonable,
)
from route_action_gen.runtime.transport import SimpleRequest, collapse_headers, split_query


class Body(BaseModel):
    title: str
    content: str


class Params(BaseModel):
    postId: str


class Headers(BaseModel):
    authorization: str


def _descriptor(**facets):
    seen = []

    async def handler(data: RequestData):
        seen.append(data)
        return success_response({"id": data.params.postId if data.params else None})

    return RouteDescriptor(create_request_validator(**facets), dict, handler, method="post"), seen


def _json_post(body, **kw):
    return SimpleRequest(method="POST", headers={"Content-Type": "application/json", **kw.pop("headers", {})}, body=body, **kw)


async def test_no_identity_resolver_yields_null_identity():
    identity, rejection = await authenticate(None)
    assert identity is None and rejection is None

    descriptor, seen = _descriptor(params=Params)
    result = await process_request(descriptor)(SimpleRequest(), {"postId": "1"})
    assert isinstance(result, SuccessResponse)
    assert seen[0].identity is None


async def test_sync_and_async_identity_resolvers():
    async def async_user(request):
        return {"id": request.method}

    identity, _ = await authenticate(async_user, SimpleRequest(method="PUT"))
    assert identity == {"id": "PUT"}

    identity, _ = await authenticate(lambda: "alice")
    assert identity == "alice"


async def test_identity_failure_skips_validation_and_handler():
    validated = []

    class Tracked(BaseModel):
        title: str

        @field_validator("title")
        @classmethod
        def _track(cls, v):
            validated.append(v)
            return v

    def deny(*args):
        raise PermissionError("token expired at 12:00")

    descriptor, seen = _descriptor(body=Tracked, identity=deny)
    result = await process_request(descriptor)(_json_post({"title": "t"}))

    assert result == ErrorResponse("Unauthorized", 401)
    assert result.to_body() == {"message": "Unauthorized", "statusCode": 401}
    assert validated == []
    assert seen == []


async def test_valid_request_reaches_handler_with_params():
    descriptor, seen = _descriptor(body=Body, params=Params)
    result = await process_request(descriptor)(_json_post({"title": "t", "content": "c"}), {"postId": "1"})

    assert result.status_code == 200
    assert result.to_body() == {"id": "1"}
    assert seen[0].body == Body(title="t", content="c")
    assert seen[0].headers is None
    assert seen[0].query is None


async def test_invalid_body_never_invokes_handler():
    descriptor, seen = _descriptor(body=Body, params=Params)

    with pytest.raises(RequestValidationError) as exc:
        await process_request(descriptor)(_json_post({"title": "t"}), {"postId": "1"})

    assert seen == []
    assert exc.value.facet == "body"
    assert exc.value.to_list() == [{"name": "content", "message": "Field required", "code": "validation:missing"}]


async def test_all_facets_settle_and_first_failure_in_facet_order_wins():
    descriptor, seen = _descriptor(body=Body, headers=Headers, params=Params)

    with pytest.raises(RequestValidationError) as exc:
        await process_request(descriptor)(_json_post({"title": 1}), {})

    assert exc.value.facet == "body"
    assert seen == []


async def test_body_only_parsed_for_write_verbs():
    descriptor, seen = _descriptor(body=Body)
    await process_request(descriptor)(SimpleRequest(method="GET", body={"nonsense": True}))
    assert seen[0].body is None


async def test_params_without_raw_value_resolve_to_none():
    descriptor, seen = _descriptor(params=Params)
    await process_request(descriptor)(SimpleRequest())
    assert seen[0].params is None


async def test_headers_are_lowercased_and_first_value_wins():
    descriptor, seen = _descriptor(headers=Headers)
    request = SimpleRequest(headers={"Authorization": ["Bearer a", "Bearer b"], "X-Extra": "1"})
    await process_request(descriptor)(request)
    assert seen[0].headers == Headers(authorization="Bearer a")

    assert collapse_headers([("Accept", "a"), ("ACCEPT", "b")]) == {"accept": "a"}


async def test_query_facet_from_request():
    class Query(BaseModel):
        page: int = 1

    descriptor, seen = _descriptor(query=Query)
    await process_request(descriptor)(SimpleRequest(query={"page": ["3", "4"]}))
    assert seen[0].query == Query(page=3)


@pytest.mark.parametrize(
    "content_type, body, expected",
    [
        ("application/json; charset=utf-8", {"a": 1}, {"a": 1}),
        ("application/x-www-form-urlencoded", [("a", "1"), ("a", "2")], {"a": "2"}),
        ("multipart/form-data; boundary=x", {"f": "v"}, {"f": "v"}),
        ("text/plain", "hello", "hello"),
        ("application/octet-stream", b"\x00", None),
    ],
)
async def test_parse_body_by_content_type(content_type, body, expected):
    request = SimpleRequest(method="POST", headers={"content-type": content_type}, body=body)
    assert await parse_body(request) == expected


async def test_undeclared_facets_are_none_without_sources():
    validator = create_request_validator(params=Params)
    values = await validate_facets(validator, {})
    assert values == {"body": None, "headers": None, "params": None, "query": None}


async def test_form_action_builds_nested_payload():
    descriptor, seen = _descriptor(body=Body, params=Params)
    action = create_form_action(descriptor)

    result = await action(None, [("body.title", "t"), ("body.content", "c"), ("params.postId", "9")])

    assert result.to_body() == {"id": "9"}
    assert seen[0].body == Body(title="t", content="c")


async def test_form_action_with_missing_body_fails_validation():
    descriptor, seen = _descriptor(body=Body)
    with pytest.raises(RequestValidationError):
        await process_form_action(descriptor)([("params.postId", "9")])
    assert seen == []


async def test_server_function_has_no_headers_facet():
    descriptor, seen = _descriptor(body=Body, headers=Headers, params=Params)
    call = create_server_function(descriptor)

    result = await call({"body": {"title": "t", "content": "c"}, "params": {"postId": "5"}})

    assert result.to_body() == {"id": "5"}
    assert seen[0].headers is None


async def test_every_variant_returns_unauthorized_when_identity_fails():
    async def deny(*args):
        raise RuntimeError("no session")

    descriptor, seen = _descriptor(body=Body, params=Params, identity=deny)
    payload = {"body": {"title": "t", "content": "c"}, "params": {"postId": "1"}}

    results = await asyncio.gather(
        process_request(descriptor)(_json_post(payload["body"]), payload["params"]),
        process_form_action(descriptor)([("body.title", "t"), ("body.content", "c"), ("params.postId", "1")]),
        process_server_function(descriptor)(payload),
    )

    for result in results:
        assert result == ErrorResponse("Unauthorized", 401)
    assert seen == []


async def test_handler_failure_passes_through():
    async def handler(data):
        return error_response("Post not found", {"postId": "x"}, 404)

    descriptor = RouteDescriptor(create_request_validator(), dict, handler)
    result = await process_server_function(descriptor)({})

    assert result.status_code == 404
    assert result.object == {"postId": "x"}
    assert result.to_body() == {"message": "Post not found", "statusCode": 404}


def test_validator_reports_declared_facets():
    validator = create_request_validator(body=Body, identity=lambda: None)
    assert validator.facets == frozenset({Facet.BODY, Facet.IDENTITY})
    assert create_request_validator().facets == frozenset()


def test_split_query_and_jsonable():
    assert split_query({"userId": "7", "tab": ["a", "b"]}, ["userId"]) == ({"userId": "7"}, {"tab": "a"})
    assert to_jsonable({"post": Body(title="t", content="c")}) == {"post": {"title": "t", "content": "c"}}


async def test_resolver_with_optional_request_works_in_every_variant():
    calls = []

    def current_user(request=None):
        calls.append(request)
        return "alice"

    async def handler(data):
        return success_response({"user": data.identity})

    descriptor = RouteDescriptor(create_request_validator(identity=current_user), dict, handler)
    request = SimpleRequest()

    results = [
        await process_request(descriptor)(request),
        await process_form_action(descriptor)([]),
        await process_server_function(descriptor)({}),
    ]

    assert [r.to_body() for r in results] == [{"user": "alice"}] * 3
    assert calls == [request, None, None]


async def test_resolver_signature_mismatch_is_not_reported_as_unauthorized():
    def needs_request(request):
        return "alice"

    descriptor, seen = _descriptor(identity=needs_request)

    result = await process_request(descriptor)(SimpleRequest())
    assert isinstance(result, SuccessResponse)

    with pytest.raises(TypeError):
        await process_server_function(descriptor)({})
    with pytest.raises(TypeError):
        await process_form_action(descriptor)([])


async def test_other_facets_finish_validating_when_body_fails():
    validated = []

    class TrackedParams(BaseModel):
        postId: str

        @field_validator("postId")
        @classmethod
        def _track(cls, v):
            validated.append(("params", v))
            return v

    class TrackedQuery(BaseModel):
        tab: str = "all"

        @field_validator("tab")
        @classmethod
        def _track(cls, v):
            validated.append(("query", v))
            return v

    descriptor, seen = _descriptor(body=Body, params=TrackedParams, query=TrackedQuery)
    request = SimpleRequest(method="POST", headers={"content-type": "application/json"}, query={"tab": "x"}, body={})

    with pytest.raises(RequestValidationError) as exc:
        await process_request(descriptor)(request, {"postId": "1"})

    assert exc.value.facet == "body"
    assert sorted(validated) == [("params", "1"), ("query", "x")]
    assert seen == []
