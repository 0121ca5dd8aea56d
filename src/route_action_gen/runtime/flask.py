from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from flask import Request, jsonify, request

from route_action_gen.errors import RequestValidationError
from route_action_gen.runtime.process import process_request
from route_action_gen.runtime.request import RouteDescriptor, validation_error_body
from route_action_gen.runtime.transport import split_query

logger = logging.getLogger(__name__)


class FlaskTransport:
    """TransportRequest over a Flask request; query excludes path params."""

    def __init__(self, req: Request, query: Mapping[str, str]) -> None:
        self._request = req
        self._query = query

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def content_type(self) -> Optional[str]:
        return self._request.content_type

    def header_items(self) -> Iterable[Tuple[str, str]]:
        return self._request.headers.items()

    def query_items(self) -> Mapping[str, str]:
        return self._query

    async def json(self) -> Any:
        return self._request.get_json(silent=True)

    async def form(self) -> Iterable[Tuple[str, Any]]:
        return list(self._request.form.items(multi=True))

    async def text(self) -> str:
        return self._request.get_data(as_text=True)


def create_view(methods: Mapping[str, RouteDescriptor], param_names: Sequence[str] = ()):
    """
    One Flask view for an endpoint: picks the descriptor by request method and
    runs it through the request pipeline.

    Responses: 405 for methods without a descriptor, 400 with field errors on
    validation failure, 500 with the error message for anything else raised.
    """
    runners = {method.lower(): process_request(d) for method, d in methods.items()}

    async def view(**path_params: str):
        method = request.method.lower()
        run = runners.get(method)
        if run is None and method == "head":
            run = runners.get("get")
        if run is None:
            return jsonify({"message": f"Method {request.method} not allowed"}), 405

        params, query = split_query(request.args.lists(), param_names)
        # dynamic path segments always win over same-named query keys
        params.update(path_params)

        try:
            result = await run(FlaskTransport(request, query), params or None)
        except RequestValidationError as exc:
            return jsonify(validation_error_body(exc)), 400
        except Exception as exc:
            logger.exception("%s %s failed", request.method, request.path)
            return jsonify({"message": str(exc) or "Internal server error", "statusCode": 500}), 500

        return jsonify(result.to_body()), result.status_code

    return view
