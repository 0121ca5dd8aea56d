from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional

from route_action_gen.runtime.form_data import FormItems
from route_action_gen.runtime.process import process_form_action, process_server_function
from route_action_gen.runtime.request import HandlerResponse, RouteDescriptor
from route_action_gen.runtime.transport import RawItems


def create_server_function(descriptor: RouteDescriptor) -> Callable[[Mapping[str, Any]], Awaitable[HandlerResponse]]:
    """
    In-process call: payload is {"body": ..., "params": ..., "query": ...}.
    Headers are not a facet of this path.
    """
    run = process_server_function(descriptor)

    async def server_function(payload: Mapping[str, Any]) -> HandlerResponse:
        return await run(payload)

    return server_function


def create_form_action(descriptor: RouteDescriptor):
    """
    Form submission entry: (previous_state, form_items, headers=None) -> response.
    previous_state is accepted so the action can be chained across
    submissions; it does not feed validation.
    """
    run = process_form_action(descriptor)

    async def form_action(
        previous_state: Optional[HandlerResponse],
        form_items: FormItems,
        headers: Optional[RawItems] = None,
    ) -> HandlerResponse:
        return await run(form_items, headers)

    return form_action
