from __future__ import annotations

from route_action_gen.targets.naming import pascal_case
from route_action_gen.targets.templates.common import GENERATED_NOTICE


def readme_template(
    route_path: str,
    methods: list[str],
    framework: str,
    has_actions: bool,
    has_form_components: bool,
) -> str:
    """README.md describing every file in the generated directory."""
    method_list = ", ".join(m.upper() for m in methods)
    plural = "s" if len(methods) > 1 else ""

    if framework == "flask-views":
        dispatcher = (
            f"Flask view that dispatches {method_list} to your `route.<method>.config.py` "
            "handlers, registered on a `blueprint` with `<name>` path converters. "
            "Undeclared methods get 405, validation failures 400 with field errors."
        )
    else:
        dispatcher = (
            f"FastAPI endpoints ({method_list}) on an `APIRouter` named `router`. Each one "
            "validates the request, calls your `route.<method>.config.py` handler and "
            "returns its JSON response."
        )

    lines = [
        f"<!-- {GENERATED_NOTICE} -->",
        "",
        f"# Generated files for `{route_path}`",
        "",
        "> **Do not edit these files manually.** They are regenerated every time you run `route-action-gen generate`.",
        "",
        f"This directory holds generated Python code for the **{method_list}** route handler{plural}.",
        "",
        "## Files",
        "",
        "### `route.py`",
        "",
        dispatcher,
        "",
        "### `client.py`",
        "",
        "`RouteClient`, an async httpx client with one method per HTTP method, for scripts and service-to-service calls.",
        "",
    ]

    for method in methods:
        if method == "get":
            lines += [
                "### `use_route_get.py`",
                "",
                "`RouteGetQuery` fetches the GET endpoint and keeps `data`, `error`, `is_loading` and "
                "`last_fetched_at`. It refetches when its inputs change and supports cancel and timeout.",
                "",
            ]
        else:
            lines += [
                f"### `use_route_{method}.py`",
                "",
                f"`Route{pascal_case(method)}Mutation` calls the {method.upper()} endpoint on demand through "
                "`fetch_data()`. Accepts a cancel event and a timeout per call.",
                "",
            ]

    if has_actions:
        lines += [
            "### `server_function.py`",
            "",
            "`server_function` runs the handler in-process with a `{body, params, query}` payload, without HTTP.",
            "",
            "### `form_action.py`",
            "",
            "`form_action(previous_state, form_items)` parses flat form fields (`body.title`, `params.postId`), "
            "validates them and calls the handler.",
            "",
        ]

    if has_form_components:
        lines += [
            "### `form_components.py`",
            "",
            "`form_components` maps each known field to a `FormField` holding an `<input>` and `<label>` with "
            "the right `name`, `type` and `id`.",
            "",
        ]

    return "\n".join(lines)
