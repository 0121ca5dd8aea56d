from __future__ import annotations

from route_action_gen.domain.models import DescriptorSummary, GenerationContext
from route_action_gen.targets.naming import example_path, snake_case, to_fastapi_path, to_flask_path
from route_action_gen.targets.templates.common import (
    GENERATED_HEADER,
    comment_block,
    descriptor_loader_lines,
    descriptor_var,
    example_inputs,
    example_param_fields,
    hook_class_name,
    hook_module_name,
)


def _usage_comment(config: DescriptorSummary, route_path: str) -> list[str]:
    verb = config.method.upper()
    inputs = example_inputs(config, route_path)
    url = example_path(route_path, example_param_fields(config, route_path))

    http_args = [repr(f"http://localhost:8000{url}")]
    for arg, literal in inputs:
        if arg == "body":
            http_args.append(f"json={literal}")
        elif arg == "query":
            http_args.append(f"params={literal}")
    call_args = ", ".join(f"{arg}={literal}" for arg, literal in inputs)

    lines = [
        f"{verb} {route_path} (handler in {config.config_file_name})",
        "",
        "Call it over HTTP:",
        "",
        f"    response = httpx.{config.method}({', '.join(http_args)})",
    ]
    hook = hook_class_name(config.method)
    lines += ["", f"Or with the generated hook ({hook_module_name(config.method)}.py):", ""]
    if config.method == "get":
        ctor = ", ".join(["base_url"] + [f"{a}={lit}" for a, lit in inputs])
        lines += [f"    query = {hook}({ctor})", "    await query.fetch()"]
    else:
        lines += [
            f"    mutation = {hook}(base_url)",
            f"    await mutation.fetch_data({call_args})",
        ]
    lines += [
        "",
        "Or with the generated client (client.py):",
        "",
        f"    data = await RouteClient(base_url).{config.method}({call_args})",
    ]
    return comment_block(lines)


def fastapi_route_template(context: GenerationContext) -> str:
    """
    route.py for the fastapi-router target: one endpoint per declared verb,
    registered on an APIRouter under the route path.
    """
    lines = [
        GENERATED_HEADER,
        "from __future__ import annotations",
        "",
        "from pathlib import Path",
        "",
        "from fastapi import APIRouter",
        "",
        "from route_action_gen.runtime.fastapi import create_route",
        "from route_action_gen.runtime.loader import load_descriptor",
        "",
    ]
    lines += descriptor_loader_lines(context.configs, context.config_import_prefix)
    lines += ["", f"ROUTE_PATH = {to_fastapi_path(context.route_path)!r}", ""]

    for c in context.configs:
        lines += ["", *_usage_comment(c, context.route_path), f"{c.method.upper()} = create_route({descriptor_var(c.method)})", ""]

    lines += ["", "router = APIRouter()"]
    for c in context.configs:
        verb = c.method.upper()
        lines.append(f"router.add_api_route(ROUTE_PATH, {verb}, methods=[{verb!r}])")
    return "\n".join(lines) + "\n"


def flask_route_template(context: GenerationContext, param_names: list[str]) -> str:
    """
    route.py for the flask-views target: a single view dispatching on the
    request method, registered on a Blueprint.
    """
    endpoint = snake_case(context.route_path)
    methods = [c.method.upper() for c in context.configs]
    lines = [
        GENERATED_HEADER,
        "from __future__ import annotations",
        "",
        "from pathlib import Path",
        "",
        "from flask import Blueprint",
        "",
        "from route_action_gen.runtime.flask import create_view",
        "from route_action_gen.runtime.loader import load_descriptor",
        "",
    ]
    lines += descriptor_loader_lines(context.configs, context.config_import_prefix)
    lines += [
        "",
        f"ROUTE_PATH = {to_flask_path(context.route_path)!r}",
        f"PARAM_NAMES = {param_names!r}",
        "",
    ]

    for c in context.configs:
        lines += ["", *_usage_comment(c, context.route_path)]

    entries = ", ".join(f"{c.method!r}: {descriptor_var(c.method)}" for c in context.configs)
    lines += [
        f"view = create_view({{{entries}}}, PARAM_NAMES)",
        "",
        f"blueprint = Blueprint({endpoint!r}, __name__)",
        "blueprint.add_url_rule(",
        "    ROUTE_PATH,",
        f"    endpoint={endpoint!r},",
        "    view_func=view,",
        f"    methods={methods!r},",
        ")",
    ]
    return "\n".join(lines) + "\n"
