from __future__ import annotations

from route_action_gen.domain.models import DescriptorSummary
from route_action_gen.targets.naming import build_fetch_url_expression, extract_dynamic_segments
from route_action_gen.targets.templates.common import (
    GENERATED_HEADER,
    hook_class_name,
    uses_body,
    uses_params,
)

_IMPORTS = [
    "from __future__ import annotations",
    "",
    "from typing import Any, Optional",
    "from urllib.parse import quote",
    "",
]


def _url_method(route_path: str, has_params: bool) -> list[str]:
    url = build_fetch_url_expression(route_path)
    if has_params and extract_dynamic_segments(route_path):
        return [
            "    def build_url(self, params: Optional[dict[str, Any]]) -> str:",
            "        params = params or {}",
            f"        return {url}",
        ]
    return [
        "    def build_url(self, params: Optional[dict[str, Any]]) -> str:",
        f"        return {url}",
    ]


def use_route_get_template(config: DescriptorSummary, route_path: str) -> str:
    """use_route_get.py: auto-fetching query holder for the read verb."""
    cls = hook_class_name(config.method)
    has_params = uses_params(config, route_path)

    ctor = ["self", 'base_url: str = ""', "*"]
    if has_params:
        ctor.append("params: dict[str, Any]")
    if config.has_query:
        ctor.append("query: Optional[dict[str, Any]] = None")
    ctor += ["client: Optional[httpx.AsyncClient] = None", "timeout: float = 5.0"]

    lines = [
        GENERATED_HEADER,
        *_IMPORTS,
        "import httpx",
        "",
        "from route_action_gen.runtime.hooks import AutoFetchQuery",
        "",
        "",
        f"class {cls}(AutoFetchQuery):",
        '    """',
        f"    GET {route_path} ({config.config_file_name}).",
        "",
        "    Fetches when started, again whenever set_inputs() changes the URL or",
        "    query, and on refetch(). cancel() aborts the request in flight.",
        '    """',
        "",
        '    method = "GET"',
        "",
        f"    def __init__({', '.join(ctor)}) -> None:",
        "        super().__init__(base_url, client=client, timeout=timeout)",
        f"        self.params = {'params' if has_params else 'None'}",
        f"        self.query = {'query' if config.has_query else 'None'}",
        "",
        *_url_method(route_path, has_params),
    ]
    return "\n".join(lines) + "\n"


def use_route_mutation_template(config: DescriptorSummary, route_path: str) -> str:
    """use_route_<verb>.py: on-demand request holder for every other verb."""
    cls = hook_class_name(config.method)
    has_params = uses_params(config, route_path)

    args = ["self", "*"]
    if uses_body(config):
        args.append("body: Any")
    if has_params:
        args.append("params: dict[str, Any]")
    if config.has_query:
        args.append("query: Optional[dict[str, Any]] = None")
    args += ["cancel_event: Optional[asyncio.Event] = None", "timeout: Optional[float] = None"]

    send = [
        f"body={'body' if uses_body(config) else 'None'}",
        f"params={'params' if has_params else 'None'}",
        f"query={'query' if config.has_query else 'None'}",
        "cancel_event=cancel_event",
        "timeout=timeout",
    ]

    lines = [
        GENERATED_HEADER,
        "from __future__ import annotations",
        "",
        "import asyncio",
        *_IMPORTS[2:],
        "from route_action_gen.runtime.hooks import Mutation",
        "",
        "",
        f"class {cls}(Mutation):",
        f'    """{config.method.upper()} {route_path} ({config.config_file_name})."""',
        "",
        f"    method = {config.method.upper()!r}",
        "",
        *_url_method(route_path, has_params),
        "",
        f"    async def fetch_data({', '.join(args)}) -> Any:",
        "        return await self.send(",
        *[f"            {s}," for s in send],
        "        )",
    ]
    return "\n".join(lines) + "\n"
