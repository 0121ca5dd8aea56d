from __future__ import annotations

from route_action_gen.domain.models import DescriptorSummary
from route_action_gen.targets.naming import build_fetch_url_expression
from route_action_gen.targets.templates.common import GENERATED_HEADER, uses_body, uses_params


def _signature(config: DescriptorSummary, route_path: str) -> str:
    args = ["self", "*"]
    if uses_body(config):
        args.append("body: Any")
    if uses_params(config, route_path):
        args.append("params: dict[str, Any]")
    if config.has_query:
        args.append("query: Optional[dict[str, Any]] = None")
    if len(args) == 2:
        args.pop()
    return ", ".join(args)


def _method_block(config: DescriptorSummary, route_path: str) -> list[str]:
    request_args = [repr(config.method.upper()), build_fetch_url_expression(route_path)]
    if config.has_query:
        request_args.append("params=query")
    if uses_body(config):
        request_args.append("json=body")

    return [
        f"    async def {config.method}({_signature(config, route_path)}) -> Any:",
        f'        """{config.method.upper()} {route_path} ({config.config_file_name})"""',
        "        response = await self._client.request(",
        *[f"            {a}," for a in request_args],
        "        )",
        "        return read_json_response(response)",
    ]


def client_template(configs: tuple[DescriptorSummary, ...], route_path: str) -> str:
    lines = [
        GENERATED_HEADER,
        "from __future__ import annotations",
        "",
        "from typing import Any, Optional",
        "from urllib.parse import quote",
        "",
        "import httpx",
        "",
        "from route_action_gen.runtime.hooks import read_json_response",
        "",
        "",
        "class RouteClient:",
        f'    """Typed async client for {route_path}."""',
        "",
        '    def __init__(self, base_url: str = "", client: Optional[httpx.AsyncClient] = None) -> None:',
        "        self._owns_client = client is None",
        "        self._client = client or httpx.AsyncClient(base_url=base_url)",
        "",
        "    async def aclose(self) -> None:",
        "        if self._owns_client:",
        "            await self._client.aclose()",
        "",
        "    async def __aenter__(self) -> RouteClient:",
        "        return self",
        "",
        "    async def __aexit__(self, *exc_info: Any) -> None:",
        "        await self.aclose()",
    ]
    for c in configs:
        lines += ["", *_method_block(c, route_path)]
    return "\n".join(lines) + "\n"
