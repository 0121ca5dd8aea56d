from __future__ import annotations

from route_action_gen.domain.models import DescriptorSummary
from route_action_gen.targets.templates.common import (
    GENERATED_HEADER,
    comment_block,
    descriptor_loader_lines,
    descriptor_var,
    example_inputs,
)


def _preamble(config: DescriptorSummary, config_import_prefix: str, factory: str) -> list[str]:
    return [
        GENERATED_HEADER,
        "from __future__ import annotations",
        "",
        "from pathlib import Path",
        "",
        f"from route_action_gen.runtime.actions import {factory}",
        "from route_action_gen.runtime.loader import load_descriptor",
        "",
        *descriptor_loader_lines((config,), config_import_prefix),
        "",
    ]


def server_function_template(config: DescriptorSummary, route_path: str, config_import_prefix: str) -> str:
    payload = ", ".join(f"{arg!r}: {literal}" for arg, literal in example_inputs(config, route_path))
    lines = _preamble(config, config_import_prefix, "create_server_function")
    lines += comment_block(
        [
            f"Calls the {config.method.upper()} handler of {route_path} in-process, without HTTP.",
            "Headers are not available on this path.",
            "",
            f"    result = await server_function({{{payload}}})",
        ]
    )
    lines.append(f"server_function = create_server_function({descriptor_var(config.method)})")
    return "\n".join(lines) + "\n"


def form_action_template(config: DescriptorSummary, route_path: str, config_import_prefix: str) -> str:
    lines = _preamble(config, config_import_prefix, "create_form_action")
    lines += comment_block(
        [
            f"Form submission entry point for {config.method.upper()} {route_path}.",
            "Field names use the form_components keys (body.title, params.postId, ...).",
            "",
            "    state = await form_action(previous_state, form_items)",
        ]
    )
    lines.append(f"form_action = create_form_action({descriptor_var(config.method)})")
    return "\n".join(lines) + "\n"
