from __future__ import annotations

from typing import Iterable

from route_action_gen.domain.models import DescriptorSummary, FieldInfo
from route_action_gen.targets.naming import example_object, extract_dynamic_segments, pascal_case

GENERATED_NOTICE = "This file is auto-generated by route-action-gen. Do not edit manually."
GENERATED_HEADER = f"# {GENERATED_NOTICE}"


def descriptor_var(method: str) -> str:
    return f"{method}_descriptor"


def descriptor_loader_lines(configs: Iterable[DescriptorSummary], config_import_prefix: str) -> list[str]:
    """
    Lines that locate the descriptor directory relative to the generated file
    and load one descriptor module per config.
    """
    lines = [
        f"_CONFIG_DIR = (Path(__file__).resolve().parent / {config_import_prefix!r}).resolve()",
        "",
    ]
    for c in configs:
        lines.append(f"{descriptor_var(c.method)} = load_descriptor(_CONFIG_DIR / {c.config_file_name!r})")
    return lines


def comment_block(lines: Iterable[str]) -> list[str]:
    return [f"# {line}".rstrip() for line in lines]


def uses_params(config: DescriptorSummary, route_path: str) -> bool:
    # dynamic segments need values for the URL even when params are not validated
    return config.has_params or bool(extract_dynamic_segments(route_path))


def uses_body(config: DescriptorSummary) -> bool:
    return config.is_body_method and config.has_body


def example_param_fields(config: DescriptorSummary, route_path: str) -> tuple[FieldInfo, ...]:
    if config.param_fields:
        return config.param_fields
    return tuple(FieldInfo(name=n, kind="string") for n in extract_dynamic_segments(route_path))


def example_inputs(config: DescriptorSummary, route_path: str) -> list[tuple[str, str]]:
    """
    (argument, example literal) pairs for the inputs a caller passes, in the
    order body, params, query.
    """
    inputs: list[tuple[str, str]] = []
    if uses_body(config):
        inputs.append(("body", example_object(config.body_fields)))
    if uses_params(config, route_path):
        inputs.append(("params", example_object(example_param_fields(config, route_path))))
    if config.has_query:
        inputs.append(("query", example_object(config.query_fields)))
    return inputs


def hook_class_name(method: str) -> str:
    suffix = "Query" if method == "get" else "Mutation"
    return f"Route{pascal_case(method)}{suffix}"


def hook_module_name(method: str) -> str:
    return f"use_route_{method}"
