from __future__ import annotations

import re
from typing import Iterable

from route_action_gen.domain.models import FieldInfo

_DYNAMIC_SEGMENT = re.compile(r"\[(\w+)\]")
_SAFE = re.compile(r"[^a-zA-Z0-9_]+")


def pascal_case(text: str) -> str:
    """post-id -> PostId, foo_bar -> FooBar"""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_]", text))


def camel_case(text: str) -> str:
    pascal = pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def snake_case(text: str) -> str:
    # postId -> post_id, /api/posts/[postId] -> api_posts_post_id
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    return _SAFE.sub("_", text).strip("_").lower() or "root"


def extract_dynamic_segments(route_path: str) -> list[str]:
    """/api/[orgId]/posts/[postId] -> ["orgId", "postId"]"""
    return _DYNAMIC_SEGMENT.findall(route_path)


def _fstring_literal_part(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("{", "{{").replace("}", "}}")


def build_fetch_url_expression(route_path: str, params_accessor: str = "params") -> str:
    """
    Render a route path as a Python f-string expression, substituting each
    bracketed segment with its field access:

        /api/posts/[postId]  ->  f"/api/posts/{quote(str(params['postId']), safe='')}"
    """
    parts: list[str] = []
    last = 0
    for m in _DYNAMIC_SEGMENT.finditer(route_path):
        parts.append(_fstring_literal_part(route_path[last : m.start()]))
        parts.append("{quote(str(%s[%r]), safe='')}" % (params_accessor, m.group(1)))
        last = m.end()
    parts.append(_fstring_literal_part(route_path[last:]))
    return 'f"' + "".join(parts) + '"'


def to_fastapi_path(route_path: str) -> str:
    return _DYNAMIC_SEGMENT.sub(r"{\1}", route_path)


def to_flask_path(route_path: str) -> str:
    return _DYNAMIC_SEGMENT.sub(r"<\1>", route_path)


def kind_to_input_type(kind: str) -> str:
    if kind == "number":
        return "number"
    if kind == "boolean":
        return "checkbox"
    if kind == "date":
        return "date"
    return "text"


def field_name_to_label(name: str) -> str:
    """postId -> Post Id, first_name -> First Name"""
    words = re.sub(r"([a-z])([A-Z])", r"\1 \2", name)
    return " ".join(w[:1].upper() + w[1:] for w in re.split(r"[\s_-]+", words) if w)


def example_value(kind: str, field_name: str) -> str:
    if kind == "number":
        return "1"
    if kind == "boolean":
        return "True"
    return repr(f"example-{field_name}")


def example_object(fields: Iterable[FieldInfo]) -> str:
    """{"title": "example-title", "views": 1}"""
    entries = ", ".join(f"{f.name!r}: {example_value(f.kind, f.name)}" for f in fields)
    return "{" + entries + "}"


def example_path(route_path: str, param_fields: Iterable[FieldInfo]) -> str:
    """/api/posts/[postId] -> /api/posts/example-postId"""
    kinds = {f.name: f.kind for f in param_fields}

    def _sub(m: re.Match) -> str:
        name = m.group(1)
        if name not in kinds:
            return name
        return example_value(kinds[name], name).strip("'\"")

    return _DYNAMIC_SEGMENT.sub(_sub, route_path)
