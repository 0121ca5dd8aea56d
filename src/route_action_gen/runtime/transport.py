from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence, Tuple, Union

RawValue = Union[str, Sequence[str], None]
RawItems = Union[Mapping[str, RawValue], Iterable[Tuple[str, RawValue]]]


class TransportRequest(Protocol):
    """What the pipeline needs from an incoming HTTP request."""

    @property
    def method(self) -> str: ...

    @property
    def content_type(self) -> Optional[str]: ...

    def header_items(self) -> RawItems: ...

    def query_items(self) -> RawItems: ...

    async def json(self) -> Any: ...

    async def form(self) -> Iterable[Tuple[str, Any]]: ...

    async def text(self) -> str: ...


def _items(raw: RawItems) -> Iterable[Tuple[str, RawValue]]:
    if isinstance(raw, Mapping):
        return raw.items()
    return raw


def _first(value: RawValue) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value  # type: ignore[return-value]


def collapse_headers(raw: RawItems) -> dict[str, str]:
    """Lower-case header names; a repeated or multi-valued header keeps its first value."""
    out: dict[str, str] = {}
    for key, value in _items(raw):
        value = _first(value)
        name = key.lower()
        if value is None or name in out:
            continue
        out[name] = value
    return out


def collapse_query(raw: RawItems) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in _items(raw):
        value = _first(value)
        if value is None or key in out:
            continue
        out[key] = value
    return out


def split_query(query: RawItems, param_names: Iterable[str]) -> tuple[dict[str, str], dict[str, str]]:
    """
    Split a combined key/value mapping into (path params, remaining query).

    >>> split_query({"userId": "7", "tab": ["a", "b"]}, ["userId"])
    ({'userId': '7'}, {'tab': 'a'})
    """
    names = set(param_names)
    params: dict[str, str] = {}
    rest: dict[str, str] = {}
    for key, value in collapse_query(query).items():
        (params if key in names else rest)[key] = value
    return params, rest


@dataclass
class SimpleRequest:
    """
    In-memory TransportRequest, for tests and for callers outside a web
    framework. body is the already-decoded payload: a dict or list for JSON,
    a mapping or item list for forms, a str for text.
    """

    method: str = "GET"
    headers: Mapping[str, RawValue] = field(default_factory=dict)
    query: Mapping[str, RawValue] = field(default_factory=dict)
    body: Any = None

    @property
    def content_type(self) -> Optional[str]:
        return collapse_headers(self.headers).get("content-type")

    def header_items(self) -> RawItems:
        return self.headers

    def query_items(self) -> RawItems:
        return self.query

    async def json(self) -> Any:
        return self.body

    async def form(self) -> Iterable[Tuple[str, Any]]:
        if self.body is None:
            return []
        return list(_items(self.body))

    async def text(self) -> str:
        return "" if self.body is None else str(self.body)
