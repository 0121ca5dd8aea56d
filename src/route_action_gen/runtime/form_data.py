from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

_INDEXED = re.compile(r"^(.+)\[(\d+)\]$")

# Largest list index honoured; a bigger one stays part of a plain key.
MAX_LIST_INDEX = 1000

FormItems = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]


def parse_form_data(items: FormItems) -> dict[str, Any]:
    """
    Build nested data from flat form field names.

        body.title=Hi             -> {"body": {"title": "Hi"}}
        body.tags[1]=b            -> {"body": {"tags": [None, "b"]}}
        body.items[0].name=x      -> {"body": {"items": [{"name": "x"}]}}

    A later field with the same name overwrites an earlier one.
    Indexes above MAX_LIST_INDEX are not expanded: body.tags[5000]=x sets
    the key "tags[5000]".
    """
    result: dict[str, Any] = {}
    if items is None:
        return result
    pairs = items.items() if isinstance(items, Mapping) else items
    for name, value in pairs:
        set_nested_value(result, name, value)
    return result


def _split_index(key: str) -> Tuple[str, Optional[int]]:
    m = _INDEXED.match(key)
    if m is None:
        return key, None
    digits = m.group(2)
    if len(digits) > len(str(MAX_LIST_INDEX)) or int(digits) > MAX_LIST_INDEX:
        return key, None
    return m.group(1), int(digits)


def _slot(seq: list, index: int) -> None:
    if len(seq) <= index:
        seq.extend([None] * (index + 1 - len(seq)))


def set_nested_value(obj: dict[str, Any], path: str, value: Any) -> None:
    keys = [k for k in path.split(".") if k]
    if not keys:
        return

    current: dict[str, Any] = obj
    for key in keys[:-1]:
        name, index = _split_index(key)
        if index is None:
            if not isinstance(current.get(name), dict):
                current[name] = {}
            current = current[name]
            continue
        if not isinstance(current.get(name), list):
            current[name] = []
        seq = current[name]
        _slot(seq, index)
        if not isinstance(seq[index], dict):
            seq[index] = {}
        current = seq[index]

    name, index = _split_index(keys[-1])
    if index is None:
        current[name] = value
        return
    if not isinstance(current.get(name), list):
        current[name] = []
    _slot(current[name], index)
    current[name][index] = value
