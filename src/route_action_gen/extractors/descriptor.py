from __future__ import annotations

import keyword
import logging
import re
from pathlib import Path
from typing import Optional

from route_action_gen.domain.models import DescriptorSummary, Facet, FieldInfo

logger = logging.getLogger(__name__)

_VALIDATOR_CALL = re.compile(r"(?<![\w.])create_request_validator\s*\(")
_SCHEMA_FACTORY = "create_model"

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = set(_OPENERS.values())

_DOTTED_NAME = re.compile(r"[A-Za-z_]\w*(?:\s*\.\s*[A-Za-z_]\w*)*")
_FIELD_LINE = re.compile(r"^([ \t]*)([A-Za-z_]\w*)[ \t]*:(?!=)[ \t]*([^=\n]*)")
_BARE_FIELD = re.compile(r"(?<![\w.])([A-Za-z_]\w*)\s*=\s*([A-Za-z_][\w.]*(?:\[\s*\])?)\s*(?=,|$)")
_CONSTANTS = {"None", "True", "False", "Ellipsis"}

# Wrappers unwrapped when reading an annotation's primitive kind.
_TRANSPARENT_NAMES = {"Optional", "Annotated", "Required", "NotRequired", "None", "typing", "typing_extensions"}

_PRIMITIVE_KINDS = {
    "str": "string",
    "EmailStr": "string",
    "HttpUrl": "string",
    "UUID": "string",
    "int": "number",
    "float": "number",
    "Decimal": "number",
    "bool": "boolean",
    "date": "date",
    "datetime": "date",
}

# Facets whose schema fields are extracted; headers and identity are presence-only.
_FIELD_FACETS = (Facet.BODY, Facet.PARAMS, Facet.QUERY)


def extract_descriptor(source: str, method: str, config_file_name: str) -> DescriptorSummary:
    """
    Summarize which facets a descriptor declares and the fields of its
    body/params/query schemas, from source text alone.

    Best-effort and total: malformed or unusual descriptors degrade to fewer
    facets or fieldless facets, never to an exception.
    """
    try:
        return _extract(source, method, config_file_name)
    except Exception:
        logger.debug("extraction failed for %s; treating as empty descriptor", config_file_name, exc_info=True)
        return DescriptorSummary(method=method, config_file_name=config_file_name)


def extract_descriptor_from_file(path: Path, method: str, max_bytes: int = 500_000) -> DescriptorSummary:
    try:
        data = path.read_bytes()[:max_bytes]
        source = data.decode("utf-8", errors="ignore")
    except OSError:
        logger.debug("cannot read %s", path, exc_info=True)
        source = ""
    return extract_descriptor(source, method, path.name)


def _extract(source: str, method: str, config_file_name: str) -> DescriptorSummary:
    masked = mask_source(source)

    call = _VALIDATOR_CALL.search(masked)
    if call is None:
        return DescriptorSummary(method=method, config_file_name=config_file_name)

    open_at = call.end() - 1
    args = balanced_contents(masked, open_at)
    if args is None:
        return DescriptorSummary(method=method, config_file_name=config_file_name)

    top = _flatten(args)
    facets = frozenset(f for f in Facet if _has_keyword(top, f.value))

    fields: dict[Facet, tuple[FieldInfo, ...]] = {}
    for facet in _FIELD_FACETS:
        if facet not in facets:
            continue
        fields[facet] = _facet_fields(masked, args, top, facet.value)
        if not fields[facet]:
            logger.debug("%s: %s declared but no fields resolved", config_file_name, facet.value)

    return DescriptorSummary(
        method=method,
        config_file_name=config_file_name,
        facets=facets,
        body_fields=fields.get(Facet.BODY, ()),
        param_fields=fields.get(Facet.PARAMS, ()),
        query_fields=fields.get(Facet.QUERY, ()),
    )


# ----------------------------
# Text helpers
# ----------------------------


def mask_source(source: str) -> str:
    """
    Blank out comments and string-literal contents, keeping length, quotes and
    newlines, so bracket matching and regexes only see code.
    """
    out = list(source)
    n = len(source)
    i = 0
    while i < n:
        ch = source[i]
        if ch == "#":
            end = source.find("\n", i)
            end = n if end == -1 else end
            for k in range(i, end):
                out[k] = " "
            i = end
            continue
        if ch in "'\"":
            quote = source[i : i + 3] if source[i : i + 3] in ('"""', "'''") else ch
            j = i + len(quote)
            while j < n and not source.startswith(quote, j):
                if source[j] == "\\":
                    j += 2
                    continue
                if len(quote) == 1 and source[j] == "\n":
                    break
                j += 1
            end = min(j, n)
            for k in range(i + len(quote), end):
                if out[k] != "\n":
                    out[k] = " "
            i = end + len(quote) if source.startswith(quote, end) else end
            continue
        i += 1
    return "".join(out)


def balanced_contents(text: str, open_at: int) -> Optional[str]:
    """Text strictly between the bracket at open_at and its partner, or None when unbalanced."""
    if open_at < 0 or open_at >= len(text) or text[open_at] not in _OPENERS:
        return None
    depth = 0
    for i in range(open_at, len(text)):
        ch = text[i]
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth == 0:
                return text[open_at + 1 : i]
    return None


def _flatten(text: str) -> str:
    # keep only depth-0 characters (bracket chars of depth 1 stay), same length
    out = []
    depth = 0
    for ch in text:
        if ch in _OPENERS:
            out.append(ch if depth == 0 else " ")
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            out.append(ch if depth == 0 else " ")
        else:
            out.append(ch if depth == 0 else ("\n" if ch == "\n" else " "))
    return "".join(out)


def _has_keyword(top: str, key: str) -> bool:
    return re.search(rf"(?<![\w.]){re.escape(key)}\s*=(?!=)", top) is not None


def _last_component(dotted: str) -> str:
    return re.split(r"\s*\.\s*", dotted.strip())[-1]


# ----------------------------
# Facet -> fields
# ----------------------------


def _facet_fields(masked: str, args: str, top: str, key: str) -> tuple[FieldInfo, ...]:
    bound = re.search(rf"(?<![\w.]){re.escape(key)}\s*=\s*({_DOTTED_NAME.pattern})", top)

    if bound is not None:
        after = top[bound.end() :].lstrip()
        name = _last_component(bound.group(1))
        if after.startswith("("):
            # inline call: key=create_model(...)
            if name == _SCHEMA_FACTORY:
                paren = top.index("(", bound.end())
                inner = balanced_contents(args, paren)
                return _create_model_fields(inner) if inner is not None else ()
            return ()
        return schema_fields(masked, name)

    # shorthand fallback: the key doubles as the schema name
    return schema_fields(masked, key)


def schema_fields(masked: str, identifier: str) -> tuple[FieldInfo, ...]:
    """
    Fields of the schema bound to identifier: a `class identifier(...)` block or
    an `identifier = create_model(...)` assignment. Empty when neither is found.
    """
    block = _class_block(masked, identifier)
    if block is not None:
        return _class_fields(block)

    assign = re.search(
        rf"^[ \t]*{re.escape(identifier)}[ \t]*(?::[^=\n]*)?=[ \t]*(?:\w+\s*\.\s*)*{_SCHEMA_FACTORY}\s*\(",
        masked,
        re.M,
    )
    if assign is not None:
        inner = balanced_contents(masked, assign.end() - 1)
        if inner is not None:
            return _create_model_fields(inner)

    return ()


def _indent_of(line: str) -> int:
    return len(line.expandtabs()) - len(line.expandtabs().lstrip())


def _class_block(masked: str, identifier: str) -> Optional[str]:
    m = re.search(rf"^([ \t]*)class[ \t]+{re.escape(identifier)}\b", masked, re.M)
    if m is None:
        return None
    class_indent = len(m.group(1).expandtabs())

    pos = m.end()
    while pos < len(masked) and masked[pos] in " \t":
        pos += 1
    if pos < len(masked) and masked[pos] == "(":
        bases = balanced_contents(masked, pos)
        if bases is None:
            return None
        pos += len(bases) + 2
    while pos < len(masked) and masked[pos] in " \t":
        pos += 1
    if pos >= len(masked) or masked[pos] != ":":
        return None

    line_end = masked.find("\n", pos)
    if line_end == -1:
        return masked[pos + 1 :]
    inline_body = masked[pos + 1 : line_end]
    if inline_body.strip():
        return inline_body

    body: list[str] = []
    for line in masked[line_end + 1 :].split("\n"):
        if not line.strip():
            body.append(line)
            continue
        if _indent_of(line) <= class_indent:
            break
        body.append(line)
    return "\n".join(body)


def _class_fields(block: str) -> tuple[FieldInfo, ...]:
    fields: dict[str, str] = {}
    field_indent: Optional[int] = None

    for line in block.split("\n"):
        if not line.strip():
            continue
        indent = _indent_of(line)
        if field_indent is None:
            field_indent = indent
        if indent != field_indent:
            continue
        m = _FIELD_LINE.match(line)
        if m is None:
            continue
        name, annotation = m.group(2), m.group(3)
        if keyword.iskeyword(name) or name.startswith("_") or name == "model_config":
            continue
        kind = annotation_kind(annotation)
        if kind:
            fields[name] = kind

    return tuple(FieldInfo(name=n, kind=k) for n, k in fields.items())


def _create_model_fields(args: str) -> tuple[FieldInfo, ...]:
    found: list[tuple[int, str, str]] = []
    top = _flatten(args)
    for m in re.finditer(r"(?<![\w.])([A-Za-z_]\w*)\s*=\s*\(", top):
        name = m.group(1)
        if name.startswith("__"):
            continue
        inner = balanced_contents(args, m.end() - 1)
        if inner is None:
            continue
        annotation = _flatten(inner).split(",", 1)[0]
        # flatten blanked nested brackets; read the kind from the raw slice
        kind = annotation_kind(inner[: len(annotation)])
        if kind:
            found.append((m.start(), name, kind))

    # name=Type without a default
    for m in _BARE_FIELD.finditer(top):
        name = m.group(1)
        if name.startswith("__") or m.group(2) in _CONSTANTS:
            continue
        kind = annotation_kind(args[m.start(2) : m.end(2)])
        if kind:
            found.append((m.start(), name, kind))

    fields: dict[str, str] = {}
    for _, name, kind in sorted(found):
        fields[name] = kind
    return tuple(FieldInfo(name=n, kind=k) for n, k in fields.items())


def annotation_kind(annotation: str) -> str:
    """
    Primitive kind of an annotation: Optional/Annotated/union-with-None are
    unwrapped, dotted names reduce to their last part.

    >>> annotation_kind("Optional[int]")
    'number'
    >>> annotation_kind("datetime.date | None")
    'date'
    """
    for dotted in _DOTTED_NAME.findall(annotation):
        name = _last_component(dotted)
        if name in _TRANSPARENT_NAMES:
            continue
        return _PRIMITIVE_KINDS.get(name, name.lower())
    return ""
