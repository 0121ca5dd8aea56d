from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, get_args

HttpMethod = Literal["get", "post", "put", "delete", "patch", "options", "head"]

HTTP_METHODS: tuple[str, ...] = get_args(HttpMethod)

# Verbs that carry a request body.
BODY_METHODS: tuple[str, ...] = ("post", "put", "patch")


class Facet(str, Enum):
    BODY = "body"
    PARAMS = "params"
    HEADERS = "headers"
    QUERY = "query"
    IDENTITY = "identity"


# Facet order used for validation and for reporting the first failure.
VALIDATED_FACETS: tuple[Facet, ...] = (Facet.BODY, Facet.HEADERS, Facet.PARAMS, Facet.QUERY)


@dataclass(frozen=True)
class FieldInfo:
    name: str
    kind: str  # string | number | boolean | date | <annotation name>


@dataclass(frozen=True)
class DescriptorSummary:
    """
    Structural summary of one route.<method>.config.py file.
    Produced by static text extraction; never by importing the descriptor.
    """

    method: str
    config_file_name: str
    facets: frozenset[Facet] = frozenset()

    body_fields: tuple[FieldInfo, ...] = ()
    param_fields: tuple[FieldInfo, ...] = ()
    query_fields: tuple[FieldInfo, ...] = ()

    @property
    def has_body(self) -> bool:
        return Facet.BODY in self.facets

    @property
    def has_params(self) -> bool:
        return Facet.PARAMS in self.facets

    @property
    def has_headers(self) -> bool:
        return Facet.HEADERS in self.facets

    @property
    def has_query(self) -> bool:
        return Facet.QUERY in self.facets

    @property
    def has_identity(self) -> bool:
        return Facet.IDENTITY in self.facets

    @property
    def is_body_method(self) -> bool:
        return self.method in BODY_METHODS

    @property
    def module_stem(self) -> str:
        # route.post.config.py -> route.post.config
        name = self.config_file_name
        return name[:-3] if name.endswith(".py") else name


@dataclass(frozen=True)
class ScannedConfig:
    absolute_path: str
    file_name: str
    method: str
    directory: str


@dataclass(frozen=True)
class EndpointGroup:
    """All descriptor files of one directory (one logical endpoint)."""

    directory: str
    configs: tuple[ScannedConfig, ...] = ()

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(c.method for c in self.configs)


@dataclass(frozen=True)
class GenerationContext:
    directory: str
    route_path: str  # e.g. /api/posts/[postId]
    configs: tuple[DescriptorSummary, ...] = ()
    # POSIX path from the generated dir back to the descriptor dir, e.g. ".."
    config_import_prefix: str = ".."

    @property
    def body_configs(self) -> tuple[DescriptorSummary, ...]:
        return tuple(c for c in self.configs if c.is_body_method)


@dataclass(frozen=True)
class GeneratedFile:
    file_name: str
    content: str


@dataclass(frozen=True)
class EntryPointFile:
    file_name: str
    content: str


@dataclass(frozen=True)
class GroupResult:
    directory: str
    generated_dir: str
    framework: str
    route_path: str
    files: tuple[str, ...] = ()
    written: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    entry_point_file: str = ""
    entry_point_created: bool = False


@dataclass(frozen=True)
class GenerateResult:
    root: str
    framework: str
    groups: tuple[GroupResult, ...] = field(default_factory=tuple)

    @property
    def total_files(self) -> int:
        return sum(len(g.files) for g in self.groups)
