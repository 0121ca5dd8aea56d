from __future__ import annotations

import os
from abc import ABC, abstractmethod

from route_action_gen.domain.models import EntryPointFile, GeneratedFile, GenerationContext


class TargetAdapter(ABC):
    """
    One host-framework flavour of generated code.

    Adapters are stateless: every method is a pure function of its arguments,
    so one instance is shared by all endpoint groups of a run.
    """

    name: str = ""
    # Directory segment under which route paths start, e.g. "app" for /abs/app/api/x
    routes_root: str = ""

    def __init__(self, generated_dir_name: str = "_generated") -> None:
        self.generated_dir_name = generated_dir_name

    def resolve_route_path(self, directory: str) -> str:
        """
        /abs/project/app/api/posts/[postId] -> /api/posts/[postId]

        Falls back to the last path segment when the routes root is absent.
        """
        posix = directory.replace(os.sep, "/")
        marker = f"/{self.routes_root}/"
        idx = posix.find(marker)
        if idx != -1:
            return posix[idx + len(marker) - 1 :]
        return "/" + posix.rstrip("/").rsplit("/", 1)[-1]

    @abstractmethod
    def resolve_generated_dir(self, config_dir: str, root: str) -> str:
        ...

    @abstractmethod
    def generate(self, context: GenerationContext) -> list[GeneratedFile]:
        ...

    @abstractmethod
    def get_entry_point_file(self, generated_dir_rel_path: str) -> EntryPointFile:
        ...
