from __future__ import annotations

import os
from typing import Optional

from route_action_gen.errors import UnknownTargetError
from route_action_gen.targets.base import TargetAdapter
from route_action_gen.targets.fastapi_router import FastAPIRouterTarget
from route_action_gen.targets.flask_views import FlaskViewsTarget

AUTO = "auto"
DEFAULT_TARGET = "fastapi-router"


class TargetRegistry:
    """
    Named target adapters. Built once (see default_registry) and passed to the
    generator; nothing looks adapters up through module globals.
    """

    def __init__(self, default: str = DEFAULT_TARGET) -> None:
        self._adapters: dict[str, TargetAdapter] = {}
        self.default = default

    def register(self, adapter: TargetAdapter) -> None:
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> TargetAdapter:
        try:
            return self._adapters[name]
        except KeyError:
            raise UnknownTargetError(name, self.names()) from None

    def names(self) -> list[str]:
        return sorted(self._adapters)

    def detect(self, directory: str) -> str:
        """
        Pick a target from the directory layout. Deterministic, no file reads:
        a views/ segment means Flask views, anything else the default.
        """
        posix = directory.replace(os.sep, "/")
        if "/views/" in posix + "/" and "flask-views" in self._adapters:
            return "flask-views"
        return self.default

    def resolve(self, name: Optional[str], directory: str) -> TargetAdapter:
        if not name or name == AUTO:
            return self.get(self.detect(directory))
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._adapters


def default_registry(generated_dir_name: str = "_generated") -> TargetRegistry:
    registry = TargetRegistry()
    registry.register(FastAPIRouterTarget(generated_dir_name))
    registry.register(FlaskViewsTarget(generated_dir_name))
    return registry
