"""
Exception hierarchy for route-action-gen.

    RouteGenError (base)
    ├── RequestValidationError   → a descriptor schema rejected request input (400)
    ├── DescriptorLoadError      → a descriptor module could not be imported
    ├── UnknownTargetError       → --framework names no registered target
    ├── NoDescriptorsFoundError  → generate found nothing to do
    ├── DescriptorExistsError    → create refused to overwrite a descriptor
    └── GenerationIOError        → directory creation or file write failed

Unauthorized and handler failures are not exceptions: the pipeline returns
them as ErrorResponse values.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class RouteGenError(Exception):
    """Base class; carries a user-facing message and a debug context dict."""

    def __init__(self, message: str = "route-action-gen error", context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class RequestValidationError(RouteGenError):
    """
    Raised when one facet (body, headers, params, query) fails its schema.

    The pipeline does not catch it. Framework dispatchers decide whether to map
    it to a 400 response (see runtime.fastapi / runtime.flask).
    """

    def __init__(self, facet: str, issues: Iterable[Any], context: Optional[Dict[str, Any]] = None):
        self.facet = facet
        self.issues = list(issues)
        ctx = context or {}
        ctx["facet"] = facet
        super().__init__(message=f"Invalid request {facet}", context=ctx)

    def to_list(self) -> list[dict[str, str]]:
        return [issue.to_dict() for issue in self.issues]


class DescriptorLoadError(RouteGenError):
    def __init__(self, path: str, reason: str):
        super().__init__(message=f"Cannot load descriptor {path}: {reason}", context={"path": path})
        self.path = path


class UnknownTargetError(RouteGenError):
    def __init__(self, name: str, available: Iterable[str]):
        names = ", ".join(available)
        super().__init__(
            message=f'Unknown framework: "{name}". Available: auto, {names}',
            context={"framework": name},
        )
        self.name = name


class NoDescriptorsFoundError(RouteGenError):
    def __init__(self, root: str):
        super().__init__(
            message=(
                "No route config files found. Create route.[method].config.py files "
                "(e.g., route.post.config.py) in your route directories."
            ),
            context={"root": root},
        )


class DescriptorExistsError(RouteGenError):
    def __init__(self, path: str):
        super().__init__(
            message=f"File already exists: {path}. Use --force to overwrite.",
            context={"path": path},
        )
        self.path = path


class GenerationIOError(RouteGenError):
    """
    A write failed while emitting one endpoint group.

    Groups are rendered fully in memory before any write, so earlier groups
    are complete on disk and no other group's files are interleaved.
    """

    def __init__(self, directory: str, detail: str):
        super().__init__(
            message=f"Failed to write generated files for {directory}: {detail}",
            context={"directory": directory},
        )
        self.directory = directory
        self.detail = detail
