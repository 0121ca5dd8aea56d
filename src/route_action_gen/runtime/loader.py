from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, MutableMapping, Union

from route_action_gen.errors import DescriptorLoadError
from route_action_gen.repo.scanner import extract_method
from route_action_gen.runtime.request import RequestValidator, RouteDescriptor

logger = logging.getLogger(__name__)

_REQUIRED = ("request_validator", "response_validator", "handler")

_descriptors: dict[str, RouteDescriptor] = {}


def _module_name(path: Path, prefix: str) -> str:
    # descriptor and generated dirs ([postId], _generated) are not importable
    # packages, so modules get a stable synthetic name per file
    digest = hashlib.sha256(str(path).encode("utf-8")).hexdigest()[:16]
    stem = path.name.replace(".", "_")
    return f"{prefix}_{stem}_{digest}"


def load_module(path: Union[str, Path], prefix: str = "route_action_gen_loaded") -> ModuleType:
    """Import a Python file by path; later calls for the same file reuse the module."""
    p = Path(path).resolve()
    name = _module_name(p, prefix)
    cached = sys.modules.get(name)
    if cached is not None:
        return cached

    spec = importlib.util.spec_from_file_location(name, p)
    if spec is None or spec.loader is None:
        raise DescriptorLoadError(str(p), "not a loadable Python file")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        # no half-imported module left behind
        sys.modules.pop(name, None)
        raise
    logger.debug("loaded %s as %s", p, name)
    return module


def load_descriptor(path: Union[str, Path]) -> RouteDescriptor:
    """
    Import route.<method>.config.py and wrap its three exports.

    Raises DescriptorLoadError when the file is missing or one of
    request_validator, response_validator or handler is absent.
    """
    p = Path(path).resolve()
    key = str(p)
    if key in _descriptors:
        return _descriptors[key]

    if not p.is_file():
        raise DescriptorLoadError(key, "file not found")

    module = load_module(p, prefix="route_action_gen_descriptors")
    missing = [attr for attr in _REQUIRED if not hasattr(module, attr)]
    if missing:
        raise DescriptorLoadError(key, f"missing {', '.join(missing)}")

    validator = module.request_validator
    if not isinstance(validator, RequestValidator):
        raise DescriptorLoadError(key, "request_validator must come from create_request_validator()")

    descriptor = RouteDescriptor(
        request_validator=validator,
        response_validator=module.response_validator,
        handler=module.handler,
        method=extract_method(p.name) or "",
    )
    _descriptors[key] = descriptor
    return descriptor


def reexport(namespace: MutableMapping[str, Any], anchor: Union[str, Path], relative_path: str) -> ModuleType:
    """
    Load relative_path (POSIX, relative to anchor's directory) and copy its
    public names into namespace. Entry point files call this with globals().
    """
    target = Path(anchor).resolve().parent.joinpath(*relative_path.split("/"))
    module = load_module(target)
    for name, value in vars(module).items():
        if not name.startswith("_"):
            namespace[name] = value
    return module
