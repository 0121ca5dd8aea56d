from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from route_action_gen.domain.models import BODY_METHODS, HTTP_METHODS
from route_action_gen.errors import DescriptorExistsError, RouteGenError

logger = logging.getLogger(__name__)

_IMPORTS = '''from pydantic import BaseModel

from route_action_gen.runtime.request import (
    RequestData,
    create_request_validator,
    success_response,
)
'''

_BODY_TEMPLATE = (
    _IMPORTS
    + '''

class Body(BaseModel):
    pass


request_validator = create_request_validator(body=Body)

response_validator = dict


async def handler(data: RequestData):
    body = data.body
    return success_response({})
'''
)

_PLAIN_TEMPLATE = (
    _IMPORTS
    + '''
request_validator = create_request_validator()

response_validator = dict


async def handler(data: RequestData):
    return success_response({})
'''
)


def is_valid_method(value: str) -> bool:
    return value in HTTP_METHODS


def get_config_template(method: str) -> str:
    """Boilerplate descriptor; write verbs start with an empty Body schema."""
    return _BODY_TEMPLATE if method in BODY_METHODS else _PLAIN_TEMPLATE


def create_config_file(method: str, directory: str = ".", force: bool = False, root: Optional[Path] = None) -> Path:
    """
    Write route.<method>.config.py into directory (relative to root, default
    the working directory). Refuses to overwrite unless force is set.
    """
    if not is_valid_method(method):
        raise RouteGenError(
            f'Invalid method "{method}". Valid methods: {", ".join(HTTP_METHODS)}',
            context={"method": method},
        )

    target_dir = Path(directory)
    if not target_dir.is_absolute():
        target_dir = (root or Path.cwd()) / target_dir
    target_dir = target_dir.resolve()

    path = target_dir / f"route.{method}.config.py"
    if path.exists() and not force:
        raise DescriptorExistsError(str(path))

    target_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(get_config_template(method), encoding="utf-8")
    logger.info("created %s", path)
    return path
