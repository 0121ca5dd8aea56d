import textwrap
from pathlib import Path

import pytest

from route_action_gen.config import Settings


POSTS_GET = """
from pydantic import BaseModel

from route_action_gen.runtime.request import RequestData, create_request_validator, success_response


class Params(BaseModel):
    postId: str


request_validator = create_request_validator(params=Params)

response_validator = dict


async def handler(data: RequestData):
    return success_response({"id": data.params.postId})
"""

POSTS_POST = """
from pydantic import BaseModel

from route_action_gen.runtime.request import RequestData, create_request_validator, success_response

calls = {"count": 0}


class Body(BaseModel):
    title: str
    content: str


class Params(BaseModel):
    postId: str


request_validator = create_request_validator(body=Body, params=Params)

response_validator = dict


async def handler(data: RequestData):
    calls["count"] += 1
    return success_response({"id": data.params.postId})
"""

USERS_GET = """
from pydantic import BaseModel

from route_action_gen.runtime.request import RequestData, create_request_validator, success_response


class Params(BaseModel):
    userId: str


class Query(BaseModel):
    fields: str = "all"


request_validator = create_request_validator(params=Params, query=Query)

response_validator = dict


async def handler(data: RequestData):
    return success_response({"id": data.params.userId, "fields": data.query.fields})
"""

USERS_PUT = """
from pydantic import BaseModel

from route_action_gen.runtime.request import (
    RequestData,
    create_request_validator,
    error_response,
    success_response,
)


class Body(BaseModel):
    name: str
    age: int


class Params(BaseModel):
    userId: str


request_validator = create_request_validator(body=Body, params=Params)

response_validator = dict


async def handler(data: RequestData):
    if data.params.userId == "missing":
        return error_response("User not found", status_code=404)
    if data.params.userId == "boom":
        raise RuntimeError("database down")
    return success_response({"id": data.params.userId, "name": data.body.name, "age": data.body.age})
"""


def write(p: Path, s: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s).lstrip(), encoding="utf-8")
    return p


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, framework="auto", generated_dir_name="_generated", write_unchanged=False)


@pytest.fixture
def posts_project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    write(root / "app/api/posts/[postId]/route.get.config.py", POSTS_GET)
    write(root / "app/api/posts/[postId]/route.post.config.py", POSTS_POST)
    return root


@pytest.fixture
def users_project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    write(root / "views/api/users/[userId]/route.get.config.py", USERS_GET)
    write(root / "views/api/users/[userId]/route.put.config.py", USERS_PUT)
    return root
