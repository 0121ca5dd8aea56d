import sys
from pathlib import Path

import pytest

from route_action_gen.errors import DescriptorLoadError
from route_action_gen.runtime.loader import load_descriptor, load_module, reexport

from conftest import POSTS_GET, write


def test_load_descriptor_wraps_exports(tmp_path: Path):
    path = write(tmp_path / "app/x/[id]/route.get.config.py", POSTS_GET)

    descriptor = load_descriptor(path)

    assert descriptor.method == "get"
    assert descriptor.response_validator is dict
    assert load_descriptor(path) is descriptor


def test_missing_exports_are_reported(tmp_path: Path):
    path = write(tmp_path / "route.post.config.py", "request_validator = None\n")
    with pytest.raises(DescriptorLoadError) as exc:
        load_descriptor(path)
    assert exc.value.message.endswith("missing response_validator, handler")


def test_validator_must_come_from_factory(tmp_path: Path):
    path = write(
        tmp_path / "route.get.config.py",
        """
        request_validator = object()
        response_validator = dict
        async def handler(data): ...
        """,
    )
    with pytest.raises(DescriptorLoadError):
        load_descriptor(path)


def test_missing_file(tmp_path: Path):
    with pytest.raises(DescriptorLoadError) as exc:
        load_descriptor(tmp_path / "route.get.config.py")
    assert "file not found" in exc.value.message


def test_failed_import_leaves_no_module(tmp_path: Path):
    path = write(tmp_path / "broken.py", "raise RuntimeError('nope')\n")
    before = set(sys.modules)

    with pytest.raises(RuntimeError):
        load_module(path)

    assert set(sys.modules) == before


def test_reexport_copies_public_names(tmp_path: Path):
    write(tmp_path / "_generated/route.py", "VALUE = 1\n_hidden = 2\n")
    entry = tmp_path / "route.py"
    namespace = {}

    reexport(namespace, entry, "_generated/route.py")

    assert namespace["VALUE"] == 1
    assert "_hidden" not in namespace
