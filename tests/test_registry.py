import os

import pytest

from route_action_gen.errors import UnknownTargetError
from route_action_gen.targets.fastapi_router import FastAPIRouterTarget
from route_action_gen.targets.flask_views import FlaskViewsTarget
from route_action_gen.targets.registry import TargetRegistry, default_registry


def test_default_registry_names_and_lookup():
    registry = default_registry()
    assert registry.names() == ["fastapi-router", "flask-views"]
    assert isinstance(registry.get("fastapi-router"), FastAPIRouterTarget)
    assert isinstance(registry.get("flask-views"), FlaskViewsTarget)
    assert "flask-views" in registry


def test_detect_by_views_segment():
    registry = default_registry()
    assert registry.detect("/proj/views/api/users/[userId]") == "flask-views"
    assert registry.detect("/proj/views") == "flask-views"
    assert registry.detect("/proj/app/api/posts") == "fastapi-router"
    assert registry.detect("/proj/app/reviews/x") == "fastapi-router"


def test_resolve_auto_and_explicit():
    registry = default_registry()
    assert registry.resolve("auto", "/proj/views/x").name == "flask-views"
    assert registry.resolve(None, "/proj/app/x").name == "fastapi-router"
    assert registry.resolve("flask-views", "/proj/app/x").name == "flask-views"


def test_unknown_target_lists_available():
    with pytest.raises(UnknownTargetError) as exc:
        default_registry().get("next-app-router")
    assert exc.value.message == 'Unknown framework: "next-app-router". Available: auto, fastapi-router, flask-views'


def test_empty_registry_detects_default_name_only():
    registry = TargetRegistry()
    assert registry.detect("/proj/views/x") == "fastapi-router"
    with pytest.raises(UnknownTargetError):
        registry.resolve("auto", "/proj/views/x")


def test_route_path_resolution():
    fastapi = FastAPIRouterTarget()
    flask = FlaskViewsTarget()
    d = os.path.join("/proj", "app", "api", "posts", "[postId]")
    assert fastapi.resolve_route_path(d) == "/api/posts/[postId]"
    assert fastapi.resolve_route_path("/proj/elsewhere/health") == "/health"
    assert flask.resolve_route_path("/proj/views/api/users/[userId]") == "/api/users/[userId]"


def test_generated_dir_layouts():
    assert FastAPIRouterTarget().resolve_generated_dir("/proj/app/api/x", "/proj") == os.path.join(
        "/proj/app/api/x", "_generated"
    )
    assert FlaskViewsTarget("gen").resolve_generated_dir("/proj/views/api/x", "/proj") == os.path.normpath(
        "/proj/gen/views/api/x"
    )
