import json
from pathlib import Path

from typer.testing import CliRunner

from route_action_gen.cli import app

runner = CliRunner()


def test_generate_writes_files(posts_project: Path):
    result = runner.invoke(app, ["generate", str(posts_project)])

    assert result.exit_code == 0, result.output
    assert "Generated 8 files for 1 route(s)." in result.output
    assert (posts_project / "app/api/posts/[postId]/_generated/route.py").exists()
    assert (posts_project / "app/api/posts/[postId]/route.py").exists()


def test_generate_with_explicit_framework(users_project: Path):
    result = runner.invoke(app, ["generate", str(users_project), "--framework", "fastapi-router"])
    assert result.exit_code == 0, result.output
    assert (users_project / "views/api/users/[userId]/route.py").exists()


def test_generate_fails_without_descriptors(tmp_path: Path):
    result = runner.invoke(app, ["generate", str(tmp_path)])
    assert result.exit_code == 1
    assert "No route config files found" in result.output


def test_generate_unknown_framework(posts_project: Path):
    result = runner.invoke(app, ["generate", str(posts_project), "--framework", "django"])
    assert result.exit_code == 1
    assert 'Unknown framework: "django"' in result.output


def test_create_and_refuse_overwrite(tmp_path: Path):
    target = tmp_path / "app/api/posts"

    result = runner.invoke(app, ["create", "POST", str(target)])
    assert result.exit_code == 0, result.output
    assert (target / "route.post.config.py").exists()

    result = runner.invoke(app, ["create", "post", str(target)])
    assert result.exit_code == 1
    assert "--force" in result.output

    result = runner.invoke(app, ["create", "post", str(target), "-f"])
    assert result.exit_code == 0


def test_create_invalid_method(tmp_path: Path):
    result = runner.invoke(app, ["create", "fetch", str(tmp_path)])
    assert result.exit_code == 1
    assert 'Invalid method "fetch"' in result.output


def test_list_json(users_project: Path):
    result = runner.invoke(app, ["list", str(users_project), "--format", "json"])

    assert result.exit_code == 0, result.output
    rows = json.loads(result.output)
    assert [(r["method"], r["route"], r["target"]) for r in rows] == [
        ("GET", "/api/users/[userId]", "flask-views"),
        ("PUT", "/api/users/[userId]", "flask-views"),
    ]
    assert rows[0]["facets"] == ["params", "query"]
    assert rows[0]["query"] == ["fields"]
    assert rows[1]["body"] == ["name", "age"]


def test_frameworks_and_version():
    result = runner.invoke(app, ["frameworks"])
    assert result.exit_code == 0
    assert "fastapi-router (default)" in result.output
    assert "flask-views" in result.output

    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("route-action-gen ")
