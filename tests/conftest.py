"""Shared fixtures: a small Flask site and a freezer writing into tmp_path."""

import pytest
from flask import Flask

from site_freezer import Freezer


@pytest.fixture
def build_dir(tmp_path):
    return tmp_path / "build"


@pytest.fixture
def app(build_dir) -> Flask:
    app = Flask(__name__)
    app.config["FREEZER_DESTINATION"] = str(build_dir)

    @app.route("/")
    def home():
        return "home page"

    @app.route("/hello")
    def hello():
        return "hello page"

    return app


@pytest.fixture
def freezer(app) -> Freezer:
    return Freezer(app)


@pytest.fixture
def frozen_files(build_dir):
    """Relative paths of every file written below the destination, sorted."""

    def list_files() -> list[str]:
        return sorted(p.relative_to(build_dir).as_posix() for p in build_dir.rglob("*") if p.is_file())

    return list_files
