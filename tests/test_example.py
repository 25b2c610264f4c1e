"""Freeze the bundled example site end to end."""

import importlib
import sys
from pathlib import Path

import pytest

EXAMPLE_DIR = Path(__file__).parent.parent / "example"


@pytest.fixture
def example_freezer(monkeypatch, build_dir):
    """Import example/freeze.py fresh, writing into the test's build dir."""
    monkeypatch.setenv("FREEZER_DESTINATION", str(build_dir))
    monkeypatch.syspath_prepend(str(EXAMPLE_DIR))
    for name in ("app", "freeze"):
        sys.modules.pop(name, None)
    try:
        yield importlib.import_module("freeze").freezer
    finally:
        for name in ("app", "freeze"):
            sys.modules.pop(name, None)


def test_freezes_whole_site(example_freezer, frozen_files) -> None:
    example_freezer.freeze()
    assert frozen_files() == [
        "guides/freezing.html",
        "guides/index.html",
        "hello.html",
        "index.html",
        "notes/first-post.html",
        "notes/index.html",
        "notes/second-post.html",
    ]


def test_article_rendered_and_cleaned(example_freezer, build_dir) -> None:
    example_freezer.freeze()
    html = (build_dir / "notes" / "second-post.html").read_text(encoding="utf-8")
    assert "<h1>Second post</h1>" in html
    assert "<script>" not in html


def test_links_point_at_frozen_pages(example_freezer, build_dir) -> None:
    example_freezer.freeze()
    html = (build_dir / "index.html").read_text(encoding="utf-8")
    assert 'href="/guides/freezing"' in html
    assert (build_dir / "guides" / "freezing.html").is_file()
