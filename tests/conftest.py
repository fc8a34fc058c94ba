"""Pytest configuration and fixtures."""
import pytest

from tmplkit import Templater, TemplaterConfiguration
from tmplkit.vfs import MemoryFS


class CountingFS(MemoryFS):
    """MemoryFS that records every open."""

    def __init__(self, files=None):
        super().__init__(files)
        self.opened = []

    def open(self, name):
        self.opened.append(name)
        return super().open(name)


class RecordingConverter:
    """Markdown converter stand-in that wraps its input in <md> tags."""

    def __init__(self):
        self.sources = []

    def convert(self, source, sink):
        self.sources.append(source)
        sink.write(f"<md>{source}</md>")


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    """Keep a developer's TMPL_DEBUG from leaking into the tests."""
    monkeypatch.delenv("TMPL_DEBUG", raising=False)


@pytest.fixture
def config():
    """Create a test configuration."""
    return TemplaterConfiguration(debug=False)


@pytest.fixture
def debug_config():
    """Create a configuration with hot reload on."""
    return TemplaterConfiguration(debug=True)


@pytest.fixture
def files():
    """Template sources shared by most tests."""
    return {
        "hello.html": "Hello {{ name }}!",
        "layout/header.html": "<h1>{{ title }}</h1>",
        "layout/page.html": "{% include 'header' %}<p>{{ body }}</p>",
        "broken.html": "{{ missing }}",
        "docs/page.md": "# {{ title }}",
        "notes.txt": "not a template",
    }


@pytest.fixture
def memory_fs(files):
    """In-memory filesystem holding the shared sources."""
    return CountingFS(files)


@pytest.fixture
def templater(memory_fs, config):
    """Templater with the shared sources registered by hand."""
    tmpl = Templater(memory_fs, config)
    tmpl.register("hello", "hello.html")
    tmpl.register("header", "layout/header.html")
    tmpl.register("page", "layout/page.html")
    tmpl.register("broken", "broken.html")
    return tmpl


@pytest.fixture
def converter():
    """Markdown converter that records what it was given."""
    return RecordingConverter()
