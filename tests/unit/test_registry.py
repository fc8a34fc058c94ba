import pytest

from tmplkit import Templater, preregister, must_preregister
from tmplkit.error.exceptions import FileSystemError, PreregisterError
from tmplkit.templates.registry import template_name
from tmplkit.vfs import DirFS, MemoryFS


class BrokenWalkFS(MemoryFS):
    """Filesystem whose walk fails."""

    def walk(self, top="."):
        raise FileSystemError("disk on fire")


def test_register_returns_handle(memory_fs, config):
    """Test registering a template."""
    templater = Templater(memory_fs, config)
    sub = templater.register("hello", "hello.html")

    assert sub.name == "hello"
    assert sub.templater is templater
    assert templater.includes == {"hello": "hello.html"}


def test_register_keeps_existing_mapping(memory_fs, config):
    """Test that a second registration does not replace the first."""
    templater = Templater(memory_fs, config)
    templater.register("hello", "hello.html")
    sub = templater.register("hello", "other.html")

    assert sub.name == "hello"
    assert templater.includes["hello"] == "hello.html"


def test_subtemplate_for_unregistered_name(memory_fs, config):
    """Test that handles can be made for names that are not registered."""
    templater = Templater(memory_fs, config)
    sub = templater.subtemplate("ghost")

    assert sub.name == "ghost"
    assert "ghost" not in templater.includes


def test_preregister_discovers_templates(memory_fs, config):
    """Test pre-registration with the default extensions."""
    templater = preregister(Templater(memory_fs, config))

    assert templater.includes == {
        "broken": "broken.html",
        "page": "docs/page.md",
        "hello": "hello.html",
        "header": "layout/header.html",
    }


def test_preregister_respects_configured_extensions(memory_fs):
    """Test that only configured extensions count as templates."""
    templater = preregister(Templater(memory_fs, {"debug": False, "extensions": [".html"]}))

    assert "notes" not in templater.includes
    assert templater.includes["page"] == "layout/page.html"


def test_explicit_registration_beats_preregister(memory_fs, config):
    """Test that a name registered before the walk keeps its path."""
    templater = Templater(memory_fs, config)
    templater.register("page", "layout/page.html")
    preregister(templater)

    assert templater.includes["page"] == "layout/page.html"


def test_register_after_preregister_keeps_discovered_path(memory_fs, config):
    """Test that register does not replace a pre-registered path."""
    templater = preregister(Templater(memory_fs, config))
    templater.register("page", "layout/page.html")

    assert templater.includes["page"] == "docs/page.md"


def test_preregister_collision_is_lexicographic(config):
    """Test that the first path in lexicographic order wins a name clash."""
    fsys = MemoryFS({"b/index.html": "B", "a/index.htm": "A", "c/index.md": "C"})
    templater = preregister(Templater(fsys, config))

    assert templater.includes == {"index": "a/index.htm"}


def test_preregister_dir_fs(tmp_path, config):
    """Test pre-registration from disk."""
    (tmp_path / "partials").mkdir()
    (tmp_path / "partials" / "nav.html").write_text("nav", encoding="utf-8")
    (tmp_path / "README.txt").write_text("readme", encoding="utf-8")

    templater = preregister(Templater(DirFS(tmp_path), config))

    assert templater.includes == {"nav": "partials/nav.html"}


def test_preregister_walk_failure(config):
    """Test that a failing walk is a setup error."""
    with pytest.raises(PreregisterError):
        preregister(Templater(BrokenWalkFS(), config))


def test_must_preregister_exits(config):
    """Test the aborting variant."""
    with pytest.raises(SystemExit) as exc:
        must_preregister(Templater(BrokenWalkFS(), config))
    assert exc.value.code == 1


def test_template_name():
    """Test name derivation."""
    assert template_name("a/b/index.html") == "index"
    assert template_name("page.md") == "page"
    assert template_name("archive.tar.html") == "archive.tar"


def test_preregister_override_walk_failure(memory_fs, config):
    """Test that a broken override layer is not mistaken for an empty one."""
    templater = Templater(memory_fs, config)
    templater.override(BrokenWalkFS({"hello.html": "override"}))

    with pytest.raises(PreregisterError):
        preregister(templater)
    assert templater.includes == {}


def test_preregister_missing_override_dir(memory_fs, config, tmp_path):
    """Test that an override directory that does not exist adds nothing."""
    templater = Templater(memory_fs, config)
    templater.override(DirFS(tmp_path / "missing"))

    preregister(templater)

    assert templater.includes["hello"] == "hello.html"
