import io
from types import SimpleNamespace

import pytest
from jinja2 import TemplateNotFound, UndefinedError

from tmplkit import MarkdownConversionError, MarkdownRenderer, Templater


class FailingConverter:
    """Markdown converter that always fails."""

    def convert(self, source, sink):
        raise ValueError("unbalanced emphasis")


def test_execute_writes_to_sink(templater):
    """Test rendering into a sink."""
    out = io.StringIO()
    templater.execute(out, "hello", {"name": "World"})

    assert out.getvalue() == "Hello World!"


def test_execute_escapes_html(templater):
    """Test that values are HTML-escaped."""
    assert templater.render("hello", {"name": "<b>"}) == "Hello &lt;b&gt;!"


def test_templates_include_each_other_by_name(templater):
    """Test that registered names are visible to include."""
    output = templater.render("page", {"title": "Title", "body": "text"})

    assert output == "<h1>Title</h1><p>text</p>"


def test_non_mapping_data_is_bound_to_data(memory_fs, config):
    """Test that a plain value is available as ``data``."""
    memory_fs["item.html"] = "{{ data.label }}={{ data.value }}"
    templater = Templater(memory_fs, config)
    templater.register("item", "item.html")

    assert templater.render("item", SimpleNamespace(label="a", value=1)) == "a=1"


def test_subtemplate_execute(templater):
    """Test that a handle renders its bound name."""
    sub = templater.subtemplate("hello")
    out = io.StringIO()
    sub.execute(out, {"name": "sub"})

    assert out.getvalue() == "Hello sub!"
    assert sub.render({"name": "again"}) == "Hello again!"


def test_unregistered_name_fails(templater):
    """Test executing a name that was never registered."""
    calls = []
    templater.on_render_fail = lambda sub, sink, err: calls.append(sub.name)

    with pytest.raises(TemplateNotFound):
        templater.subtemplate("ghost").execute(io.StringIO())
    assert calls == ["ghost"]


def test_missing_variable_fails(templater):
    """Test that undefined variables are render errors."""
    with pytest.raises(UndefinedError):
        templater.render("broken")


def test_lenient_undefined(memory_fs):
    """Test that strict undefined can be turned off."""
    templater = Templater(memory_fs, {"debug": False, "strict_undefined": False})
    templater.register("broken", "broken.html")

    assert templater.render("broken") == ""


def test_hook_receives_error_and_can_write_fallback(templater):
    """Test the render failure hook."""
    seen = []

    def on_fail(sub, sink, err):
        seen.append((sub.name, type(err)))
        sink.write("fallback")

    templater.on_render_fail = on_fail
    out = io.StringIO()

    with pytest.raises(UndefinedError):
        templater.execute(out, "broken")

    assert seen == [("broken", UndefinedError)]
    assert out.getvalue() == "fallback"


def test_hook_is_not_called_recursively(templater):
    """Test that a failing error page does not re-trigger the hook."""
    calls = []

    def on_fail(sub, sink, err):
        calls.append(sub.name)
        # The error page itself is broken.
        sub.templater.execute(sink, "broken")

    templater.on_render_fail = on_fail

    with pytest.raises(UndefinedError):
        templater.execute(io.StringIO(), "broken")
    assert calls == ["broken"]

    with pytest.raises(TemplateNotFound):
        templater.execute(io.StringIO(), "ghost")
    assert calls == ["broken", "ghost"]


def test_hook_error_does_not_replace_original(templater):
    """Test that the caller always gets the render error."""
    def on_fail(sub, sink, err):
        raise RuntimeError("hook broke")

    templater.on_render_fail = on_fail

    with pytest.raises(UndefinedError):
        templater.render("broken")


def test_function_errors_reach_caller(memory_fs, config):
    """Test that exceptions from template functions are raised as is."""
    def explode():
        raise KeyError("boom")

    memory_fs["explode.html"] = "{{ explode() }}"
    calls = []
    templater = Templater(
        memory_fs,
        config,
        functions={"explode": explode},
        on_render_fail=lambda sub, sink, err: calls.append(err),
    )
    templater.register("explode", "explode.html")

    with pytest.raises(KeyError):
        templater.render("explode")
    assert len(calls) == 1


def test_markdown_pipeline(memory_fs, config, converter):
    """Test that Markdown sources are converted after templating."""
    templater = Templater(memory_fs, config, markdown=converter)
    templater.register("doc", "docs/page.md")
    templater.register("hello", "hello.html")

    assert templater.render("doc", {"title": "Intro"}) == "<md># Intro</md>"
    assert converter.sources == ["# Intro"]

    # Non-Markdown sources skip the converter.
    assert templater.render("hello", {"name": "x"}) == "Hello x!"
    assert converter.sources == ["# Intro"]


def test_markdown_source_without_converter(memory_fs, config):
    """Test that .md templates render as plain text without a converter."""
    templater = Templater(memory_fs, config)
    templater.register("doc", "docs/page.md")

    assert templater.render("doc", {"title": "Intro"}) == "# Intro"


def test_markdown_template_failure_writes_nothing(memory_fs, config, converter):
    """Test that a failing Markdown template never reaches the converter or sink."""
    memory_fs["bad.md"] = "# {{ missing }}"
    hook_sinks = []

    def on_fail(sub, sink, err):
        hook_sinks.append(sink)
        sink.write("fallback")

    templater = Templater(memory_fs, config, markdown=converter, on_render_fail=on_fail)
    templater.register("bad", "bad.md")
    out = io.StringIO()

    with pytest.raises(UndefinedError):
        templater.execute(out, "bad")

    assert converter.sources == []
    assert out.getvalue() == ""
    assert len(hook_sinks) == 1 and hook_sinks[0] is not out


def test_markdown_conversion_failure(memory_fs, config):
    """Test that conversion errors are wrapped, reported and raised."""
    errors = []
    sinks = []

    def on_fail(sub, sink, err):
        sinks.append(sink)
        errors.append(err)

    templater = Templater(memory_fs, config, markdown=FailingConverter(), on_render_fail=on_fail)
    templater.register("doc", "docs/page.md")

    out = io.StringIO()
    with pytest.raises(MarkdownConversionError) as exc:
        templater.execute(out, "doc", {"title": "x"})

    assert isinstance(exc.value.__cause__, ValueError)
    assert errors == [exc.value]
    assert sinks[0] is out
    assert "unbalanced emphasis" in str(exc.value)


def test_markdown_renderer(memory_fs, config):
    """Test the Python-Markdown backed renderer."""
    memory_fs["post.md"] = "# {{ title }}\n\nSome *text*."
    templater = Templater(memory_fs, config, markdown=MarkdownRenderer())
    templater.register("post", "post.md")

    output = templater.render("post", {"title": "Hello"})

    assert "<h1>Hello</h1>" in output
    assert "<em>text</em>" in output
