"""
Templater: named templates from a virtual filesystem, compiled lazily into
one tree and rendered with an optional failure hook and Markdown pass.
"""
import io
import logging
from contextvars import ContextVar
from typing import Any, Callable, Dict, Optional

from ..config.configuration import TemplaterConfiguration, ensure_templater_config
from ..error.exceptions import ConfigurationError, DuplicateFunctionError, MarkdownConversionError
from ..error.handler import fatal_on_error
from ..utils.atomic import AtomicReference
from ..utils.logging import get_render_logger
from ..vfs.base import DirFS, FileSystem
from ..vfs.overlay import OverrideFS
from .markdown import MarkdownConverter
from .tree import TemplateTree, Writer, build_context, build_tree

logger = logging.getLogger(__name__)

# RenderFailFunc is called with (subtemplate, sink, error) when a render fails.
RenderFailFunc = Callable[["Subtemplate", Writer, BaseException], None]

# Set while a failure hook runs on the current thread/context. A render that
# fails inside the hook must not call the hook again.
_in_render_fail: ContextVar[bool] = ContextVar("tmplkit_in_render_fail", default=False)


class Templater:
    """
    Describes the templates to be compiled and how to render them.

    Setup methods (register, func, override, preregister) are NOT thread-safe
    and must all run before the first load or execute. Changing the
    templater after that is undefined behavior.

    Loading and executing are safe from any number of threads.
    """

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        config: Optional[Any] = None,
        *,
        includes: Optional[Dict[str, str]] = None,
        functions: Optional[Dict[str, Callable]] = None,
        on_render_fail: Optional[RenderFailFunc] = None,
        markdown: Optional[MarkdownConverter] = None,
    ):
        """
        Initialize the templater.

        Args:
            filesystem: Filesystem to look templates up from; defaults to
                a DirFS over ``config.template_dir``
            config: TemplaterConfiguration or a dict of its fields
            includes: Initial template name to path mapping
            functions: Initial function table
            on_render_fail: Hook called when a render fails
            markdown: Converter applied to templates with a Markdown source
        """
        self.config: TemplaterConfiguration = ensure_templater_config(config)
        # Fixed for the lifetime of the templater.
        self._debug = self.config.debug

        if filesystem is None:
            if self.config.template_dir is None:
                raise ConfigurationError("Templater needs a filesystem or config.template_dir")
            filesystem = DirFS(self.config.template_dir)

        self.filesystem: FileSystem = filesystem
        self.includes: Dict[str, str] = dict(includes or {})
        self.functions: Dict[str, Callable] = {}
        self.on_render_fail = on_render_fail
        self.markdown = markdown
        self._tree: AtomicReference[TemplateTree] = AtomicReference()

        for name, fn in (functions or {}).items():
            self.func(name, fn)

    def __repr__(self) -> str:
        return f"<Templater {len(self.includes)} templates, filesystem={self.filesystem!r}>"

    @property
    def debug(self) -> bool:
        return self._debug

    def register(self, name: str, path: str) -> "Subtemplate":
        """
        Register a template, unless the name is already registered.

        A pre-registered mapping is kept as is. Either way a handle for
        name is returned.
        """
        if name not in self.includes:
            if self.debug:
                logger.info(f"Registering {name} at {path}")
            self.includes[name] = path

        return Subtemplate(self, name)

    def subtemplate(self, name: str) -> "Subtemplate":
        """
        Return a handle for name.

        The name does not have to be registered; executing an unregistered
        handle fails with TemplateNotFound.
        """
        return Subtemplate(self, name)

    def func(self, name: str, fn: Callable) -> None:
        """
        Add a function to the table shared by every template.

        Raises:
            DuplicateFunctionError: If name is already taken
        """
        if name in self.functions:
            raise DuplicateFunctionError(name)
        if not callable(fn):
            raise ConfigurationError(f"template function {name!r} is not callable")
        self.functions[name] = fn

    def override(self, filesystem: FileSystem) -> None:
        """
        Layer filesystem over the current one.

        Already compiled templates are kept; call reset to pick up the
        overriding sources.
        """
        self.filesystem = OverrideFS(self.filesystem, filesystem)

    def load(self) -> TemplateTree:
        """
        Return the compiled tree, building it on first use.

        Concurrent first calls may each build a tree, but only one of them
        is installed and every caller gets that one. In debug mode the tree
        is rebuilt on every call and never stored.
        """
        while True:
            tree = self._tree.get()
            if tree is not None:
                return tree

            tree = build_tree(self.filesystem, self.includes, self.functions, self.config)

            if self.debug:
                return tree

            if self._tree.compare_and_swap(None, tree):
                return tree

            logger.debug("Another thread installed the template tree first, discarding ours")

    def preload(self) -> None:
        """Compile the templates now instead of on the first render."""
        self.load()

    must_preload = fatal_on_error(preload)

    def reset(self) -> None:
        """Drop the compiled tree so the next load rebuilds it."""
        self._tree.set(None)

    def execute(self, sink: Writer, name: str, data: Any = None) -> None:
        """
        Render the named template into sink.

        Templates registered from a Markdown source are rendered into a
        buffer first and converted when a Markdown converter is set, so a
        failing template writes nothing to sink.

        Raises:
            TemplateNotFound: If name is not registered
            MarkdownConversionError: If Markdown conversion fails
            Exception: Whatever the template raised while rendering
        """
        if self.markdown is not None and self.config.is_markdown(self.includes.get(name)):
            out = io.StringIO()
            self._execute(out, name, data)

            try:
                self.markdown.convert(out.getvalue(), sink)
            except Exception as e:
                err = MarkdownConversionError(name, str(e))
                err.__cause__ = e
                self._on_render_fail(sink, name, err)
                raise err

            return

        self._execute(sink, name, data)

    def render(self, name: str, data: Any = None) -> str:
        """Render the named template and return the output."""
        out = io.StringIO()
        self.execute(out, name, data)
        return out.getvalue()

    def _execute(self, sink: Writer, name: str, data: Any) -> None:
        tree = self.load()
        try:
            tree.render_to(sink, name, build_context(data))
        except Exception as e:
            self._on_render_fail(sink, name, e)
            raise

    def _on_render_fail(self, sink: Writer, name: str, error: BaseException) -> None:
        log = get_render_logger(__name__, template=name)
        if self.debug:
            log.warning(f"failed to render {name!r}: {error}")

        if self.on_render_fail is None:
            return

        if _in_render_fail.get():
            if self.debug:
                log.warning(f"not calling the render failure hook again for {name!r}")
            return

        token = _in_render_fail.set(True)
        try:
            self.on_render_fail(Subtemplate(self, name), sink, error)
        except Exception:
            log.exception(f"render failure hook raised while handling {name!r}")
        finally:
            _in_render_fail.reset(token)


class Subtemplate:
    """A named template belonging to a Templater."""

    __slots__ = ("_templater", "_name")

    def __init__(self, templater: Templater, name: str):
        self._templater = templater
        self._name = name

    def __repr__(self) -> str:
        return f"<Subtemplate {self._name!r}>"

    @property
    def templater(self) -> Templater:
        return self._templater

    @property
    def name(self) -> str:
        return self._name

    def execute(self, sink: Writer, data: Any = None) -> None:
        """Render the subtemplate into sink."""
        self._templater.execute(sink, self._name, data)

    def render(self, data: Any = None) -> str:
        """Render the subtemplate and return the output."""
        return self._templater.render(self._name, data)
