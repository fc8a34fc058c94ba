"""
Compiled template trees.

A tree is one Jinja2 environment holding every registered template under
its name, so templates can include and extend each other by name. Trees are
built once and never mutated afterwards, which lets any number of threads
render from the same tree without locking.
"""
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterator, Mapping, Optional, Protocol

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
)

from ..config.configuration import TemplaterConfiguration
from ..error.exceptions import TemplateLoadError, TemplateSourceError
from ..vfs.base import FileSystem, read_file

logger = logging.getLogger(__name__)


class Writer(Protocol):
    """Anything rendered output can be written to."""

    def write(self, s: str) -> Any:
        ...


def build_context(data: Any) -> Dict[str, Any]:
    """
    Turn a data value into a template context.

    Mappings are spread into top-level variables; any other value is bound
    to the variable ``data``.
    """
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    return {"data": data}


class TemplateTree:
    """Immutable set of compiled templates sharing one environment."""

    def __init__(self, environment: Environment, templates: Dict[str, Template], paths: Dict[str, str]):
        self.environment = environment
        self._templates = MappingProxyType(dict(templates))
        self._paths = MappingProxyType(dict(paths))

    def __repr__(self) -> str:
        return f"<TemplateTree {sorted(self._templates)!r}>"

    def __contains__(self, name: str) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset(self._templates)

    def path(self, name: str) -> Optional[str]:
        """Source path the named template was built from."""
        return self._paths.get(name)

    def get(self, name: str) -> Template:
        """
        Look up a compiled template.

        Raises:
            TemplateNotFound: If no template of that name was built
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFound(name) from None

    def render_to(self, sink: Writer, name: str, context: Dict[str, Any]) -> None:
        """Render the named template into sink, one chunk at a time."""
        for chunk in self.get(name).generate(context):
            sink.write(chunk)


def create_environment(
    config: TemplaterConfiguration,
    sources: Dict[str, str],
    functions: Mapping[str, Callable],
) -> Environment:
    """
    Create the Jinja2 environment a tree compiles into.

    Functions are exposed both as globals and as filters, so templates can
    call ``fn(x)`` or pipe ``x | fn``.
    """
    env = Environment(
        loader=DictLoader(sources),
        autoescape=config.autoescape,
        undefined=StrictUndefined if config.strict_undefined else Undefined,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=config.keep_trailing_newline,
        auto_reload=False,
        cache_size=-1,
    )
    env.globals.update(functions)
    env.filters.update(functions)
    return env


def build_tree(
    fsys: FileSystem,
    includes: Mapping[str, str],
    functions: Mapping[str, Callable],
    config: TemplaterConfiguration,
) -> TemplateTree:
    """
    Read and compile every registered template.

    Args:
        fsys: Filesystem the sources are read from
        includes: Template name to source path
        functions: Function table shared by every template
        config: Templater configuration

    Returns:
        Freshly built tree

    Raises:
        TemplateSourceError: If a source cannot be read
        TemplateLoadError: If a source fails to compile
    """
    paths = dict(includes)
    sources: Dict[str, str] = {}
    for name, path in paths.items():
        try:
            sources[name] = read_file(fsys, path)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateSourceError(name, path, str(e)) from e

    env = create_environment(config, sources, dict(functions))

    templates: Dict[str, Template] = {}
    for name, path in paths.items():
        try:
            templates[name] = env.get_template(name)
        except TemplateSyntaxError as e:
            raise TemplateLoadError(name, path, e.message or str(e), e.lineno) from e

    if config.debug:
        logger.info(f"Compiled {len(templates)} templates")
    return TemplateTree(env, templates, paths)
