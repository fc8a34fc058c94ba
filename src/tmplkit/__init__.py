"""
tmplkit: named Jinja2 templates from a virtual filesystem, compiled once and
rendered with failure hooks and Markdown post-processing.
"""
from .config import TemplaterConfiguration, load_config
from .error import (
    TemplaterError,
    SetupError,
    ConfigurationError,
    DuplicateFunctionError,
    FileSystemError,
    PreregisterError,
    TemplateLoadError,
    TemplateSourceError,
    RenderError,
    MarkdownConversionError,
)
from .middleware import always_flush, FlushWriter
from .templates import (
    Templater,
    Subtemplate,
    TemplateTree,
    MarkdownRenderer,
    preregister,
    must_preregister,
)
from .vfs import DirFS, MemoryFS, OverrideFS, FilterFS, SubFS, sub_fs, must_sub

__version__ = "0.1.0"

__all__ = [
    "Templater",
    "Subtemplate",
    "TemplateTree",
    "MarkdownRenderer",
    "preregister",
    "must_preregister",
    "TemplaterConfiguration",
    "load_config",
    "DirFS",
    "MemoryFS",
    "OverrideFS",
    "FilterFS",
    "SubFS",
    "sub_fs",
    "must_sub",
    "always_flush",
    "FlushWriter",
    "TemplaterError",
    "SetupError",
    "ConfigurationError",
    "DuplicateFunctionError",
    "FileSystemError",
    "PreregisterError",
    "TemplateLoadError",
    "TemplateSourceError",
    "RenderError",
    "MarkdownConversionError",
    "__version__",
]
