"""
Centralized exception definitions for tmplkit.
"""
from typing import Optional


class ErrorContext:
    """Context information for errors."""

    def __init__(self, component: str = None, operation: str = None, **kwargs):
        self.component = component
        self.operation = operation
        self.details = kwargs


class TemplaterError(Exception):
    """Base class for all tmplkit errors."""

    def __init__(self, message: str, context: ErrorContext = None, details: dict = None):
        super().__init__(message)
        self.context = context or ErrorContext()
        self.details = details or {}

    def __str__(self):
        base_str = super().__str__()
        if self.context.component and self.context.operation:
            return f"{base_str} [in {self.context.component}.{self.context.operation}]"
        return base_str


class SetupError(TemplaterError):
    """Error raised while configuring a templater or building its tree.

    These indicate a broken deployment rather than a recoverable runtime
    condition.
    """
    pass


class ConfigurationError(SetupError):
    """Error in configuration."""
    pass


class FileSystemError(SetupError):
    """Error in virtual filesystem operations."""
    pass


class DirectoryNotFoundError(FileSystemError):
    """The directory to walk does not exist."""
    pass


class DuplicateFunctionError(SetupError):
    """A template function was registered twice under the same name."""

    def __init__(self, name: str):
        super().__init__(
            f"duplicate function with name {name!r}",
            ErrorContext("Templater", "func", name=name),
        )
        self.name = name


class PreregisterError(SetupError):
    """Walking the template filesystem failed during pre-registration."""
    pass


class TemplateSourceError(SetupError):
    """A registered template source could not be read."""

    def __init__(self, name: str, path: str, reason: str):
        super().__init__(
            f"failed to read template {name!r} at {path!r}: {reason}",
            ErrorContext("TemplateTree", "build", name=name, path=path),
        )
        self.name = name
        self.path = path


class TemplateLoadError(SetupError):
    """A registered template failed to compile."""

    def __init__(self, name: str, path: str, reason: str, lineno: Optional[int] = None):
        location = f"{path}:{lineno}" if lineno else path
        super().__init__(
            f"failed to parse template {name!r} ({location}): {reason}",
            ErrorContext("TemplateTree", "build", name=name, path=path),
            {"lineno": lineno},
        )
        self.name = name
        self.path = path
        self.lineno = lineno


class RenderError(TemplaterError):
    """Error during template rendering raised by tmplkit itself."""
    pass


class MarkdownConversionError(RenderError):
    """The Markdown renderer failed to convert templated output."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"failed to convert markdown for {name!r}: {reason}",
            ErrorContext("Templater", "execute", name=name),
        )
        self.name = name
