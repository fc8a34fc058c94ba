"""
Error handling utilities and exceptions.
"""
from .exceptions import (
    ErrorContext,
    TemplaterError,
    SetupError,
    ConfigurationError,
    FileSystemError,
    DirectoryNotFoundError,
    DuplicateFunctionError,
    PreregisterError,
    TemplateSourceError,
    TemplateLoadError,
    RenderError,
    MarkdownConversionError,
)

from .handler import (
    ErrorHandler,
    ErrorCategory,
    fatal_on_error,
)

__all__ = [
    # Exceptions
    'ErrorContext',
    'TemplaterError',
    'SetupError',
    'ConfigurationError',
    'FileSystemError',
    'DirectoryNotFoundError',
    'DuplicateFunctionError',
    'PreregisterError',
    'TemplateSourceError',
    'TemplateLoadError',
    'RenderError',
    'MarkdownConversionError',

    # Error handling utilities
    'ErrorHandler',
    'ErrorCategory',
    'fatal_on_error',
]
