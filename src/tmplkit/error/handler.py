"""
Error classification and the aborting helpers used by the must_* entry points.
"""
import functools
import logging
import sys
import traceback
from typing import Any, Callable, Dict, TypeVar

from jinja2 import TemplateError as JinjaTemplateError

from .exceptions import (
    TemplaterError,
    SetupError,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorCategory:
    """Error categories for classification."""
    SETUP = "setup"      # Broken deployment: bad templates, config, functions
    RENDER = "render"    # Recoverable render-time failures
    SYSTEM = "system"    # Anything else


class ErrorHandler:
    """Centralized error classification."""

    @staticmethod
    def classify_error(error: Exception) -> str:
        """
        Classify error into categories.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        if isinstance(error, SetupError):
            return ErrorCategory.SETUP
        elif isinstance(error, (TemplaterError, JinjaTemplateError)):
            return ErrorCategory.RENDER
        else:
            return ErrorCategory.SYSTEM

    @staticmethod
    def is_fatal(error: Exception) -> bool:
        """Setup errors should stop the process instead of being retried."""
        return ErrorHandler.classify_error(error) == ErrorCategory.SETUP

    @staticmethod
    def format_exception(exc: Exception) -> Dict[str, Any]:
        """
        Format exception as a dictionary with standard fields.

        Args:
            exc: Exception to format

        Returns:
            Dictionary with exception details
        """
        return {
            "error_type": exc.__class__.__name__,
            "error_message": str(exc),
            "error_category": ErrorHandler.classify_error(exc),
            "is_fatal": ErrorHandler.is_fatal(exc),
            "traceback": traceback.format_exception(type(exc), exc, exc.__traceback__),
        }

    @staticmethod
    def fatal_on_error(func: Callable[..., T]) -> Callable[..., T]:
        """
        Decorator that turns a tmplkit error into process termination.

        The wrapped call logs the error at CRITICAL level and exits with
        status 1. Meant for startup code that has no way to recover from a
        broken template source.
        """
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except TemplaterError as e:
                logger.critical(f"{func.__name__} failed: {e}")
                logger.debug(f"Error details: {traceback.format_exc()}")
                sys.exit(1)

        return wrapper


fatal_on_error = ErrorHandler.fatal_on_error
