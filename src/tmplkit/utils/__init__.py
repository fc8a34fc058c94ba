"""
Utility helpers.
"""
from .atomic import AtomicReference
from .logging import configure_logging, get_logger, get_render_logger, JsonFormatter

__all__ = [
    'AtomicReference',
    'configure_logging',
    'get_logger',
    'get_render_logger',
    'JsonFormatter',
]
