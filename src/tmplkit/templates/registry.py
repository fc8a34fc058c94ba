"""
Template discovery.
"""
import logging
import posixpath
from typing import TYPE_CHECKING

from ..error.exceptions import ErrorContext, FileSystemError, PreregisterError
from ..error.handler import fatal_on_error

if TYPE_CHECKING:
    from .templater import Templater

logger = logging.getLogger(__name__)


def template_name(path: str) -> str:
    """Derive a template name from its path: the base name without extension."""
    return posixpath.splitext(posixpath.basename(path))[0]


def preregister(templater: "Templater") -> "Templater":
    """
    Register every template found in the templater's filesystem.

    A file is a template if its extension is listed in
    ``templater.config.extensions``. The name is the base name without the
    extension. Names that are already registered are left alone, and since
    the walk is in lexicographic path order the first path wins when two
    files map to the same name.

    Use Templater.subtemplate to get a handle, or call Templater.register,
    which keeps the pre-registered path.

    Raises:
        PreregisterError: If the filesystem cannot be walked
    """
    try:
        paths = list(templater.filesystem.walk("."))
    except (OSError, FileSystemError) as e:
        raise PreregisterError(
            f"failed to walk templates: {e}",
            ErrorContext("registry", "preregister"),
        ) from e

    for full_path in paths:
        if not templater.config.is_template(full_path):
            continue

        name = template_name(full_path)
        if name in templater.includes:
            if templater.debug:
                logger.info(f"Skipping {full_path}: {name} is already registered at {templater.includes[name]}")
            continue

        if templater.debug:
            logger.info(f"Pre-registering {name} at {full_path}")

        templater.includes[name] = full_path

    return templater


must_preregister = fatal_on_error(preregister)
