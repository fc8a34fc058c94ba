"""
Filesystem adapters that layer, filter or scope another filesystem.
"""
import logging
import os
from typing import BinaryIO, Iterable, Iterator

from ..error.exceptions import DirectoryNotFoundError, FileSystemError
from ..error.handler import fatal_on_error
from .base import FileSystem, clean_path, join_path

logger = logging.getLogger(__name__)


class OverrideFS:
    """
    Filesystem where files in override shadow files in base.

    This lets users replace individual template files while keeping the
    rest of the bundled set. Nothing is cached: every open resolves again.
    """

    def __init__(self, base: FileSystem, override: FileSystem):
        self.base = base
        self.override = override

    def __repr__(self) -> str:
        return f"OverrideFS(base={self.base!r}, override={self.override!r})"

    def open(self, name: str) -> BinaryIO:
        try:
            return self.override.open(name)
        except OSError:
            return self.base.open(name)

    def walk(self, top: str = ".") -> Iterator[str]:
        paths = set(_walk_or_empty(self.override, top))
        paths.update(self.base.walk(top))
        yield from sorted(paths)


def _walk_or_empty(fsys: FileSystem, top: str) -> Iterable[str]:
    # An override layer does not need to mirror the base directory layout.
    # Any other walk failure propagates.
    try:
        return list(fsys.walk(top))
    except (DirectoryNotFoundError, FileNotFoundError):
        return []


class FilterFS:
    """
    Filesystem that only exposes files with an allowed extension.

    The check runs against the name reported by the opened file, not the
    requested name, so a lower layer that rewrites paths cannot smuggle a
    disallowed file through.
    """

    def __init__(self, fsys: FileSystem, extensions: Iterable[str]):
        self.fsys = fsys
        self.extensions = frozenset(ext.lower() for ext in extensions)

    def __repr__(self) -> str:
        return f"FilterFS({self.fsys!r}, {sorted(self.extensions)!r})"

    def allowed(self, name: str) -> bool:
        return os.path.splitext(name)[1].lower() in self.extensions

    def open(self, name: str) -> BinaryIO:
        f = self.fsys.open(name)
        resolved = getattr(f, "name", name)
        if not isinstance(resolved, str) or not self.allowed(resolved):
            f.close()
            raise FileNotFoundError(f"file does not exist: {name!r}")
        return f

    def walk(self, top: str = ".") -> Iterator[str]:
        for path in self.fsys.walk(top):
            if self.allowed(path):
                yield path


class SubFS:
    """Filesystem rooted at a sub-directory of another filesystem."""

    def __init__(self, fsys: FileSystem, directory: str):
        self.fsys = fsys
        self.directory = directory

    def __repr__(self) -> str:
        return f"SubFS({self.fsys!r}, {self.directory!r})"

    def open(self, name: str) -> BinaryIO:
        return self.fsys.open(join_path(self.directory, clean_path(name)))

    def walk(self, top: str = ".") -> Iterator[str]:
        prefix = "" if self.directory == "." else self.directory + "/"
        for path in self.fsys.walk(join_path(self.directory, clean_path(top))):
            yield path[len(prefix):]


def sub_fs(fsys: FileSystem, directory: str) -> FileSystem:
    """
    Scope fsys to directory.

    Raises:
        FileSystemError: If directory is not a valid relative path
    """
    try:
        directory = clean_path(directory)
    except FileNotFoundError as e:
        raise FileSystemError(f"invalid sub-directory {directory!r}") from e
    if directory == ".":
        return fsys
    return SubFS(fsys, directory)


must_sub = fatal_on_error(sub_fs)
