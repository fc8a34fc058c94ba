"""
Read-only virtual filesystems that templates are loaded from.
"""
import io
import logging
import os
import posixpath
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List, Mapping, Protocol, Union, runtime_checkable

from ..error.exceptions import DirectoryNotFoundError, FileSystemError

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for read-only template sources."""

    def open(self, name: str) -> BinaryIO:
        """
        Open a file for reading.

        Args:
            name: Slash separated path relative to the filesystem root

        Returns:
            Binary file object whose ``name`` attribute is the resolved entry name

        Raises:
            FileNotFoundError: If the file does not exist
        """
        ...

    def walk(self, top: str = ".") -> Iterator[str]:
        """
        Walk the tree under top.

        Args:
            top: Directory to start from

        Returns:
            Iterator of slash separated file paths in lexicographic order
        """
        ...


def clean_path(name: str) -> str:
    """
    Normalize a filesystem-relative path.

    Raises:
        FileNotFoundError: If the path is absolute or escapes the root
    """
    cleaned = posixpath.normpath(name.replace("\\", "/"))
    if cleaned.startswith("/") or cleaned == ".." or cleaned.startswith("../"):
        raise FileNotFoundError(f"invalid path: {name!r}")
    return cleaned


def join_path(directory: str, name: str) -> str:
    """Join two relative paths, keeping "." out of the result."""
    if directory == ".":
        return name
    if name == ".":
        return directory
    return f"{directory}/{name}"


class DirFS:
    """Serves files from a directory on disk."""

    def __init__(self, root: Union[str, Path]):
        """
        Initialize the filesystem.

        Args:
            root: Directory to serve
        """
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirFS({str(self.root)!r})"

    def open(self, name: str) -> BinaryIO:
        path = self.root / clean_path(name)
        if path.is_dir():
            raise IsADirectoryError(f"is a directory: {name!r}")
        return open(path, "rb")

    def walk(self, top: str = ".") -> Iterator[str]:
        start = self.root / clean_path(top)
        if not start.is_dir():
            raise DirectoryNotFoundError(f"cannot walk {top!r}: not a directory under {self.root}")

        def onerror(err: OSError) -> None:
            raise FileSystemError(f"cannot walk {top!r}: {err}") from err

        paths: List[str] = []
        for dirpath, _, filenames in os.walk(start, onerror=onerror):
            for filename in filenames:
                full = Path(dirpath) / filename
                paths.append(full.relative_to(self.root).as_posix())

        yield from sorted(paths)


class MemoryFile(io.BytesIO):
    """In-memory file carrying the name it was opened under."""

    def __init__(self, name: str, data: bytes):
        super().__init__(data)
        self.name = name


class MemoryFS:
    """Serves files from an in-memory mapping of path to content."""

    def __init__(self, files: Mapping[str, Union[bytes, str]] = None):
        """
        Initialize the filesystem.

        Args:
            files: Mapping of slash separated path to content; str content is UTF-8 encoded
        """
        self.files: Dict[str, bytes] = {}
        for name, content in (files or {}).items():
            self[name] = content

    def __setitem__(self, name: str, content: Union[bytes, str]) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[clean_path(name)] = content

    def __contains__(self, name: str) -> bool:
        try:
            return clean_path(name) in self.files
        except FileNotFoundError:
            return False

    def __repr__(self) -> str:
        return f"MemoryFS({sorted(self.files)!r})"

    def open(self, name: str) -> BinaryIO:
        path = clean_path(name)
        if path not in self.files:
            raise FileNotFoundError(f"file does not exist: {name!r}")
        return MemoryFile(path, self.files[path])

    def walk(self, top: str = ".") -> Iterator[str]:
        start = clean_path(top)
        prefix = "" if start == "." else start + "/"
        yield from sorted(p for p in self.files if p.startswith(prefix))


def read_file(fsys: FileSystem, path: str) -> str:
    """Read a whole file from fsys and decode it as UTF-8."""
    with fsys.open(path) as f:
        return f.read().decode("utf-8")
