"""
Virtual filesystem layer: template sources and the adapters layered on them.
"""
from .base import FileSystem, DirFS, MemoryFS, MemoryFile, read_file, clean_path
from .overlay import OverrideFS, FilterFS, SubFS, sub_fs, must_sub

__all__ = [
    'FileSystem',
    'DirFS',
    'MemoryFS',
    'MemoryFile',
    'read_file',
    'clean_path',
    'OverrideFS',
    'FilterFS',
    'SubFS',
    'sub_fs',
    'must_sub',
]
