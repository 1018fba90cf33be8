"""
File browser module for Owl.

Directory navigation plus whole-file read/write, create, delete and rename.
"""

from .navigation import DirectoryEntry, NavigationSession, list_directory, enter_directory, parent_directory
from .file_ops import FileMetadata, read_file, write_file, create_entry, delete_entry, rename_entry
from .browser import FileBrowser, ActionResult, OpenedFile

__all__ = [
    'DirectoryEntry',
    'NavigationSession',
    'list_directory',
    'enter_directory',
    'parent_directory',
    'FileMetadata',
    'read_file',
    'write_file',
    'create_entry',
    'delete_entry',
    'rename_entry',
    'FileBrowser',
    'ActionResult',
    'OpenedFile',
]
