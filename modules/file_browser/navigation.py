"""
Directory navigation for the Owl file browser.

Plain functions compute listings and new paths; ``NavigationSession`` holds
the one piece of state, the current directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class DirectoryEntry:
    """A named child of a directory."""
    name: str
    is_directory: bool


def list_directory(path: str, show_hidden: bool = True) -> List[DirectoryEntry]:
    """
    List the immediate children of a directory.

    Args:
        path: Directory to enumerate
        show_hidden: Include names starting with a dot

    Returns:
        Entries sorted case-insensitively by name

    Raises:
        FileNotFoundError: If the directory doesn't exist
        NotADirectoryError: If path is a file
        PermissionError: If the directory can't be opened
    """
    entries = []
    # scandir never yields "." or ".."
    with os.scandir(path) as it:
        for item in it:
            if not show_hidden and item.name.startswith("."):
                continue
            try:
                is_dir = item.is_dir()
            except OSError:
                is_dir = False
            entries.append(DirectoryEntry(name=item.name, is_directory=is_dir))

    entries.sort(key=lambda e: (e.name.lower(), e.name))
    return entries


def enter_directory(path: str, name: str) -> str:
    """
    Resolve a child directory of ``path``.

    Raises:
        NotADirectoryError: If ``name`` is not a directory inside ``path``
    """
    target = os.path.join(path, name)
    if not os.path.isdir(target):
        raise NotADirectoryError(f"Not a directory: {target}")
    return target


def parent_directory(path: str) -> str:
    """Return the parent of ``path``, or ``path`` itself at the filesystem root."""
    parent = str(Path(path).parent)
    if parent == str(Path(path)):
        return path
    return parent


class NavigationSession:
    """Tracks the directory the user is looking at."""

    def __init__(self, start_dir: str, show_hidden: bool = True):
        start = os.path.abspath(start_dir)
        if not os.path.isdir(start):
            raise NotADirectoryError(f"Not a directory: {start}")
        self.current_dir = start
        self.show_hidden = show_hidden

    def list(self) -> List[DirectoryEntry]:
        """List the current directory."""
        return list_directory(self.current_dir, self.show_hidden)

    def path_of(self, name: str) -> str:
        """Full path of an entry name in the current directory."""
        return os.path.join(self.current_dir, name)

    def enter(self, name: str) -> List[DirectoryEntry]:
        """
        Move into a child directory.

        The current directory only changes once the child has been listed,
        so a failure leaves the session where it was.

        Returns:
            Listing of the new directory
        """
        target = enter_directory(self.current_dir, name)
        entries = list_directory(target, self.show_hidden)
        self.current_dir = os.path.normpath(target)
        return entries

    def up(self) -> List[DirectoryEntry]:
        """
        Move to the parent directory.

        At the root this stays put. An unreadable parent raises and leaves
        the session unchanged.

        Returns:
            Listing of the (possibly unchanged) current directory
        """
        target = parent_directory(self.current_dir)
        entries = list_directory(target, self.show_hidden)
        self.current_dir = target
        return entries
