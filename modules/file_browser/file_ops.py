"""
File operations for the Owl file browser.

Whole-file read/write plus create, recursive delete and rename. Errors are the
built-in OSError subclasses, so callers can tell "not found" from "already
exists" by type.
"""

import os
import tempfile
from pathlib import Path
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

DIRECTORY_SUFFIXES = ("/", "\\")


@dataclass(frozen=True)
class FileMetadata:
    """Size and modification time of a file at the moment it was read."""
    size_bytes: int
    modified_time: datetime

    @property
    def modified_iso(self) -> str:
        return self.modified_time.isoformat()


def read_file(path: str) -> Tuple[bytes, FileMetadata]:
    """
    Read a whole file.

    Args:
        path: Path to the file

    Returns:
        The contents and the file's size/modified time

    Raises:
        FileNotFoundError: If the file doesn't exist
        IsADirectoryError: If path is a directory
        PermissionError: If the file can't be read
    """
    path_obj = Path(path)
    if path_obj.is_dir():
        raise IsADirectoryError(f"Is a directory: {path}")

    with open(path_obj, "rb") as f:
        contents = f.read()
        stat = os.fstat(f.fileno())

    return contents, FileMetadata(
        size_bytes=stat.st_size,
        modified_time=datetime.fromtimestamp(stat.st_mtime),
    )


def write_file(path: str, contents: bytes, atomic: bool = False) -> None:
    """
    Overwrite a file with ``contents``, creating it if absent.

    Args:
        path: Path to the file
        contents: New contents
        atomic: Write to a temporary file in the same directory and rename it
            over the target, so readers never see a half-written file

    Raises:
        IsADirectoryError: If path is a directory
    """
    path_obj = Path(path)
    if path_obj.is_dir():
        raise IsADirectoryError(f"Cannot save content to a directory: {path}")

    if not atomic:
        path_obj.write_bytes(contents)
        return

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path_obj.name}.", dir=str(path_obj.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(contents)
            f.flush()
            os.fsync(f.fileno())
        if path_obj.exists():
            os.chmod(tmp_name, path_obj.stat().st_mode & 0o7777)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def is_directory_name(name: str) -> bool:
    """True if a user-typed name asks for a directory (trailing separator)."""
    return name.endswith(DIRECTORY_SUFFIXES)


def create_entry(directory: str, name: str) -> str:
    """
    Create an empty file, or an empty directory if ``name`` ends with a separator.

    Missing ancestors of a new directory are created too. The target itself
    is created exclusively, so losing a race to another creator fails rather
    than reusing their entry.

    Args:
        directory: Directory to create in
        name: Entry name, e.g. "notes.txt" or "drafts/"

    Returns:
        Full path of the created entry

    Raises:
        FileExistsError: If the entry already exists
    """
    make_dir = is_directory_name(name)
    target = Path(directory) / name.rstrip("/\\")

    if target.exists() or target.is_symlink():
        raise FileExistsError(f"File or directory already exists: {target}")

    if make_dir:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.mkdir()
    else:
        with open(target, "xb"):
            pass

    return str(target)


def _raise(error: OSError) -> None:
    raise error


def delete_entry(path: str) -> None:
    """
    Delete a file, or a directory and everything beneath it.

    Directories are emptied bottom-up before being removed. Symbolic links
    are removed, never followed.

    Raises:
        FileNotFoundError: If path doesn't exist
    """
    if os.path.islink(path) or not os.path.isdir(path):
        if not os.path.lexists(path):
            raise FileNotFoundError(f"File not found: {path}")
        os.unlink(path)
        return

    for root, dirs, files in os.walk(path, topdown=False, onerror=_raise):
        for name in files:
            os.unlink(os.path.join(root, name))
        for name in dirs:
            child = os.path.join(root, name)
            if os.path.islink(child):
                os.unlink(child)
            else:
                os.rmdir(child)
    os.rmdir(path)


def rename_entry(old_path: str, new_path: str) -> None:
    """
    Rename a file or directory.

    Raises:
        FileNotFoundError: If old_path doesn't exist
        FileExistsError: If new_path already exists
        PermissionError: If the rename is not allowed
        IOError: For any other OS failure, e.g. a cross-device rename
    """
    if not os.path.lexists(old_path):
        raise FileNotFoundError(f"File not found: {old_path}")
    if os.path.lexists(new_path):
        raise FileExistsError(f"Item with the new name already exists: {new_path}")

    try:
        os.rename(old_path, new_path)
    except (FileNotFoundError, FileExistsError, PermissionError, IsADirectoryError, NotADirectoryError):
        raise
    except OSError as e:
        raise IOError(f"Rename failed: {e}") from e
