"""
File browser facade for Owl.

Binds the navigation session and file operations to entry names in the
current directory, records every action in the audit log, and reports
outcomes as ``ActionResult`` values instead of exceptions.
"""

import os
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from core.config import BrowserConfig
from core.logger import AuditLogger, ActionType, ActionStatus

from .file_ops import (
    FileMetadata,
    create_entry,
    delete_entry,
    is_directory_name,
    read_file,
    rename_entry,
    write_file,
)
from .navigation import DirectoryEntry, NavigationSession


@dataclass
class ActionResult:
    """Result of a browser action."""
    success: bool
    status: str
    message: Optional[str] = None
    data: Optional[Any] = None


@dataclass
class OpenedFile:
    """A file read for viewing or editing."""
    path: str
    name: str
    contents: bytes
    metadata: FileMetadata

    @property
    def status_line(self) -> str:
        return (
            f"Current File: {self.name} | Size: {self.metadata.size_bytes} bytes"
            f" | Modified: {self.metadata.modified_iso}"
        )


def _error_message(error: Exception) -> str:
    """OS error text as the user should see it."""
    if isinstance(error, OSError) and error.strerror and error.filename:
        return f"{error.strerror}: {error.filename}"
    return str(error)


class FileBrowser:
    """Browser operations against a session's current directory."""

    def __init__(
        self,
        session: NavigationSession,
        logger: AuditLogger,
        config: Optional[BrowserConfig] = None
    ):
        """
        Initialize FileBrowser.

        Args:
            session: Navigation session holding the current directory
            logger: Audit logger instance
            config: Settings; defaults are used when omitted
        """
        self.session = session
        self.logger = logger
        self.atomic_writes = config.atomic_writes if config else False

    @classmethod
    def from_config(cls, config: BrowserConfig, start_dir: Optional[str] = None) -> "FileBrowser":
        """Build a browser, session and logger from settings."""
        session = NavigationSession(start_dir or config.start_directory, show_hidden=config.show_hidden)
        return cls(session, AuditLogger(log_path=config.audit_log), config)

    @property
    def current_dir(self) -> str:
        return self.session.current_dir

    def _ok(self, action_type: ActionType, description: str, target: str,
            message: str, data: Any = None, metadata: Optional[dict] = None) -> ActionResult:
        self.logger.log_action(
            action_type=action_type,
            description=description,
            target=target,
            status=ActionStatus.EXECUTED,
            result=message,
            metadata=metadata
        )
        return ActionResult(success=True, status=ActionStatus.EXECUTED.value, message=message, data=data)

    def _fail(self, action_type: ActionType, description: str, target: Optional[str],
              message: str) -> ActionResult:
        self.logger.log_action(
            action_type=action_type,
            description=f"Failed: {description}",
            target=target,
            status=ActionStatus.FAILED,
            result=message
        )
        return ActionResult(success=False, status=ActionStatus.FAILED.value, message=message)

    def listing(self) -> ActionResult:
        """List the current directory; ``data`` holds the entries."""
        target = self.current_dir
        try:
            entries = self.session.list()
        except OSError as e:
            return self._fail(ActionType.LIST, f"List {target}", target,
                              f"Cannot open directory: {_error_message(e)}")
        return self._ok(ActionType.LIST, f"Listed {target}", target,
                        f"{len(entries)} entries", data=entries)

    def _navigate(self, move: Callable[[], List[DirectoryEntry]], description: str) -> ActionResult:
        before = self.current_dir
        try:
            entries = move()
        except OSError as e:
            return self._fail(ActionType.NAVIGATE, description, before, _error_message(e))
        return self._ok(ActionType.NAVIGATE, description, self.current_dir,
                        self.current_dir, data=entries, metadata={"from": before})

    def enter(self, name: str) -> ActionResult:
        """Move into a child directory."""
        return self._navigate(lambda: self.session.enter(name), f"Enter {name}")

    def up(self) -> ActionResult:
        """Move to the parent directory."""
        return self._navigate(self.session.up, "Go up")

    def open(self, name: str) -> ActionResult:
        """
        Open an entry the way activating a row does.

        Directories are entered; files are read, with ``data`` holding an
        ``OpenedFile``.
        """
        if os.path.isdir(self.session.path_of(name)):
            return self.enter(name)
        return self.read(name)

    def read(self, name: str) -> ActionResult:
        """Read a file in the current directory."""
        path = self.session.path_of(name)
        try:
            contents, metadata = read_file(path)
        except OSError as e:
            return self._fail(ActionType.READ, f"Read {name}", path, _error_message(e))

        opened = OpenedFile(path=path, name=name, contents=contents, metadata=metadata)
        return self._ok(ActionType.READ, f"Read {name}", path, opened.status_line,
                        data=opened, metadata={"size": metadata.size_bytes})

    def save(self, name: str, contents: bytes) -> ActionResult:
        """Overwrite a file in the current directory."""
        if not name:
            return self._fail(ActionType.WRITE, "Save", None, "Please select a file to save.")

        path = self.session.path_of(name)
        if os.path.isdir(path):
            return self._fail(ActionType.WRITE, f"Save {name}", path, "Cannot save content to a directory.")
        try:
            write_file(path, contents, atomic=self.atomic_writes)
        except OSError as e:
            return self._fail(ActionType.WRITE, f"Save {name}", path, _error_message(e))
        return self._ok(ActionType.WRITE, f"Saved {name}", path, "File saved (updated).",
                        metadata={"size": len(contents)})

    def create(self, name: str) -> ActionResult:
        """Create an empty file, or a directory when the name ends with a separator."""
        if not name:
            return self._fail(ActionType.CREATE, "Create", None, "Please enter a name.")

        path = self.session.path_of(name.rstrip("/\\"))
        kind = "Directory" if is_directory_name(name) else "File"
        try:
            path = create_entry(self.current_dir, name)
        except FileExistsError:
            return self._fail(ActionType.CREATE, f"Create {name}", path, "File or directory already exists.")
        except OSError as e:
            return self._fail(ActionType.CREATE, f"Create {name}", path, _error_message(e))
        return self._ok(ActionType.CREATE, f"Created {name}", path, f"{kind} created.")

    def delete(self, name: str, confirm: Optional[Callable[[str], bool]] = None) -> ActionResult:
        """
        Delete an entry and everything beneath it.

        Args:
            name: Entry in the current directory
            confirm: Asked with the entry name; deletion only proceeds on True
        """
        if not name:
            return self._fail(ActionType.DELETE, "Delete", None, "Please select an item.")

        path = self.session.path_of(name)
        if confirm is not None and not confirm(name):
            self.logger.log_action(
                action_type=ActionType.DELETE,
                description=f"Cancelled delete of {name}",
                target=path,
                status=ActionStatus.CANCELLED
            )
            return ActionResult(success=False, status=ActionStatus.CANCELLED.value, message="Delete cancelled.")

        try:
            delete_entry(path)
        except OSError as e:
            return self._fail(ActionType.DELETE, f"Delete {name}", path, _error_message(e))
        return self._ok(ActionType.DELETE, f"Deleted {name}", path, "Item deleted.")

    def rename(self, old_name: str, new_name: str) -> ActionResult:
        """Rename an entry within the current directory."""
        if not new_name:
            return self._fail(ActionType.RENAME, "Rename", None, "Please enter new name.")
        if not old_name:
            return self._fail(ActionType.RENAME, "Rename", None, "Please select an item.")

        old_path = self.session.path_of(old_name)
        new_path = self.session.path_of(new_name)
        try:
            rename_entry(old_path, new_path)
        except FileExistsError:
            return self._fail(ActionType.RENAME, f"Rename {old_name}", old_path,
                              "Item with the new name already exists.")
        except OSError as e:
            message = _error_message(e)
            if not message.startswith("Rename failed:"):
                message = f"Rename failed: {message}"
            return self._fail(ActionType.RENAME, f"Rename {old_name}", old_path, message)
        return self._ok(ActionType.RENAME, f"Renamed {old_name} to {new_name}", new_path,
                        "Item renamed.", metadata={"from": old_path})
