"""
Tests for the Owl command line.
"""

import pytest
import tempfile
from pathlib import Path

import click
from click.testing import CliRunner

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import owl as owl_cli
from core.logger import AuditLogger


@pytest.fixture
def workspace():
    """A directory to browse plus a config whose audit log lives beside it."""
    with tempfile.TemporaryDirectory() as d:
        root = Path(d, "files")
        root.mkdir()
        (root / "a.txt").write_bytes(b"hello")
        (root / "b").mkdir()
        log_path = Path(d, "audit.jsonl")
        config_path = Path(d, "config.yaml")
        config_path.write_text(f"owl:\n  audit_log: {log_path}\n  start_directory: {root}\n")
        yield root, config_path, log_path


@pytest.fixture
def run(workspace):
    """Invoke the CLI with the workspace config."""
    _, config_path, _ = workspace
    runner = CliRunner()

    def invoke(*args, input=None):
        return runner.invoke(owl_cli.owl, ["--config", str(config_path), *args], input=input)

    return invoke


class TestOneShotCommands:
    """Test the non-interactive commands."""

    def test_ls(self, run, workspace):
        """ls shows the entries of the configured start directory."""
        result = run("ls")

        assert result.exit_code == 0
        assert "a.txt" in result.output
        assert "b/" in result.output

    def test_ls_missing_directory(self, run, workspace):
        """ls on a missing directory exits with an error."""
        root, _, _ = workspace

        result = run("ls", str(root / "missing"))

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_cat(self, run, workspace):
        """cat prints contents and size."""
        root, _, _ = workspace

        result = run("cat", str(root / "a.txt"))

        assert result.exit_code == 0
        assert "hello" in result.output
        assert "5 bytes" in result.output

    def test_write_from_option_and_stdin(self, run, workspace):
        """write takes --text or stdin."""
        root, _, _ = workspace

        assert run("write", str(root / "a.txt"), "--text", "from option").exit_code == 0
        assert (root / "a.txt").read_bytes() == b"from option"

        assert run("write", str(root / "new.txt"), input="from stdin").exit_code == 0
        assert (root / "new.txt").read_bytes() == b"from stdin"

    def test_write_to_directory_fails(self, run, workspace):
        """write refuses directories."""
        root, _, _ = workspace

        result = run("write", str(root / "b"), "--text", "x")

        assert result.exit_code == 1
        assert "Cannot save content to a directory." in result.output

    def test_new_file_and_directory(self, run, workspace):
        """new creates files and directories in --dir."""
        root, _, _ = workspace

        assert run("new", "notes.txt", "--dir", str(root)).exit_code == 0
        assert run("new", "docs/", "--dir", str(root)).exit_code == 0

        assert (root / "notes.txt").is_file()
        assert (root / "docs").is_dir()

    def test_new_existing_fails(self, run, workspace):
        """new on an existing name exits with an error."""
        root, _, _ = workspace

        result = run("new", "a.txt", "--dir", str(root))

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_rm_with_confirmation(self, run, workspace):
        """rm asks first and only deletes on yes."""
        root, _, _ = workspace

        declined = run("rm", str(root / "b"), input="n\n")
        assert declined.exit_code == 0
        assert (root / "b").exists()

        accepted = run("rm", str(root / "b"), input="y\n")
        assert accepted.exit_code == 0
        assert not (root / "b").exists()

    def test_rm_yes(self, run, workspace):
        """rm --yes skips the prompt."""
        root, _, _ = workspace

        result = run("rm", "--yes", str(root / "a.txt"))

        assert result.exit_code == 0
        assert not (root / "a.txt").exists()

    def test_mv(self, run, workspace):
        """mv renames within --dir and refuses to overwrite."""
        root, _, _ = workspace

        assert run("mv", "a.txt", "c.txt", "--dir", str(root)).exit_code == 0
        assert (root / "c.txt").exists()

        result = run("mv", "c.txt", "b", "--dir", str(root))
        assert result.exit_code == 1
        assert (root / "c.txt").exists()

    def test_edit(self, run, workspace, monkeypatch):
        """edit saves what the editor returns."""
        root, _, _ = workspace
        monkeypatch.setattr(click, "edit", lambda *args, **kwargs: "edited text")

        result = run("edit", str(root / "a.txt"))

        assert result.exit_code == 0
        assert (root / "a.txt").read_bytes() == b"edited text"

    def test_edit_without_changes(self, run, workspace, monkeypatch):
        """edit leaves the file alone when the editor changes nothing."""
        root, _, _ = workspace
        monkeypatch.setattr(click, "edit", lambda *args, **kwargs: None)

        result = run("edit", str(root / "a.txt"))

        assert "No changes." in result.output
        assert (root / "a.txt").read_bytes() == b"hello"


class TestBrowse:
    """Test the interactive session."""

    def test_browse_session(self, run, workspace):
        """A scripted session creates, navigates and renames."""
        root, _, _ = workspace
        script = "\n".join([
            "new notes.txt",
            "cd b",
            "new inner/",
            "up",
            "mv notes.txt renamed.txt",
            "open a.txt",
            "quit",
        ]) + "\n"

        result = run("browse", input=script)

        assert result.exit_code == 0
        assert (root / "renamed.txt").exists()
        assert (root / "b" / "inner").is_dir()
        assert "hello" in result.output
        assert "Goodbye!" in result.output

    def test_browse_by_row_number(self, run, workspace):
        """Rows can be addressed by their number in the last listing."""
        root, _, _ = workspace
        (root / "b" / "deep.txt").touch()

        result = run("browse", input="cd 2\npwd\nquit\n")

        assert result.exit_code == 0
        assert "deep.txt" in result.output

    def test_browse_unknown_command(self, run):
        """Unknown commands are reported without ending the session."""
        result = run("browse", input="frobnicate\nquit\n")

        assert result.exit_code == 0
        assert "Unknown command" in result.output

    def test_browse_ends_on_eof(self, run):
        """End of input ends the session cleanly."""
        result = run("browse", input="")

        assert result.exit_code == 0
        assert "Goodbye!" in result.output


class TestAuditAndConfig:
    """Test the audit and config commands."""

    def test_audit_lists_actions(self, run, workspace):
        """Actions taken through the CLI show up in the audit log."""
        root, _, log_path = workspace
        run("new", "x.txt", "--dir", str(root))
        run("new", "x.txt", "--dir", str(root))

        entries = AuditLogger(log_path=str(log_path)).get_recent()
        assert [e.status for e in entries[:2]] == ["failed", "executed"]

        result = run("audit", "--failed")
        assert result.exit_code == 0
        assert "failed" in result.output

    def test_audit_export(self, run, workspace):
        """audit --export prints the log as JSON."""
        root, _, _ = workspace
        run("new", "x.txt", "--dir", str(root))

        result = run("audit", "--export", "json")

        assert result.exit_code == 0
        assert '"action_type": "create"' in result.output

    def test_config_set_and_show(self, run, workspace):
        """config set persists a value that config show reports."""
        _, config_path, _ = workspace

        assert run("config", "set", "confirm_delete", "false").exit_code == 0
        assert "confirm_delete: False" in run("config", "show").output
        assert "audit_log" in config_path.read_text()

    def test_config_set_unknown(self, run):
        """Unknown settings are rejected."""
        result = run("config", "set", "colour", "purple")

        assert result.exit_code == 1
        assert "Unknown setting" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
