#!/usr/bin/env python3
"""
Owl - File Browser

Main entry point for the Owl CLI application.
"""

import os
import shlex
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from core import BrowserConfig, AuditLogger
from modules.file_browser import FileBrowser, ActionResult, DirectoryEntry, OpenedFile


console = Console()

BROWSE_HELP = """\
[bold]ls[/bold]                 list the current directory
[bold]cd[/bold] NAME|N          enter a directory (by name or row number)
[bold]up[/bold]                 go to the parent directory
[bold]open[/bold] NAME|N        enter a directory or show a file
[bold]edit[/bold] NAME|N        edit a file in $EDITOR and save it
[bold]new[/bold] NAME           create a file, or a directory if NAME ends with /
[bold]rm[/bold] NAME|N          delete a file or directory (recursive)
[bold]mv[/bold] OLD|N NEW       rename an entry
[bold]pwd[/bold]                show the current directory
[bold]help[/bold]               show this help
[bold]quit[/bold]               leave the browser"""


def get_config(ctx: click.Context) -> BrowserConfig:
    """Get the configuration loaded by the command group."""
    return ctx.obj["config"]


def get_browser(ctx: click.Context, directory: Optional[str] = None) -> FileBrowser:
    """Get a browser rooted at ``directory`` (or the configured start directory)."""
    config = get_config(ctx)
    try:
        return FileBrowser.from_config(config, start_dir=directory)
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(1)


def split_path(path: str):
    """Split a path into (absolute parent directory, entry name)."""
    absolute = os.path.abspath(path)
    return os.path.dirname(absolute), os.path.basename(absolute)


def report(result: ActionResult) -> bool:
    """Print the outcome of an action; returns its success flag."""
    if result.success:
        console.print(f"[green]{escape(result.message or 'Done.')}[/green]")
    elif result.status == "cancelled":
        console.print(f"[yellow]{escape(result.message or 'Cancelled.')}[/yellow]")
    else:
        console.print(f"[red]Error:[/red] {escape(result.message or 'Unknown error')}")
    return result.success


def render_listing(directory: str, entries: List[DirectoryEntry]) -> None:
    """Show a directory listing as a numbered table."""
    table = Table(title=escape(directory), title_justify="left")
    table.add_column("#", style="dim", justify="right")
    table.add_column("")
    table.add_column("Name")

    for i, entry in enumerate(entries, start=1):
        marker = "📁" if entry.is_directory else "📄"
        name = f"[bold blue]{escape(entry.name)}/[/bold blue]" if entry.is_directory else escape(entry.name)
        table.add_row(str(i), marker, name)

    if not entries:
        console.print(f"[dim]{escape(directory)} is empty.[/dim]")
        return
    console.print(table)


def render_file(opened: OpenedFile, encoding: str) -> None:
    """Show a file's contents and its status line."""
    text = opened.contents.decode(encoding, errors="replace")
    console.print(Panel(escape(text), title=escape(opened.name), title_align="left"))
    console.print(f"[dim]{escape(opened.status_line)}[/dim]")


def edit_file(browser: FileBrowser, name: str, encoding: str) -> None:
    """Open a file in the user's editor and save it back if it changed."""
    result = browser.read(name)
    if not result.success:
        report(result)
        return

    opened = result.data
    text = opened.contents.decode(encoding, errors="replace")
    edited = click.edit(text, extension=os.path.splitext(name)[1] or ".txt", require_save=True)
    if edited is None:
        console.print("[dim]No changes.[/dim]")
        return

    if report(browser.save(name, edited.encode(encoding))):
        saved = browser.read(name)
        if saved.success:
            console.print(f"[dim]{escape(saved.data.status_line)}[/dim]")


def confirm_delete(name: str) -> bool:
    """Ask the user before an irreversible delete."""
    return click.confirm(f'Confirm deletion of "{name}"? This cannot be undone.', default=False)


@click.group()
@click.version_option(version="0.1.0", prog_name="Owl")
@click.option("--config", "config_path", default="config.yaml", show_default=True,
              type=click.Path(dir_okay=False), help="Path to the YAML configuration file.")
@click.pass_context
def owl(ctx, config_path):
    """
    Owl - A Small File Browser

    Navigate directories, view and edit files, and create, rename
    or delete entries.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = BrowserConfig(config_path=config_path)


@owl.command("ls")
@click.argument("directory", required=False, type=click.Path())
@click.pass_context
def ls(ctx, directory):
    """List a directory."""
    browser = get_browser(ctx, directory)
    result = browser.listing()
    if not result.success:
        report(result)
        ctx.exit(1)
    render_listing(browser.current_dir, result.data)


@owl.command()
@click.argument("path", type=click.Path())
@click.pass_context
def cat(ctx, path):
    """Show a file with its size and modification time."""
    directory, name = split_path(path)
    browser = get_browser(ctx, directory)
    result = browser.read(name)
    if not result.success:
        report(result)
        ctx.exit(1)
    render_file(result.data, get_config(ctx).encoding)


@owl.command()
@click.argument("path", type=click.Path())
@click.option("--text", default=None, help="New contents; read from stdin when omitted.")
@click.pass_context
def write(ctx, path, text):
    """Overwrite a file (created if missing)."""
    config = get_config(ctx)
    if text is None:
        contents = click.get_binary_stream("stdin").read()
    else:
        contents = text.encode(config.encoding)

    directory, name = split_path(path)
    browser = get_browser(ctx, directory)
    if not report(browser.save(name, contents)):
        ctx.exit(1)


@owl.command()
@click.argument("path", type=click.Path())
@click.pass_context
def edit(ctx, path):
    """Edit a file in $EDITOR and save the result."""
    directory, name = split_path(path)
    browser = get_browser(ctx, directory)
    edit_file(browser, name, get_config(ctx).encoding)


@owl.command()
@click.argument("name")
@click.option("--dir", "directory", default=None, type=click.Path(), help="Directory to create in.")
@click.pass_context
def new(ctx, name, directory):
    """Create an empty file, or a directory if NAME ends with /."""
    browser = get_browser(ctx, directory)
    if not report(browser.create(name)):
        ctx.exit(1)


@owl.command()
@click.argument("path", type=click.Path())
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation.")
@click.pass_context
def rm(ctx, path, yes):
    """Delete a file or a directory with everything in it."""
    config = get_config(ctx)
    directory, name = split_path(path)
    browser = get_browser(ctx, directory)
    confirm = None if yes or not config.confirm_delete else confirm_delete
    result = browser.delete(name, confirm=confirm)
    if not report(result) and result.status != "cancelled":
        ctx.exit(1)


@owl.command()
@click.argument("old")
@click.argument("new_name", metavar="NEW")
@click.option("--dir", "directory", default=None, type=click.Path(), help="Directory holding the entry.")
@click.pass_context
def mv(ctx, old, new_name, directory):
    """Rename an entry."""
    browser = get_browser(ctx, directory)
    if not report(browser.rename(old, new_name)):
        ctx.exit(1)


def resolve_name(arg: str, entries: List[DirectoryEntry]) -> str:
    """Map a browse argument to an entry name: exact name first, then row number."""
    if any(entry.name == arg for entry in entries):
        return arg
    if arg.isdigit() and 1 <= int(arg) <= len(entries):
        return entries[int(arg) - 1].name
    return arg


@owl.command()
@click.argument("directory", required=False, type=click.Path())
@click.pass_context
def browse(ctx, directory):
    """Start an interactive browsing session."""
    config = get_config(ctx)
    browser = get_browser(ctx, directory)

    console.print(Panel.fit(
        "[bold blue]Owl File Browser[/bold blue]\n"
        "[dim]Type 'help' for commands, 'quit' to leave[/dim]",
        title="🦉 Browse"
    ))

    entries: List[DirectoryEntry] = []

    def refresh() -> None:
        nonlocal entries
        result = browser.listing()
        if result.success:
            entries = result.data
            render_listing(browser.current_dir, entries)
        else:
            entries = []
            report(result)

    refresh()

    while True:
        try:
            line = console.input(f"\n[bold green]{escape(browser.current_dir)}>[/bold green] ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\n[dim]Goodbye![/dim]")
            break

        if not line:
            continue

        try:
            words = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            continue

        command, args = words[0].lower(), words[1:]

        if command in ("quit", "exit", "q"):
            console.print("[dim]Goodbye![/dim]")
            break
        elif command == "help":
            console.print(BROWSE_HELP)
        elif command == "pwd":
            console.print(escape(browser.current_dir))
        elif command == "ls":
            refresh()
        elif command == "up":
            if report(browser.up()):
                refresh()
        elif command in ("cd", "open") and args:
            name = resolve_name(args[0], entries)
            result = browser.enter(name) if command == "cd" else browser.open(name)
            if not result.success:
                report(result)
            elif isinstance(result.data, OpenedFile):
                render_file(result.data, config.encoding)
            else:
                refresh()
        elif command == "edit" and args:
            edit_file(browser, resolve_name(args[0], entries), config.encoding)
        elif command == "new" and args:
            if report(browser.create(args[0])):
                refresh()
        elif command == "rm" and args:
            confirm = confirm_delete if config.confirm_delete else None
            if report(browser.delete(resolve_name(args[0], entries), confirm=confirm)):
                refresh()
        elif command == "mv" and len(args) == 2:
            if report(browser.rename(resolve_name(args[0], entries), args[1])):
                refresh()
        else:
            console.print(f"[red]Unknown command:[/red] {escape(line)} [dim](try 'help')[/dim]")


@owl.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.option("--failed", is_flag=True, help="Only show failed actions.")
@click.option("--export", "export_format", type=click.Choice(["json", "csv"]), default=None,
              help="Print the whole log in this format instead of a table.")
@click.pass_context
def audit(ctx, limit, failed, export_format):
    """View the audit log."""
    logger = AuditLogger(log_path=get_config(ctx).audit_log)

    if export_format:
        click.echo(logger.export(format=export_format))
        return

    entries = logger.get_failures(limit=limit) if failed else logger.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Action")
    table.add_column("Status")
    table.add_column("Result")

    for entry in entries:
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "executed":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"
        elif entry.status == "cancelled":
            status_str = f"[yellow]{entry.status}[/yellow]"

        description = entry.action_description
        if len(description) > 50:
            description = description[:50] + "..."

        table.add_row(time_str, escape(description), status_str, escape(entry.result or ""))

    console.print(table)


@owl.group("config")
def config_group():
    """Show or change settings."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx):
    """Show the current settings."""
    config = get_config(ctx)
    console.print(f"\n[bold]Settings[/bold] [dim]({escape(str(config.config_path))})[/dim]")
    for key, value in config.settings.items():
        console.print(f"  {key}: {escape(repr(value))}")


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key, value):
    """Change a setting and save it."""
    config = get_config(ctx)
    try:
        config.set(key, value)
    except KeyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e.args[0]))}")
        ctx.exit(1)
    config.save()
    console.print(f"[green]Saved:[/green] {key} = {escape(repr(config.settings[key]))}")


if __name__ == "__main__":
    owl()
