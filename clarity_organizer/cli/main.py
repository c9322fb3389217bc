# clarity_organizer/cli/main.py

import logging
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from tqdm import tqdm

from clarity_organizer.core.app_state import AppState
from clarity_organizer.core.config_manager import ConfigStore, Configuration
from clarity_organizer.core.errors import ConfigIOError, OrganizerError
from clarity_organizer.utils.logger import setup_logging

VERSION = "0.1.0"

# A single Console object handles all rich-formatted output.
console = Console()
logger = logging.getLogger(__name__)


def _fail(ctx: click.Context, error: Exception):
    """Reports an error to the user and ends the command with status 1."""
    console.print(f"[bold red]❌ {escape(str(error))}[/bold red]")
    logger.error(f"Command '{ctx.info_name}' failed: {error}")
    ctx.exit(1)


def _get_state(ctx: click.Context) -> AppState:
    """Loads the application state on first use."""
    obj = ctx.find_root().obj
    if obj["state"] is None:
        try:
            obj["state"] = AppState.startup(obj["store"])
        except ConfigIOError as e:
            # Without a configuration the organizer cannot do anything.
            console.print("[bold red]Could not load the configuration.[/bold red]")
            _fail(ctx, e)
    return obj["state"]


def _preview_table(preview) -> Table:
    table = Table(title="Organization Preview", style="cyan", title_style="bold magenta")
    table.add_column("Category", style="green")
    table.add_column("Files", style="yellow", justify="right")
    for category, count in preview:
        table.add_row(escape(category), str(count))
    return table


# --- Main Command Group ---
@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version=VERSION, prog_name="Clarity File Organizer")
@click.option('--config-dir', envvar='CLARITY_CONFIG_DIR',
              type=click.Path(file_okay=False, dir_okay=True, path_type=Path), default=None,
              help="Directory holding config.json. Defaults to the per-user config directory.")
@click.option('-v', '--verbose', is_flag=True, help="Show debug messages on the console.")
@click.pass_context
def clarity(ctx: click.Context, config_dir: Path | None, verbose: bool):
    """
    🗂️ Clarity File Organizer - sorts the files of a folder into category folders.

    Files are sorted by extension into one sub-folder per configured category.
    Use `preview` to see what would happen and `organize` to do it.
    """
    store = ConfigStore(config_dir)
    setup_logging(store.config_dir / "logs", verbose=verbose)
    ctx.obj = {"store": store, "state": None}


# --- Organization Commands ---
@clarity.command()
@click.argument('path', type=click.Path(path_type=Path))
@click.pass_context
def preview(ctx: click.Context, path: Path):
    """🔍 Shows how many files of each category PATH contains."""
    state = _get_state(ctx)
    try:
        result = state.preview_organization(str(path))
    except OrganizerError as e:
        _fail(ctx, e)
        return

    if not result:
        console.print("[yellow]No files with a known category were found.[/yellow]")
        return
    console.print(_preview_table(result))
    console.print(f"Total: [bold]{sum(count for _, count in result)}[/bold] files.")


@clarity.command()
@click.argument('path', type=click.Path(path_type=Path))
@click.option('-y', '--yes', is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def organize(ctx: click.Context, path: Path, yes: bool):
    """🧹 Moves the files of PATH into one folder per category.

    Every configured category gets a folder, even when no file moves into it.
    """
    state = _get_state(ctx)
    console.print(f"[bold cyan]🚀 Organizing[/bold cyan] [bright_magenta]{escape(str(path))}[/bright_magenta]")

    try:
        result = state.preview_organization(str(path))
    except OrganizerError as e:
        _fail(ctx, e)
        return

    if not result:
        # No file moves, so only the empty category folders get created.
        try:
            state.organize_files(str(path))
        except OrganizerError as e:
            _fail(ctx, e)
            return
        console.print("[bold green]✅ No files to move. Category folders are in place.[/bold green]")
        return

    console.print(_preview_table(result))
    total = sum(count for _, count in result)
    if not yes:
        click.confirm(f"\nReady to move {total} files. Do you want to proceed?", abort=True)

    try:
        with tqdm(total=total, unit="file", desc="Organizing") as bar:
            state.organize_files(str(path), on_move=lambda source, destination: bar.update(1))
    except OrganizerError as e:
        console.print("[yellow]Files moved before the error stay where they are. "
                      "Run `undo` to move them back.[/yellow]")
        _fail(ctx, e)
        return

    console.print("[bold green]🎉 Organization complete![/bold green]")


@clarity.command()
@click.option('-y', '--yes', is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def undo(ctx: click.Context, yes: bool):
    """⏪ Moves the files of the last organize back to where they were."""
    state = _get_state(ctx)
    pending = len(state.journal.entries())
    if not pending:
        console.print("[yellow]No previous operation found to undo.[/yellow]")
        return

    if not yes:
        click.confirm(f"This will move {pending} files back to their original locations. Are you sure?",
                      abort=True)

    with tqdm(total=pending, unit="file", desc="Undoing") as bar:
        report = state.undo_last_operation(lambda done, total, message: bar.update(1))

    console.print(f"[bold green]✅ Reverted {report.reverted} files.[/bold green]")
    for skipped in report.skipped:
        console.print(f"[yellow]Skipped:[/yellow] {escape(skipped)}")


# --- Configuration Commands ---
@clarity.group()
def config():
    """⚙️ View and edit categories and protected paths."""
    pass


def _edit_config(ctx: click.Context, edit: Callable[[Configuration], object]):
    """Applies `edit` to a draft of the current configuration and saves it."""
    state = _get_state(ctx)
    draft = state.get_current_config()
    try:
        edit(draft)
        state.save_config(draft)
    except KeyError as e:
        _fail(ctx, ValueError(f"Unknown category: {e.args[0]}"))
    except (ValueError, OrganizerError) as e:
        _fail(ctx, e)


@config.command(name="show")
@click.pass_context
def show_config(ctx: click.Context):
    """📚 Prints the current configuration."""
    current = _get_state(ctx).get_current_config()

    table = Table(title="Categories", style="cyan", title_style="bold magenta")
    table.add_column("Category", style="green")
    table.add_column("Extensions", style="yellow")
    for name, extensions in current.categories.items():
        table.add_row(escape(name), escape(", ".join(extensions)) or "-")
    console.print(table)

    for title, paths in (("Safe paths", current.safe_paths), ("Protected paths", current.unsafe_paths)):
        console.print(f"[bold]{title}:[/bold]")
        if not paths:
            console.print("  (none)")
        for p in paths:
            console.print(f"  • {escape(p)}")


@config.command(name="path")
@click.pass_context
def config_path(ctx: click.Context):
    """Prints the location of config.json."""
    click.echo(str(ctx.find_root().obj["store"].config_path))


@config.command(name="add-category")
@click.argument('name', required=False)
@click.pass_context
def add_category(ctx: click.Context, name: str | None):
    """Adds an empty category (auto-named when NAME is omitted)."""
    added = []
    _edit_config(ctx, lambda draft: added.append(draft.add_category(name)))
    console.print(f"[green]Added category[/green] '{escape(added[0])}'.")


@config.command(name="remove-category")
@click.argument('name')
@click.pass_context
def remove_category(ctx: click.Context, name: str):
    """Removes category NAME."""
    _edit_config(ctx, lambda draft: draft.remove_category(name))
    console.print(f"[green]Removed category[/green] '{escape(name)}'.")


@config.command(name="rename-category")
@click.argument('old_name')
@click.argument('new_name')
@click.pass_context
def rename_category(ctx: click.Context, old_name: str, new_name: str):
    """Renames category OLD_NAME to NEW_NAME, keeping its extensions."""
    _edit_config(ctx, lambda draft: draft.rename_category(old_name, new_name))
    console.print(f"[green]Renamed[/green] '{escape(old_name)}' to '{escape(new_name.strip())}'.")


@config.command(name="set-extensions")
@click.argument('name')
@click.argument('extensions')
@click.pass_context
def set_extensions(ctx: click.Context, name: str, extensions: str):
    """Sets the extensions of NAME from a comma-separated list, e.g. "jpg, png"."""
    _edit_config(ctx, lambda draft: draft.set_extensions(name, extensions))
    saved = _get_state(ctx).get_current_config().categories[name]
    console.print(f"[green]{escape(name)}:[/green] {escape(', '.join(saved)) or '(no extensions)'}")


@config.command(name="add-safe-path")
@click.argument('paths', nargs=-1, required=True)
@click.pass_context
def add_safe_path(ctx: click.Context, paths):
    """Adds one or more safe paths."""
    _edit_config(ctx, lambda draft: draft.add_safe_paths(*paths))
    console.print(f"[green]Added {len(paths)} safe path(s).[/green]")


@config.command(name="remove-safe-path")
@click.argument('path')
@click.pass_context
def remove_safe_path(ctx: click.Context, path: str):
    """Removes a safe path."""
    _edit_config(ctx, lambda draft: draft.remove_safe_path(path))
    console.print(f"[green]Removed safe path[/green] {escape(path)}")


@config.command(name="add-unsafe-path")
@click.argument('path')
@click.pass_context
def add_unsafe_path(ctx: click.Context, path: str):
    """Protects PATH (and every path starting or ending with it)."""
    _edit_config(ctx, lambda draft: draft.add_unsafe_path(path))
    console.print(f"[green]Protected[/green] {escape(path)}")


@config.command(name="remove-unsafe-path")
@click.argument('path')
@click.pass_context
def remove_unsafe_path(ctx: click.Context, path: str):
    """Stops protecting PATH."""
    _edit_config(ctx, lambda draft: draft.remove_unsafe_path(path))
    console.print(f"[green]No longer protected:[/green] {escape(path)}")


@config.command(name="reset")
@click.option('-y', '--yes', is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def reset_config(ctx: click.Context, yes: bool):
    """Restores the built-in default configuration."""
    if not yes:
        click.confirm("Replace the current configuration with the defaults?", abort=True)
    state = _get_state(ctx)
    try:
        state.save_config(Configuration.default())
    except OrganizerError as e:
        _fail(ctx, e)
    console.print("[green]Configuration reset to defaults.[/green]")
