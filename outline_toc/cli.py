"""
Creates, inserts, or refreshes a table of contents from a host outline snapshot.
`create` prints the ToC, `insert` writes it at the cursor, `update` rewrites an existing one.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, TocSettings, build_settings
from .constants import LIST_STYLES, MARKDOWN_EXTENSIONS, OUTLINE_EXTENSIONS
from .editing import TextBuffer, insert_toc, update_toc
from .exceptions import OutlineError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    normalize_filepath,
    safe_read,
    write_document,
)
from .generator import create_toc
from .models import Position, TocResult
from .snapshot import OutlineSnapshot, load_snapshot

__all__ = ["cli"]


def _warn(message: str) -> None:
    click.echo(message, err=True)


_SETTINGS_OPTIONS = (
    click.option("--min-depth", "minimum_depth", type=int, help="Minimum heading level"),
    click.option("--max-depth", "maximum_depth", type=int, help="Maximum heading level"),
    click.option("--list-style", type=click.Choice(LIST_STYLES), help="List marker style"),
    click.option(
        "--markdown/--wiki", "use_markdown", default=None, help="Markdown links instead of wiki links"
    ),
    click.option(
        "--github-compat/--no-github-compat",
        default=None,
        help="GitHub heading anchors for markdown links",
    ),
    click.option("--title", help="ToC heading title"),
)


def settings_options(command):
    """Attach the setting override options shared by every command."""
    for option in reversed(_SETTINGS_OPTIONS):
        command = option(command)
    return command


def cursor_options(required: bool):
    def decorator(command):
        command = click.option(
            "--column", type=click.IntRange(min=0), default=0, show_default=True, help="Cursor column"
        )(command)
        return click.option(
            "--line",
            type=click.IntRange(min=0),
            required=required,
            default=None if required else 0,
            show_default=not required,
            help="Zero-based cursor line",
        )(command)

    return decorator


def _resolve(raw_path: str, extensions: tuple[str, ...] = MARKDOWN_EXTENSIONS) -> Path:
    base_dir = Path.cwd().resolve()
    try:
        return normalize_filepath(raw_path, base_dir, extensions)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _load_settings(search_path: Path, overrides: dict) -> TocSettings:
    try:
        return build_settings(search_path, **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


def _load_outline(outline_path: Path) -> OutlineSnapshot:
    try:
        return load_snapshot(outline_path)
    except (IOError, OutlineError) as error:
        raise click.ClickException(str(error)) from error


def _present(result: TocResult) -> None:
    if result.error is None:
        return
    if result.error.fatal:
        raise click.ClickException(str(result.error))
    _warn(str(result.error))


def _edit_document(filepath: str, outline: str, cursor: Position, overrides: dict, action) -> None:
    document = _resolve(filepath)
    settings = _load_settings(document.parent, overrides)

    try:
        max_file_size = get_max_file_size(default=settings.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(document)
        enforce_file_size(initial_stat, max_file_size, document)
        with safe_read(document) as stream:
            text = stream.read()
    except (IOError, UnicodeDecodeError) as error:
        raise click.ClickException(str(error)) from error

    snapshot = _load_outline(_resolve(outline, OUTLINE_EXTENSIONS))

    try:
        post_read_stat = collect_file_stat(document)
        ensure_file_unchanged(initial_stat, post_read_stat, document)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    buffer = TextBuffer(text, cursor)
    result = action(snapshot, buffer, settings)
    _present(result)

    if result.is_ok:
        try:
            write_document(document, buffer.text, post_read_stat, initial_stat, warn=_warn)
        except IOError as error:
            raise click.ClickException(str(error)) from error


@click.group()
@click.version_option()
def cli():
    """Generate a table of contents from a document's heading outline."""


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option("--outline", required=True, type=click.Path(exists=True, dir_okay=False))
@cursor_options(required=False)
@settings_options
def create(filepath: str, outline: str, line: int, column: int, **overrides):
    """
    Print the ToC for headings below the cursor without touching the document.

    Settings are resolved from the document's directory.

    Examples:
        outline-toc create notes.md --outline notes.json --line 3 --markdown
    """
    document = _resolve(filepath)
    settings = _load_settings(document.parent, overrides)
    snapshot = _load_outline(_resolve(outline, OUTLINE_EXTENSIONS))

    result = create_toc(snapshot.headings, Position(line, column), settings)
    _present(result)
    if result.is_ok:
        click.echo(result.text, nl=False)


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option("--outline", required=True, type=click.Path(exists=True, dir_okay=False))
@cursor_options(required=True)
@settings_options
def insert(filepath: str, outline: str, line: int, column: int, **overrides):
    """
    Insert a ToC at the cursor.

    Examples:
        outline-toc insert notes.md --outline notes.json --line 2
    """
    _edit_document(
        filepath,
        outline,
        Position(line, column),
        overrides,
        lambda snapshot, buffer, settings: insert_toc(snapshot.headings, buffer, settings),
    )


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option("--outline", required=True, type=click.Path(exists=True, dir_okay=False))
@cursor_options(required=False)
@settings_options
def update(filepath: str, outline: str, line: int, column: int, **overrides):
    """
    Refresh the existing ToC in place.

    Examples:
        outline-toc update notes.md --outline notes.json --title Contents
    """
    _edit_document(
        filepath,
        outline,
        Position(line, column),
        overrides,
        lambda snapshot, buffer, settings: update_toc(
            snapshot.headings, snapshot.sections, buffer, settings
        ),
    )


if __name__ == "__main__":
    cli()
