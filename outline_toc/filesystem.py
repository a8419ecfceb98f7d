"""Filesystem helpers for outline-toc."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "OUTLINE_TOC_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the largest document size, in bytes, the commands will edit.

    `OUTLINE_TOC_MAX_FILE_SIZE` takes precedence over `default`, which usually
    comes from the `max_file_size` setting.

    Args:
        default: Limit used when the environment variable is unset.

    Returns:
        int: Maximum document size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        limit = get_max_file_size(default=settings.max_file_size)
    """
    raw_limit = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_limit is None:
        return default

    limit = int(raw_limit) if raw_limit.strip().isdecimal() else 0
    if limit <= 0:
        raise ValueError(
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {raw_limit} (expected positive integer)"
        )
    return limit


def _is_symlink(candidate: Path) -> bool:
    try:
        return candidate.is_symlink()
    except OSError:
        return False


def contains_symlink(path: Path) -> bool:
    """Tell whether `path` or one of its parent directories is a symlink."""
    return any(_is_symlink(candidate) for candidate in (path, *path.parents))


def normalize_filepath(
    raw_path: str, base_dir: Path, extensions: Sequence[str] = MARKDOWN_EXTENSIONS
) -> Path:
    """Resolve and validate a filepath under a base directory.

    Args:
        raw_path: User-supplied path (absolute or relative).
        base_dir: Working directory that constrains allowed paths.
        extensions: Accepted lowercase file suffixes.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, is
            outside `base_dir`, has an unsupported extension, or traverses a
            symlink.

    Examples:
        normalize_filepath("notes/todo.md", Path.cwd())
        normalize_filepath("notes/todo.json", Path.cwd(), extensions=(".json",))
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    if resolved.suffix.lower() not in extensions:
        error_message = f"{resolved} has an unsupported extension.\n"
        error_message += f"Supported extensions are: {', '.join(extensions)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat a document without following symlinks.

    The result doubles as the fingerprint used to detect concurrent edits.

    Args:
        filepath: Document or outline path.

    Returns:
        os.stat_result: Stat of the file itself.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        file_stat = filepath.lstat()
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if stat.S_ISLNK(file_stat.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(file_stat.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    return file_stat


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def _fingerprint(stat_result: os.stat_result) -> tuple:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Compare two stats of the same document.

    The document is read, the outline is loaded and the ToC is rendered
    between the two stats; a different inode, device, size or modification
    time means another writer touched the file meanwhile.

    Raises:
        IOError: If the fingerprints differ.
    """
    if _fingerprint(expected_stat) == _fingerprint(current_stat):
        return
    raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def safe_read(filepath: Path) -> TextIO:
    """Open a document or outline as UTF-8 text.

    Line endings are passed through untranslated so a rewritten document keeps
    its `\\r\\n` or `\\n` convention.

    Args:
        filepath: File to open.

    Returns:
        TextIO: Open text stream; the caller closes it.

    Raises:
        IOError: If the file cannot be opened.

    Examples:
        with safe_read(Path("notes.md")) as stream:
            text = stream.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error



def write_document(
    filepath: Path,
    text: str,
    expected_stat: os.stat_result,
    initial_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Atomically replace a document's content.

    Writes to a temporary file in the same directory, copies permissions and
    (when possible) ownership, then swaps it into place. The original access
    time is restored; the modification time reflects the write.

    Args:
        filepath: Document to overwrite.
        text: New document content.
        expected_stat: Stat captured after reading, used to detect races.
        initial_stat: Stat captured before reading, used to keep the access time.
        warn: Optional callback for non-fatal warnings.

    Raises:
        IOError: If the file changed since `expected_stat` was captured or
            cannot be replaced.
    """
    current_stat = collect_file_stat(filepath)
    ensure_file_unchanged(expected_stat, current_stat, filepath)

    permissions = stat.S_IMODE(expected_stat.st_mode)
    uid = getattr(expected_stat, "st_uid", None)
    gid = getattr(expected_stat, "st_gid", None)
    atime_ns = initial_stat.st_atime_ns

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, permissions)

            if uid is not None and gid is not None and hasattr(os, "chown"):
                try:
                    os.chown(tmp_file.name, uid, gid)
                except PermissionError:
                    if warn is not None:
                        warn(
                            f"Warning: Could not preserve file ownership for {filepath.name} "
                            "(requires elevated privileges)"
                        )

        os.replace(temp_path, filepath)

        current_stat = filepath.stat()
        os.utime(filepath, ns=(atime_ns, current_stat.st_mtime_ns))
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
