"""Settings loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_TITLE,
    LIST_STYLE_ALIASES,
    LIST_STYLES,
    MAX_HEADING_LEVEL,
    MIN_HEADING_LEVEL,
)


@dataclass
class TocSettings:
    """Settings for generating tables of contents.

    Attributes:
        minimum_depth: Smallest heading level to include.
        maximum_depth: Largest heading level to include.
        list_style: ``"bullet"`` or ``"numbered"`` (aliases ``"number"``,
            ``"ordered"`` and ``"dash"`` are accepted).
        use_markdown: Render ``[text](#anchor)`` links instead of
            ``[[#anchor|text]]`` wiki links.
        github_compat: With `use_markdown`, build anchors with GitHub's
            heading slug rules instead of URI encoding.
        title: Title of the ToC heading; empty means ``"Table of Contents"``.
        max_file_size: Maximum document size in bytes that will be processed.

    Examples:
        TocSettings(minimum_depth=1, use_markdown=True, github_compat=True)
    """

    # Heading levels
    minimum_depth: int = 2
    maximum_depth: int = 6

    # Formatting
    list_style: str = "bullet"
    use_markdown: bool = False
    github_compat: bool = False
    title: str = ""

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    @property
    def resolved_title(self) -> str:
        return self.title or DEFAULT_TITLE


class ConfigError(ValueError):
    """Exception raised when settings values are invalid.

    Examples:
        raise ConfigError("`maximum_depth` must be >= `minimum_depth`")
    """


def load_settings(search_path: Path) -> TocSettings:
    """Load settings from the nearest configuration file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.outline-toc]`` table from `pyproject.toml` and the
    ``[outline-toc]`` or ``[tool.outline-toc]`` table from `.outline-toc.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for the lookup.

    Returns:
        TocSettings: Loaded settings with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_settings(Path("notes"))
    """
    current = search_path.resolve()

    while True:
        pyproject_settings = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "outline-toc")]
        )
        if pyproject_settings is not None:
            return normalize_settings(pyproject_settings)

        dotfile_settings = _load_from_file(
            current / ".outline-toc.toml",
            table_paths=[("outline-toc",), ("tool", "outline-toc")],
        )
        if dotfile_settings is not None:
            return normalize_settings(dotfile_settings)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TocSettings()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TocSettings | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_settings = _extract_table(data, table_path)
        if raw_settings is _MISSING:
            continue
        return _build_settings_from_raw(raw_settings, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_settings_from_raw(
    raw_settings: object, config_file: Path, table_path: tuple[str, ...]
) -> TocSettings:
    table_display = ".".join(table_path)

    if not isinstance(raw_settings, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_settings:
        return TocSettings()

    try:
        return TocSettings(**raw_settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_settings(settings: TocSettings) -> TocSettings:
    list_style = settings.list_style
    if isinstance(list_style, str):
        list_style = LIST_STYLE_ALIASES.get(list_style, list_style)
    return replace(settings, list_style=list_style)


def validate_settings(settings: TocSettings) -> None:
    """Validate a `TocSettings` instance.

    Args:
        settings: Settings to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the depth band is inconsistent, the list style is
            unsupported, a flag is not a boolean, or the size limit is not a
            positive integer.

    Examples:
        validate_settings(TocSettings(minimum_depth=1, maximum_depth=3))
    """
    settings = normalize_settings(settings)

    _ensure_integers(
        {
            "minimum_depth": settings.minimum_depth,
            "maximum_depth": settings.maximum_depth,
            "max_file_size": settings.max_file_size,
        }
    )

    if settings.minimum_depth < MIN_HEADING_LEVEL:
        raise ConfigError(f"`minimum_depth` must be >= {MIN_HEADING_LEVEL}")
    if settings.maximum_depth < settings.minimum_depth:
        raise ConfigError("`maximum_depth` must be >= `minimum_depth`")
    if settings.maximum_depth > MAX_HEADING_LEVEL:
        raise ConfigError(f"`maximum_depth` must be <= {MAX_HEADING_LEVEL}")

    if settings.list_style not in LIST_STYLES:
        raise ConfigError("`list_style` must be one of: bullet, numbered, number, ordered, dash")
    for key in ("use_markdown", "github_compat"):
        if not isinstance(getattr(settings, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")
    if not isinstance(settings.title, str):
        raise ConfigError("`title` must be a string")

    if settings.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(settings: TocSettings, **overrides: object) -> TocSettings:
    """Apply override values to `TocSettings`.

    Args:
        settings: Base settings to update.
        overrides: Override values keyed by field name; values set to None are
            ignored.

    Returns:
        TocSettings: New settings with the overrides applied, or the original
        settings when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TocSettings`.

    Examples:
        updated = apply_overrides(settings, title="Contents", minimum_depth=1)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return settings
    return replace(settings, **changes)


def build_settings(search_path: Path, **overrides: object) -> TocSettings:
    """Load, override, and validate settings.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by setting name; None values are
            ignored.

    Returns:
        TocSettings: Validated settings.

    Raises:
        ConfigError: If loading or validation fails.

    Examples:
        settings = build_settings(Path.cwd(), minimum_depth=1, list_style="numbered")
    """
    settings = load_settings(search_path)
    settings = apply_overrides(settings, **overrides)
    settings = normalize_settings(settings)
    validate_settings(settings)
    return settings


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
