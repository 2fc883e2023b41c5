"""Shared pieces of the terminal interface: header, sections and formatting."""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Iterable

from mirrorvault.scan import DatabaseType, ScanResult
from mirrorvault.selection import ALL_DATABASES_NAME
from mirrorvault.styles import (
    AUTH_STYLE,
    DIVIDER_STYLE,
    ENGINE_NAME_STYLE,
    ENGINE_STYLE,
    ITEM_STYLE,
    MODE_STYLE,
    NO_AUTH_STYLE,
    SECTION_TITLE_STYLE,
    SUBTITLE_STYLE,
    TILE_STYLE,
    TITLE_STYLE,
    join_horizontal,
    join_vertical,
    visible_width,
)


class Mode(IntEnum):
    """What the interface was started to do."""

    SCAN = 0
    BACKUP = 1
    RESTORE = 2
    SCHEDULE = 3


_VERSION_CHARS = re.compile(r"[0-9.]*")

_VERSION_PREFIXES = {
    "MySQL": ("8.",),
    "PostgreSQL": ("15.", "16."),
    "Redis": ("7.",),
}

_DEFAULT_DATABASES = {
    "MongoDB": frozenset({"admin", "config", "local"}),
}


def render_header(mode: Mode) -> str:
    """The application title block with the current mode."""
    if mode is Mode.SCAN:
        label = "Mode: Scan (read-only)"
    elif mode is Mode.SCHEDULE:
        label = "Mode: Backup Scheduler"
    else:
        label = "Mode: Backup"
    return (
        TITLE_STYLE.render("🗄  MirrorVault") + "\n"
        + SUBTITLE_STYLE.render("Secure Database Backup Agent") + "\n"
        + MODE_STYLE.render(label) + "\n\n"
    )


def extract_version(s: str, *prefixes: str) -> str:
    """The version number starting at the first prefix found, or s unchanged."""
    for prefix in prefixes:
        start = s.find(prefix)
        if start != -1:
            return _VERSION_CHARS.match(s, start).group()
    return s


def normalize_version(engine: str, raw: str) -> str:
    """Short version string for display, taken out of an engine's raw version text."""
    raw = raw.lower()
    prefixes = _VERSION_PREFIXES.get(engine)
    if prefixes is None:
        return raw
    return extract_version(raw, *prefixes)


def is_default_database(engine: str, name: str) -> bool:
    """Whether name is a system database the engine creates on installation."""
    return name in _DEFAULT_DATABASES.get(engine, frozenset())


def filter_default_databases(engine: str, names: Iterable[str]) -> list[str]:
    """The names without the engine's default system databases."""
    return [name for name in names if not is_default_database(engine, name)]


def format_database_list(databases: list[str]) -> str:
    """Comma-separated database names, with the all-databases marker spelled out."""
    if databases == [ALL_DATABASES_NAME]:
        return "All databases"
    return ", ".join(
        "All databases" if name == ALL_DATABASES_NAME else name for name in databases
    )


def format_bytes(size: int) -> str:
    """Human-readable size in binary units."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def pad_string(s: str, width: int) -> str:
    """Pad s with spaces to a visible width, ignoring escape codes."""
    actual = visible_width(s)
    if actual >= width:
        return s
    return s + " " * (width - actual)


def render_section(title: str, db_type: DatabaseType, result: ScanResult) -> str:
    """Tiles and database listings for every engine of one type."""
    matching = [db for db in result.databases if db.type is db_type]
    parts = [SECTION_TITLE_STYLE.render(f"{title} ({len(matching)})") + "\n\n"]

    tiles = []
    for db in matching:
        auth_label = AUTH_STYLE.render("Auth") if db.requires_auth else NO_AUTH_STYLE.render("No auth")
        display_version = normalize_version(db.engine, db.version)
        content = join_vertical([ENGINE_NAME_STYLE.render(f"{db.engine} {display_version}"), auth_label])
        tiles.append(TILE_STYLE.render(content))
    if tiles:
        parts.append(join_horizontal(tiles) + "\n\n")

    for db in matching:
        parts.append(ENGINE_STYLE.render(db.engine + " Databases") + "\n")
        parts.extend(
            ITEM_STYLE.render("  • " + name) + "\n"
            for name in filter_default_databases(db.engine, db.names)
        )
        parts.append("\n")
    return "".join(parts)


def render_divider() -> str:
    """A horizontal rule between sections."""
    return DIVIDER_STYLE.render("─" * 50) + "\n\n"