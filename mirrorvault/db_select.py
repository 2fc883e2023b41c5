"""Choosing an engine, its databases and the backup format."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from mirrorvault.render import Mode, filter_default_databases, normalize_version, render_header
from mirrorvault.scan import Database, ScanResult
from mirrorvault.selection import ALL_DATABASES_NAME, SelectionState
from mirrorvault.styles import (
    AUTH_STYLE,
    ENGINE_NAME_STYLE,
    FOOTER_STYLE,
    NO_AUTH_STYLE,
    SECTION_TITLE_STYLE,
    TILE_STYLE,
    join_horizontal,
    join_vertical,
)

ALL_DATABASES_LABEL = "Backup all databases"
FORMAT_OPTIONS = (
    "Native format (no compression)",
    "Compressed (gzip)",
)
_SELECTED_BORDER = "#89b4fa"
_HEADER_HEIGHT = 2
_FOOTER_HEIGHT = 1
_AUTH_MESSAGE_HEIGHT = 2


class SelectAction(Enum):
    """What a selection screen asks the caller to do after a key."""

    NONE = "none"
    OPEN_DB = "open_db"
    CONFIRM = "confirm"
    BACK = "back"
    QUIT = "quit"


def db_select_options(engine: Optional[Database]) -> list[str]:
    """The databases offered for an engine, followed by the all-databases entry."""
    if engine is None:
        return []
    return [*filter_default_databases(engine.engine, engine.names), ALL_DATABASES_LABEL]


def _selection_key(option: str) -> str:
    return ALL_DATABASES_NAME if option == ALL_DATABASES_LABEL else option


def _center_beside(left: str, block: str) -> str:
    height = block.count("\n") + 1
    offset = (height - 1) // 2
    return join_horizontal(["\n" * offset + left, block])


@dataclass
class DatabaseSelector:
    """Cursor, scrolling and choices on the engine and database screens."""

    scan_result: ScanResult = field(default_factory=ScanResult)
    selection: SelectionState = field(default_factory=SelectionState)
    scroll_offset: int = 0
    terminal_height: int = 24

    def current_engine(self) -> Optional[Database]:
        """The engine under the cursor, or None if the cursor is out of range."""
        index = self.selection.engine_index
        if 0 <= index < len(self.scan_result.databases):
            return self.scan_result.databases[index]
        return None

    def handle_engine_key(self, key: str) -> SelectAction:
        """React to a key on the engine screen."""
        if key == "up":
            if self.selection.engine_index > 0:
                self.selection.engine_index -= 1
        elif key == "down":
            if self.selection.engine_index < len(self.scan_result.databases) - 1:
                self.selection.engine_index += 1
        elif key == "enter":
            self.scroll_offset = 0
            self.selection.db_index = 0
            return SelectAction.OPEN_DB
        elif key in ("q", "ctrl+c"):
            return SelectAction.QUIT
        return SelectAction.NONE

    def handle_db_key(self, key: str) -> SelectAction:
        """React to a key on the database screen."""
        engine = self.current_engine()
        if engine is None:
            return SelectAction.BACK

        options = db_select_options(engine)
        if key == "up":
            if self.selection.db_index > 0:
                self.selection.db_index -= 1
                self.adjust_scroll()
        elif key == "down":
            if self.selection.db_index < len(options) - 1:
                self.selection.db_index += 1
                self.adjust_scroll()
        elif key == " ":
            if 0 <= self.selection.db_index < len(options):
                option = options[self.selection.db_index]
                self.selection.toggle(engine.engine, _selection_key(option), engine.requires_auth)
        elif key == "enter":
            return SelectAction.CONFIRM
        elif key == "esc":
            return SelectAction.BACK
        return SelectAction.NONE

    def _available_height(self, engine: Optional[Database]) -> int:
        auth_height = _AUTH_MESSAGE_HEIGHT if engine is not None and engine.requires_auth else 0
        available = self.terminal_height - _HEADER_HEIGHT - _FOOTER_HEIGHT - auth_height - 1
        return max(available, 1)

    def _clamped_offset(self, offset: int, option_count: int, available: int) -> int:
        max_scroll = max(option_count - available, 0)
        return max(min(offset, max_scroll), 0)

    def adjust_scroll(self) -> None:
        """Move the scroll window so the database under the cursor is visible."""
        engine = self.current_engine()
        options = db_select_options(engine)
        available = self._available_height(engine)
        index = self.selection.db_index

        if index < self.scroll_offset:
            self.scroll_offset = index
        elif index >= self.scroll_offset + available:
            self.scroll_offset = index - available + 1
        self.scroll_offset = self._clamped_offset(self.scroll_offset, len(options), available)

    def render_engine_select(self, mode: Mode) -> str:
        """The engine screen: one tile per engine with the cursor beside it."""
        parts = [render_header(mode)]
        title = (
            "Select database engine for daily backup"
            if mode is Mode.SCHEDULE
            else "Select Database Engine"
        )
        parts.append(SECTION_TITLE_STYLE.render(title) + "\n\n")

        for i, db in enumerate(self.scan_result.databases):
            selected = i == self.selection.engine_index
            style = replace(TILE_STYLE, border_foreground=_SELECTED_BORDER) if selected else TILE_STYLE
            cursor = "> " if selected else "  "
            auth_label = (
                AUTH_STYLE.render("Auth Required") if db.requires_auth else NO_AUTH_STYLE.render("No auth")
            )
            version = normalize_version(db.engine, db.version)
            content = join_vertical([ENGINE_NAME_STYLE.render(f"{db.engine} {version}"), auth_label])
            parts.append(_center_beside(cursor, style.render(content)) + "\n")

        parts.append("\n" + FOOTER_STYLE.render(" ↑ ↓ move    Enter select    Ctrl+C exit "))
        return "".join(parts)

    def render_db_select(self) -> str:
        """The database screen for the current engine, scrolled to fit the terminal."""
        engine = self.current_engine()
        if engine is None:
            return ""

        parts = [SECTION_TITLE_STYLE.render(f"Select database(s) for {engine.engine}") + "\n\n"]
        options = db_select_options(engine)
        available = self._available_height(engine)
        start = self._clamped_offset(self.scroll_offset, len(options), available)
        visible = options[start:start + available]

        for i, option in enumerate(visible, start=start):
            cursor = "> " if i == self.selection.db_index else "  "
            check = "[x] " if self.selection.is_selected(engine.engine, _selection_key(option)) else "[ ] "
            label = option
            if option == ALL_DATABASES_LABEL and engine.requires_auth:
                label = "Backup all databases (disabled - auth enabled)"
            parts.append(f"{cursor}{check}{label}\n")

        if engine.requires_auth:
            parts.append("\n" + AUTH_STYLE.render("! Auth enabled: create separate backups per database") + "\n")

        if len(options) > available:
            footer = (
                " ↑/↓ move • Space select • Enter confirm • Esc back • Ctrl+C exit "
                f"[{self.selection.db_index + 1}/{len(options)}]"
            )
        else:
            footer = " ↑/↓ move • Space select • Enter confirm • Esc back • Ctrl+C exit "
        parts.append("\n" + FOOTER_STYLE.render(footer))
        return "".join(parts)


@dataclass
class FormatSelector:
    """Choice between a native and a compressed backup."""

    index: int = 0
    compression: str = ""

    def handle_key(self, key: str) -> SelectAction:
        """React to a key; Enter fixes the compression and confirms."""
        if key == "up":
            if self.index > 0:
                self.index -= 1
        elif key == "down":
            if self.index < len(FORMAT_OPTIONS) - 1:
                self.index += 1
        elif key == "enter":
            self.compression = "" if self.index == 0 else "gz"
            return SelectAction.CONFIRM
        elif key == "esc":
            return SelectAction.BACK
        return SelectAction.NONE

    def render(self) -> str:
        """The backup format screen."""
        parts = [SECTION_TITLE_STYLE.render("Select Backup Format") + "\n\n"]
        for i, option in enumerate(FORMAT_OPTIONS):
            cursor = "> " if i == self.index else "  "
            parts.append(f"{cursor}{option}\n")
        parts.append("\n" + FOOTER_STYLE.render(" ↑/↓ move • Enter select • Esc back "))
        return "".join(parts)