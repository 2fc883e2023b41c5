"""Choosing what to restore: engine, database and dump file."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from mirrorvault.render import filter_default_databases, format_bytes
from mirrorvault.restore_view import DatabaseStats, RestorePlan
from mirrorvault.scan import Database, ScanResult
from mirrorvault.selection import SelectionState
from mirrorvault.styles import (
    AUTH_STYLE,
    FOOTER_STYLE,
    ITEM_STYLE,
    NO_AUTH_STYLE,
    SECTION_TITLE_STYLE,
    Style,
)

_ERROR_STYLE = Style(foreground="#f38ba8", bold=True)
_TIP_STYLE = Style(foreground="#89b4fa", italic=True)
_F1_KEYS = frozenset({"f1", "F1"})
_NAMED_KEYS = frozenset(
    {
        "up", "down", "left", "right", "tab", "shift+tab", "backtab",
        "home", "end", "pageup", "pagedown", "pgup", "pgdn", "insert", "delete",
        "esc", "enter", "backspace", "ctrl+c",
        *(f"f{n}" for n in range(1, 21)),
        *(f"F{n}" for n in range(1, 21)),
    }
)

BackupFinder = Callable[[str, str], str]


class RestoreSelectAction(Enum):
    """What a restore selection screen asks the caller to do after a key."""

    NONE = "none"
    OPEN_DB = "open_db"
    OPEN_SOURCE = "open_source"
    CONFIRM = "confirm"
    BACK = "back"
    QUIT = "quit"


def _is_text(key: str) -> bool:
    return bool(key) and key not in _NAMED_KEYS and not key.startswith(("ctrl+", "alt+"))


@dataclass
class RestoreSelector:
    """Cursor and input state for the screens before a restore starts."""

    scan_result: ScanResult = field(default_factory=ScanResult)
    selection: SelectionState = field(default_factory=SelectionState)
    dump_path: str = ""
    source_index: int = 0
    error: Optional[BaseException] = None
    find_latest_backup: Optional[BackupFinder] = None

    def current_engine(self) -> Optional[Database]:
        """The engine under the cursor, or None if the cursor is out of range."""
        index = self.selection.engine_index
        if 0 <= index < len(self.scan_result.databases):
            return self.scan_result.databases[index]
        return None

    def _display_names(self, engine: Database) -> list[str]:
        return list(filter_default_databases(engine.engine, engine.names) or [])

    def selected_database(self) -> Optional[str]:
        """The database under the cursor, or None if nothing valid is selected."""
        engine = self.current_engine()
        if engine is None:
            return None
        names = self._display_names(engine)
        index = self.selection.db_index
        if 0 <= index < len(names):
            return names[index]
        return None

    def handle_engine_key(self, key: str) -> RestoreSelectAction:
        """React to a key on the restore engine screen."""
        if key == "up":
            if self.selection.engine_index > 0:
                self.selection.engine_index -= 1
        elif key == "down":
            if self.selection.engine_index < len(self.scan_result.databases) - 1:
                self.selection.engine_index += 1
        elif key == "enter":
            engine = self.current_engine()
            if engine is None or not engine.names:
                return RestoreSelectAction.NONE
            self.selection.db_index = 0
            return RestoreSelectAction.OPEN_DB
        elif key in ("q", "ctrl+c"):
            return RestoreSelectAction.QUIT
        return RestoreSelectAction.NONE

    def handle_db_key(self, key: str) -> RestoreSelectAction:
        """React to a key on the restore database screen."""
        engine = self.current_engine()
        if engine is None:
            return RestoreSelectAction.BACK

        names = self._display_names(engine)
        if key == "up":
            if self.selection.db_index > 0:
                self.selection.db_index -= 1
        elif key == "down":
            if self.selection.db_index < len(names) - 1:
                self.selection.db_index += 1
        elif key == "enter":
            if 0 <= self.selection.db_index < len(names):
                self.dump_path = ""
                self.source_index = 0
                self.error = None
                return RestoreSelectAction.OPEN_SOURCE
        elif key == "esc":
            return RestoreSelectAction.BACK
        elif key in ("q", "ctrl+c"):
            return RestoreSelectAction.QUIT
        return RestoreSelectAction.NONE

    def _use_latest_backup(self) -> None:
        engine = self.current_engine()
        database = self.selected_database()
        if engine is None or database is None:
            return
        try:
            if self.find_latest_backup is None:
                raise LookupError("no backup lookup configured")
            latest = self.find_latest_backup(engine.engine, database)
        except Exception as exc:
            self.error = RuntimeError(f"failed to find latest backup: {exc}")
            self.dump_path = ""
        else:
            self.dump_path = latest
            self.error = None

    def handle_dump_path_key(self, key: str) -> RestoreSelectAction:
        """React to a key in the dump path field; F1 fills in the latest backup."""
        if _is_text(key) or key == "backspace":
            self.error = None

        if key in _F1_KEYS:
            self._use_latest_backup()
            return RestoreSelectAction.NONE

        if key == "enter":
            if not self.dump_path:
                self.error = ValueError("dump file path cannot be empty")
                return RestoreSelectAction.NONE
            return RestoreSelectAction.CONFIRM
        if key == "esc":
            return RestoreSelectAction.BACK
        if key == "backspace":
            self.dump_path = self.dump_path[:-1]
            return RestoreSelectAction.NONE
        if key == "ctrl+c":
            return RestoreSelectAction.QUIT
        if key == "q" and not self.dump_path:
            return RestoreSelectAction.QUIT
        if _is_text(key):
            self.dump_path += key
        return RestoreSelectAction.NONE

    def render_engine_select(self) -> str:
        """The engine screen with running state and auth marker per engine."""
        parts = [SECTION_TITLE_STYLE.render("Select Database Engine for Restore") + "\n\n"]
        for i, db in enumerate(self.scan_result.databases):
            cursor = "> " if i == self.selection.engine_index else "  "
            status = "●" if db.running else "○"
            auth = AUTH_STYLE.render(" [Auth]") if db.requires_auth else ""
            parts.append(f"{cursor}{status} {db.engine} ({db.display_version()}){auth}\n")
        parts.append("\n" + FOOTER_STYLE.render(" ↑/↓ move • Enter select • Ctrl+C exit "))
        return "".join(parts)

    def render_db_select(self) -> str:
        """The database screen for the current engine."""
        engine = self.current_engine()
        if engine is None:
            return ""
        parts = [
            SECTION_TITLE_STYLE.render(f"Select Database to Restore ({engine.engine})") + "\n\n"
        ]
        for i, name in enumerate(self._display_names(engine)):
            cursor = "> " if i == self.selection.db_index else "  "
            parts.append(f"{cursor}{name}\n")
        parts.append("\n" + FOOTER_STYLE.render(" ↑/↓ move • Enter select • Esc back • Ctrl+C exit "))
        return "".join(parts)

    def render_dump_path(self) -> str:
        """The screen for typing the dump file path."""
        engine = self.current_engine()
        if engine is None:
            return ""
        parts = [SECTION_TITLE_STYLE.render("Enter Dump File Path") + "\n\n"]
        parts.append(f"Engine: {engine.engine}\n")
        parts.append(f"Database: {self.selected_database() or ''}\n\n")
        parts.append(NO_AUTH_STYLE.render("Enter the full path to the dump file on this server:") + "\n\n")

        if self.dump_path:
            parts.append(ITEM_STYLE.render(f"  {self.dump_path}") + "\n")
        else:
            parts.append(ITEM_STYLE.render("  [Type or paste dump file path here]") + "\n")

        if self.error is not None:
            parts.append("\n" + _ERROR_STYLE.render(f"⚠ Error: {self.error}") + "\n\n")

        parts.append("\n")
        parts.append(NO_AUTH_STYLE.render("Examples:") + "\n")
        parts.append("  • /home/user/backups/app_db_2026-01-09.sql\n")
        parts.append("  • /var/backups/mirrorvault/mysql/app_db_2026-01-09.sql\n")
        parts.append("  • /tmp/dump.sql.gz\n")
        parts.append("  • ./backup.sql\n\n")
        parts.append(NO_AUTH_STYLE.render("Tip: Press F1 to automatically use the latest backup") + "\n")
        parts.append(
            "\n" + FOOTER_STYLE.render(
                " Type path • F1 latest backup • Enter confirm • Esc back • Ctrl+C exit "
            )
        )
        parts.append(
            "\n" + _TIP_STYLE.render(
                "💡 Tip: Run 'sudo mirrorvault restore-history' to view previous restore operations"
            )
        )
        return "".join(parts)

    def render_confirm(
        self, plan: Optional[RestorePlan], pre_stats: Optional[DatabaseStats]
    ) -> str:
        """The confirmation screen showing the plan and current statistics."""
        if plan is None:
            return "Error: Restore plan not initialized"
        if self.current_engine() is None:
            return "Error: Engine not selected"

        parts = [SECTION_TITLE_STYLE.render("Confirm Restore Operation") + "\n\n"]
        parts.append(f"Engine: {plan.engine}\n")
        parts.append(f"Database: {plan.database}\n")
        parts.append(f"Dump Path: {plan.dump_path}\n\n")

        if pre_stats is not None:
            parts.append("Current Database Statistics:\n")
            parts.append(f"  Tables: {pre_stats.table_count}\n")
            parts.append(f"  Total Rows: {pre_stats.total_rows}\n")
            parts.append(f"  Size: {format_bytes(pre_stats.size)}\n\n")

        parts.append(NO_AUTH_STYLE.render("⚠ WARNING: This will replace the current database!") + "\n")
        parts.append(NO_AUTH_STYLE.render("A backup will be created before restore.") + "\n\n")
        parts.append(FOOTER_STYLE.render(" Enter confirm • Esc back • Ctrl+C exit "))
        return "".join(parts)