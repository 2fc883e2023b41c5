"""The screen listing past restore operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from mirrorvault.render import pad_string
from mirrorvault.styles import DIVIDER_STYLE, FOOTER_STYLE, ITEM_STYLE, SECTION_TITLE_STYLE, Style

_BOX_WIDTH = 70
_CONTENT_WIDTH = _BOX_WIDTH - 4
_LINES_PER_ENTRY = 12
_RESERVED_LINES = 7
_MIN_HEIGHT = 8
_DUMP_LABEL = "Dump Path: "
_BACKUP_LABEL = "Pre-Restore Backup: "
_ERROR_LABEL = "Error: "
_ELLIPSIS = "..."

_SUCCESS_STYLE = Style(foreground="#a6e3a1", bold=True)
_FAILURE_STYLE = Style(foreground="#f38ba8", bold=True)
_ENGINE_STYLE = Style(foreground="#89b4fa", bold=True)
_DB_STYLE = Style(foreground="#a6e3a1")
_INFO_STYLE = Style(foreground="#cdd6f4")
_HEADER_STYLE = Style(foreground="#f9e2af", bold=True)
_ROLLED_BACK_STYLE = Style(foreground="#fab387", bold=True)


@dataclass
class RestoreHistoryItem:
    """One recorded restore operation."""

    timestamp: str = ""
    engine: str = ""
    database: str = ""
    dump_path: str = ""
    dump_format: str = ""
    compressed: bool = False
    multi_db: bool = False
    pre_restore_backup: str = ""
    success: bool = False
    rolled_back: bool = False
    error: str = ""
    log_file: str = ""


class HistoryAction(Enum):
    """What the history screen asks the caller to do after a key."""

    NONE = "none"
    BACK = "back"


def wrap_words(text: str, width: int) -> list[str]:
    """Split text into lines of whole words no wider than width where possible."""
    words = text.split() or [text]
    lines: list[str] = []
    current: list[str] = []
    current_len = 0
    for word in words:
        space = 1 if current else 0
        if current and current_len + space + len(word) > width:
            lines.append(" ".join(current))
            current = [word]
            current_len = len(word)
        else:
            current.append(word)
            current_len += space + len(word)
    if current:
        lines.append(" ".join(current))
    return lines


def wrap_path(path: str, width: int) -> list[str]:
    """Split a path into display lines, breaking at slashes where possible.

    Every line after the first starts with "..." to mark it as a continuation.
    """
    if len(path) <= width:
        return [path]

    continuation_width = max(width - 3, 1)
    parts = path.split("/")
    if len(parts) == 1:
        first = path[:width]
        lines = [first]
        remaining = path[len(first):]
        while remaining:
            chunk = remaining[:continuation_width]
            lines.append(_ELLIPSIS + chunk)
            remaining = remaining[len(chunk):]
        return lines

    lines = []

    def emit(text: str) -> None:
        lines.append(text if not lines else _ELLIPSIS + text)

    current: list[str] = []
    current_len = 0
    for part in parts:
        separator = 1 if current else 0
        if len(part) > width - 3 and not current:
            if lines:
                lines.append(_ELLIPSIS)
            remaining = part
            while remaining:
                chunk_len = width if not lines else continuation_width
                emit(remaining[:chunk_len])
                remaining = remaining[chunk_len:]
            continue
        if current and current_len + separator + len(part) > width:
            emit("/".join(current))
            current = [part]
            current_len = len(part)
        else:
            current.append(part)
            current_len += separator + len(part)
    if current:
        emit("/".join(current))
    return lines


def _box_line(content: str) -> str:
    return f"│ {pad_string(content, _CONTENT_WIDTH)} │\n"


def _rule(left: str, right: str) -> str:
    return left + "─" * (_BOX_WIDTH - 2) + right + "\n"


def _render_entry(number: int, item: RestoreHistoryItem) -> str:
    parts = [_rule("┌", "┐")]
    parts.append(_box_line(_HEADER_STYLE.render(f"Restore #{number} - {item.timestamp}")))
    parts.append(_rule("├", "┤"))

    parts.append(_box_line(f"Engine: {_ENGINE_STYLE.render(item.engine)}"))
    parts.append(_box_line(f"Database: {_DB_STYLE.render(item.database)}"))
    parts.append(_rule("├", "┤"))

    status = _SUCCESS_STYLE.render("✓ SUCCESS") if item.success else _FAILURE_STYLE.render("✗ FAILED")
    if item.rolled_back:
        status += " " + _ROLLED_BACK_STYLE.render("(ROLLED BACK)")
    parts.append(_box_line(f"Status: {status}"))
    parts.append(_rule("├", "┤"))

    dump_max = _CONTENT_WIDTH - len(_DUMP_LABEL)
    dump_path = item.dump_path
    if len(dump_path) > dump_max:
        dump_path = _ELLIPSIS + dump_path[len(dump_path) - (dump_max - 3):]
    parts.append(_box_line(_DUMP_LABEL + _INFO_STYLE.render(dump_path)))

    format_info = item.dump_format
    if item.compressed:
        format_info += " (compressed)"
    if item.multi_db:
        format_info += " (multi-DB)"
    parts.append(_box_line(f"Format: {_INFO_STYLE.render(format_info)}"))
    parts.append(_rule("├", "┤"))

    if item.pre_restore_backup:
        indent = " " * len(_BACKUP_LABEL)
        lines = wrap_path(item.pre_restore_backup, _CONTENT_WIDTH - len(_BACKUP_LABEL))
        for i, line in enumerate(lines):
            label = _BACKUP_LABEL if i == 0 else indent
            parts.append(_box_line(label + _INFO_STYLE.render(line)))

    if not item.success and item.error:
        parts.append(_rule("├", "┤"))
        indent = " " * len(_ERROR_LABEL)
        lines = wrap_words(item.error, _CONTENT_WIDTH - len(_ERROR_LABEL))
        for i, line in enumerate(lines):
            label = _ERROR_LABEL if i == 0 else indent
            parts.append(_box_line(label + _FAILURE_STYLE.render(line)))

    parts.append("└" + "─" * (_BOX_WIDTH - 2) + "┘\n")
    return "".join(parts)


@dataclass
class HistoryView:
    """Past restore operations, shown a few at a time."""

    items: list[RestoreHistoryItem] = field(default_factory=list)
    scroll_offset: int = 0
    terminal_height: int = 24

    def _items_per_page(self) -> int:
        available = max(self.terminal_height - _RESERVED_LINES, _MIN_HEIGHT)
        return max(available // _LINES_PER_ENTRY, 1)

    def render(self) -> str:
        """The history screen for the current scroll position."""
        parts = [SECTION_TITLE_STYLE.render("Restore History") + "\n\n"]

        if not self.items:
            parts.append(ITEM_STYLE.render("No restore operations found.") + "\n\n")
            parts.append(FOOTER_STYLE.render("Press Esc to go back • Ctrl+C to exit"))
            return "".join(parts)

        offset = self.scroll_offset
        if not 0 <= offset < len(self.items):
            offset = 0
        start = offset
        end = min(start + self._items_per_page(), len(self.items))

        for i in range(start, end):
            if i > start:
                parts.append("\n" + DIVIDER_STYLE.render("═" * _BOX_WIDTH) + "\n\n")
            parts.append(_render_entry(i + 1, self.items[i]))

        parts.append("\n")
        footer = ""
        if len(self.items) > end - start:
            percent = min(int(offset / len(self.items) * 100), 100)
            footer = f"[Scroll: {percent}% ↑/k up ↓/j down] "
        footer += "Ctrl+C exit"
        parts.append(FOOTER_STYLE.render(footer))
        return "".join(parts)

    def handle_key(self, key: str) -> HistoryAction:
        """React to a key press: scroll, or go back on Esc."""
        if self.scroll_offset < 0:
            self.scroll_offset = 0
        if self.items and self.scroll_offset >= len(self.items):
            self.scroll_offset = 0

        if key == "esc":
            self.scroll_offset = 0
            return HistoryAction.BACK
        if key in ("up", "k"):
            if self.scroll_offset > 0:
                self.scroll_offset -= 1
        elif key in ("down", "j"):
            max_offset = max(len(self.items) - self._items_per_page(), 0)
            if self.scroll_offset < max_offset:
                self.scroll_offset += 1
        return HistoryAction.NONE