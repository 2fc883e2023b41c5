"""The restore progress screen with its before-and-after summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mirrorvault.render import format_bytes, pad_string
from mirrorvault.styles import (
    DIVIDER_STYLE,
    ERROR_STYLE,
    FOOTER_STYLE,
    ITEM_STYLE,
    NO_AUTH_STYLE,
    SECTION_TITLE_STYLE,
    Style,
)

_BAR_WIDTH = 50
_LABEL_WIDTH = 9
_INFO_CONTENT_WIDTH = 50
_INFO_BOX_WIDTH = 1 + 1 + _LABEL_WIDTH + 1 + _INFO_CONTENT_WIDTH + 1 + 1
_PROGRESS_LABEL_WIDTH = 8
_MAX_DUMP_DISPLAY = 45
_METRIC_WIDTH = 24
_VALUE_WIDTH = 16
_COL_NAME_WIDTH = 24
_COL_TYPE_WIDTH = 28
_COL_NULL_WIDTH = 10
_SAMPLE_MIN_WIDTH = 10
_SAMPLE_MAX_WIDTH = 20
_SAMPLE_ROW_LIMIT = 10
_MIN_VISIBLE_LINES = 10
_END_OFFSET = 999999
_PAGE = 10
_DOUBLE_RULE = "═" * 59

_ENGINE_STYLE = Style(bold=True, foreground="#89b4fa")
_DB_STYLE = Style(bold=True, foreground="#a6e3a1")
_BAR_FILLED_STYLE = Style(foreground="#a6e3a1")
_BAR_EMPTY_STYLE = Style(foreground="#585b70")
_STEP_STYLE = Style(foreground="#f9e2af", bold=True)
_MESSAGE_STYLE = Style(foreground="#bac2de")
_BACKUP_STYLE = Style(foreground="#89b4fa", italic=True)
_BEFORE_STYLE = Style(foreground="#f38ba8", bold=True)
_AFTER_STYLE = Style(foreground="#a6e3a1", bold=True)
_METRIC_STYLE = Style(foreground="#cdd6f4")
_TABLE_NAME_STYLE = Style(foreground="#89b4fa", bold=True, underline=True)
_HEADING_STYLE = Style(foreground="#f9e2af", bold=True)
_COL_NAME_STYLE = Style(foreground="#89b4fa")
_COL_TYPE_STYLE = Style(foreground="#bac2de")
_SAMPLE_HEADER_STYLE = Style(foreground="#89b4fa", bold=True)
_CELL_STYLE = Style(foreground="#bac2de")
_NULL_STYLE = Style(foreground="#585b70")
_YES_STYLE = Style(foreground="#a6e3a1")
_NO_STYLE = Style(foreground="#f38ba8")
_TIP_STYLE = Style(foreground="#89b4fa", italic=True)
_HISTORY_TIP = "💡 Tip: Run 'sudo mirrorvault restore-history' to view all restore operations"


@dataclass
class ColumnInfo:
    """One column of a table."""

    name: str
    type: str = ""
    nullable: bool = False


@dataclass
class TableStats:
    """Size, shape and a few sample rows of one table."""

    name: str
    row_count: int = 0
    columns: list[ColumnInfo] = field(default_factory=list)
    sample_rows: list[dict[str, str]] = field(default_factory=list)


@dataclass
class DatabaseStats:
    """Summary figures of a database at one point in time."""

    table_count: int = 0
    total_rows: int = 0
    size: int = 0
    tables: list[TableStats] = field(default_factory=list)


@dataclass
class RestorePlan:
    """What is to be restored and from where."""

    engine: str
    database: str
    dump_path: str
    requires_auth: bool = False


class RestoreAction(Enum):
    """What the progress screen asks the caller to do after a key."""

    NONE = "none"
    QUIT = "quit"


def _clamp_progress(progress: float) -> float:
    return min(max(progress, 0.0), 1.0)


def render_progress_bar(progress: float, width: int = _BAR_WIDTH) -> str:
    """A coloured bar of the given width filled in proportion to progress (0..1)."""
    progress = _clamp_progress(progress)
    filled = int(progress * width)
    return _BAR_FILLED_STYLE.render("█" * filled) + _BAR_EMPTY_STYLE.render("░" * (width - filled))


def _truncate(text: str, width: int) -> str:
    return text[:width - 3] + "..." if len(text) > width else text


def _rule(left: str, mid: str, right: str, widths: list[int]) -> str:
    return left + mid.join("─" * (w + 2) for w in widths) + right


def _row(cells: list[str], widths: list[int]) -> str:
    return "│ " + " │ ".join(pad_string(c, w) for c, w in zip(cells, widths)) + " │\n"


def _render_summary(pre: Optional[DatabaseStats], post: DatabaseStats) -> str:
    widths = [_METRIC_WIDTH, _VALUE_WIDTH, _VALUE_WIDTH]
    parts = [
        "\n",
        SECTION_TITLE_STYLE.render(_DOUBLE_RULE) + "\n",
        SECTION_TITLE_STYLE.render("Restore Summary") + "\n",
        SECTION_TITLE_STYLE.render(_DOUBLE_RULE) + "\n\n",
        _rule("┌", "┬", "┐", widths) + "\n",
        _row([_METRIC_STYLE.render("Metric"), _BEFORE_STYLE.render("BEFORE"), _AFTER_STYLE.render("AFTER")], widths),
        _rule("├", "┼", "┤", widths) + "\n",
    ]
    pre_tables = pre.table_count if pre else 0
    pre_rows = pre.total_rows if pre else 0
    pre_size = pre.size if pre else 0
    rows = [
        ("Tables", str(pre_tables), str(post.table_count)),
        ("Total Rows", str(pre_rows), str(post.total_rows)),
        ("Database Size", format_bytes(pre_size), format_bytes(post.size)),
    ]
    for label, before, after in rows:
        parts.append(_row(
            [_METRIC_STYLE.render(label), _BEFORE_STYLE.render(before), _AFTER_STYLE.render(after)],
            widths,
        ))
    parts.append(_rule("└", "┴", "┘", widths) + "\n\n")

    if post.tables or (pre is not None and pre.tables):
        parts.append(SECTION_TITLE_STYLE.render(_DOUBLE_RULE) + "\n")
        parts.append(SECTION_TITLE_STYLE.render("Table Details") + "\n")
        parts.append(SECTION_TITLE_STYLE.render(_DOUBLE_RULE) + "\n\n")
        pre_by_name = {t.name: t for t in pre.tables} if pre is not None else {}
        for i, table in enumerate(post.tables):
            if i > 0:
                parts.append("\n" + DIVIDER_STYLE.render("─" * 70) + "\n\n")
            parts.append(_render_table(pre_by_name.get(table.name), table))
    return "".join(parts)


def _render_table(pre: Optional[TableStats], post: TableStats) -> str:
    widths = [_METRIC_WIDTH, _VALUE_WIDTH, _VALUE_WIDTH]
    total_width = 1 + sum(w + 2 for w in widths) + len(widths)
    header_content_width = total_width - 9 - 2
    parts = [
        "┌" + "─" * (total_width - 2) + "┐\n",
        f"│ Table: {pad_string(_TABLE_NAME_STYLE.render(post.name), header_content_width)} │\n",
        _rule("├", "┬", "┤", widths) + "\n",
        _row([_METRIC_STYLE.render("Property"), _BEFORE_STYLE.render("BEFORE"), _AFTER_STYLE.render("AFTER")], widths),
        _rule("├", "┼", "┤", widths) + "\n",
    ]
    pre_rows = pre.row_count if pre else 0
    pre_cols = len(pre.columns) if pre else 0
    parts.append(_row(
        [_METRIC_STYLE.render("Rows"), _BEFORE_STYLE.render(str(pre_rows)), _AFTER_STYLE.render(str(post.row_count))],
        widths,
    ))
    parts.append(_row(
        [_METRIC_STYLE.render("Columns"), _BEFORE_STYLE.render(str(pre_cols)),
         _AFTER_STYLE.render(str(len(post.columns)))],
        widths,
    ))
    parts.append(_rule("└", "┴", "┘", widths) + "\n\n")

    if post.columns:
        col_widths = [_COL_NAME_WIDTH, _COL_TYPE_WIDTH, _COL_NULL_WIDTH]
        parts.append(_HEADING_STYLE.render("Columns:") + "\n")
        parts.append(_rule("┌", "┬", "┐", col_widths) + "\n")
        parts.append(_row(
            [_HEADING_STYLE.render("Column Name"), _HEADING_STYLE.render("Type"), _HEADING_STYLE.render("Nullable")],
            col_widths,
        ))
        parts.append(_rule("├", "┼", "┤", col_widths) + "\n")
        for col in post.columns:
            nullable = _YES_STYLE.render("YES") if col.nullable else _NO_STYLE.render("NO")
            parts.append(_row(
                [_COL_NAME_STYLE.render(_truncate(col.name, _COL_NAME_WIDTH)),
                 _COL_TYPE_STYLE.render(_truncate(col.type, _COL_TYPE_WIDTH)),
                 nullable],
                col_widths,
            ))
        parts.append(_rule("└", "┴", "┘", col_widths) + "\n\n")

    if post.sample_rows:
        parts.append(_HEADING_STYLE.render(f"Sample Rows (last {len(post.sample_rows)} rows):") + "\n")
        names = [col.name for col in post.columns]
        if names:
            widths = [min(max(len(n), _SAMPLE_MIN_WIDTH), _SAMPLE_MAX_WIDTH) for n in names]
            parts.append(_rule("┌", "┬", "┐", widths) + "\n")
            parts.append(_row(
                [_SAMPLE_HEADER_STYLE.render(_truncate(n, w)) for n, w in zip(names, widths)], widths
            ))
            parts.append(_rule("├", "┼", "┤", widths) + "\n")
            for sample in post.sample_rows[:_SAMPLE_ROW_LIMIT]:
                cells = []
                for name, width in zip(names, widths):
                    value = sample.get(name, "")
                    if value == "":
                        cells.append(_NULL_STYLE.render("<NULL>"))
                    else:
                        cells.append(_CELL_STYLE.render(_truncate(value, width)))
                parts.append(_row(cells, widths))
            parts.append(_rule("└", "┴", "┘", widths) + "\n\n")
    return "".join(parts)


@dataclass
class RestoreProgressView:
    """Progress, outcome and scrolling of a running restore."""

    plan: Optional[RestorePlan] = None
    progress: float = 0.0
    step: str = ""
    message: str = ""
    error: Optional[BaseException] = None
    backup_path: str = ""
    pre_stats: Optional[DatabaseStats] = None
    post_stats: Optional[DatabaseStats] = None
    scroll_offset: int = 0
    terminal_height: int = 24

    @property
    def finished(self) -> bool:
        return self.progress >= 1.0 or self.error is not None

    def apply_progress(
        self, step: str, progress: float, message: str, error: Optional[BaseException]
    ) -> None:
        """Record a progress report; an error, once reported, is kept."""
        self.step = step
        self.progress = progress
        self.message = message
        if error is not None:
            self.error = error

    def apply_complete(
        self,
        success: bool,
        backup_path: str,
        post_stats: Optional[DatabaseStats],
        error: Optional[BaseException],
    ) -> None:
        """Record the end of the restore."""
        self.progress = 1.0
        if error is not None:
            self.error = error
        if backup_path:
            self.backup_path = backup_path
        if post_stats is not None:
            self.post_stats = post_stats

    def handle_key(self, key: str) -> RestoreAction:
        """Scroll or quit; keys are ignored until the restore has finished."""
        if not self.finished:
            return RestoreAction.NONE
        if key in ("up", "k"):
            if self.scroll_offset > 0:
                self.scroll_offset -= 1
        elif key in ("down", "j"):
            self.scroll_offset += 1
        elif key in ("pageup", "pgup"):
            self.scroll_offset = max(self.scroll_offset - _PAGE, 0)
        elif key in ("pagedown", "pgdn"):
            self.scroll_offset += _PAGE
        elif key in ("home", "g"):
            self.scroll_offset = 0
        elif key in ("end", "G"):
            self.scroll_offset = _END_OFFSET
        elif key in ("enter", "q", "ctrl+c"):
            return RestoreAction.QUIT
        return RestoreAction.NONE

    def _body(self) -> str:
        plan = self.plan
        parts = [SECTION_TITLE_STYLE.render("Restoring Database") + "\n\n"]

        dump_path = plan.dump_path
        if len(dump_path) > _MAX_DUMP_DISPLAY:
            dump_path = "..." + dump_path[len(dump_path) - (_MAX_DUMP_DISPLAY - 3):]
        parts.append("┌" + "─" * (_INFO_BOX_WIDTH - 2) + "┐\n")
        for label, value in (
            ("Engine:", _ENGINE_STYLE.render(plan.engine)),
            ("Database:", _DB_STYLE.render(plan.database)),
            ("Dump:", ITEM_STYLE.render(dump_path)),
        ):
            parts.append(
                f"│ {pad_string(label, _LABEL_WIDTH)} {pad_string(value, _INFO_CONTENT_WIDTH)} │\n"
            )
        parts.append("└" + "─" * (_INFO_BOX_WIDTH - 2) + "┘\n\n")

        progress = _clamp_progress(self.progress)
        parts.append(
            f"{pad_string('Progress:', _PROGRESS_LABEL_WIDTH)} "
            f"{render_progress_bar(progress, _BAR_WIDTH)} {int(progress * 100)}%\n\n"
        )
        if self.step:
            parts.append(f"{pad_string('Step:', _PROGRESS_LABEL_WIDTH)} {_STEP_STYLE.render(self.step)}\n")
        if self.message:
            parts.append(f"{pad_string('Status:', _PROGRESS_LABEL_WIDTH)} {_MESSAGE_STYLE.render(self.message)}\n")
        if self.error is not None:
            parts.append("\n" + ERROR_STYLE.render(f"Error: {self.error}") + "\n")
        if self.backup_path:
            parts.append("\nPre-restore backup: " + _BACKUP_STYLE.render(self.backup_path) + "\n")

        if self.post_stats is not None and self.error is None:
            parts.append(_render_summary(self.pre_stats, self.post_stats))

        tip = _TIP_STYLE.render(_HISTORY_TIP)
        if self.error is None and self.progress >= 1.0:
            parts.append("\n" + NO_AUTH_STYLE.render("✓ Restore completed successfully!") + "\n\n")
            parts.append(tip + "\n\n")
        elif self.error is not None:
            parts.append("\n" + ERROR_STYLE.render("✗ Restore failed") + "\n")
            if self.backup_path:
                parts.append(NO_AUTH_STYLE.render("Database has been rolled back to previous state.") + "\n")
            parts.append("\n" + tip + "\n\n")
        return "".join(parts)

    def render(self) -> str:
        """The visible part of the progress screen followed by its footer."""
        if self.plan is None:
            return "Error: Restore plan not initialized"

        lines = self._body().split("\n")
        available = max(self.terminal_height - 3, _MIN_VISIBLE_LINES)
        max_scroll = max(len(lines) - available, 0)
        offset = min(max(self.scroll_offset, 0), max_scroll)
        result = "\n".join(lines[offset:offset + available])

        footer = ""
        if max_scroll > 0:
            footer += f"\n[Scroll: {int(offset / max_scroll * 100)}%"
            if offset > 0:
                footer += " ↑/k up"
            if offset < max_scroll:
                footer += " ↓/j down"
            footer += "] "
        if self.finished:
            footer += "Enter exit"

        if footer:
            return result + "\n" + FOOTER_STYLE.render(footer)
        return result + "\n" + FOOTER_STYLE.render(" Press Enter to exit ")