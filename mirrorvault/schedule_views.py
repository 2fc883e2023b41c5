"""Screens listing scheduled backups and choosing their format."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from mirrorvault.db_select import FORMAT_OPTIONS
from mirrorvault.render import Mode, format_database_list, render_header
from mirrorvault.schedules import ScheduleData, format_label
from mirrorvault.styles import (
    DIVIDER_STYLE,
    ENGINE_NAME_STYLE,
    FOOTER_STYLE,
    ITEM_STYLE,
    SECTION_TITLE_STYLE,
    SUBTITLE_STYLE,
    TITLE_STYLE,
)

_HIGHLIGHT = "#89b4fa"


class ScheduleListAction(Enum):
    """What the schedule list asks the caller to do after a key."""

    NONE = "none"
    EDIT = "edit"
    DELETE = "delete"
    QUIT = "quit"


@dataclass
class ScheduleList:
    """All scheduled backups with a cursor."""

    schedules: list[ScheduleData] = field(default_factory=list)
    index: int = 0
    chosen: Optional[ScheduleData] = None
    pending_delete: str = ""

    def handle_key(self, key: str) -> ScheduleListAction:
        """React to a key press and say what should happen next."""
        if key == "up":
            if self.index > 0:
                self.index -= 1
        elif key == "down":
            if self.index < len(self.schedules) - 1:
                self.index += 1
        elif key == "e":
            if 0 <= self.index < len(self.schedules):
                self.chosen = replace(self.schedules[self.index])
                return ScheduleListAction.EDIT
        elif key == "d":
            if 0 <= self.index < len(self.schedules):
                self.pending_delete = self.schedules[self.index].timer_name
                return ScheduleListAction.DELETE
        elif key in ("enter", "q", "ctrl+c"):
            return ScheduleListAction.QUIT
        return ScheduleListAction.NONE

    def render(self, mode: Optional[Mode]) -> str:
        """The list screen; without a working mode the title stands alone."""
        if not mode:
            parts = [
                TITLE_STYLE.render("🗄  MirrorVault") + "\n",
                SUBTITLE_STYLE.render("Secure Database Backup Agent") + "\n\n",
            ]
        else:
            parts = [render_header(mode)]

        parts.append(SECTION_TITLE_STYLE.render("All Scheduled Backups") + "\n\n")

        if not self.schedules:
            parts.append("No scheduled backups found.\n\n")
        for i, sched in enumerate(self.schedules):
            if i > 0:
                parts.append("\n" + DIVIDER_STYLE.render("─" * 44) + "\n\n")
            selected = i == self.index
            cursor = "> " if selected else "  "
            style = ITEM_STYLE.with_foreground(_HIGHLIGHT) if selected else ITEM_STYLE
            parts.append(cursor + style.render(f"Engine: {ENGINE_NAME_STYLE.render(sched.engine)}") + "\n")
            parts.append("  " + style.render(f"Databases: {format_database_list(sched.databases)}") + "\n")
            parts.append("  " + style.render(f"Time: {sched.time}") + "\n")
            parts.append("  " + style.render(f"Format: {format_label(sched.compression)}") + "\n")

        parts.append("\n")
        if self.schedules:
            parts.append(FOOTER_STYLE.render(" ↑↓ navigate    E edit time    D delete    Enter/Ctrl+C exit "))
        else:
            parts.append(FOOTER_STYLE.render(" Press Enter to exit "))
        return "".join(parts)


def render_schedule_format(index: int, mode: Mode) -> str:
    """The format screen shown while creating a schedule."""
    parts = [render_header(mode)]
    parts.append(SECTION_TITLE_STYLE.render("Select Backup Format") + "\n\n")
    for i, option in enumerate(FORMAT_OPTIONS):
        cursor = "> " if i == index else "  "
        parts.append(f"{cursor}{option}\n")
    parts.append("\n" + FOOTER_STYLE.render(" ↑/↓ move    Enter select    ESC back "))
    return "".join(parts)