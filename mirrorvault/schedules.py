"""Daily backup schedules: time entry and duplicate handling."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional

from mirrorvault.render import Mode, format_database_list, render_header
from mirrorvault.styles import (
    AUTH_STYLE,
    DIVIDER_STYLE,
    ENGINE_NAME_STYLE,
    FOOTER_STYLE,
    ITEM_STYLE,
    SECTION_TITLE_STYLE,
)

_HOUR_ONLY = re.compile(r"^([0-9]{1,2})$")
_HOUR_MINUTE = re.compile(r"^([0-9]{1,2}):([0-9]{1,2})$")
_ALLOWED_CHARS = frozenset("0123456789: ")
_HIGHLIGHT = "#89b4fa"


@dataclass
class ScheduleData:
    """A daily backup schedule for some databases of one engine."""

    engine: str
    databases: list[str] = field(default_factory=list)
    time: str = ""
    password: str = ""
    compression: str = ""
    timer_name: str = ""


def normalize_time(value: str) -> str:
    """Turn "6", "6:30" or "14:00" into HH:MM; raise ValueError if invalid."""
    text = value.strip().replace(" ", "")

    match = _HOUR_ONLY.match(text)
    if match:
        hour = match.group(1).zfill(2)
        hour_num = int(hour)
        if hour_num > 24:
            raise ValueError("hour must be between 0 and 24")
        if hour_num == 24:
            return "23:59"
        return f"{hour}:00"

    match = _HOUR_MINUTE.match(text)
    if match:
        hour = match.group(1).zfill(2)
        minute = match.group(2).zfill(2)
        if int(hour) > 23:
            raise ValueError("hour must be between 0 and 23")
        if int(minute) > 59:
            raise ValueError("minute must be between 0 and 59")
        return f"{hour}:{minute}"

    raise ValueError("invalid time format")


def format_label(compression: str) -> str:
    """How the backup format is shown to the user."""
    return f"Compressed ({compression})" if compression else "Native"


def find_conflicts(
    engine: str, databases: Iterable[str], schedules: Iterable[ScheduleData]
) -> list[ScheduleData]:
    """Existing schedules of the engine that cover any of the databases."""
    wanted = set(databases)
    return [
        sched for sched in schedules
        if sched.engine == engine and wanted.intersection(sched.databases)
    ]


@dataclass
class TimeInput:
    """The text typed into the backup time field."""

    value: str = ""

    def type_char(self, char: str) -> None:
        """Append the first character if it is a digit, colon or space."""
        if char and char[0] in _ALLOWED_CHARS:
            self.value += char[0]

    def backspace(self) -> None:
        """Remove the last character."""
        self.value = self.value[:-1]

    def submit(self) -> str:
        """Normalise the typed time and keep it; raise ValueError if empty or invalid."""
        text = self.value.strip()
        if not text:
            raise ValueError("time is empty")
        self.value = normalize_time(text)
        return self.value


def render_schedule_time(
    data: Optional[ScheduleData], time_input: str, mode: Mode, editing: bool
) -> str:
    """The screen for entering or changing a schedule's time."""
    parts = [render_header(mode)]

    if editing and data is not None:
        parts.append(SECTION_TITLE_STYLE.render("Edit Backup Time") + "\n\n")
        parts.append(f"Engine: {ENGINE_NAME_STYLE.render(data.engine)}\n")
        parts.append(f"Databases: {format_database_list(data.databases)}\n")
        parts.append(f"Current Time: {data.time}\n\n")
    else:
        parts.append(SECTION_TITLE_STYLE.render("Enter backup time") + "\n\n")
        if data is None:
            return "".join(parts)
        parts.append(f"Engine: {ENGINE_NAME_STYLE.render(data.engine)}\n")
        parts.append(f"Databases: {format_database_list(data.databases)}\n\n")

    parts.append(f"Format: {format_label(data.compression)}\n\n")
    parts.append("Enter time in 00:00 to 24:00 format\n")
    parts.append("Examples: 6, 6:30, 14:00, 23:45\n\n")
    parts.append(ITEM_STYLE.render(f"Time: {time_input or '_'}") + "\n\n")
    parts.append(FOOTER_STYLE.render(" Enter confirm    ESC back    Ctrl+C exit "))
    return "".join(parts)


class DuplicateAction(Enum):
    """What the duplicate screen asks the caller to do after a key."""

    NONE = "none"
    EDIT = "edit"
    DELETE = "delete"
    BACK = "back"
    QUIT = "quit"


@dataclass
class DuplicateView:
    """The list of existing schedules that clash with a new one."""

    schedules: list[ScheduleData] = field(default_factory=list)
    index: int = 0
    chosen: Optional[ScheduleData] = None
    pending_delete: str = ""

    def handle_key(self, key: str) -> DuplicateAction:
        """React to a key press and say what should happen next."""
        if key == "up":
            if self.index > 0:
                self.index -= 1
            return DuplicateAction.NONE
        if key == "down":
            if self.index < len(self.schedules) - 1:
                self.index += 1
            return DuplicateAction.NONE
        if key == "e":
            if 0 <= self.index < len(self.schedules):
                self.chosen = replace(self.schedules[self.index])
                self.index = 0
                return DuplicateAction.EDIT
            return DuplicateAction.NONE
        if key == "d":
            if 0 <= self.index < len(self.schedules):
                self.pending_delete = self.schedules[self.index].timer_name
                return DuplicateAction.DELETE
            return DuplicateAction.NONE
        if key == "esc":
            return DuplicateAction.BACK
        if key in ("q", "ctrl+c"):
            return DuplicateAction.QUIT
        return DuplicateAction.NONE

    def render(self, duplicate_names: Iterable[str], mode: Mode) -> str:
        """The screen listing the clashing databases and schedules."""
        parts = [render_header(mode)]
        parts.append(SECTION_TITLE_STYLE.render("Duplicate Schedule Detected") + "\n\n")
        parts.append(AUTH_STYLE.render("⚠ Warning: Backup already scheduled for:\n"))
        parts.extend(f"  - {name}\n" for name in duplicate_names)
        parts.append("\n")
        parts.append("Existing schedules:\n\n")

        if not self.schedules:
            parts.append("No conflicting schedules found.\n\n")
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
        parts.append(FOOTER_STYLE.render(" ↑↓ navigate    E edit time    D delete    ESC back    Ctrl+C exit "))
        return "".join(parts)