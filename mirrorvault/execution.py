"""Backup execution state, progress events and the execution screen."""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from mirrorvault.render import format_bytes
from mirrorvault.styles import (
    AUTH_STYLE,
    DIVIDER_STYLE,
    ERROR_STYLE,
    FOOTER_STYLE,
    ITEM_STYLE,
    NO_AUTH_STYLE,
    SECTION_TITLE_STYLE,
    SUMMARY_BOX_STYLE,
)

_LEFT_WIDTH = 30
_BUS_CAPACITY = 100


class ExecStatus(Enum):
    """Where one database backup stands."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


class DriveStatus(Enum):
    """Where the cloud upload of one backup stands."""

    NONE = "none"
    CHECKING = "checking"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"


_STATUS_LABELS = {
    ExecStatus.PENDING: "⏳ pending",
    ExecStatus.RUNNING: "▶ running",
    ExecStatus.DONE: "✔ done",
    ExecStatus.FAILED: "✖ failed",
}

_DRIVE_STAGES = {
    "checking": DriveStatus.CHECKING,
    "uploading": DriveStatus.UPLOADING,
    "done": DriveStatus.DONE,
    "skipped": DriveStatus.SKIPPED,
    "failed": DriveStatus.FAILED,
}


def exec_status_from_name(status: str) -> ExecStatus:
    """Map a reported status word to a status; anything unknown counts as failed."""
    if status == "running":
        return ExecStatus.RUNNING
    if status == "done":
        return ExecStatus.DONE
    return ExecStatus.FAILED


def drive_status_from_stage(stage: str) -> DriveStatus:
    """Map a reported upload stage to a status; anything unknown means none."""
    return _DRIVE_STAGES.get(stage, DriveStatus.NONE)


@dataclass
class ExecItem:
    """One database being backed up."""

    engine: str
    database: str
    status: ExecStatus = ExecStatus.PENDING
    path: str = ""
    size: int = 0
    error: Optional[BaseException] = None
    drive_status: DriveStatus = DriveStatus.NONE
    drive_message: str = ""
    drive_remote_name: str = ""
    drive_error: Optional[BaseException] = None
    drive_account_remaining: int = 0
    drive_account_total: int = 0
    drive_backup_size: int = 0


@dataclass(frozen=True)
class ExecProgress:
    """A backup progress report for one database."""

    engine: str
    database: str
    status: ExecStatus
    path: str = ""
    size: int = 0
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class DriveProgress:
    """An upload progress report for one database."""

    engine: str
    database: str
    stage: str
    message: str = ""
    remote_name: str = ""
    backup_size: int = 0
    account_remaining: int = 0
    account_total: int = 0
    error: Optional[BaseException] = None


@dataclass
class ExecState:
    """Progress of a whole backup run."""

    items: list[ExecItem] = field(default_factory=list)
    index: int = 0
    done: bool = False
    await_exit: bool = False

    def _matching(self, engine: str, database: str):
        return (
            item for item in self.items
            if item.engine == engine and item.database == database
        )

    def apply_exec_progress(self, event: ExecProgress) -> None:
        """Record a backup progress report and note when all items finished."""
        for item in self._matching(event.engine, event.database):
            item.status = event.status
            item.path = event.path
            item.size = event.size
            item.error = event.error
            if event.status in (ExecStatus.DONE, ExecStatus.FAILED):
                self.index += 1
        if self.index >= len(self.items):
            self.done = True
            self.await_exit = True

    def apply_drive_progress(self, event: DriveProgress) -> None:
        """Record an upload progress report."""
        for item in self._matching(event.engine, event.database):
            item.drive_message = event.message
            item.drive_remote_name = event.remote_name
            item.drive_error = event.error
            item.drive_backup_size = event.backup_size
            item.drive_account_remaining = event.account_remaining
            item.drive_account_total = event.account_total
            item.drive_status = drive_status_from_stage(event.stage)

    def has_failures(self) -> bool:
        """Whether any backup failed."""
        return any(item.status is ExecStatus.FAILED for item in self.items)


def new_exec_state(engine: str, databases: list[str]) -> ExecState:
    """A run with one pending item per database of one engine."""
    return ExecState(items=[ExecItem(engine=engine, database=db) for db in databases])


class ProgressBus:
    """A bounded queue carrying progress reports from workers to the interface."""

    def __init__(self, capacity: int = _BUS_CAPACITY) -> None:
        self._queue: queue.Queue[Union[ExecProgress, DriveProgress]] = queue.Queue(maxsize=capacity)

    def emit_exec_progress(
        self,
        engine: str,
        database: str,
        path: str,
        size: int,
        status: str,
        error: Optional[BaseException],
    ) -> None:
        """Queue a backup progress report; status is "running", "done" or a failure."""
        self._queue.put(
            ExecProgress(
                engine=engine,
                database=database,
                status=exec_status_from_name(status),
                path=path,
                size=size,
                error=error,
            )
        )

    def emit_drive_progress(
        self,
        engine: str,
        database: str,
        stage: str,
        message: str,
        remote_name: str,
        backup_size: int,
        account_remaining: int,
        account_total: int,
        error: Optional[BaseException],
    ) -> None:
        """Queue an upload progress report."""
        self._queue.put(
            DriveProgress(
                engine=engine,
                database=database,
                stage=stage,
                message=message,
                remote_name=remote_name,
                backup_size=backup_size,
                account_remaining=account_remaining,
                account_total=account_total,
                error=error,
            )
        )

    def next(self, timeout: Optional[float] = None) -> Union[ExecProgress, DriveProgress]:
        """Wait for the next report; raise TimeoutError if none arrives in time."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("no progress report received") from None


def _drive_text(item: ExecItem) -> str:
    status = item.drive_status
    if status is DriveStatus.CHECKING:
        if item.drive_account_total > 0:
            return (
                f"checking free space ({format_bytes(item.drive_account_remaining)}"
                f" / {format_bytes(item.drive_account_total)} remaining)"
            )
        return "checking free space"
    if status is DriveStatus.UPLOADING:
        return "uploading backup"
    if status is DriveStatus.DONE:
        return f"uploaded ({item.drive_remote_name})" if item.drive_remote_name else "uploaded"
    if status is DriveStatus.SKIPPED:
        return f"skipped - {item.drive_message}" if item.drive_message else "skipped"
    if status is DriveStatus.FAILED:
        return f"failed - {item.drive_error}" if item.drive_error is not None else "failed"
    return ""


def render_execute(state: ExecState) -> str:
    """The execution screen: per-database status, uploads and the final summary."""
    parts = [SECTION_TITLE_STYLE.render("Executing Backups") + "\n\n"]

    for i, item in enumerate(state.items):
        if i > 0:
            parts.append("\n" + DIVIDER_STYLE.render("─" * 44) + "\n\n")

        left = f"{item.engine} / {item.database}"
        if len(left) > _LEFT_WIDTH:
            left = left[:_LEFT_WIDTH - 3] + "..."
        parts.append(f"{ITEM_STYLE.render(left):<{_LEFT_WIDTH}} {_STATUS_LABELS[item.status]}\n")

        if item.status is ExecStatus.DONE and item.path:
            parts.append(ITEM_STYLE.render(f"   ↳ {item.path} ({format_bytes(item.size)})") + "\n")
            parts.append(ITEM_STYLE.render("   ↳ Validation: OK") + "\n")

        if item.drive_status is not DriveStatus.NONE:
            parts.append(ITEM_STYLE.render("   ↳ Drive: " + _drive_text(item)) + "\n")

        if item.status is ExecStatus.FAILED and item.error is not None:
            parts.append(ERROR_STYLE.render(f"   ↳ Error: {item.error}") + "\n")

    if state.done:
        parts.append("\n")
        if state.has_failures():
            parts.append(AUTH_STYLE.render("Backup completed with errors") + "\n\n")
        else:
            parts.append(NO_AUTH_STYLE.render("Backup completed successfully") + "\n\n")
        parts.append(FOOTER_STYLE.render(" Press Enter to exit "))

    return "\n\n" + SUMMARY_BOX_STYLE.render("".join(parts))