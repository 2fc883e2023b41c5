"""Scan results and the plain-text console output for them."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO


class DatabaseType(Enum):
    """Broad family a database engine belongs to."""

    SQL = "sql"
    NOSQL = "nosql"


@dataclass
class Database:
    """One database engine found on the server."""

    id: int
    engine: str
    version: str
    type: DatabaseType
    requires_auth: bool = False
    names: list[str] = field(default_factory=list)
    running: bool = True

    def display_version(self) -> str:
        """Version text for display, or "unknown" when none was detected."""
        return self.version.strip() or "unknown"


@dataclass
class ScanResult:
    """Everything a server scan found."""

    databases: list[Database] = field(default_factory=list)


def print_scan_result(result: ScanResult, out: TextIO | None = None) -> None:
    """Write a plain listing of the scanned engines and their databases."""
    out = out if out is not None else sys.stdout
    out.write("\nScanning server for databases:\n\n")

    sql_printed = False
    nosql_printed = False
    for db in result.databases:
        if db.type is DatabaseType.SQL and not sql_printed:
            out.write("SQL Databases\n")
            sql_printed = True
        if db.type is DatabaseType.NOSQL and not nosql_printed:
            out.write("\nNoSQL Databases\n")
            nosql_printed = True

        auth = "auth required" if db.requires_auth else "no auth"
        out.write(f" {db.id}) {db.engine} ({db.version}) [{auth}]\n")
        for name in db.names:
            out.write(f"    - {name}\n")


def ask_proceed_to_backup(stdin: TextIO | None = None, stdout: TextIO | None = None) -> bool:
    """Ask whether to continue with a backup; True only when the answer is "1"."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    stdout.write("\nDo you want to proceed with backup?\n")
    stdout.write("1) Yes\n")
    stdout.write("2) No (exit)\n")
    stdout.write("Enter choice: ")
    stdout.flush()

    return stdin.readline().strip() == "1"