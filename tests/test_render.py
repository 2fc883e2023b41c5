from mirrorvault.render import (
    Mode,
    extract_version,
    filter_default_databases,
    format_bytes,
    format_database_list,
    is_default_database,
    normalize_version,
    pad_string,
    render_divider,
    render_header,
    render_section,
)
from mirrorvault.scan import Database, DatabaseType, ScanResult
from mirrorvault.selection import ALL_DATABASES_NAME
from mirrorvault.styles import NO_AUTH_STYLE, visible_width


def test_normalize_mysql_version():
    assert normalize_version("MySQL", "mysql  Ver 8.0.36 for Linux") == "8.0.36"


def test_normalize_postgres_version():
    assert normalize_version("PostgreSQL", "PostgreSQL 16.2 (Ubuntu)") == "16.2"


def test_normalize_other_engine_is_lowercased():
    assert normalize_version("SQLite", "V3.45") == "v3.45"


def test_extract_version_without_match_returns_input():
    assert extract_version("no digits here", "8.") == "no digits here"
    assert extract_version("redis 7.2.4-x", "9.", "7.") == "7.2.4"


def test_mongodb_defaults_filtered():
    names = ["admin", "events", "config", "local", "users"]
    assert filter_default_databases("MongoDB", names) == ["events", "users"]
    assert filter_default_databases("MySQL", names) == names
    assert is_default_database("MongoDB", "admin")
    assert not is_default_database("MySQL", "admin")


def test_format_database_list():
    assert format_database_list([ALL_DATABASES_NAME]) == "All databases"
    assert format_database_list(["a", "b"]) == "a, b"
    assert format_database_list(["a", ALL_DATABASES_NAME]) == "a, All databases"


def test_format_bytes():
    assert format_bytes(512) == "512 B"
    assert format_bytes(1024) == "1.0 KB"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(1024 * 1024) == "1.0 MB"


def test_format_bytes_unit_grows_with_size():
    units = [format_bytes(1024 ** k).split()[1] for k in range(1, 6)]
    assert len(set(units)) == 5


def test_pad_string_ignores_escape_codes():
    styled = NO_AUTH_STYLE.render("ok")
    padded = pad_string(styled, 10)
    assert visible_width(padded) == 10
    assert padded.startswith(styled)
    assert pad_string("longer text", 3) == "longer text"


def test_render_header_modes():
    assert "Mode: Scan (read-only)" in render_header(Mode.SCAN)
    assert "Mode: Backup Scheduler" in render_header(Mode.SCHEDULE)
    assert "Mode: Backup" in render_header(Mode.BACKUP)
    assert render_header(Mode.BACKUP).endswith("\n\n")


def test_render_section_counts_and_filters():
    result = ScanResult(
        databases=[
            Database(1, "MySQL", "8.0.36", DatabaseType.SQL, False, ["app"]),
            Database(2, "PostgreSQL", "16.2", DatabaseType.SQL, True, ["billing"]),
            Database(3, "MongoDB", "7.0", DatabaseType.NOSQL, False, ["admin", "events"]),
        ]
    )
    sql = render_section("SQL DATABASES", DatabaseType.SQL, result)
    assert "SQL DATABASES (2)" in sql
    assert "MySQL Databases" in sql
    assert "  • billing" in sql
    assert "MongoDB" not in sql

    nosql = render_section("NOSQL DATABASES", DatabaseType.NOSQL, result)
    assert "NOSQL DATABASES (1)" in nosql
    assert "  • events" in nosql
    assert "  • admin" not in nosql


def test_render_divider_width():
    assert visible_width(render_divider()) == 50