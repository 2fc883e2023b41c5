import pytest

from mirrorvault.render import format_bytes
from mirrorvault.restore_select import RestoreSelectAction, RestoreSelector
from mirrorvault.restore_view import DatabaseStats, RestorePlan
from mirrorvault.scan import Database, DatabaseType, ScanResult


def _scan():
    return ScanResult(
        databases=[
            Database(1, "MySQL", "8.0.36", DatabaseType.SQL, requires_auth=True, names=["shop", "blog"]),
            Database(2, "MongoDB", "7.0", DatabaseType.NOSQL, names=["admin", "app", "local"], running=False),
            Database(3, "Redis", "7.2", DatabaseType.NOSQL, names=[]),
        ]
    )


@pytest.fixture
def selector():
    return RestoreSelector(scan_result=_scan())


def test_engine_navigation_is_bounded(selector):
    selector.handle_engine_key("up")
    assert selector.selection.engine_index == 0
    for _ in range(5):
        selector.handle_engine_key("down")
    assert selector.selection.engine_index == 2
    assert selector.current_engine().engine == "Redis"


def test_engine_enter_without_databases_does_nothing(selector):
    selector.selection.engine_index = 2
    assert selector.handle_engine_key("enter") is RestoreSelectAction.NONE


def test_engine_enter_opens_db_and_resets_index(selector):
    selector.selection.db_index = 1
    assert selector.handle_engine_key("enter") is RestoreSelectAction.OPEN_DB
    assert selector.selection.db_index == 0


def test_engine_quit(selector):
    assert selector.handle_engine_key("q") is RestoreSelectAction.QUIT


def test_db_select_filters_default_mongo_databases(selector):
    selector.selection.engine_index = 1
    assert selector.selected_database() == "app"
    selector.handle_db_key("down")
    assert selector.selection.db_index == 0
    assert "admin" not in selector.render_db_select()


def test_db_enter_resets_restore_input(selector):
    selector.dump_path = "/tmp/x.sql"
    selector.source_index = 1
    selector.error = ValueError("old")
    assert selector.handle_db_key("enter") is RestoreSelectAction.OPEN_SOURCE
    assert selector.dump_path == ""
    assert selector.source_index == 0
    assert selector.error is None


def test_db_key_without_engine_goes_back():
    empty = RestoreSelector()
    assert empty.handle_db_key("down") is RestoreSelectAction.BACK
    assert empty.selected_database() is None


def test_typing_and_backspace(selector):
    for ch in "/tmp/a.sql":
        selector.handle_dump_path_key(ch)
    assert selector.dump_path == "/tmp/a.sql"
    selector.handle_dump_path_key("backspace")
    assert selector.dump_path == "/tmp/a.sq"


def test_q_quits_only_when_path_empty(selector):
    assert selector.handle_dump_path_key("q") is RestoreSelectAction.QUIT
    selector.handle_dump_path_key("/")
    assert selector.handle_dump_path_key("q") is RestoreSelectAction.NONE
    assert selector.dump_path == "/q"


def test_enter_with_empty_path_sets_error(selector):
    assert selector.handle_dump_path_key("enter") is RestoreSelectAction.NONE
    assert str(selector.error) == "dump file path cannot be empty"
    selector.handle_dump_path_key("x")
    assert selector.error is None
    assert selector.handle_dump_path_key("enter") is RestoreSelectAction.CONFIRM


def test_f1_uses_latest_backup(selector):
    calls = []

    def finder(engine, database):
        calls.append((engine, database))
        return "/var/backups/shop.sql"

    selector.find_latest_backup = finder
    selector.handle_dump_path_key("f1")
    assert selector.dump_path == "/var/backups/shop.sql"
    assert calls == [("MySQL", "shop")]


def test_f1_failure_clears_path_and_reports(selector):
    def finder(engine, database):
        raise FileNotFoundError("nothing here")

    selector.find_latest_backup = finder
    selector.dump_path = "/old"
    selector.handle_dump_path_key("f1")
    assert selector.dump_path == ""
    assert "failed to find latest backup" in str(selector.error)
    assert "nothing here" in str(selector.error)


def test_render_engine_select_marks(selector):
    text = selector.render_engine_select()
    assert "> ● MySQL (8.0.36)" in text
    assert "○ MongoDB (7.0)" in text
    assert "[Auth]" in text


def test_render_dump_path_placeholder_and_value(selector):
    assert "[Type or paste dump file path here]" in selector.render_dump_path()
    selector.dump_path = "/tmp/dump.sql.gz"
    text = selector.render_dump_path()
    assert "  /tmp/dump.sql.gz" in text
    assert "Database: shop" in text


def test_render_dump_path_shows_error(selector):
    selector.handle_dump_path_key("enter")
    assert "⚠ Error: dump file path cannot be empty" in selector.render_dump_path()


def test_render_confirm_without_plan(selector):
    assert selector.render_confirm(None, None) == "Error: Restore plan not initialized"


def test_render_confirm_without_engine():
    plan = RestorePlan(engine="MySQL", database="shop", dump_path="/tmp/a.sql")
    assert RestoreSelector().render_confirm(plan, None) == "Error: Engine not selected"


def test_render_confirm_with_stats(selector):
    plan = RestorePlan(engine="MySQL", database="shop", dump_path="/tmp/a.sql")
    stats = DatabaseStats(table_count=3, total_rows=42, size=2048)
    text = selector.render_confirm(plan, stats)
    assert "Dump Path: /tmp/a.sql" in text
    assert "  Tables: 3" in text
    assert "  Total Rows: 42" in text
    assert f"  Size: {format_bytes(2048)}" in text
    assert "Current Database Statistics" not in selector.render_confirm(plan, None)