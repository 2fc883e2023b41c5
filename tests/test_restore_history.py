import re

import pytest

from mirrorvault.restore_history import (
    HistoryAction,
    HistoryView,
    RestoreHistoryItem,
    wrap_path,
    wrap_words,
)
from mirrorvault.styles import visible_width

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def plain(text):
    return _ANSI.sub("", text)


def make_item(n, **kwargs):
    defaults = dict(
        timestamp=f"2026-01-0{n} 10:00:00",
        engine="MySQL",
        database=f"app_db_{n}",
        dump_path="/var/backups/app.sql",
        dump_format="sql",
        success=True,
    )
    defaults.update(kwargs)
    return RestoreHistoryItem(**defaults)


def test_wrap_words_keeps_all_words_in_order():
    text = "connection refused while restoring the database dump " * 4
    lines = wrap_words(text, 20)
    assert " ".join(lines) == " ".join(text.split())
    assert all(len(line) <= 20 for line in lines)
    assert len(lines) > 1


def test_wrap_words_overlong_word_kept_whole():
    word = "x" * 30
    assert wrap_words(f"a {word} b", 10) == ["a", word, "b"]


def test_wrap_words_whitespace_only():
    assert wrap_words("   ", 10) == ["   "]


def test_wrap_path_short_unchanged():
    assert wrap_path("/tmp/a.sql", 46) == ["/tmp/a.sql"]


def test_wrap_path_without_slashes():
    path = "a" * 100
    lines = wrap_path(path, 46)
    assert len(lines[0]) == 46
    assert all(line.startswith("...") for line in lines[1:])
    assert lines[0] + "".join(line[3:] for line in lines[1:]) == path


def test_wrap_path_breaks_at_slashes():
    path = "/var/lib/mirrorvault/pre_restore/mysql/app_database/backup_2026_01_09.sql"
    lines = wrap_path(path, 30)
    assert len(lines) > 1
    assert all(line.startswith("...") for line in lines[1:])
    assert all(len(line.removeprefix("...")) <= 30 for line in lines)
    assert "/".join([lines[0]] + [line[3:] for line in lines[1:]]) == path


def test_wrap_path_long_component_is_chunked():
    long_part = "b" * 80
    path = f"{long_part}/tail.sql"
    lines = wrap_path(path, 46)
    assert len(lines[0]) == 46
    joined = lines[0] + "".join(line[3:] for line in lines[1:-1])
    assert joined == long_part
    assert lines[-1] == "...tail.sql"


def test_render_empty_history():
    out = plain(HistoryView().render())
    assert "No restore operations found." in out
    assert "Press Esc to go back" in out


def test_render_success_entry():
    view = HistoryView(items=[make_item(1)], terminal_height=100)
    out = plain(view.render())
    assert "Restore #1 - 2026-01-01 10:00:00" in out
    assert "✓ SUCCESS" in out
    assert "Engine: MySQL" in out
    assert "Database: app_db_1" in out
    assert "Scroll" not in out


def test_render_failed_rolled_back_entry_shows_error():
    error = "restore failed because the dump file was truncated " * 3
    item = make_item(1, success=False, rolled_back=True, error=error, compressed=True)
    out = plain(HistoryView(items=[item], terminal_height=100).render())
    assert "✗ FAILED" in out
    assert "(ROLLED BACK)" in out
    assert "(compressed)" in out
    assert "Error: restore" in out
    for word in error.split():
        assert word in out


def test_long_dump_path_truncated_keeping_tail():
    dump_path = "/data/" + "q" * 100 + "/final.sql"
    out = plain(HistoryView(items=[make_item(1, dump_path=dump_path)], terminal_height=100).render())
    assert dump_path not in out
    assert "Dump Path: ..." in out
    assert "/final.sql" in out


def test_invalid_offset_starts_from_first():
    view = HistoryView(items=[make_item(1), make_item(2)], scroll_offset=10)
    out = plain(view.render())
    assert "Restore #1 -" in out


def test_small_terminal_shows_scroll_indicator():
    view = HistoryView(items=[make_item(1), make_item(2), make_item(3)], terminal_height=24)
    out = plain(view.render())
    assert "Restore #1 -" in out
    assert "Restore #2 -" not in out
    assert "[Scroll: 0% ↑/k up ↓/j down] Ctrl+C exit" in out


def test_down_stops_at_last_page():
    items = [make_item(i) for i in range(1, 4)]
    view = HistoryView(items=items, terminal_height=24)
    for _ in range(10):
        assert view.handle_key("j") is HistoryAction.NONE
    assert view.scroll_offset == len(items) - 1
    assert f"Restore #{len(items)} -" in plain(view.render())


def test_down_does_nothing_when_all_fit():
    view = HistoryView(items=[make_item(1), make_item(2)], terminal_height=100)
    view.handle_key("down")
    assert view.scroll_offset == 0


@pytest.mark.parametrize("key", ["up", "k"])
def test_up_stops_at_zero(key):
    view = HistoryView(items=[make_item(1), make_item(2)], scroll_offset=1)
    view.handle_key(key)
    assert view.scroll_offset == 0
    view.handle_key(key)
    assert view.scroll_offset == 0


def test_esc_goes_back_and_resets():
    view = HistoryView(items=[make_item(1), make_item(2)], scroll_offset=1)
    assert view.handle_key("esc") is HistoryAction.BACK
    assert view.scroll_offset == 0


def test_out_of_range_offset_clamped_on_key():
    view = HistoryView(items=[make_item(1)], scroll_offset=5)
    assert view.handle_key("enter") is HistoryAction.NONE
    assert view.scroll_offset == 0