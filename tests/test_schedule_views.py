import re

from mirrorvault.render import Mode
from mirrorvault.schedule_views import ScheduleList, ScheduleListAction, render_schedule_format
from mirrorvault.schedules import ScheduleData
from mirrorvault.selection import ALL_DATABASES_NAME

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def _plain(text):
    return _ANSI.sub("", text)


def _list():
    return ScheduleList(
        schedules=[
            ScheduleData("MySQL", ["app"], "02:30", compression="gz", timer_name="mv-mysql-app"),
            ScheduleData("Redis", [ALL_DATABASES_NAME], "06:00", timer_name="mv-redis-all"),
        ]
    )


def test_cursor_stays_in_range():
    view = _list()
    assert view.handle_key("up") is ScheduleListAction.NONE
    assert view.index == 0
    view.handle_key("down")
    view.handle_key("down")
    assert view.index == 1


def test_edit_returns_copy_of_selected():
    view = _list()
    view.handle_key("down")
    assert view.handle_key("e") is ScheduleListAction.EDIT
    assert view.chosen == view.schedules[1]
    assert view.chosen is not view.schedules[1]


def test_delete_marks_timer():
    view = _list()
    assert view.handle_key("d") is ScheduleListAction.DELETE
    assert view.pending_delete == "mv-mysql-app"


def test_empty_list_ignores_edit_and_delete():
    view = ScheduleList()
    assert view.handle_key("e") is ScheduleListAction.NONE
    assert view.handle_key("d") is ScheduleListAction.NONE
    assert view.chosen is None
    assert view.pending_delete == ""


def test_exit_keys_quit():
    for key in ("enter", "q", "ctrl+c"):
        assert _list().handle_key(key) is ScheduleListAction.QUIT


def test_render_entries():
    text = _plain(_list().render(Mode.SCHEDULE))
    assert "Mode: Backup Scheduler" in text
    assert "All Scheduled Backups" in text
    assert "> Engine: MySQL" in text
    assert "  Engine: Redis" in text
    assert "Format: Compressed (gz)" in text
    assert "Databases: All databases" in text
    assert "Format: Native" in text
    assert "E edit time" in text


def test_render_without_mode_has_no_mode_line():
    text = _plain(ScheduleList().render(Mode.SCAN))
    assert "Mode:" not in text
    assert "MirrorVault" in text
    assert "No scheduled backups found." in text
    assert "Press Enter to exit" in text


def test_render_schedule_format_cursor():
    text = _plain(render_schedule_format(1, Mode.SCHEDULE))
    assert "Select Backup Format" in text
    assert "  Native format (no compression)" in text
    assert "> Compressed (gzip)" in text
    assert "ESC back" in text