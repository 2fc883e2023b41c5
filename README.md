# mirrorvault

Terminal screens and state handling for a database backup agent: listing the
database servers a scan found, choosing databases to back up, following backup
progress, entering daily backup times, and reviewing restore progress and
restore history.

The package uses only the standard library. Every screen is returned as a
plain string with ANSI colour codes, ready to print. Key handling lives in
small state objects that take key names such as `"up"`, `"down"`, `"enter"`,
`"esc"`, `" "` (space) or a typed character, update themselves, and return an
action value telling the caller what to do next.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `mirrorvault.scan` holds the scan result model: `DatabaseType`
  (`SQL`, `NOSQL`), `Database` and `ScanResult`. `print_scan_result` writes a
  plain listing of the engines and their databases, and
  `ask_proceed_to_backup` asks a yes/no question and returns `True` only when
  the answer is `1`.
- `mirrorvault.styles` provides `Style`, an immutable ANSI styling helper
  (colours, bold/italic/underline, padding, fixed width, rounded border,
  margins), plus `visible_width`, `join_horizontal` and `join_vertical` for
  laying out styled blocks.
- `mirrorvault.render` has the shared helpers: `Mode`, `render_header`,
  `render_section`, `render_divider`, `normalize_version`, `extract_version`,
  `filter_default_databases`, `is_default_database`, `format_database_list`,
  `format_bytes` and `pad_string`.
- `mirrorvault.selection` provides `SelectionState`, which keeps the cursor
  positions and the databases chosen per engine. `toggle` flips a choice (an
  engine that needs authentication keeps a single database and refuses the
  all-databases choice), `is_selected` checks one, and `export_selection`
  returns the choices by engine.
- `mirrorvault.execution` follows a backup run: `ExecState` with its
  `ExecItem`s, the `ExecProgress` and `DriveProgress` reports, and
  `ProgressBus`, a bounded thread-safe queue that carries reports from worker
  threads. `render_execute` draws the progress screen with its final summary.
- `mirrorvault.schedules` parses backup times with `normalize_time`, finds
  clashing schedules with `find_conflicts`, and has `ScheduleData`,
  `TimeInput`, `render_schedule_time` and `DuplicateView` for the matching
  screens.
- `mirrorvault.db_select` has `DatabaseSelector` for the engine and database
  screens, with scrolling to fit the terminal height, and `FormatSelector`
  for choosing between a native and a gzip-compressed backup.
- `mirrorvault.schedule_views` has `ScheduleList` for the list of scheduled
  backups and `render_schedule_format` for the format screen used while
  creating a schedule.
- `mirrorvault.restore_history` shows past restores through `HistoryView`,
  with `RestoreHistoryItem` records and the `wrap_words` and `wrap_path`
  line-wrapping helpers.
- `mirrorvault.restore_view` draws the restore progress screen, with a
  before-and-after summary of tables, rows and sizes, through
  `RestoreProgressView`. The data it shows is described by `RestorePlan`,
  `DatabaseStats`, `TableStats` and `ColumnInfo`.
- `mirrorvault.restore_select` provides `RestoreSelector` for the engine,
  database and dump-path steps before a restore, and its confirmation screen.
  Pressing F1 in the dump-path field calls the `find_latest_backup` function
  you give it.

## Examples

```python
from mirrorvault.render import format_bytes
from mirrorvault.schedules import normalize_time

normalize_time("6:5")    # "06:05"
normalize_time("24")     # "23:59"
normalize_time("25")     # raises ValueError
format_bytes(1536)       # "1.5 KB"
```

```python
from mirrorvault.selection import SelectionState

selection = SelectionState()
selection.toggle("MySQL", "app", requires_auth=False)   # True
selection.export_selection()                            # {"MySQL": ["app"]}
```

```python
from mirrorvault.execution import ProgressBus, new_exec_state, render_execute

bus = ProgressBus()
state = new_exec_state("MySQL", ["app"])

# typically called from a worker thread
bus.emit_exec_progress("MySQL", "app", "/tmp/app.sql", 2048, "done", None)

state.apply_exec_progress(bus.next(timeout=1))
state.done                  # True
print(render_execute(state))
```

## What this package does not do

- It has no command and no full-screen application loop. You read keys, pass
  them to the state objects, and print the strings they render.
- It does not scan servers, run backups or restores, or compute database
  statistics. It only displays the results and progress reports you give it.
- It does not store, install or remove backup schedules, and it does not
  prompt for database passwords.
- It has no cloud storage connection. Upload progress is shown only when
  `DriveProgress` reports are fed into `ExecState`.