from mirrorvault.selection import ALL_DATABASES_NAME, SelectionState


def test_new_state_is_empty():
    state = SelectionState()
    assert state.engine_index == 0
    assert state.db_index == 0
    assert state.export_selection() == {}


def test_toggle_without_auth_adds_and_removes():
    state = SelectionState()
    assert state.toggle("MySQL", "app", False) is True
    assert state.toggle("MySQL", "shop", False) is True
    assert state.export_selection() == {"MySQL": ["app", "shop"]}
    assert state.toggle("MySQL", "app", False) is False
    assert state.export_selection() == {"MySQL": ["shop"]}
    assert not state.is_selected("MySQL", "app")


def test_auth_engine_allows_one_database():
    state = SelectionState()
    state.toggle("PostgreSQL", "billing", True)
    state.toggle("PostgreSQL", "users", True)
    assert state.export_selection() == {"PostgreSQL": ["users"]}


def test_auth_engine_ignores_all_databases():
    state = SelectionState()
    assert state.toggle("PostgreSQL", ALL_DATABASES_NAME, True) is False
    assert state.export_selection() == {}


def test_all_databases_replaces_individual_choices():
    state = SelectionState()
    state.toggle("MySQL", "app", False)
    assert state.toggle("MySQL", ALL_DATABASES_NAME, False) is True
    assert state.export_selection() == {"MySQL": [ALL_DATABASES_NAME]}
    assert not state.is_selected("MySQL", "app")


def test_individual_choice_clears_all_databases():
    state = SelectionState()
    state.toggle("MySQL", ALL_DATABASES_NAME, False)
    state.toggle("MySQL", "app", False)
    assert state.export_selection() == {"MySQL": ["app"]}


def test_all_databases_toggles_off():
    state = SelectionState()
    state.toggle("Redis", ALL_DATABASES_NAME, False)
    assert state.toggle("Redis", ALL_DATABASES_NAME, False) is False
    assert state.export_selection() == {}


def test_selections_kept_per_engine():
    state = SelectionState()
    state.toggle("MySQL", "app", False)
    state.toggle("MongoDB", "events", False)
    exported = state.export_selection()
    assert exported == {"MySQL": ["app"], "MongoDB": ["events"]}
    assert state.is_selected("MongoDB", "events")
    assert not state.is_selected("MySQL", "events")