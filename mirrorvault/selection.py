"""Which engines and databases the user has picked."""

from __future__ import annotations

from dataclasses import dataclass, field

ALL_DATABASES_NAME = "__all_databases__"


@dataclass
class SelectionState:
    """Cursor positions and the chosen databases per engine."""

    engine_index: int = 0
    db_index: int = 0
    selected: dict[str, set[str]] = field(default_factory=dict)

    def export_selection(self) -> dict[str, list[str]]:
        """Chosen databases by engine; the all-databases marker stands alone."""
        result: dict[str, list[str]] = {}
        for engine, names in self.selected.items():
            if ALL_DATABASES_NAME in names:
                result[engine] = [ALL_DATABASES_NAME]
            elif names:
                result[engine] = sorted(names)
        return result

    def toggle(self, engine: str, name: str, requires_auth: bool) -> bool:
        """Flip the choice of one database and return whether it is now chosen.

        Engines that need authentication allow a single database and no
        all-databases choice.
        """
        names = self.selected.setdefault(engine, set())

        if name == ALL_DATABASES_NAME:
            if requires_auth:
                return False
            if ALL_DATABASES_NAME in names:
                names.discard(ALL_DATABASES_NAME)
                return False
            self.selected[engine] = {ALL_DATABASES_NAME}
            return True

        names.discard(ALL_DATABASES_NAME)
        if requires_auth:
            self.selected[engine] = {name}
            return True
        if name in names:
            names.discard(name)
            return False
        names.add(name)
        return True

    def is_selected(self, engine: str, name: str) -> bool:
        """Whether the database is chosen for the engine."""
        return name in self.selected.get(engine, ())