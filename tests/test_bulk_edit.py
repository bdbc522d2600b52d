# tests/test_bulk_edit.py
"""
Tests del seguimiento de cambios para edición masiva.
"""
import logging
from unittest.mock import MagicMock

import pytest

from custom_fields.domain.errors import ValidationRejected
from custom_fields.domain.slot import EntityKind, ValueType
from custom_fields.integrations.entity_store import InMemoryEntityStore
from custom_fields.services.bulk_edit import (
    BulkChangeTracker,
    TriStateField,
    apply_bulk_patch,
    compute_changed_fields,
    track_bulk_edit,
)


def _decks():
    return {
        f"deck-{n}": {
            "name": f"Deck {n}",
            "description": f"desc {n}",
            "series": "Alpha",
            "custom_1_bool": True,
            "is_favorite": n == 1,
        }
        for n in (1, 2, 3)
    }


class TestTriStateField:
    def test_cycle(self):
        """Test: Ciclo None -> True -> False -> True."""
        field = TriStateField("is_favorite")
        assert field.state is None
        assert field.cycle() is True
        assert field.cycle() is False
        assert field.cycle() is True
        field.reset()
        assert field.state is None
        assert field.is_changed is False

    def test_set_rejects_non_boolean(self):
        """Test: Un string como "false" no es un estado válido y no altera el campo."""
        field = TriStateField("is_favorite")
        field.set(True)

        with pytest.raises(ValidationRejected) as exc_info:
            field.set("false")

        assert exc_info.value.field_name == "is_favorite"
        assert field.state is True

    def test_track_rejects_string_for_tri_state_key(self):
        tracker = BulkChangeTracker(EntityKind.DECK)

        with pytest.raises(ValidationRejected):
            tracker.track("is_favorite", "false")

        assert tracker.fields_to_update() == {}


class TestChangedFields:
    def test_only_touched_non_empty_keys(self):
        tracker = BulkChangeTracker(EntityKind.DECK)
        tracker.track("name", "X")
        tracker.track("description", "")
        tracker.track("tag", [])
        tracker.track("number", None)

        changed = tracker.changed_fields()

        assert [(f.key, f.label, f.value) for f in changed] == [("name", "Deck name", "X")]

    def test_falsy_values_are_intentional_changes(self):
        """Test: False y 0 sí se aplican (no se confunden con "sin cambio")."""
        tracker = BulkChangeTracker(EntityKind.PACK)
        tracker.track("custom_2_bool", False)
        tracker.track("custom_1_num", 0)

        assert tracker.fields_to_update() == {"custom_2_bool": False, "custom_1_num": 0}
        assert [f.label for f in tracker.changed_fields()] == ["Custom flag 2", "Custom number 1"]

    def test_remove_chip_deletes_key(self):
        tracker = BulkChangeTracker(EntityKind.DECK)
        tracker.track("name", "X")
        tracker.track("series", "Beta")

        tracker.remove("series")

        assert "series" not in tracker.edit_record
        assert tracker.fields_to_update() == {"name": "X"}

    def test_tri_state_scenario(self):
        """Test: Favorito null -> true -> false -> true; quitar el chip vuelve a null."""
        tracker = BulkChangeTracker(EntityKind.DECK)
        assert "is_favorite" not in tracker.fields_to_update()

        tracker.toggle("is_favorite")
        tracker.toggle("is_favorite")
        assert tracker.fields_to_update() == {"is_favorite": False}
        tracker.toggle("is_favorite")
        assert tracker.fields_to_update() == {"is_favorite": True}

        changed = tracker.changed_fields()
        assert changed[-1].label == "Favorite"

        tracker.remove("is_favorite")
        assert tracker.tri_states["is_favorite"].state is None
        assert "is_favorite" not in tracker.fields_to_update()
        assert "is_favorite" not in tracker.edit_record

    def test_tracking_tri_state_key_routes_to_tri_state(self):
        tracker = BulkChangeTracker(EntityKind.CARD)
        tracker.track("is_favorite", False)

        assert tracker.edit_record == {}
        assert tracker.fields_to_update() == {"is_favorite": False}

    def test_setting_changes_are_merged_per_slot(self):
        tracker = BulkChangeTracker(EntityKind.DECK)
        tracker.update_setting(ValueType.NUM, 1, {"displayName": "Cost"})
        tracker.update_setting(ValueType.NUM, 1, {"isEnabled": True})

        assert tracker.fields_to_update() == {
            "field_settings": {"num_1": {"display_name": "Cost", "is_enabled": True}}
        }

    def test_functional_forms(self):
        record = track_bulk_edit({}, "name", "X")
        record = track_bulk_edit(record, "series", "")
        favorite = TriStateField("is_favorite")
        favorite.set(True)

        changed = compute_changed_fields(record, [favorite])

        assert [(f.key, f.value) for f in changed] == [("name", "X"), ("is_favorite", True)]

    def test_functional_form_ignores_tri_state_key_in_record(self):
        """Test: Una clave de tres estados en el registro sólo cuenta vía su TriStateField."""
        record = track_bulk_edit({}, "is_favorite", False)
        favorite = TriStateField("is_favorite")

        assert compute_changed_fields(record, [favorite]) == []

        favorite.set(True)
        changed = compute_changed_fields(record, [favorite])

        assert [(f.key, f.value) for f in changed] == [("is_favorite", True)]


class TestApply:
    def test_three_decks_only_name_changes(self):
        """Test: Con editRecord {name: 'X'} sólo cambia el nombre de las 3 decks."""
        store = InMemoryEntityStore({EntityKind.DECK: _decks()})
        before = {deck_id: store.get(EntityKind.DECK, deck_id) for deck_id in store.ids(EntityKind.DECK)}
        tracker = BulkChangeTracker(EntityKind.DECK)
        tracker.track("name", "X")

        result = tracker.apply(
            store.ids(EntityKind.DECK),
            lambda ids, fields: store.bulk_update(EntityKind.DECK, ids, fields),
        )

        assert result.status == "applied"
        assert result.fields == {"name": "X"}
        for deck_id, old in before.items():
            new = store.get(EntityKind.DECK, deck_id)
            assert new["name"] == "X"
            assert {k: v for k, v in new.items() if k != "name"} == {k: v for k, v in old.items() if k != "name"}

    def test_same_patch_for_every_target(self):
        persist = MagicMock()
        tracker = BulkChangeTracker(EntityKind.CARD)
        tracker.track("rarity", "Secret")

        tracker.apply(["c1", "c2"], persist)

        persist.assert_called_once_with(["c1", "c2"], {"rarity": "Secret"})

    def test_no_changes_is_noop(self):
        """Test: Sin cambios no se llama a la persistencia y el editor se cierra."""
        persist = MagicMock()
        tracker = BulkChangeTracker(EntityKind.PACK)
        tracker.track("description", "")

        result = tracker.apply(["p1"], persist)

        assert result.is_noop
        persist.assert_not_called()
        assert tracker.edit_record == {}

    def test_persist_failure_keeps_record_for_retry(self):
        """Test: Si la persistencia falla, el error se propaga y el registro se conserva."""
        persist = MagicMock(side_effect=RuntimeError("db down"))
        tracker = BulkChangeTracker(EntityKind.DECK)
        tracker.track("name", "X")
        tracker.toggle("is_favorite")

        with pytest.raises(RuntimeError):
            tracker.apply(["d1"], persist)

        assert tracker.edit_record == {"name": "X"}
        assert tracker.tri_states["is_favorite"].state is True

        persist.side_effect = None
        result = tracker.apply(["d1"], persist)

        assert result.status == "applied"
        persist.assert_called_with(["d1"], {"name": "X", "is_favorite": True})
        assert tracker.edit_record == {}
        assert tracker.tri_states["is_favorite"].state is None

    def test_apply_bulk_patch_never_adds_keys(self):
        persist = MagicMock()

        result = apply_bulk_patch({"series": "Beta"}, ("d1",), persist)

        assert result.updated_ids == ["d1"]
        persist.assert_called_once_with(["d1"], {"series": "Beta"})

    def test_apply_bulk_patch_leaves_failure_logging_to_caller(self, caplog):
        persist = MagicMock(side_effect=KeyError("missing"))

        with caplog.at_level(logging.DEBUG, logger="custom_fields.services.bulk_edit"):
            with pytest.raises(KeyError):
                apply_bulk_patch({"name": "X"}, ["missing"], persist)

        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
