"""
Record store behaviour against a temporary JSON document.
"""
from __future__ import annotations

import json

import pytest

import medinfo.repositories.json_storage as json_storage
from medinfo.core.security import verify_password
from medinfo.repositories.errors import (
    AdministratorExistsError,
    EntryNotFoundError,
    StorageError,
)
from medinfo.repositories.json_storage import JsonRecordStore

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_initialize_creates_document_with_hashed_default_admin(json_store, settings):
    doc = _read(settings.data_file)
    assert set(doc) == {"admins", "diseases", "nextId"}
    assert doc["diseases"] == []
    assert doc["nextId"] == 1
    assert len(doc["admins"]) == 1
    admin = doc["admins"][0]
    assert admin["username"] == ADMIN_USERNAME
    assert admin["password"] != ADMIN_PASSWORD
    assert verify_password(ADMIN_PASSWORD, admin["password"])
    # pretty-printed
    assert "\n  " in settings.data_file.read_text(encoding="utf-8")


def test_initialize_keeps_existing_document_untouched(settings, write_document):
    path = write_document(
        {
            "admins": [{"id": 1, "username": "boss", "password": "argon2$x", "created_at": "2024-01-01T00:00:00.000Z"}],
            "diseases": [],
            "nextId": 3,
        }
    )
    before = path.read_text(encoding="utf-8")
    store = JsonRecordStore(settings=settings)
    store.initialize()
    assert path.read_text(encoding="utf-8") == before
    assert store.find_administrator("boss") is not None
    assert store.find_administrator(ADMIN_USERNAME) is None


def test_document_without_admins_gets_default_admin(settings, write_document):
    path = write_document({"admins": [], "diseases": [], "nextId": 1})
    store = JsonRecordStore(settings=settings)
    store.initialize()
    assert store.find_administrator(ADMIN_USERNAME) is not None
    assert len(_read(path)["admins"]) == 1


def test_corrupt_document_is_replaced_with_fresh_one(settings):
    settings.data_file.write_text("{not json", encoding="utf-8")
    store = JsonRecordStore(settings=settings)
    store.initialize()
    doc = _read(settings.data_file)
    assert doc["nextId"] == 1
    assert [a["username"] for a in doc["admins"]] == [ADMIN_USERNAME]


def test_find_administrator_is_exact_and_case_sensitive(json_store):
    assert json_store.find_administrator(ADMIN_USERNAME) is not None
    assert json_store.find_administrator(ADMIN_USERNAME.upper()) is None
    assert json_store.find_administrator(ADMIN_USERNAME[:-1]) is None


def test_add_then_get_returns_inputs_with_normalized_optionals(json_store):
    entry_id = json_store.add_entry("Measles", None, None, "Rest and fluids")
    entry = json_store.get_entry(entry_id)
    assert entry is not None
    assert entry.id == entry_id
    assert entry.name == "Measles"
    assert entry.description == ""
    assert entry.symptoms == ""
    assert entry.treatment == "Rest and fluids"
    assert entry.created_at == entry.updated_at


def test_update_keeps_id_and_created_at(json_store, monkeypatch):
    monkeypatch.setattr(json_storage, "utc_timestamp", lambda: "2024-01-01T00:00:00.000Z")
    entry_id = json_store.add_entry("Cold", "Common cold", "Sneezing", "Rest")
    monkeypatch.setattr(json_storage, "utc_timestamp", lambda: "2024-02-01T00:00:00.000Z")

    assert json_store.update_entry(entry_id, "Common cold", "", "Sneezing, cough", "Fluids") == 1

    entry = json_store.get_entry(entry_id)
    assert entry.id == entry_id
    assert entry.created_at == "2024-01-01T00:00:00.000Z"
    assert entry.updated_at == "2024-02-01T00:00:00.000Z"
    assert entry.name == "Common cold"
    assert entry.description == ""
    assert entry.symptoms == "Sneezing, cough"
    assert entry.treatment == "Fluids"


def test_updated_at_never_moves_before_created_at(json_store, monkeypatch):
    monkeypatch.setattr(json_storage, "utc_timestamp", lambda: "2024-05-01T00:00:00.000Z")
    entry_id = json_store.add_entry("Gout", "", "", "Diet")
    # clock stepped backwards
    monkeypatch.setattr(json_storage, "utc_timestamp", lambda: "2024-04-01T00:00:00.000Z")
    json_store.update_entry(entry_id, "Gout", "", "", "Diet and medication")
    entry = json_store.get_entry(entry_id)
    assert entry.updated_at >= entry.created_at


def test_delete_removes_entry(json_store):
    keep = json_store.add_entry("Asthma", "", "", "Inhaler")
    gone = json_store.add_entry("Flu", "", "", "Rest")
    assert json_store.delete_entry(gone) == 1
    assert [e.id for e in json_store.list_entries()] == [keep]
    assert json_store.get_entry(gone) is None


def test_update_and_delete_missing_entry_raise_not_found(json_store):
    with pytest.raises(EntryNotFoundError):
        json_store.update_entry(99, "X", "", "", "Y")
    with pytest.raises(EntryNotFoundError):
        json_store.delete_entry(99)
    with pytest.raises(EntryNotFoundError):
        json_store.delete_entry("abc")


def test_get_entry_with_non_integer_id_is_not_found(json_store):
    json_store.add_entry("Flu", "", "", "Rest")
    assert json_store.get_entry("abc") is None
    assert json_store.get_entry("1.5") is None
    for digits in ("\u00b2", "\u2460", "\u0663"):
        assert json_store.get_entry(digits) is None
        with pytest.raises(EntryNotFoundError):
            json_store.delete_entry(digits)
    assert json_store.get_entry(None) is None
    assert json_store.get_entry("1") is not None


def test_list_is_sorted_by_name_regardless_of_insertion(json_store):
    for name in ("Flu", "Asthma", "Zika"):
        json_store.add_entry(name, "", "", "Rest")
    assert [e.name for e in json_store.list_entries()] == ["Asthma", "Flu", "Zika"]


def test_sort_ignores_case_and_accents_and_keeps_ties_stable(json_store):
    first = json_store.add_entry("flu", "first", "", "Rest")
    second = json_store.add_entry("flu", "second", "", "Rest")
    json_store.add_entry("Ébola", "", "", "Supportive care")
    json_store.add_entry("Dengue", "", "", "Fluids")
    entries = json_store.list_entries()
    assert [e.name for e in entries] == ["Dengue", "Ébola", "flu", "flu"]
    assert [e.id for e in entries[2:]] == [first, second]


def test_names_differing_only_in_case_sort_lowercase_first(json_store):
    json_store.add_entry("Mumps", "", "", "Rest")
    json_store.add_entry("mumps", "", "", "Rest")
    json_store.add_entry("Lyme", "", "", "Antibiotics")
    assert [e.name for e in json_store.list_entries()] == ["Lyme", "mumps", "Mumps"]


def test_search_matches_any_text_field_case_insensitively(json_store):
    json_store.add_entry("Influenza", "Causes flu-like illness", "", "Antivirals")
    json_store.add_entry("Migraine", "Recurring headache", "Nausea", "Analgesics")
    json_store.add_entry("Covid-19", "", "Fever, FLU symptoms", "Rest")

    names = [e.name for e in json_store.search_entries("flu")]
    assert names == ["Covid-19", "Influenza"]
    assert [e.name for e in json_store.search_entries("NAUSEA")] == ["Migraine"]
    assert json_store.search_entries("tuberculosis") == []


def test_ids_are_never_reused(json_store):
    first = json_store.add_entry("A", "", "", "t")
    second = json_store.add_entry("B", "", "", "t")
    assert first != second
    json_store.delete_entry(second)
    third = json_store.add_entry("C", "", "", "t")
    assert third not in {first, second}
    assert third > second


def test_counter_continues_from_persisted_next_id(settings, write_document):
    path = write_document(
        {
            "admins": [{"id": 1, "username": "boss", "password": "argon2$x", "created_at": "2024-01-01T00:00:00.000Z"}],
            "diseases": [],
            "nextId": 5,
        }
    )
    store = JsonRecordStore(settings=settings)
    store.initialize()
    assert store.add_entry("Malaria", "", "", "Antimalarials") == 5
    assert _read(path)["nextId"] == 6


def test_counter_is_raised_past_existing_ids(settings, write_document):
    write_document(
        {
            "admins": [],
            "diseases": [
                {"id": 7, "name": "Mumps", "treatment": "Rest", "created_at": "2024-01-01T00:00:00.000Z"}
            ],
            "nextId": 2,
        }
    )
    store = JsonRecordStore(settings=settings)
    store.initialize()
    assert store.add_entry("Rubella", "", "", "Rest") == 8


def test_mutations_are_written_through(json_store, settings):
    entry_id = json_store.add_entry("Scabies", "Skin infestation", "Itching", "Permethrin")
    doc = _read(settings.data_file)
    assert doc["diseases"][0]["id"] == entry_id
    assert doc["diseases"][0]["symptoms"] == "Itching"

    reloaded = JsonRecordStore(settings=settings)
    reloaded.initialize()
    assert reloaded.get_entry(entry_id).name == "Scabies"


def test_returned_entries_are_copies(json_store):
    entry_id = json_store.add_entry("Flu", "", "", "Rest")
    entry = json_store.get_entry(entry_id)
    entry.name = "Changed"
    assert json_store.get_entry(entry_id).name == "Flu"


def test_write_failure_raises_storage_error(json_store, tmp_path):
    json_store.path = tmp_path  # a directory cannot be written as a file
    with pytest.raises(StorageError):
        json_store.add_entry("Flu", "", "", "Rest")


def test_add_administrator_and_reset_password(json_store):
    admin = json_store.add_administrator("second", "another-password")
    assert admin.id == 2
    with pytest.raises(AdministratorExistsError):
        json_store.add_administrator("second", "whatever-else")
    json_store.set_administrator_password("second", "rotated-password")
    stored = json_store.find_administrator("second")
    assert verify_password("rotated-password", stored.password)
    assert not verify_password("another-password", stored.password)
