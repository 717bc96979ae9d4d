"""
Tests for word_store module.
"""

import json

import pytest

from errors import ValidationError
from word_store import LocalStorage, WordEntry, WordStore, dump_entries, parse_entries


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "kid_custom_words_v1.json")


@pytest.fixture
def store(storage, clock):
    s = WordStore(storage, clock=clock)
    s.load()
    return s


def test_add_normalizes_word_and_category(store):
    """Words and categories are stored upper-cased."""
    entry = store.add("cat", "animals", "data:image/png;base64,AAAA")

    assert entry.word == "CAT"
    assert entry.category == "ANIMALS"
    assert entry in store.filter("ALL")
    assert entry in store.filter("ANIMALS")
    assert entry not in store.filter("FRUITS")


def test_add_defaults_category(store):
    entry = store.add("  sun ", "   ", "data:image/png;base64,AAAA")
    assert entry.word == "SUN"
    assert entry.category == "GENERAL"


def test_add_rejects_empty_word(store, storage):
    """An empty word is a validation error and nothing is stored."""
    with pytest.raises(ValidationError):
        store.add("   ", "animals", "data:image/png;base64,AAAA")
    with pytest.raises(ValidationError):
        store.add("cat", "animals", "")

    assert len(store) == 0
    assert not storage.path.exists()


def test_ids_unique_within_same_millisecond(store, clock):
    """Entries created at the same instant still get distinct, increasing ids."""
    a = store.add("a", "", "data:,a")
    b = store.add("b", "", "data:,b")
    clock.now += 5
    c = store.add("c", "", "data:,c")

    assert a.id == int(clock.now * 1000) - 5000
    assert b.id == a.id + 1
    assert c.id > b.id


def test_entries_are_immutable(store):
    entry = store.add("cat", "animals", "data:,x")
    with pytest.raises(Exception):
        entry.word = "DOG"


def test_remove_missing_id_is_noop(store, storage):
    """Removing an unknown id changes nothing."""
    store.add("cat", "animals", "data:,x")
    before = storage.path.read_bytes()
    events = []
    store.subscribe(events.append)

    store.remove(424242)

    assert len(store) == 1
    assert storage.path.read_bytes() == before
    assert events == []


def test_remove_persists(store, storage):
    cat = store.add("cat", "animals", "data:,x")
    store.add("dog", "animals", "data:,y")

    store.remove(cat.id)

    assert [e.word for e in store] == ["DOG"]
    saved = json.loads(storage.path.read_text(encoding="utf-8"))
    assert [r["word"] for r in saved] == ["DOG"]


def test_filter_case_insensitive(store):
    store.add("cat", "animals", "data:,x")
    store.add("apple", "fruits", "data:,y")

    assert store.filter("Animals") == store.filter("ANIMALS")
    assert [e.word for e in store.filter("animals")] == ["CAT"]
    assert len(store.filter("all")) == 2


def test_categories_sorted_distinct(store):
    store.add("pear", "fruits", "data:,x")
    store.add("cat", "animals", "data:,y")
    store.add("dog", "animals", "data:,z")

    assert store.categories() == ["ANIMALS", "FRUITS"]


def test_insertion_order_preserved(store):
    for w in ["zebra", "apple", "moon"]:
        store.add(w, "", "data:,x")
    assert [e.word for e in store] == ["ZEBRA", "APPLE", "MOON"]


def test_load_missing_file_is_empty(store):
    assert store.load() == []


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"word": "CAT"}',
        '[{"id": 1, "word": "", "category": "A", "imageData": "x"}]',
        '[{"id": 1, "word": "CAT", "imageData": "x"}, {"id": 1, "word": "DOG", "imageData": "y"}]',
    ],
)
def test_load_malformed_is_empty(storage, clock, raw):
    """Corrupt local data loads as an empty collection instead of failing."""
    storage.path.write_text(raw, encoding="utf-8")
    store = WordStore(storage, clock=clock)

    assert store.load() == []
    assert len(store) == 0


def test_load_reads_imagedata_records(storage, clock, records):
    """Records keyed by imageData load as-is."""
    storage.path.write_text(json.dumps(records), encoding="utf-8")
    store = WordStore(storage, clock=clock)

    loaded = store.load()

    assert [e.word for e in loaded] == ["CAT", "DOG", "APPLE"]
    assert loaded[0].image == "data:image/png;base64,Y2F0"


def test_save_load_idempotent(storage, clock, records):
    """Saving what was loaded twice gives byte-identical files."""
    storage.path.write_text(json.dumps(records, indent=2), encoding="utf-8")
    store = WordStore(storage, clock=clock)

    store.save(store.load())
    first = storage.path.read_bytes()
    store.save(store.load())
    second = storage.path.read_bytes()

    assert first == second


def test_save_failure_keeps_memory(store, monkeypatch):
    """A failed write is swallowed and the in-memory list stays usable."""
    def boom(text):
        raise OSError("disk full")

    monkeypatch.setattr(store.storage, "write", boom)

    entry = store.add("cat", "animals", "data:,x")

    assert store.entries == [entry]


def test_new_ids_after_load_exceed_existing(storage, clock, records):
    records[0]["id"] = int(clock.now * 1000) + 10_000
    storage.path.write_text(json.dumps(records), encoding="utf-8")
    store = WordStore(storage, clock=clock)
    store.load()

    entry = store.add("sun", "", "data:,x")

    assert entry.id == records[0]["id"] + 1


def test_subscribers_get_snapshots(store):
    events = []
    store.subscribe(events.append)

    cat = store.add("cat", "animals", "data:,x")
    store.remove(cat.id)

    assert [[e.word for e in snap] for snap in events] == [["CAT"], []]


def test_replace_persists_without_event(store, storage, records):
    events = []
    store.subscribe(events.append)

    store.replace(parse_entries(records))

    assert len(store) == 3
    assert events == []
    assert json.loads(storage.path.read_text(encoding="utf-8"))[2]["word"] == "APPLE"


def test_entry_accepts_either_image_key():
    a = WordEntry.model_validate({"id": 1, "word": "cat", "imageData": "data:,x"})
    b = WordEntry.model_validate({"id": 1, "word": "cat", "image": "data:,x"})
    assert a == b
    assert json.loads(dump_entries([a])) == [
        {"id": 1, "word": "CAT", "category": "GENERAL", "imageData": "data:,x"}
    ]
