import json

import numpy as np
import pytest

from audiowatch.errors import DuplicateEmail, InvalidEmail
from audiowatch.persistence import DataFile
from audiowatch.store import EmailList, PatternStore

from tests.conftest import make_frame, make_pattern


def test_store_keeps_insertion_order() -> None:
    store = PatternStore()
    a = make_pattern([make_frame()], name="A", pattern_id=3)
    b = make_pattern([make_frame()], name="B", pattern_id=1)
    store.add(a)
    store.add(b)
    assert store.all() == (a, b)
    assert len(store) == 2
    assert store.get(1) is b


def test_store_remove() -> None:
    a = make_pattern([make_frame()], name="A", pattern_id=1)
    b = make_pattern([make_frame()], name="B", pattern_id=2)
    store = PatternStore([a, b])
    store.remove(1)
    assert store.all() == (b,)
    store.remove(99)
    assert store.all() == (b,)
    assert store.get(1) is None


def test_store_view_is_read_only() -> None:
    store = PatternStore()
    view = store.all()
    store.add(make_pattern([make_frame()]))
    assert view == ()


def test_email_list_validates() -> None:
    emails = EmailList()
    assert emails.add("  me@example.com ") == "me@example.com"
    with pytest.raises(DuplicateEmail):
        emails.add("me@example.com")
    with pytest.raises(InvalidEmail):
        emails.add("not-an-email")
    with pytest.raises(InvalidEmail):
        emails.add("   ")
    assert emails.all() == ("me@example.com",)


def test_email_list_remove() -> None:
    emails = EmailList(["a@x.it", "b@x.it"])
    emails.remove("a@x.it")
    emails.remove("missing@x.it")
    assert emails.all() == ("b@x.it",)


def test_data_file_round_trip(tmp_path) -> None:
    first = make_pattern(
        [make_frame(10, timestamp=100), make_frame(20, timestamp=150)],
        name="Bell",
        pattern_id=1_700_000_000_000,
    )
    second = make_pattern([make_frame(30, timestamp=200)], name="Kettle", pattern_id=1_700_000_000_500)
    emails = ["a@x.it", "b@x.it", "c@x.it"]
    data_file = DataFile(tmp_path / "nested" / "data.json")

    data_file.save(emails, [first, second])
    loaded = data_file.load()

    assert loaded.emails == emails
    assert [p.id for p in loaded.patterns] == [first.id, second.id]
    assert [p.name for p in loaded.patterns] == ["Bell", "Kettle"]
    assert [p.duration for p in loaded.patterns] == [first.duration, second.duration]
    for original, restored in zip([first, second], loaded.patterns):
        assert len(restored.frames) == len(original.frames)
        for a, b in zip(original.frames, restored.frames):
            assert np.array_equal(a.spectrum, b.spectrum)
            assert b.spectrum.dtype == np.uint8
            assert b.level == pytest.approx(a.level)
            assert b.timestamp == a.timestamp


def test_data_file_document_layout(tmp_path) -> None:
    path = tmp_path / "data.json"
    DataFile(path).save(["a@x.it"], [make_pattern([make_frame(1, bins=4)])])
    document = json.loads(path.read_text())
    assert set(document) == {"emailList", "soundPatterns"}
    pattern = document["soundPatterns"][0]
    assert set(pattern) == {"id", "name", "data", "duration"}
    assert pattern["data"][0]["frequencies"] == [1, 1, 1, 1]


def test_data_file_missing_is_empty(tmp_path) -> None:
    loaded = DataFile(tmp_path / "absent.json").load()
    assert loaded.emails == []
    assert loaded.patterns == []


def test_data_file_missing_keys(tmp_path) -> None:
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"emailList": ["a@x.it"]}))
    loaded = DataFile(path).load()
    assert loaded.emails == ["a@x.it"]
    assert loaded.patterns == []


def test_data_file_invalid_json(tmp_path) -> None:
    path = tmp_path / "data.json"
    path.write_text("{not json")
    with pytest.raises(ValueError):
        DataFile(path).load()


@pytest.mark.parametrize("document", ["[]", "null", '"patterns"', "3"])
def test_data_file_non_object_document(tmp_path, document) -> None:
    path = tmp_path / "data.json"
    path.write_text(document)
    with pytest.raises(ValueError, match="JSON object"):
        DataFile(path).load()


def test_data_file_pattern_without_frames(tmp_path) -> None:
    path = tmp_path / "data.json"
    pattern = {"id": 1, "name": "Bell", "data": [], "duration": 0}
    path.write_text(json.dumps({"emailList": [], "soundPatterns": [pattern]}))
    with pytest.raises(ValueError, match="no frames"):
        DataFile(path).load()
