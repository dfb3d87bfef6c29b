import json

import pytest

from core.exceptions import PersistenceError
from storage import JsonCustomExerciseStore


def test_missing_file_is_empty_catalog(tmp_path):
    store = JsonCustomExerciseStore(str(tmp_path / "custom.json"))

    assert store.get_custom_exercises() == {}


def test_save_then_load(tmp_path):
    # Arrange
    path = tmp_path / "nested" / "custom.json"
    store = JsonCustomExerciseStore(str(path))

    # Act
    store.save_custom_exercises({"Zercher Squat": ("zercher", "zs")})

    # Assert
    assert json.loads(path.read_text(encoding="utf-8")) == {"Zercher Squat": ["zercher", "zs"]}
    assert store.get_custom_exercises() == {"Zercher Squat": ["zercher", "zs"]}


def test_save_overwrites_whole_mapping(tmp_path):
    store = JsonCustomExerciseStore(str(tmp_path / "custom.json"))
    store.save_custom_exercises({"A": ["a"], "B": ["b"]})

    store.save_custom_exercises({"B": ["bb"]})

    assert store.get_custom_exercises() == {"B": ["bb"]}
    assert [p.name for p in tmp_path.iterdir()] == ["custom.json"]


def test_corrupt_file_raises(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonCustomExerciseStore(str(path)).get_custom_exercises()


def test_non_object_file_raises(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonCustomExerciseStore(str(path)).get_custom_exercises()


def test_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = JsonCustomExerciseStore(str(blocker / "custom.json"))

    with pytest.raises(PersistenceError):
        store.save_custom_exercises({"A": ["a"]})


def test_string_alias_value_raises(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text('{"Zercher Squat": "zercher"}', encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonCustomExerciseStore(str(path)).get_custom_exercises()
