import json
import os

import pytest

from i18n_catalog import (
    CatalogFormatError,
    CatalogKeyError,
    CatalogStore,
    ancestor_paths,
    flatten,
    unflatten,
)


@pytest.mark.parametrize(
    "catalog",
    [
        {},
        {"greeting": {"hello": "Hello"}},
        {
            "nav": {"home": "Home", "settings": {"title": "Settings", "tabs": ["Voice", "Text"]}},
            "tips": ["Speak slowly", "Ask again"],
            "empty": {},
            "count": 3,
        },
        {"ru": {"привет": "Привет", "emoji": "👋"}},
    ],
)
def test_unflatten_restores_flattened_catalog(catalog):
    assert unflatten(flatten(catalog)) == catalog


def test_flatten_keeps_arrays_as_single_values():
    flat = flatten({"onboarding": {"steps": ["One", "Two"], "title": "Welcome"}})

    assert flat == {"onboarding.steps": ["One", "Two"], "onboarding.title": "Welcome"}


def test_flatten_copies_array_leaves():
    steps = ["One", "Two"]
    flat = flatten({"steps": steps})
    flat["steps"][0] = "Uno"

    assert steps == ["One", "Two"]


@pytest.mark.parametrize(
    "catalog",
    [
        {"settings.title": "Settings"},
        {"settings": {"v1.2": "Version"}},
        {"": "Blank"},
    ],
)
def test_flatten_rejects_keys_that_cannot_round_trip(catalog):
    with pytest.raises(CatalogKeyError):
        flatten(catalog)


def test_unflatten_rejects_path_through_leaf():
    with pytest.raises(CatalogKeyError):
        unflatten({"menu": "Menu", "menu.open": "Open"})


def test_unflatten_rejects_leaf_over_object():
    with pytest.raises(CatalogKeyError):
        unflatten({"menu.open": "Open", "menu": "Menu"})


def test_ancestor_paths():
    assert ancestor_paths("a.b.c") == ["a", "a.b"]
    assert ancestor_paths("a") == []


def write_catalog(root, language, payload, file_name="translation.json"):
    path = root / language / file_name
    path.parent.mkdir(parents=True, exist_ok=True)
    text = payload if isinstance(payload, str) else json.dumps(payload)
    path.write_text(text, encoding="utf-8")
    return path


def test_load_reads_catalog(tmp_path):
    write_catalog(tmp_path, "en", {"greeting": {"hello": "Hello"}})

    assert CatalogStore(tmp_path).load("en") == {"greeting": {"hello": "Hello"}}


def test_load_missing_file_returns_empty_catalog(tmp_path, capsys):
    assert CatalogStore(tmp_path).load("de") == {}
    assert "[WARN] Catalog not found" in capsys.readouterr().out


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
def test_load_unreadable_file_returns_empty_catalog(tmp_path, capsys, payload):
    write_catalog(tmp_path, "en", payload)

    assert CatalogStore(tmp_path).load("en") == {}
    assert "[WARN] Cannot read catalog" in capsys.readouterr().out


def test_read_raises_on_non_object(tmp_path):
    write_catalog(tmp_path, "es", '["Hola"]')

    with pytest.raises(CatalogFormatError):
        CatalogStore(tmp_path).read("es")


def test_read_blank_file_is_empty_catalog(tmp_path):
    write_catalog(tmp_path, "es", "  \n")

    assert CatalogStore(tmp_path).read("es") == {}


def test_exists_and_custom_file_name(tmp_path):
    write_catalog(tmp_path, "fr", {"a": "b"}, file_name="common.json")
    store = CatalogStore(tmp_path, "common.json")

    assert store.exists("fr")
    assert not store.exists("es")
    assert store.path_for("fr") == tmp_path / "fr" / "common.json"


def test_save_writes_indented_utf8_json(tmp_path):
    store = CatalogStore(tmp_path)
    path = store.save("es", {"greeting": {"hello": "¡Hola!"}, "b": "x"})

    text = path.read_text(encoding="utf-8")
    assert text == '{\n  "greeting": {\n    "hello": "¡Hola!"\n  },\n  "b": "x"\n}\n'
    assert os.listdir(path.parent) == ["translation.json"]


def test_save_keeps_original_when_replace_fails(tmp_path, monkeypatch):
    path = write_catalog(tmp_path, "es", {"greeting": "Hello"})
    original = path.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("i18n_catalog.os.replace", broken_replace)

    with pytest.raises(OSError):
        CatalogStore(tmp_path).save("es", {"greeting": "Hola"})

    assert path.read_text(encoding="utf-8") == original
    assert os.listdir(path.parent) == ["translation.json"]
