import re

import pytest
from hypothesis import given, strategies as st

from portfolio.core.errors import StorageError
from portfolio.services.storage import (
    CATEGORIES,
    LocalPhotoStorage,
    new_photo_id,
    valid_category,
)


@pytest.fixture
def store(tmp_path):
    s = LocalPhotoStorage(tmp_path / "photos")
    s.ensure_layout()
    return s


def test_layout_has_one_folder_per_category(store):
    assert sorted(p.name for p in store.base.iterdir()) == sorted(CATEGORIES)


@pytest.mark.parametrize("name", CATEGORIES)
def test_known_categories_are_valid(name):
    assert valid_category(name)


@given(st.text(max_size=30).filter(lambda s: s not in CATEGORIES))
def test_anything_else_is_not_a_category(name):
    assert not valid_category(name)


def test_photo_ids_are_32_hex_and_distinct():
    ids = {new_photo_id() for _ in range(500)}
    assert len(ids) == 500
    assert all(re.fullmatch(r"[0-9a-f]{32}", i) for i in ids)


def test_save_scan_find_delete(store):
    store.save("photography", "abc.png", b"\x89PNG")
    (store.base / "photography" / "subdir").mkdir()

    files = store.scan("photography")
    assert [(f.photo_id, f.filename, f.category, f.size) for f in files] == [
        ("abc", "abc.png", "photography", 4)
    ]
    assert files[0].modified_at.tzinfo is not None

    found = store.find("abc")
    assert found is not None and found.category == "photography"
    assert store.find("missing") is None

    store.delete("photography", "abc.png")
    assert store.scan("photography") == []
    with pytest.raises(FileNotFoundError):
        store.delete("photography", "abc.png")


def test_find_searches_every_category(store):
    store.save("notebook-sketches", "zzz.jpg", b"x")
    assert store.find("zzz").category == "notebook-sketches"


@pytest.mark.parametrize("filename", ["../escape.png", "a/b.png"])
def test_filenames_cannot_leave_their_folder(store, filename):
    with pytest.raises(ValueError):
        store.save("featured", filename, b"x")


def test_unknown_category_path_rejected(store):
    with pytest.raises(ValueError):
        store.path_for("sculpture", "a.png")


def test_scan_of_missing_folder_is_storage_error(tmp_path):
    s = LocalPhotoStorage(tmp_path / "nowhere")
    with pytest.raises(StorageError):
        s.scan("featured")


def test_failed_write_leaves_no_file(store, monkeypatch):
    class Boom:
        def __init__(self, f):
            self.f = f

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            self.f.close()

        def write(self, data):
            self.f.write(data[:1])
            raise OSError("disk full")

    real_open = open

    def fake_open(path, mode="r", *args, **kwargs):
        return Boom(real_open(path, mode, *args, **kwargs))

    monkeypatch.setattr("builtins.open", fake_open)
    with pytest.raises(StorageError):
        store.save("featured", "partial.png", b"abcdef")
    monkeypatch.undo()
    assert not (store.base / "featured" / "partial.png").exists()
