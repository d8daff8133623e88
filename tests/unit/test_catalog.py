# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from streamprobe.catalog.json_store import JsonCatalogStore
from streamprobe.catalog.memory import MemoryCatalogStore
from streamprobe.errors import CatalogError
from streamprobe.models.target import ProbeTarget


def _write(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_json_catalog_lists_targets_with_urls(tmp_path):
    path = _write(
        tmp_path / "channels.json",
        [
            {"id": "a", "url": "http://a.example/live", "title": "A"},
            {"id": "b", "url": ""},
            {"id": "c", "url": " http://c.example/index.m3u8 "},
        ],
    )
    store = JsonCatalogStore(path)
    assert store.list_targets() == [
        ProbeTarget(id="a", url="http://a.example/live"),
        ProbeTarget(id="c", url="http://c.example/index.m3u8"),
    ]


def test_json_catalog_persists_flags_and_keeps_extra_fields(tmp_path):
    path = _write(tmp_path / "channels.json", [{"id": "a", "url": "http://a/", "logo": "x.png"}, {"id": "b", "url": "http://b/"}])
    store = JsonCatalogStore(path)
    store.set_working("a", True)
    store.set_working("b", False)
    store.flush()

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved == [
        {"id": "a", "url": "http://a/", "logo": "x.png", "is_working": True},
        {"id": "b", "url": "http://b/", "is_working": False},
    ]
    assert [p.name for p in tmp_path.iterdir()] == ["channels.json"]


def test_json_catalog_unknown_id_raises(tmp_path):
    store = JsonCatalogStore(_write(tmp_path / "c.json", [{"id": 1, "url": "http://a/"}]))
    with pytest.raises(CatalogError):
        store.set_working(2, True)


def test_json_catalog_prune_broken(tmp_path):
    path = _write(
        tmp_path / "c.json",
        [
            {"id": 1, "url": "http://a/", "is_working": False},
            {"id": 2, "url": "http://b/", "is_working": True},
            {"id": 3, "url": "http://c/"},
        ],
    )
    store = JsonCatalogStore(path)
    assert store.prune_broken() == 1
    store.flush()
    assert [r["id"] for r in json.loads(path.read_text(encoding="utf-8"))] == [2, 3]
    with pytest.raises(CatalogError):
        store.set_working(1, True)


def test_flush_without_changes_does_not_rewrite(tmp_path):
    path = _write(tmp_path / "c.json", [{"id": 1, "url": "http://a/"}])
    before = path.stat().st_mtime_ns
    JsonCatalogStore(path).flush()
    assert path.stat().st_mtime_ns == before


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps({"id": 1}), json.dumps([{"url": "http://a/"}]), json.dumps([{"id": 1}, {"id": 1}])],
)
def test_json_catalog_rejects_malformed_files(tmp_path, content):
    path = tmp_path / "c.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CatalogError):
        JsonCatalogStore(path)


def test_json_catalog_missing_file(tmp_path):
    with pytest.raises(CatalogError, match="cannot read"):
        JsonCatalogStore(tmp_path / "missing.json")


def test_memory_catalog_roundtrip():
    store = MemoryCatalogStore([ProbeTarget(id=1, url="http://a/"), ProbeTarget(id=2, url="http://b/")])
    store.set_working(1, False)
    store.set_working(2, True)
    assert store.prune_broken() == 1
    assert store.list_targets() == [ProbeTarget(id=2, url="http://b/")]
    with pytest.raises(CatalogError):
        store.set_working(3, True)


@pytest.mark.parametrize("bad_id", [[1], {"nested": 1}, True, 1.5])
def test_json_catalog_rejects_non_scalar_ids(tmp_path, bad_id):
    path = _write(tmp_path / "channels.json", [{"id": bad_id, "url": "http://a/"}])
    with pytest.raises(CatalogError, match="not a string or integer"):
        JsonCatalogStore(path)
