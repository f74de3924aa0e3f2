"""Tests for the key-value stores behind persisted favorites."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from country_directory.errors import StorageError
from country_directory.settings import AppSettings
from country_directory.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    build_key_value_store,
)


class FakeRedis:
    """Tiny synchronous stand-in for :class:`redis.Redis`."""

    def __init__(self, *, broken: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.broken = broken
        self.closed = False

    def _check(self) -> None:
        if self.broken:
            raise RedisConnectionError("connection refused")

    def get(self, key: str) -> str | None:
        self._check()
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check()
        self.data[key] = value

    def delete(self, key: str) -> None:
        self._check()
        self.data.pop(key, None)

    def close(self) -> None:
        self.closed = True


def test_in_memory_store_round_trip() -> None:
    store = InMemoryKeyValueStore({"a": "1"})

    assert isinstance(store, KeyValueStore)
    store.set("b", "2")
    store.remove("a")
    store.remove("missing")

    assert store.get("a") is None
    assert store.get("b") == "2"


def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "favorites.json"
    JsonFileKeyValueStore(path).set("countryFavorites", '["USA"]')

    reopened = JsonFileKeyValueStore(path)

    assert reopened.get("countryFavorites") == '["USA"]'
    assert json.loads(path.read_text(encoding="utf-8")) == {"countryFavorites": '["USA"]'}


def test_json_file_store_missing_file_reads_as_empty(tmp_path: Path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "absent.json")

    assert store.get("countryFavorites") is None
    store.remove("countryFavorites")
    assert not store.path.exists()


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_json_file_store_rejects_unusable_document(tmp_path: Path, content: str) -> None:
    path = tmp_path / "favorites.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError) as excinfo:
        JsonFileKeyValueStore(path).get("countryFavorites")

    assert excinfo.value.backend == "file"
    assert str(excinfo.value).startswith("[file]")


def test_redis_store_namespaces_keys() -> None:
    client = FakeRedis()
    store = RedisKeyValueStore(client, namespace="test")

    store.set("countryFavorites", '["JPN"]')

    assert client.data == {"test:countryFavorites": '["JPN"]'}
    assert store.get("countryFavorites") == '["JPN"]'

    store.remove("countryFavorites")
    assert store.get("countryFavorites") is None

    store.close()
    assert client.closed is True


def test_redis_errors_become_storage_errors() -> None:
    store = RedisKeyValueStore(FakeRedis(broken=True))

    with pytest.raises(StorageError):
        store.get("countryFavorites")
    with pytest.raises(StorageError):
        store.set("countryFavorites", "[]")
    with pytest.raises(StorageError):
        store.remove("countryFavorites")


def test_build_key_value_store_selects_backend(tmp_path: Path) -> None:
    memory = build_key_value_store(AppSettings(FAVORITES_BACKEND="memory"))
    file_store = build_key_value_store(
        AppSettings(FAVORITES_BACKEND="file", FAVORITES_FILE=str(tmp_path / "fav.json"))
    )
    redis_store = build_key_value_store(
        AppSettings(FAVORITES_BACKEND="redis", REDIS_URL="redis://localhost:6390/0")
    )

    assert isinstance(memory, InMemoryKeyValueStore)
    assert isinstance(file_store, JsonFileKeyValueStore)
    assert file_store.path == tmp_path / "fav.json"
    assert isinstance(redis_store, RedisKeyValueStore)
    redis_store.close()


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_json_file_store_write_replaces_unusable_document(
    tmp_path: Path, content: str, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "favorites.json"
    path.write_text(content, encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    with caplog.at_level(logging.WARNING):
        store.set("countryFavorites", '["USA"]')

    assert store.get("countryFavorites") == '["USA"]'
    assert (tmp_path / "favorites.json.corrupt").read_text(encoding="utf-8") == content
    assert "moving it to" in caplog.text
