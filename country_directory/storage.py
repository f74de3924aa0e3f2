"""Key-value stores backing persisted client state such as favorites.

Every store speaks the same three-call dialect (``get``/``set``/``remove``) with
string values, mirroring the browser local storage the directory was designed
around. Failures of the backing medium surface as :class:`StorageError` so
callers can degrade instead of crashing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from redis import Redis
from redis.exceptions import RedisError

from country_directory.errors import StorageError
from country_directory.settings import AppSettings

logger = logging.getLogger(__name__)

_REDIS_NAMESPACE = "country-directory"


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal storage surface required by :class:`FavoritesStore`."""

    def get(self, key: str) -> str | None:
        """Return the stored string for ``key`` or ``None`` when absent."""

    def set(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``, replacing any previous value."""

    def remove(self, key: str) -> None:
        """Delete ``key``; removing a missing key is a no-op."""


class InMemoryKeyValueStore:
    """Process-local store used by tests and ephemeral deployments."""

    backend_name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Store every key in a single JSON object on disk.

    The whole document is rewritten on each mutation, which keeps writes
    synchronous and the file readable by hand.
    """

    backend_name = "file"

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self, *, recover: bool = False) -> dict[str, str]:
        """Load the document; with ``recover`` a corrupt file is set aside and treated as empty."""

        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            if recover:
                return self._discard_corrupt(f"invalid JSON: {exc}")
            raise StorageError(
                self.backend_name, f"Storage file {self._path} is corrupted: {exc}"
            ) from exc
        except OSError as exc:
            raise StorageError(
                self.backend_name, f"Unable to read {self._path}: {exc}"
            ) from exc
        if not isinstance(payload, dict):
            if recover:
                return self._discard_corrupt("not a JSON object")
            raise StorageError(
                self.backend_name, f"Storage file {self._path} must hold a JSON object"
            )
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _discard_corrupt(self, reason: str) -> dict[str, str]:
        corrupt_path = self._path.with_name(self._path.name + ".corrupt")
        logger.warning(
            "Storage file %s is unusable (%s); moving it to %s and starting fresh",
            self._path,
            reason,
            corrupt_path,
        )
        try:
            self._path.replace(corrupt_path)
        except OSError as exc:
            raise StorageError(
                self.backend_name, f"Unable to move aside {self._path}: {exc}"
            ) from exc
        return {}

    def _write_document(self, document: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(document, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise StorageError(
                self.backend_name, f"Unable to write {self._path}: {exc}"
            ) from exc

    def get(self, key: str) -> str | None:
        return self._read_document().get(key)

    def set(self, key: str, value: str) -> None:
        document = self._read_document(recover=True)
        document[key] = value
        self._write_document(document)

    def remove(self, key: str) -> None:
        document = self._read_document(recover=True)
        if key in document:
            del document[key]
            self._write_document(document)


class RedisKeyValueStore:
    """Redis-backed store; keys are namespaced to avoid collisions."""

    backend_name = "redis"

    def __init__(self, client: Redis, *, namespace: str = _REDIS_NAMESPACE) -> None:
        self._client = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str) -> RedisKeyValueStore:
        client = Redis.from_url(url, decode_responses=True, encoding="utf-8")
        return cls(client)

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(self._key(key))
        except RedisError as exc:
            raise StorageError(self.backend_name, f"Redis get failed for {key}: {exc}") from exc
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except RedisError as exc:
            raise StorageError(self.backend_name, f"Redis set failed for {key}: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except RedisError as exc:
            raise StorageError(
                self.backend_name, f"Redis delete failed for {key}: {exc}"
            ) from exc

    def close(self) -> None:
        self._client.close()


def build_key_value_store(settings: AppSettings) -> KeyValueStore:
    """Instantiate the store selected by ``FAVORITES_BACKEND``."""

    if settings.favorites_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.favorites_backend == "redis":
        logger.info("Using Redis favorites storage")
        return RedisKeyValueStore.from_url(settings.redis_url)
    logger.info("Using file favorites storage at %s", settings.favorites_path)
    return JsonFileKeyValueStore(settings.favorites_path)


__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "build_key_value_store",
]
