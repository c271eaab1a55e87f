"""Cache stores for romanization payloads.

Every backend exposes the same best-effort ``get`` / ``set``: a backend
failure is logged and behaves exactly like a miss (or a skipped write), so
an unavailable cache only costs latency.
"""

import hashlib
import json
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

from .. import config
from ..exceptions import CacheError
from ..utils.logging import get_logger

logger = get_logger(__name__)

ROMANIZE_NAMESPACE = "romanize"
MUSIC_NAMESPACE = "music-romanize"
NAMESPACES = (ROMANIZE_NAMESPACE, MUSIC_NAMESPACE)


def canonical_json(value: Any) -> str:
    """JSON text that is identical for logically equal values."""
    return json.dumps(value, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def make_cache_key(
    namespace: str,
    text: str,
    script: Optional[str],
    system: Optional[str],
    options: Optional[Mapping[str, Any]] = None,
    **extra: Any,
) -> str:
    """Derive ``<namespace>:<sha256>`` from the normalized request.

    ``text`` is trimmed and ``options`` canonicalized, so whitespace around
    the text and option key order never change the key.
    """
    key_data: Dict[str, Any] = {
        "text": text.strip(),
        "script": script,
        "system": system or "default",
        "options": canonical_json(dict(options or {})),
    }
    for name, value in extra.items():
        key_data[name] = value
    digest = hashlib.sha256(canonical_json(key_data).encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


def split_key(key: str) -> Tuple[str, str]:
    namespace, _, digest = key.partition(":")
    return namespace, digest


class CacheStore:
    """Base class; backends implement the underscore methods."""

    name = "base"

    def __init__(self, ttl: Optional[int] = None):
        self.ttl = ttl

    def get(self, key: str) -> Optional[Any]:
        try:
            value = self._get(key)
        except Exception as e:
            logger.warning(f"Cache get failed on {self.name} backend: {e}")
            return None
        if value is not None:
            logger.debug(f"Cache hit for {key[:24]}...")
        return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            self._set(key, value, ttl if ttl is not None else self.ttl)
        except Exception as e:
            logger.warning(f"Cache set failed on {self.name} backend: {e}")

    def clear(self, namespace: Optional[str] = None) -> int:
        """Delete entries (one namespace or all); returns the count removed."""
        try:
            return self._clear(namespace)
        except Exception as e:
            raise CacheError(f"Failed to clear {self.name} cache: {e}")

    def stats(self) -> Dict[str, Any]:
        try:
            counts = {ns: self._count(ns) for ns in NAMESPACES}
        except Exception as e:
            raise CacheError(f"Failed to read {self.name} cache stats: {e}")
        return {
            "backend": self.name,
            "total_entries": sum(counts.values()),
            "namespaces": counts,
        }

    def _get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def _set(self, key: str, value: Any, ttl: Optional[int]) -> None:
        raise NotImplementedError

    def _clear(self, namespace: Optional[str]) -> int:
        raise NotImplementedError

    def _count(self, namespace: str) -> int:
        raise NotImplementedError


class NullCacheStore(CacheStore):
    """Caching disabled: every lookup misses."""

    name = "none"

    def _get(self, key: str) -> Optional[Any]:
        return None

    def _set(self, key: str, value: Any, ttl: Optional[int]) -> None:
        pass

    def _clear(self, namespace: Optional[str]) -> int:
        return 0

    def _count(self, namespace: str) -> int:
        return 0


class MemoryCacheStore(CacheStore):
    """In-process dict; used by tests and the single-process CLI.

    Values are held as JSON text like the other backends, so a caller that
    mutates a cache hit never changes the stored entry.
    """

    name = "memory"

    def __init__(self, ttl: Optional[int] = None):
        super().__init__(ttl)
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()

    def _get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            raw, expires_at = entry
            if expires_at is not None and expires_at <= time.time():
                del self._data[key]
                return None
        return json.loads(raw)

    def _set(self, key: str, value: Any, ttl: Optional[int]) -> None:
        raw = json.dumps(value, ensure_ascii=False)
        expires_at = time.time() + ttl if ttl else None
        with self._lock:
            self._data[key] = (raw, expires_at)

    def _keys(self, namespace: Optional[str]) -> List[str]:
        if namespace is None:
            return list(self._data)
        return [key for key in self._data if split_key(key)[0] == namespace]

    def _clear(self, namespace: Optional[str]) -> int:
        with self._lock:
            keys = self._keys(namespace)
            for key in keys:
                del self._data[key]
            return len(keys)

    def _count(self, namespace: str) -> int:
        with self._lock:
            return len(self._keys(namespace))


class FileCacheStore(CacheStore):
    """One JSON file per entry under ``<cache_dir>/<namespace>/``."""

    name = "file"

    def __init__(self, cache_dir: Optional[Path] = None, ttl: Optional[int] = None):
        super().__init__(ttl)
        self.cache_dir = cache_dir or config.get_cache_dir()
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        namespace, digest = split_key(key)
        return self.cache_dir / namespace / f"{digest}.json"

    def _get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            entry = json.load(f)
        expires_at = entry.get("expires_at")
        if expires_at is not None and expires_at <= time.time():
            path.unlink(missing_ok=True)
            return None
        return entry.get("value")

    def _set(self, key: str, value: Any, ttl: Optional[int]) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        entry = {"value": value, "expires_at": time.time() + ttl if ttl else None}
        with open(path, "w", encoding="utf-8") as f:
            json.dump(entry, f, ensure_ascii=False)

    def _files(self, namespace: Optional[str]) -> List[Path]:
        if namespace is not None:
            return list((self.cache_dir / namespace).glob("*.json"))
        return list(self.cache_dir.glob("*/*.json"))

    def _clear(self, namespace: Optional[str]) -> int:
        files = self._files(namespace)
        for path in files:
            path.unlink(missing_ok=True)
        logger.info(f"Removed {len(files)} cache files from {self.cache_dir}")
        return len(files)

    def _count(self, namespace: str) -> int:
        return len(self._files(namespace))


class UpstashCacheStore(CacheStore):
    """Upstash Redis over its REST API.

    Commands are posted as JSON arrays; values are stored as JSON strings.
    """

    name = "upstash"

    def __init__(
        self,
        url: str,
        token: str,
        ttl: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(ttl)
        self.url = url.rstrip("/")
        self.timeout = timeout or config.UPSTREAM_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers["Authorization"] = f"Bearer {token}"

    def command(self, *args: Any) -> Any:
        response = self.session.post(self.url, json=list(args), timeout=self.timeout)
        if not response.ok:
            # Never echo the request; it carries the bearer token
            raise CacheError(f"Upstash returned HTTP {response.status_code}")
        body = response.json()
        if "error" in body:
            raise CacheError(f"Upstash error: {body['error']}")
        return body.get("result")

    def _get(self, key: str) -> Optional[Any]:
        raw = self.command("GET", key)
        if raw is None:
            return None
        return json.loads(raw)

    def _set(self, key: str, value: Any, ttl: Optional[int]) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        if ttl:
            self.command("SET", key, payload, "EX", ttl)
        else:
            self.command("SET", key, payload)

    def _keys(self, namespace: Optional[str]) -> List[str]:
        if namespace is not None:
            return self.command("KEYS", f"{namespace}:*") or []
        keys: List[str] = []
        for ns in NAMESPACES:
            keys.extend(self.command("KEYS", f"{ns}:*") or [])
        return keys

    def _clear(self, namespace: Optional[str]) -> int:
        keys = self._keys(namespace)
        if keys:
            self.command("DEL", *keys)
        return len(keys)

    def _count(self, namespace: str) -> int:
        return len(self._keys(namespace))


def create_cache_store(
    backend: Optional[str] = None, ttl: Optional[int] = None
) -> CacheStore:
    """Build the configured backend.

    ``auto`` picks Upstash when both credentials are present and otherwise
    disables caching; missing credentials never fail a request.
    """
    backend = (backend or config.CACHE_BACKEND).lower()
    ttl = ttl if ttl is not None else config.CACHE_TTL

    if backend == "auto":
        backend = "upstash" if config.has_upstash_credentials() else "none"
        if backend == "none":
            logger.info("No cache credentials configured, caching disabled")

    if backend == "upstash":
        if not config.has_upstash_credentials():
            logger.warning(
                "Upstash cache requested without credentials, caching disabled"
            )
            return NullCacheStore()
        return UpstashCacheStore(
            config.KV_REST_API_URL, config.KV_REST_API_TOKEN, ttl=ttl
        )
    if backend == "file":
        return FileCacheStore(ttl=ttl)
    if backend == "memory":
        return MemoryCacheStore(ttl=ttl)
    if backend == "none":
        return NullCacheStore()

    raise CacheError(f"Unknown cache backend: {backend}")
