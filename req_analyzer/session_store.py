"""
Session Store
Size-limited key-value persistence for pipeline results.

Backends only know how to get, set and delete a single string value.
``BoundedValueStore`` sits on top and shards any value larger than the
per-value ceiling into ordered chunks, recording the chunk count next to them.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, unquote
import json
import logging

logger = logging.getLogger(__name__)

MAX_VALUE_SIZE = 4096
DEFAULT_MAX_AGE = 3600
# Upper bound on shards per value; chunk counts are read back from client cookies
MAX_CHUNKS = 64

ORIGINAL_CONTENT_KEY = "originalContent"
IDENTIFIED_MODULES_KEY = "identifiedModules"
PROCESSED_REQUIREMENTS_KEY = "processedRequirements"
GENERATED_TEST_CASES_KEY = "generatedTestCases"
GENERATED_SUMMARIES_KEY = "generatedSummaries"

# Chunk-count marker names that predate the generic "<key>Chunks" scheme
CHUNK_COUNT_KEYS = {
    ORIGINAL_CONTENT_KEY: "contentChunks",
}


class KeyValueBackend(ABC):
    """Single-value string storage"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str, max_age: Optional[int] = None, http_only: bool = False) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    def encoded_size(self, value: str) -> int:
        """Space the value takes once written to the backend"""
        return len(value)

    def key_overhead(self, key: str) -> int:
        """Space the key itself takes out of the per-value ceiling"""
        return 0


class InMemoryBackend(KeyValueBackend):
    """Process-local backend with per-key expiry, used by the CLI and tests"""

    def __init__(self):
        self._values: Dict[str, Tuple[str, Optional[datetime]]] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and datetime.now() >= expires_at:
            del self._values[key]
            return None
        return value

    def set(self, key: str, value: str, max_age: Optional[int] = None, http_only: bool = False) -> None:
        expires_at = datetime.now() + timedelta(seconds=max_age) if max_age else None
        self._values[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self):
        return list(self._values)


class CookieBackend(KeyValueBackend):
    """Reads request cookies and writes response cookies.

    Writes are visible to later reads within the same request. Values are
    percent-encoded so arbitrary text survives the cookie header.
    """

    def __init__(self, request_cookies: Dict[str, str], response: Any, path: str = "/"):
        self._cookies = dict(request_cookies)
        self.response = response
        self.path = path

    def get(self, key: str) -> Optional[str]:
        value = self._cookies.get(key)
        if value is None:
            return None
        return unquote(value)

    def set(self, key: str, value: str, max_age: Optional[int] = None, http_only: bool = False) -> None:
        encoded = quote(value, safe='')
        self._cookies[key] = encoded
        self.response.set_cookie(key, encoded, max_age=max_age, path=self.path, httponly=http_only)

    def encoded_size(self, value: str) -> int:
        return len(quote(value, safe=''))

    def key_overhead(self, key: str) -> int:
        # browsers count "name=" against the same 4096-byte limit as the value
        return len(key) + 1

    def delete(self, key: str) -> None:
        if key in self._cookies:
            del self._cookies[key]
            self.response.delete_cookie(key, path=self.path)


class BoundedValueStore:
    """Key-value store that transparently chunks values over ``max_value_size``"""

    def __init__(self, backend: KeyValueBackend, max_value_size: int = MAX_VALUE_SIZE,
                 max_age: int = DEFAULT_MAX_AGE, max_chunks: int = MAX_CHUNKS):
        if max_value_size <= 0:
            raise ValueError("max_value_size must be positive")
        if max_chunks <= 0:
            raise ValueError("max_chunks must be positive")
        self.backend = backend
        self.max_value_size = max_value_size
        self.max_age = max_age
        self.max_chunks = max_chunks

    @staticmethod
    def chunk_count_key(key: str) -> str:
        return CHUNK_COUNT_KEYS.get(key, f"{key}Chunks")

    @staticmethod
    def chunk_key(key: str, index: int) -> str:
        return f"{key}_{index}"

    def _chunk_count(self, key: str) -> Optional[int]:
        marker = self.backend.get(self.chunk_count_key(key))
        if marker is None:
            return None
        try:
            count = int(marker)
        except ValueError:
            logger.warning(f"Ignoring malformed chunk count for {key}: {marker!r}")
            return None
        if not 1 <= count <= self.max_chunks:
            logger.warning(f"Ignoring out-of-range chunk count for {key}: {count}")
            return None
        return count

    def _split(self, value: str, budget: int) -> List[str]:
        """Cut a value into pieces whose encoded size fits the budget"""
        chunks = []
        current: List[str] = []
        size = 0
        for char in value:
            char_size = self.backend.encoded_size(char)
            if current and size + char_size > budget:
                chunks.append("".join(current))
                current, size = [], 0
            current.append(char)
            size += char_size
        if current:
            chunks.append("".join(current))
        return chunks

    def delete(self, key: str) -> None:
        count = self._chunk_count(key)
        if count:
            for index in range(count):
                self.backend.delete(self.chunk_key(key, index))
        self.backend.delete(self.chunk_count_key(key))
        self.backend.delete(key)

    def put(self, key: str, value: str) -> None:
        """Store a value, replacing whatever was stored under the key before.

        Raises:
            ValueError: the value needs more than ``max_chunks`` chunks
        """
        self.delete(key)

        if self.backend.key_overhead(key) + self.backend.encoded_size(value) <= self.max_value_size:
            self.backend.set(key, value, max_age=self.max_age, http_only=True)
            return

        # the longest chunk name bounds the room left for every chunk
        budget = self.max_value_size - self.backend.key_overhead(self.chunk_key(key, self.max_chunks - 1))
        chunks = self._split(value, budget)
        if len(chunks) > self.max_chunks:
            raise ValueError(f"{key} is too large to store ({len(value)} characters, {len(chunks)} chunks)")

        self.backend.set(self.chunk_count_key(key), str(len(chunks)), max_age=self.max_age)
        for index, chunk in enumerate(chunks):
            self.backend.set(self.chunk_key(key, index), chunk, max_age=self.max_age)
        logger.debug(f"Stored {key} in {len(chunks)} chunks ({len(value)} characters)")

    def get(self, key: str) -> Optional[str]:
        """Read a value back, reassembling chunks in index order"""
        count = self._chunk_count(key)
        if count is not None:
            return "".join(
                self.backend.get(self.chunk_key(key, index)) or ""
                for index in range(count)
            )
        return self.backend.get(key)

    def put_json(self, key: str, value: Any) -> None:
        self.put(key, json.dumps(value))

    def get_json(self, key: str) -> Any:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {key} from session store: {e}")
            return None
