"""
Shared fixtures: test settings and in-memory implementations of the protocols.
"""

import time

import pytest

from profile_mirror.config import Settings
from profile_mirror.entities import CachedObject, ObjectListing, OriginResponse, StoredObjectInfo
from profile_mirror.handlers import RequestDispatcher

BASE_URL = "https://mirror.example.com"


class InMemoryObjectStore:
    """ObjectStore keeping objects in a dict, listing them in fixed-size pages."""

    def __init__(self, page_size: int = 2) -> None:
        self.objects: dict[str, CachedObject] = {}
        self.page_size = page_size
        self.calls: list[str] = []
        self.delete_batches: list[list[str]] = []
        self.fail_reads = False
        self.fail_writes = False
        self.fail_deletes = False
        self.fail_lists = False

    def seed(self, key: str, body: bytes, content_type: str, age_seconds: float = 0.0) -> None:
        self.objects[key] = CachedObject(
            key=key,
            body=body,
            content_type=content_type,
            uploaded_at=time.time() - age_seconds,
        )

    async def get(self, key):
        self.calls.append("get")
        if self.fail_reads:
            raise ConnectionError("store unavailable")
        return self.objects.get(key)

    async def put(self, key, body, content_type):
        self.calls.append("put")
        if self.fail_writes:
            raise ConnectionError("store unavailable")
        obj = CachedObject(key=key, body=body, content_type=content_type, uploaded_at=time.time())
        self.objects[key] = obj
        return obj

    async def list_objects(self, cursor=None, limit=1000):
        self.calls.append("list_objects")
        if self.fail_lists:
            raise ConnectionError("store unavailable")
        # Cursor is the last key returned, so deletes between pages never skip entries
        remaining = sorted(k for k in self.objects if cursor is None or k > cursor)
        keys = remaining[: self.page_size]
        page = [StoredObjectInfo(key=k, uploaded_at=self.objects[k].uploaded_at) for k in keys]
        more = len(remaining) > self.page_size
        return ObjectListing(objects=page, cursor=keys[-1] if more else None)

    async def delete(self, keys):
        self.calls.append("delete")
        if self.fail_deletes:
            raise ConnectionError("store unavailable")
        self.delete_batches.append(list(keys))
        count = 0
        for key in keys:
            if self.objects.pop(key, None) is not None:
                count += 1
        return count

    async def health_check(self):
        return not self.fail_reads


class FakeOriginClient:
    """OriginClient answering from a URL -> OriginResponse table."""

    def __init__(self, responses: dict[str, OriginResponse] | None = None) -> None:
        self.responses = responses or {}
        self.requests: list[dict] = []

    def add(self, url: str, content: bytes, content_type: str | None = None, status_code: int = 200) -> None:
        headers = {"content-type": content_type} if content_type else {}
        self.responses[url] = OriginResponse(status_code=status_code, headers=headers, content=content)

    async def fetch(self, url, headers, method="GET", content=None):
        self.requests.append({"url": url, "headers": headers, "method": method, "content": content})
        return self.responses.get(url, OriginResponse(status_code=404, content=b"Not Found"))

    async def close(self):
        pass


@pytest.fixture
def test_settings():
    """Settings pointing at a fictional public URL and profile."""
    return Settings(
        base_url=BASE_URL,
        profile_username="someone",
        map_token="pk.replacement-token",
        rewrite_rules_file=None,
        inject_css="body{margin:0}",
        inject_js="console.log('mirror')",
        cleanup_interval_seconds=0,
    )


@pytest.fixture
def store():
    """Create an in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def origin():
    """Create a fake origin client."""
    return FakeOriginClient()


@pytest.fixture
def dispatcher(test_settings, store, origin):
    """Create a dispatcher wired to the in-memory store and fake origin."""
    return RequestDispatcher.create(config=test_settings, store=store, origin=origin)
