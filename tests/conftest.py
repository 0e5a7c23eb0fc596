import json
import logging
import sys
from pathlib import Path

import httpx
import pytest

# Ensure repository root is on sys.path so `import shared...` works locally
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shared.helper.HelperConfig import HelperConfig  # noqa: E402
from shared.logging.logging_setup import ColorLogger  # noqa: E402


def make_hit(doc_id, score=1.0, index="docs", doc_type="_doc", **fields) -> dict:
    """Build a raw hit the way Elasticsearch returns it."""
    return {"_index": index, "_type": doc_type, "_id": str(doc_id), "_score": score, "fields": fields}


class FakeElasticsearch:
    """In-memory scan/scroll backend served through httpx.MockTransport.

    Each entry of `pages` is one response page; the scan returns the first one
    and every scroll request the next, then empty pages.
    """

    def __init__(self, pages: list[list[dict]], expire_after: int | None = None):
        self.pages = pages
        self.expire_after = expire_after
        self.requests: list[httpx.Request] = []
        self.scrolls = 0
        self.cleared: list[str] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _page(self, number: int) -> dict:
        hits = self.pages[number] if number < len(self.pages) else []
        total = sum(len(p) for p in self.pages)
        return {
            "_scroll_id": f"cursor-{number}",
            "took": 1,
            "hits": {"total": {"value": total, "relation": "eq"}, "hits": hits},
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/":
            return httpx.Response(200, json={"version": {"number": "8.13.0"}})
        if request.method == "POST" and path.endswith("/_search"):
            return httpx.Response(200, json=self._page(0))
        if request.method == "POST" and path == "/_search/scroll":
            self.scrolls += 1
            if self.expire_after is not None and self.scrolls > self.expire_after:
                return httpx.Response(404, json={"error": {"type": "search_context_missing_exception"}})
            body = json.loads(request.content)
            assert body["scroll_id"] == f"cursor-{self.scrolls - 1}"
            return httpx.Response(200, json=self._page(self.scrolls))
        if request.method == "DELETE" and path == "/_search/scroll":
            self.cleared.extend(json.loads(request.content)["scroll_id"])
            return httpx.Response(200, json={"succeeded": True, "num_freed": 1})
        return httpx.Response(400, json={"error": f"unexpected {request.method} {path}"})

    def requests_to(self, method: str, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.endswith(suffix)]


@pytest.fixture
def helper_config(monkeypatch) -> HelperConfig:
    for key in ("SEARCH_ENGINE", "SEARCH_TIMEOUT", "SEARCH_INDICES",
                "SEARCH_ELASTICSEARCH_HOST", "SEARCH_ELASTICSEARCH_PORT", "SEARCH_ELASTICSEARCH_SCHEME"):
        monkeypatch.delenv(key, raising=False)
    return HelperConfig(logger=ColorLogger(logging.getLogger("estab.tests")))


@pytest.fixture
def hit_factory():
    return make_hit


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """setup_logging() replaces the root handlers; put the previous ones back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
