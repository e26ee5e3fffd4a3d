"""
Global pytest fixtures for the slink-store test suite.

Responsibilities:
    - Provide a fresh SQLiteStorage on a temporary database file per test
    - Provide an in-process fake of the remote query/mutation service, wired
      into an httpx.Client through httpx.MockTransport
    - Provide a RemoteStorage fixture talking to that fake

Why a fake service instead of mocks per call?
    The contract tests in tests/integration run the same scenarios against
    both backends, so the remote side needs real (if tiny) server behaviour:
    upserts keyed by normalizedId and additive stats.
"""

import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from slink_store.storage.remote_storage import RemoteStorage
from slink_store.storage.sqlite_storage import SQLiteStorage

TOKEN = "test-token"


class FakeRpcServer:
    """Minimal stand-in for the remote service, keyed by normalizedId."""

    def __init__(self, token: str = TOKEN) -> None:
        self.token = token
        self.links: Dict[str, Dict[str, Any]] = {}
        self.stats: Dict[str, int] = {}
        self.requests: List[Tuple[str, Dict[str, Any]]] = []
        self.functions = {
            ("query", "load:loadAll"): lambda args: list(self.links.values()),
            ("query", "load:loadOne"): lambda args: self.links.get(args["normalizedId"]),
            ("mutation", "store"): self._store,
            ("query", "stats:loadStats"): lambda args: dict(self.stats),
            ("mutation", "stats:saveStats"): self._save_stats,
        }

    def _store(self, args):
        doc = args["link"]
        self.links[doc["normalizedId"]] = doc

    def _save_stats(self, args):
        for key, clicks in args["stats"].items():
            self.stats[key] = self.stats.get(key, 0) + clicks

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        kind = request.url.path.rsplit("/", 1)[-1]
        self.requests.append((request.url.path, body))
        if body["args"].get("token") != self.token:
            return httpx.Response(200, json={"status": "error", "errorMessage": "invalid token"})
        function = self.functions.get((kind, body["path"]))
        if function is None:
            return httpx.Response(404, text=f"no such function: {kind} {body['path']}")
        return httpx.Response(200, json={"status": "success", "value": function(body["args"])})


@pytest.fixture
def sqlite_storage(tmp_path) -> SQLiteStorage:
    """Fresh SQLite store backed by a per-test database file."""
    return SQLiteStorage(str(tmp_path / "slinks.db"))


@pytest.fixture
def rpc_server() -> FakeRpcServer:
    return FakeRpcServer()


@pytest.fixture
def remote_storage(rpc_server):
    """RemoteStorage wired to the fake service through httpx.MockTransport."""
    client = httpx.Client(transport=httpx.MockTransport(rpc_server))
    store = RemoteStorage("https://rpc.test", TOKEN, client=client)
    yield store
    client.close()
