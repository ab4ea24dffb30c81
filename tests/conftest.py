"""
Shared pytest fixtures: fake HTTP sessions, sample index pages, settings
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pytest
import requests

from anthology_papers.config import Settings

HOST = "www.aclweb.org"
BASE = f"https://{HOST}/anthology"

INDEX_HTML = """<!DOCTYPE html>
<html>
<head><title>ACL Anthology: P95</title></head>
<body>
<div id="header"><a href="/anthology/">ACL Anthology</a></div>
<div id="content">
  <p>Front matter <a href="P95-1000.pdf">P95-1000</a> <b>Editors</b></p>
  <h1>Track A</h1>
  <p><a href="P95-1001.pdf">P95-1001</a> [<a href="P95-1001.bib">bib</a>]:
     <b>J. Doe;
        R. Roe</b><br><i>A   Title</i></p>
  <p>No links here <b>X</b></p>
  <h1>  Track B  </h1>
  <p><a href="P95-1002.pdf">P95-1002</a>: <i>Second Paper</i></p>
</div>
</body>
</html>
"""


class FakeResponse:
    """Minimal stand-in for requests.Response in streaming mode"""

    def __init__(self, status_code: int = 200, chunks: Iterable[bytes] = (), error: Optional[Exception] = None):
        self.status_code = status_code
        self._chunks = list(chunks)
        self._error = error
        self.closed = False

    def iter_content(self, chunk_size: int):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """
    Serves canned responses per URL

    Route values: bytes (200 with that body), int (status with empty body),
    an exception instance (raised from get), or a FakeResponse factory.
    Unknown URLs answer 404.
    """

    def __init__(self, routes: Dict[str, Any], calls: List[str]):
        self.routes = routes
        self.calls = calls
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        route = self.routes.get(url, 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, bytes):
            return FakeResponse(200, [route])
        if isinstance(route, int):
            return FakeResponse(route)
        return route()

    def close(self) -> None:
        self.closed = True


class FakeSessionManager:
    """Hands out FakeSessions sharing one route table and call log"""

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = routes if routes is not None else {}
        self.calls: List[str] = []

    def create_worker_session(self) -> FakeSession:
        return FakeSession(self.routes, self.calls)


class ConcurrencyCounter:
    """Counts how many wrapped calls run at the same time"""

    def __init__(self, delay: float = 0.02):
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = 0
        self._lock = threading.Lock()

    def wrap(self, func):
        def wrapper(*args, **kwargs):
            with self._lock:
                self.in_flight += 1
                self.calls += 1
                self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                time.sleep(self.delay)
                return func(*args, **kwargs)
            finally:
                with self._lock:
                    self.in_flight -= 1
        return wrapper


def volume_url(volume: str) -> str:
    return f"{BASE}/{volume}/"


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    return tmp_path / "mirror"


@pytest.fixture
def settings(root_dir: Path) -> Settings:
    return Settings(root_dir=root_dir, host=HOST).validate()


@pytest.fixture
def session_manager() -> FakeSessionManager:
    return FakeSessionManager()


@pytest.fixture
def write_manifest(tmp_path: Path):
    def _write(text: str) -> Path:
        path = tmp_path / "conferences.yaml"
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def connection_error() -> Exception:
    return requests.exceptions.ConnectionError("connection reset")
