import json
from datetime import datetime, timezone
from functools import partial

import httpx
import pytest

from deferred_fetch.core.config import Settings
from deferred_fetch.fetch.utils import generate_unique_filename
from deferred_fetch.services.fetcher import Fetcher

FIXED_NOW = datetime(2023, 10, 27, 10, 30, 0, tzinfo=timezone.utc)
FIXED_TOKEN = "a1b2c3d4"

SAMPLE_HTML = """
<html>
  <head>
    <title>Test Page</title>
    <script>console.log('This should be removed');</script>
    <style>body { color: red; }</style>
  </head>
  <body>
    <h1>Hello World</h1>
    <p>This is a test paragraph.</p>
  </body>
</html>
"""

@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a per-test download directory, no DNS lookups"""
    return Settings(
        DOWNLOAD_DIR=str(tmp_path / "downloads"),
        REQUEST_TIMEOUT=5.0,
        RESOLVE_HOSTS=False,
    )

@pytest.fixture
def fixed_namer():
    return partial(generate_unique_filename, now=FIXED_NOW, token=FIXED_TOKEN)

@pytest.fixture
def make_fetcher(settings, fixed_namer):
    """
    Build a Fetcher whose network is served by a handler function.
    Every request seen by the transport is recorded on fetcher.requests.
    """
    def _make(handler, **kwargs):
        seen = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        kwargs.setdefault("namer", fixed_namer)
        fetcher = Fetcher(settings, transport=httpx.MockTransport(_record), **kwargs)
        fetcher.requests = seen
        return fetcher

    return _make

def html_response(body: str = SAMPLE_HTML, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=body, headers={"Content-Type": "text/html; charset=utf-8"})

def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )
