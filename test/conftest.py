from __future__ import annotations

from pathlib import Path
from typing import Tuple

import httpx
import pytest
from dotenv import load_dotenv

# Populate the environment before herit.server.core.config builds its settings
TEST_ROOT = Path(__file__).resolve().parent
load_dotenv(TEST_ROOT / ".env", override=False)
load_dotenv(TEST_ROOT / ".env.example", override=False)

from test.settings import test_settings  # noqa: E402

# The ASGI test client targets localhost; Google is faked behind http://mock
OFFLINE_ALLOWED_PREFIXES: Tuple[str, ...] = (
    "http://mock",
    "https://mock",
    "http://localhost",
    "http://127.0.0.1",
    "/",
)


@pytest.fixture(scope="session")
def test_config():
    """Test settings resolved from test/.env and test/.env.example."""
    return test_settings


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    """Fail any httpx request that would leave the machine, e.g. a real call to Google."""
    real_sync = httpx.Client.request
    real_async = httpx.AsyncClient.request

    def _check(url) -> None:
        if not str(url).startswith(OFFLINE_ALLOWED_PREFIXES):
            raise RuntimeError(f"External HTTP blocked in tests: {url}")

    def guarded_sync(self, method, url, *args, **kwargs):
        _check(url)
        return real_sync(self, method, url, *args, **kwargs)

    async def guarded_async(self, method, url, *args, **kwargs):
        _check(url)
        return await real_async(self, method, url, *args, **kwargs)

    monkeypatch.setattr(httpx.Client, "request", guarded_sync)
    monkeypatch.setattr(httpx.AsyncClient, "request", guarded_async)
