# ruff: noqa: E402
import asyncio
import os
import shutil
import tempfile
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

# Set testing environment flags before importing the app or settings
_DB_DIR = tempfile.mkdtemp(prefix="forum-tests-")
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["TRANSLATOR_API_URL"] = "http://translator.test"
os.environ.pop("LOG_DIR", None)

from forum.core.database import Base, SessionLocal, engine, init_db
from forum.modules.posts.store import SqlPostStore
from forum.modules.translate import (
    SingleFlightQueue,
    TranslationCache,
    TranslationService,
    TranslatorClient,
)
from forum.services.posts import PostService

TRANSLATOR_URL = "http://translator.test"

init_db(engine)


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_DB_DIR, ignore_errors=True)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingNotifier:
    """Notifier double that records every publish."""

    def __init__(self) -> None:
        self.published: List[Tuple[str, str, dict]] = []

    async def publish(self, room: str, event: str, payload: dict) -> None:
        self.published.append((room, event, payload))

    def events(self, event: Optional[str] = None, room: Optional[str] = None):
        return [
            (r, e, p)
            for r, e, p in self.published
            if (event is None or e == event) and (room is None or r == room)
        ]


class FakeTranslator:
    """Translator microservice double served through httpx.MockTransport.

    `responses` maps content to the JSON body returned; unknown content is reported
    as English. `delay` makes every call sleep (to trigger client timeouts) and
    `fail_with` makes every call raise the given transport exception.
    """

    def __init__(self) -> None:
        self.responses: Dict[str, Any] = {}
        self.status_code = 200
        self.delay: float = 0.0
        self.fail_with: Optional[Exception] = None
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        content = request.url.params.get("content", "")
        self.calls.append(content)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail_with is not None:
                raise self.fail_with
            body = self.responses.get(
                content, {"is_english": True, "translated_content": ""}
            )
            return httpx.Response(self.status_code, json=body)
        finally:
            self.in_flight -= 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def translator_backend():
    return FakeTranslator()


@pytest.fixture
def make_translation_service(translator_backend, clock):
    def _make(
        *, timeout: float = 0.2, cache: Optional[TranslationCache] = None
    ) -> TranslationService:
        client = TranslatorClient(
            TRANSLATOR_URL,
            timeout=timeout,
            http_client=httpx.AsyncClient(transport=translator_backend.transport),
        )
        return TranslationService(
            client,
            cache=cache if cache is not None else TranslationCache(max_entries=500, ttl_seconds=3600, timer=clock),
            queue=SingleFlightQueue(concurrency=1),
        )

    return _make


@pytest.fixture
def translation_service(make_translation_service):
    return make_translation_service()


@pytest.fixture
def db_clean():
    """Empty every table before the test runs."""
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())
    yield


@pytest.fixture
def post_store(db_clean):
    return SqlPostStore(SessionLocal)


@pytest.fixture
def make_post_service(post_store, translation_service, notifier):
    def _make(
        *, translator=None, notifier_override=None, track_ip: bool = False
    ) -> PostService:
        return PostService(
            post_store,
            translator or translation_service,
            notifier_override or notifier,
            track_ip=track_ip,
        )

    return _make


@pytest.fixture
def post_service(make_post_service):
    return make_post_service()
