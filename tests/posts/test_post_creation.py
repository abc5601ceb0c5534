import pytest

from forum.core.exceptions import InvalidPidException, InvalidUidException
from forum.modules.notifications.translation import (
    POST_EDITED_EVENT,
    TRANSLATION_STATUS_EVENT,
)
from forum.modules.posts.schemas import PostCreate
from forum.modules.translate import FALLBACK_OUTCOME


def _payload(**overrides):
    data = {"uid": 3, "tid": 7, "content": "Bonjour le monde"}
    data.update(overrides)
    return PostCreate(**data)


@pytest.fixture
def french(translator_backend):
    translator_backend.responses["Bonjour le monde"] = {
        "is_english": False,
        "translated_content": "Hello world",
    }
    return translator_backend


@pytest.mark.asyncio
async def test_uncached_post_is_created_with_defaults_then_translated(
    post_service, post_store, notifier, french
):
    post = await post_service.create_post(_payload())

    assert post["is_english"] is True
    assert post["translated_content"] == ""
    assert post["is_main"] is False
    pending = notifier.events(TRANSLATION_STATUS_EVENT)
    assert [room for room, _, _ in pending] == ["topic_7", "uid_3"]
    assert pending[0][2] == {"pid": post["pid"], "tid": 7, "status": "pending"}

    await post_service.drain()

    stored = post_store.get(post["pid"])
    assert stored["is_english"] is False
    assert stored["translated_content"] == "Hello world"

    success = notifier.events(TRANSLATION_STATUS_EVENT, room="topic_7")[-1][2]
    assert success == {
        "pid": post["pid"],
        "tid": 7,
        "status": "success",
        "isEnglish": False,
        "translatedContent": "Hello world",
    }
    edited = notifier.events(POST_EDITED_EVENT)
    assert [room for room, _, _ in edited] == ["topic_7", "uid_3"]
    assert edited[0][2] == {
        "post": {
            "pid": post["pid"],
            "tid": 7,
            "content": "Bonjour le monde",
            "isEnglish": False,
            "translatedContent": "Hello world",
            "deleted": False,
            "changed": False,
        },
        "topic": {"tid": 7},
    }


@pytest.mark.asyncio
async def test_cached_post_is_translated_before_it_is_stored(
    post_service, post_store, translation_service, notifier, french
):
    await translation_service.translate({"content": "Bonjour le monde"})

    post = await post_service.create_post(_payload(is_main=True))

    assert post["is_english"] is False
    assert post["translated_content"] == "Hello world"
    assert post["is_main"] is True
    assert post_store.get(post["pid"])["translated_content"] == "Hello world"
    assert notifier.published == []
    assert post_service.background_count == 0
    assert french.calls == ["Bonjour le monde"]


@pytest.mark.asyncio
async def test_unreachable_translator_reports_success_with_fallback(
    make_translation_service, make_post_service, post_store, notifier, translator_backend
):
    translator_backend.delay = 1.0
    service = make_post_service(translator=make_translation_service(timeout=0.05))

    post = await service.create_post(_payload(content="Hola"))
    await service.drain()

    stored = post_store.get(post["pid"])
    assert (stored["is_english"], stored["translated_content"]) == FALLBACK_OUTCOME
    statuses = [p["status"] for _, _, p in notifier.events(TRANSLATION_STATUS_EVENT)]
    assert statuses == ["pending", "pending", "success", "success"]


class BrokenTranslator:
    def is_cached(self, post_like):
        return False

    async def translate(self, post_like):
        raise RuntimeError("translator misconfigured")


@pytest.mark.asyncio
async def test_background_failure_emits_fail_and_keeps_defaults(
    make_post_service, post_store, notifier
):
    service = make_post_service(translator=BrokenTranslator())

    post = await service.create_post(_payload())
    await service.drain()

    stored = post_store.get(post["pid"])
    assert stored["is_english"] is True
    assert stored["translated_content"] == ""
    fail = notifier.events(TRANSLATION_STATUS_EVENT, room="uid_3")[-1][2]
    assert fail == {
        "pid": post["pid"],
        "tid": 7,
        "status": "fail",
        "error": "translator misconfigured",
    }
    assert notifier.events(POST_EDITED_EVENT) == []


class ExplodingNotifier:
    async def publish(self, room, event, payload):
        raise ConnectionError("socket layer down")


@pytest.mark.asyncio
async def test_notifier_failures_never_break_post_creation(
    make_post_service, post_store, french
):
    service = make_post_service(notifier_override=ExplodingNotifier())

    post = await service.create_post(_payload())
    await service.drain()

    assert post_store.get(post["pid"])["translated_content"] == "Hello world"


@pytest.mark.asyncio
async def test_missing_uid_is_rejected(post_service, post_store):
    with pytest.raises(InvalidUidException):
        await post_service.create_post(_payload(uid=None))
    assert post_store.count() == 0


@pytest.mark.asyncio
async def test_guest_posts_keep_handle(post_service):
    guest = await post_service.create_post(_payload(uid=0, handle="visitor"))
    member = await post_service.create_post(_payload(uid=5, handle="ignored"))

    assert guest["uid"] == 0
    assert guest["handle"] == "visitor"
    assert member["handle"] is None


@pytest.mark.asyncio
async def test_ip_is_stored_only_when_tracking_is_enabled(make_post_service):
    untracked = await make_post_service().create_post(_payload(ip="10.0.0.1"))
    tracked = await make_post_service(track_ip=True).create_post(_payload(ip="10.0.0.2"))

    assert untracked["ip"] is None
    assert tracked["ip"] == "10.0.0.2"


@pytest.mark.asyncio
async def test_explicit_pid_and_timestamp_are_kept(post_service):
    post = await post_service.create_post(_payload(pid=900, timestamp=1700000000000))

    assert post["pid"] == 900
    assert post["timestamp"] == 1700000000000


@pytest.mark.asyncio
async def test_reply_increments_parent_reply_count(post_service, post_store):
    parent = await post_service.create_post(_payload(content="parent"))

    reply = await post_service.create_post(_payload(content="reply", to_pid=parent["pid"]))

    assert reply["to_pid"] == parent["pid"]
    assert post_store.get(parent["pid"])["replies"] == 1


@pytest.mark.asyncio
async def test_reply_to_missing_post_is_rejected(post_service):
    with pytest.raises(InvalidPidException):
        await post_service.create_post(_payload(to_pid=12345))


@pytest.mark.asyncio
async def test_reply_to_deleted_post_is_rejected(post_service, post_store):
    parent = await post_service.create_post(_payload(content="gone"))
    post_store.set_post_fields(parent["pid"], {"deleted": True})

    with pytest.raises(InvalidPidException):
        await post_service.create_post(_payload(to_pid=parent["pid"]))
