import hashlib
from types import SimpleNamespace

import pytest

from forum.core.exceptions import TranslationInputException
from forum.modules.translate.fingerprint import content_of, fingerprint


def test_fingerprint_is_md5_hex_of_utf8_content():
    assert fingerprint("") == "d41d8cd98f00b204e9800998ecf8427e"
    assert fingerprint("Grüß Gott") == hashlib.md5("Grüß Gott".encode("utf-8")).hexdigest()


def test_fingerprint_is_deterministic_and_byte_exact():
    assert fingerprint("Bonjour le monde") == fingerprint("Bonjour le monde")
    assert fingerprint("Bonjour le monde") != fingerprint("Bonjour le monde ")
    assert fingerprint("hello") != fingerprint("Hello")


def test_content_of_accepts_mappings_objects_and_strings():
    assert content_of({"content": "from dict"}) == "from dict"
    assert content_of(SimpleNamespace(content="from object")) == "from object"
    assert content_of("plain") == "plain"


def test_content_of_coerces_non_string_content():
    assert content_of({"content": 42}) == "42"


@pytest.mark.parametrize("post_like", [{}, {"content": None}, SimpleNamespace()])
def test_content_of_rejects_missing_content(post_like):
    with pytest.raises(TranslationInputException) as exc_info:
        content_of(post_like)
    assert exc_info.value.error_code == "invalid_content"
    assert exc_info.value.status_code == 422
