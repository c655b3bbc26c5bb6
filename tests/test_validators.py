from __future__ import annotations

from gradeup.utils.validators import client_ip, sanitize_optional, sanitize_text


def test_sanitize_text_strips_null_and_trims():
    assert sanitize_text("  hello\x00world  ") == "helloworld"


def test_sanitize_text_strips_tags_and_unescapes():
    assert sanitize_text("<script>alert(1)</script>Deal &amp; terms") == "alert(1)Deal & terms"
    assert sanitize_text(None) == ""


def test_sanitize_optional_maps_blank_to_none():
    assert sanitize_optional(None) is None
    assert sanitize_optional("  <br>  ") is None
    assert sanitize_optional(" ok ") == "ok"


def test_client_ip_prefers_first_forwarded_address():
    assert client_ip("198.51.100.7, 10.0.0.1", "10.0.0.2") == "198.51.100.7"
    assert client_ip(None, " 10.0.0.2 ") == "10.0.0.2"
    assert client_ip("", None) is None
