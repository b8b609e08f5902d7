from __future__ import annotations

from pagelifecycle._redact import redact_for_log
from pagelifecycle.events import Location


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "page": "checkout",
        "user_email": "someone@example.com",
        "accessToken": "abc",
        "nested": {"session-id": "s1", "items": 3},
        "email": "someone@example.com",
    }

    redacted = redact_for_log(payload)
    assert redacted["page"] == "checkout"
    assert redacted["accessToken"] == "<redacted>"
    assert redacted["nested"]["session-id"] == "<redacted>"
    assert redacted["nested"]["items"] == 3
    assert redacted["email"] == "<redacted>"
    # Only exact key names are redacted.
    assert redacted["user_email"] == "someone@example.com"


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log({"value": "x" * 600}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_dumps_models_and_reprs_unknown_objects() -> None:
    class Opaque:
        def __repr__(self) -> str:
            return "<Opaque>"

    redacted = redact_for_log({"location": Location.parse("/a?b=1"), "other": Opaque()})
    assert redacted["location"]["pathname"] == "/a"
    assert redacted["other"] == "<Opaque>"
