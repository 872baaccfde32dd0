"""Tests for metadata sanitization."""

from multichannel_notifications.sanitization import MetadataSanitizer, default_sanitizer


def test_default_sanitizer_masks_credentials():
    sanitized = default_sanitizer.sanitize(
        {"otp": "482913", "Access_Token": "abc", "order_id": "42"}
    )

    assert sanitized == {"otp": "***", "Access_Token": "***", "order_id": "42"}


def test_sanitize_none_returns_empty_dict():
    assert default_sanitizer.sanitize(None) == {}


def test_redact_and_hash_fields():
    sanitizer = MetadataSanitizer(redact_fields={"email"}, hash_fields={"user_id"})

    sanitized = sanitizer.sanitize({"email": "a@b.c", "user_id": "u-1", "plan": "pro"})

    assert sanitized["email"] == "***"
    assert sanitized["user_id"].startswith("sha256:")
    assert sanitized["user_id"] == sanitizer.sanitize({"user_id": "u-1"})["user_id"]
    assert sanitized["plan"] == "pro"


def test_nested_values_are_sanitized():
    sanitized = default_sanitizer.sanitize(
        {"auth": {"password": "hunter2"}, "items": [{"secret": "s"}, {"sku": "x"}]}
    )

    assert sanitized == {"auth": {"password": "***"}, "items": [{"secret": "***"}, {"sku": "x"}]}


def test_containers_under_listed_keys_are_masked_whole():
    sanitizer = MetadataSanitizer(hash_fields={"user_ids"})

    sanitized = sanitizer.sanitize(
        {"token": {"value": "abc"}, "api_key": ["k1", "k2"], "user_ids": ["u-1", "u-2"]}
    )

    assert sanitized["token"] == "***"
    assert sanitized["api_key"] == "***"
    assert sanitized["user_ids"].startswith("sha256:")


def test_input_mapping_is_untouched():
    payload = {"token": "t"}

    default_sanitizer.sanitize(payload)

    assert payload == {"token": "t"}
