import hashlib
import hmac

import pytest

from artisan_doors.services.token_service import (
    build_unsubscribe_url,
    generate_unsubscribe_token,
    verify_unsubscribe_token,
)


def test_token_is_hmac_sha256_of_email():
    expected = hmac.new(b"test-secret", b"jane@example.com", hashlib.sha256).hexdigest()
    assert generate_unsubscribe_token("jane@example.com") == expected


def test_token_is_deterministic():
    assert generate_unsubscribe_token("jane@example.com") == generate_unsubscribe_token("jane@example.com")
    assert generate_unsubscribe_token("jane@example.com") != generate_unsubscribe_token("john@example.com")


def test_non_string_email_raises_type_error():
    with pytest.raises(TypeError):
        generate_unsubscribe_token(None)


def test_verify_accepts_matching_token():
    token = generate_unsubscribe_token("jane@example.com")
    assert verify_unsubscribe_token("jane@example.com", token) is True


@pytest.mark.parametrize("email,token", [
    ("jane@example.com", "not-a-token"),
    ("jane@example.com", None),
    ("jane@example.com", ""),
    (None, "abc"),
])
def test_verify_rejects_bad_input(email, token):
    assert verify_unsubscribe_token(email, token) is False


def test_token_for_other_email_is_rejected():
    token = generate_unsubscribe_token("john@example.com")
    assert verify_unsubscribe_token("jane@example.com", token) is False


def test_rotating_secret_invalidates_tokens(monkeypatch):
    token = generate_unsubscribe_token("jane@example.com")
    monkeypatch.setenv("EMAIL_SECRET", "rotated-secret")
    assert verify_unsubscribe_token("jane@example.com", token) is False


def test_unsubscribe_url_encodes_email():
    url = build_unsubscribe_url("jane+doors@example.com")
    token = generate_unsubscribe_token("jane+doors@example.com")
    assert url == f"http://localhost:5173/unsubscribe?email=jane%2Bdoors%40example.com&token={token}"
