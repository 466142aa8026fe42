from datetime import timedelta

from schoolneeds.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
    normalize_email,
    is_valid_slug,
)


def test_password_hashing_and_verification():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_normalize_email():
    assert normalize_email("  Principal@School.SY ") == "principal@school.sy"


def test_slug_validation():
    assert is_valid_slug("about-us")
    assert is_valid_slug("faq2")
    assert not is_valid_slug("About-Us")
    assert not is_valid_slug("about--us")
    assert not is_valid_slug("-about")
    assert not is_valid_slug("من-نحن")


def test_jwt_token_creation_and_decoding():
    data = {"sub": "test-user-id", "role": "principal"}
    token = create_access_token(data)
    payload = decode_token(token)

    assert payload is not None
    assert payload["sub"] == "test-user-id"
    assert payload["role"] == "principal"
    assert payload["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "x"}, expires_delta=timedelta(minutes=-1))
    assert decode_token(token) is None


def test_invalid_token_decoding():
    result = decode_token("invalid.token.here")
    assert result is None
