import jwt
import pytest

from access_api.core.config import Settings
from access_api.core.security import create_access_token, decode_token, hash_password, verify_password


@pytest.fixture
def settings():
    return Settings(JWT_SECRET="unit-secret", JWT_EXPIRES_MIN=5)


def test_password_hash_round_trip():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_tolerates_garbage_hash():
    assert not verify_password("s3cret!", "")
    assert not verify_password("s3cret!", "not-a-hash")


def test_token_carries_identity(settings):
    token = create_access_token(settings, user_id=7, username="alice", role="Employee")
    payload = decode_token(settings, token)
    assert payload["sub"] == "7"
    assert payload["username"] == "alice"
    assert payload["role"] == "Employee"
    assert payload["exp"] - payload["iat"] == 5 * 60


def test_token_signed_with_other_secret_is_rejected(settings):
    token = create_access_token(settings, user_id=7, username="alice", role="Employee")
    with pytest.raises(jwt.InvalidSignatureError):
        decode_token(Settings(JWT_SECRET="other"), token)


def test_expired_token_is_rejected(settings):
    expired = Settings(JWT_SECRET="unit-secret", JWT_EXPIRES_MIN=-1)
    token = create_access_token(expired, user_id=7, username="alice", role="Employee")
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_token(settings, token)
