from datetime import timedelta

import pytest
from jose import jwt

from scholaro.models.user import UserRole
from scholaro.utils.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_hash_is_salted_and_verifies():
    first = get_password_hash('s3cret-pass')
    second = get_password_hash('s3cret-pass')

    assert first != second
    assert verify_password('s3cret-pass', first)
    assert verify_password('s3cret-pass', second)
    assert not verify_password('wrong-pass', first)


def test_verify_malformed_digest_returns_false():
    assert verify_password('anything', 'not-a-real-hash') is False
    assert verify_password('anything', '') is False


def test_token_round_trips_claims():
    token = create_access_token('65a1f0c2e4b0a1b2c3d4e5f6', 'ada@example.com', 'admin')

    claims = decode_access_token(token)

    assert claims.sub == '65a1f0c2e4b0a1b2c3d4e5f6'
    assert claims.email == 'ada@example.com'
    assert claims.role == UserRole.ADMIN


def test_token_expires_after_24_hours():
    token = create_access_token('65a1f0c2e4b0a1b2c3d4e5f6', 'ada@example.com', 'user')
    claims = decode_access_token(token)

    assert claims.exp - claims.iat == 24 * 60 * 60


def test_expired_token_is_rejected():
    token = create_access_token(
        '65a1f0c2e4b0a1b2c3d4e5f6', 'ada@example.com', 'user',
        expires_delta=timedelta(seconds=-1),
    )

    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode(
        {'sub': '65a1f0c2e4b0a1b2c3d4e5f6', 'email': 'x@example.com', 'role': 'admin',
         'exp': 4102444800, 'iat': 1700000000, 'jti': 'abc'},
        'not-the-server-secret',
        algorithm='HS256',
    )

    with pytest.raises(InvalidTokenError):
        decode_access_token(forged)


@pytest.mark.parametrize('token', ['', 'garbage', 'a.b.c'])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)
