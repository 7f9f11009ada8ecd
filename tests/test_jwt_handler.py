from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from settings.config import settings
from utils.jwt_handler import InvalidToken, create_access_token, decode_access_token


def test_round_trip_identity():
    token = create_access_token("64b7f0c2a1b2c3d4e5f60718", "admin")
    data = decode_access_token(token)
    assert data.user_id == "64b7f0c2a1b2c3d4e5f60718"
    assert data.role == "admin"


def test_default_expiry_is_one_hour():
    token = create_access_token("abc", "guest")
    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60 == 3600


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_missing_or_malformed(token):
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_expired():
    token = create_access_token("abc", "guest", expires_delta=timedelta(minutes=-1))
    with pytest.raises(InvalidToken):
        decode_access_token(token)


def test_token_without_subject():
    token = jwt.encode(
        {"role": "admin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    with pytest.raises(InvalidToken):
        decode_access_token(token)
