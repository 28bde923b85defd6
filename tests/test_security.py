"""
Password hashing and bearer token tests.
"""

from jose import jwt

from swapshop.config import get_settings
from swapshop.core.security import (
    create_access_token,
    hash_password,
    user_id_from_token,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_token_carries_user_id():
    assert user_id_from_token(create_access_token(42)) == 42


def test_rejects_tampered_and_foreign_tokens():
    settings = get_settings()
    assert user_id_from_token("garbage") is None
    foreign = jwt.encode({"sub": "1"}, "another-secret", algorithm=settings.jwt_algorithm)
    assert user_id_from_token(foreign) is None
    no_subject = jwt.encode({"scope": "x"}, settings.secret_key, algorithm=settings.jwt_algorithm)
    assert user_id_from_token(no_subject) is None
