from datetime import timedelta

from jaothui.adapters.auth.crypto import Argon2AuthAdapter, JWTAuthAdapter
from jaothui.api.auth_utils import create_access_token


def test_hash_verify_success():
    auth = Argon2AuthAdapter()
    pwd = "Buffalo#2024"
    hashed = auth.hash_password(pwd)

    assert hashed != pwd
    assert hashed.startswith("$argon2")
    assert auth.verify_password(pwd, hashed) is True


def test_verify_fail():
    auth = Argon2AuthAdapter()
    hashed = auth.hash_password("password")

    assert auth.verify_password("wrong", hashed) is False


def test_verify_garbage_hash():
    assert Argon2AuthAdapter().verify_password("password", "not-a-hash") is False
    assert JWTAuthAdapter().verify_password("password", "not-a-hash") is False


def test_hashes_interchangeable():
    # Seeded profiles (argon2-cffi) must log in through the API adapter (passlib)
    hashed = Argon2AuthAdapter().hash_password("Buffalo#2024")

    assert JWTAuthAdapter().verify_password("Buffalo#2024", hashed) is True


def test_token_round_trip():
    auth = JWTAuthAdapter()

    token = auth.create_token("uid", 60, {"type": "access", "phone_number": "0812345678"})
    payload = auth.decode_token(token)

    assert payload is not None
    assert payload["sub"] == "uid"
    assert payload["phone_number"] == "0812345678"
    assert payload["exp"] > payload["iat"]


def test_expired_token_rejected():
    token = create_access_token("uid", expires_delta=timedelta(minutes=-1))

    assert JWTAuthAdapter().decode_token(token) is None


def test_tampered_token_rejected():
    auth = JWTAuthAdapter()
    header, _, signature = auth.create_token("uid", 60).split(".")
    _, payload, _ = auth.create_token("someone-else", 60).split(".")

    assert auth.decode_token(f"{header}.{payload}.{signature}") is None
