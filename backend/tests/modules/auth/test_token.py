"""Tests for the JWT token maker."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
import pytest

from modules.auth.exceptions import ExpiredTokenError, InvalidKeyError, InvalidTokenError
from modules.auth.interfaces import ITokenMaker
from modules.auth.token import JWTMaker, SYMMETRIC_KEY_SIZE

from tests.conftest import TEST_SYMMETRIC_KEY


class TestConstruction:
    def test_test_key_has_required_size(self):
        assert len(TEST_SYMMETRIC_KEY) == SYMMETRIC_KEY_SIZE == 32

    @pytest.mark.parametrize("key", ["", "short", "x" * 31, "x" * 33])
    def test_rejects_wrong_key_size(self, key):
        with pytest.raises(InvalidKeyError) as exc_info:
            JWTMaker(key)
        assert exc_info.value.details == {"expected": 32, "actual": len(key)}

    def test_implements_interface(self, token_maker):
        assert isinstance(token_maker, ITokenMaker)


class TestCreateToken:
    def test_payload_fields(self, token_maker):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        token, payload = token_maker.create_token("user-1", timedelta(minutes=1))

        assert isinstance(token, str) and token
        assert isinstance(payload.id, UUID)
        assert payload.subject == "user-1"
        assert payload.issued_at >= before
        lifetime = payload.expires_at - payload.issued_at
        assert timedelta(minutes=1) <= lifetime <= timedelta(minutes=1, seconds=1)

    def test_expiry_rounds_up_to_whole_second(self, token_maker):
        now = datetime(2026, 1, 1, 12, 0, 0, 950000, tzinfo=timezone.utc)
        _, payload = token_maker.create_token("user-1", timedelta(seconds=1), now=now)
        assert payload.issued_at == datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert payload.expires_at == datetime(2026, 1, 1, 12, 0, 2, tzinfo=timezone.utc)

    def test_whole_second_clock_keeps_exact_ttl(self, token_maker):
        now = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        _, payload = token_maker.create_token("user-1", timedelta(seconds=90), now=now)
        assert payload.expires_at == now + timedelta(seconds=90)

    def test_ids_are_unique(self, token_maker):
        _, first = token_maker.create_token("user-1", timedelta(minutes=1))
        _, second = token_maker.create_token("user-1", timedelta(minutes=1))
        assert first.id != second.id

    def test_claims_are_registered_jwt_claims(self, token_maker):
        token, payload = token_maker.create_token("user-1", timedelta(minutes=1))
        claims = jwt.decode(token, TEST_SYMMETRIC_KEY, algorithms=["HS256"])
        assert claims["jti"] == str(payload.id)
        assert claims["sub"] == "user-1"
        assert claims["exp"] == int(payload.expires_at.timestamp())
        assert claims["iat"] == int(payload.issued_at.timestamp())


class TestVerifyToken:
    def test_round_trip_preserves_subject(self, token_maker):
        """A fresh token should verify immediately."""
        token, created = token_maker.create_token("user-1", timedelta(seconds=1))
        payload = token_maker.verify_token(token)
        assert payload == created

    def test_never_valid_for_less_than_ttl(self, token_maker):
        """A token created late in a second stays valid for the full ttl."""
        created_at = datetime(2026, 1, 1, 12, 0, 0, 950000, tzinfo=timezone.utc)
        token, _ = token_maker.create_token("user-1", timedelta(seconds=1), now=created_at)

        for elapsed_ms in (100, 1000):
            now = created_at + timedelta(milliseconds=elapsed_ms)
            assert token_maker.verify_token(token, now=now).subject == "user-1"

        with pytest.raises(ExpiredTokenError):
            token_maker.verify_token(token, now=created_at + timedelta(seconds=2))

    def test_sub_second_ttl_round_trips(self, token_maker):
        """The returned payload matches what verification decodes."""
        now = datetime.now(timezone.utc)
        token, created = token_maker.create_token("user-1", timedelta(milliseconds=1500), now=now)
        assert token_maker.verify_token(token, now=now) == created

    def test_expired_after_ttl(self, token_maker):
        token, created = token_maker.create_token("user-1", timedelta(seconds=1))
        later = created.expires_at + timedelta(seconds=1)
        with pytest.raises(ExpiredTokenError):
            token_maker.verify_token(token, now=later)

    def test_valid_at_exact_expiry(self, token_maker):
        """Expiry is strictly after expires_at."""
        token, created = token_maker.create_token("user-1", timedelta(seconds=1))
        assert token_maker.verify_token(token, now=created.expires_at).subject == "user-1"

    def test_negative_ttl_is_expired(self, token_maker):
        token, _ = token_maker.create_token("user-1", timedelta(minutes=-1))
        with pytest.raises(ExpiredTokenError):
            token_maker.verify_token(token)

    def test_one_character_change_is_invalid(self, token_maker):
        token, _ = token_maker.create_token("user-1", timedelta(minutes=1))
        header, payload, signature = token.split(".")
        middle = len(payload) // 2
        replacement = "A" if payload[middle] != "A" else "B"
        tampered = ".".join([header, payload[:middle] + replacement + payload[middle + 1:], signature])

        with pytest.raises(InvalidTokenError):
            token_maker.verify_token(tampered)

    def test_other_key_is_invalid(self, token_maker):
        other = JWTMaker("0123456789abcdef0123456789abcdef")
        token, _ = other.create_token("user-1", timedelta(minutes=1))
        with pytest.raises(InvalidTokenError):
            token_maker.verify_token(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed(self, token_maker, token):
        with pytest.raises(InvalidTokenError):
            token_maker.verify_token(token)

    def test_missing_claim_is_invalid(self, token_maker):
        token = jwt.encode({"sub": "user-1", "exp": 9999999999}, TEST_SYMMETRIC_KEY, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            token_maker.verify_token(token)

    def test_bad_jti_is_invalid(self, token_maker):
        token = jwt.encode(
            {"jti": "not-a-uuid", "sub": "user-1", "iat": 0, "exp": 9999999999},
            TEST_SYMMETRIC_KEY,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            token_maker.verify_token(token)

    def test_none_algorithm_is_rejected(self, token_maker):
        token = jwt.encode(
            {"jti": "5f0c9a2e-6b9e-4c39-9d6b-2d5b0f2f4d11", "sub": "user-1", "iat": 0, "exp": 9999999999},
            None,
            algorithm="none",
        )
        with pytest.raises(InvalidTokenError):
            token_maker.verify_token(token)
