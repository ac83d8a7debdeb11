"""Unit tests for PasswordHasher."""

import pytest

from whisper.domain.service import PasswordHasher
from tests.harness import FAST_PASSWORD_SETTINGS


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(password_settings=FAST_PASSWORD_SETTINGS)


class TestHash:
    def test_hash_encodes_cost_parameters(self, hasher):
        result = hasher.hash("pw123")

        scheme, params, digest = result.hash.get_secret_value().split("$")
        assert scheme == "argon2id"
        assert params == "t=1,m=8,p=1"
        assert len(bytes.fromhex(digest)) == FAST_PASSWORD_SETTINGS.hash_len

    def test_hash_never_contains_plaintext(self, hasher):
        result = hasher.hash("pw123")

        assert "pw123" not in result.hash.get_secret_value()
        assert "pw123" not in repr(result)

    def test_each_call_uses_fresh_salt(self, hasher):
        first = hasher.hash("pw123")
        second = hasher.hash("pw123")

        assert first.salt.get_secret_value() != second.salt.get_secret_value()
        assert first.hash.get_secret_value() != second.hash.get_secret_value()


class TestVerify:
    def test_verify_accepts_matching_password(self, hasher):
        result = hasher.hash("pw123")

        assert hasher.verify(
            "pw123", result.hash.get_secret_value(), result.salt.get_secret_value()
        )

    def test_verify_rejects_wrong_password(self, hasher):
        result = hasher.hash("pw123")

        assert not hasher.verify(
            "wrong", result.hash.get_secret_value(), result.salt.get_secret_value()
        )

    def test_verify_rejects_wrong_salt(self, hasher):
        result = hasher.hash("pw123")
        other = hasher.hash("pw123")

        assert not hasher.verify(
            "pw123", result.hash.get_secret_value(), other.salt.get_secret_value()
        )

    def test_verify_survives_cost_change(self, hasher):
        """Hashes made with old costs still verify after costs are raised."""
        result = hasher.hash("pw123")
        stronger = PasswordHasher(
            password_settings=FAST_PASSWORD_SETTINGS.model_copy(
                update={"time_cost": 2, "memory_cost": 16}
            )
        )

        assert stronger.verify(
            "pw123", result.hash.get_secret_value(), result.salt.get_secret_value()
        )

    @pytest.mark.parametrize(
        "password_hash, salt",
        [
            ("", "00"),
            ("not-a-hash", "00"),
            ("bcrypt$t=1,m=8,p=1$00ff", "00112233445566778899aabbccddeeff"),
            ("argon2id$t=1,m=8$00ff", "00112233445566778899aabbccddeeff"),
            ("argon2id$t=x,m=8,p=1$00ff", "00112233445566778899aabbccddeeff"),
            ("argon2id$t=1,m=8,p=1$zz", "00112233445566778899aabbccddeeff"),
            ("argon2id$t=1,m=8,p=1$00ff", "not-hex"),
            ("argon2id$t=0,m=8,p=1$00112233", "00112233445566778899aabbccddeeff"),
            ("argon2id$t=-1,m=8,p=1$00112233", "00112233445566778899aabbccddeeff"),
        ],
    )
    def test_verify_returns_false_for_malformed_input(
        self, hasher, password_hash, salt
    ):
        assert hasher.verify("pw123", password_hash, salt) is False


class TestAsyncWrappers:
    @pytest.mark.asyncio
    async def test_async_round_trip(self, hasher):
        result = await hasher.hash_async("pw123")

        assert await hasher.verify_async(
            "pw123", result.hash.get_secret_value(), result.salt.get_secret_value()
        )
        assert not await hasher.verify_async(
            "nope", result.hash.get_secret_value(), result.salt.get_secret_value()
        )
