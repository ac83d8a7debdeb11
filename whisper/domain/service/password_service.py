"""Password hashing domain service.

Argon2id with an explicit per-call salt. The stored hash string records the
cost parameters it was made with:

    argon2id$t=3,m=65536,p=4$<hex digest>

so raising the costs in configuration never invalidates existing hashes.
"""

import asyncio
import hmac
import secrets

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from pydantic import SecretStr

from whisper.config import PasswordSettings
from whisper.domain.value import PasswordHash

from .base import Service

_SCHEME = "argon2id"


class PasswordHasher(Service):
    """Slow, salted, one-way password hashing."""

    def __init__(self, password_settings: PasswordSettings) -> None:
        """Initialize password hasher.

        Args:
            password_settings: Argon2 cost parameters
        """
        self.settings = password_settings

    def hash(self, plaintext: str) -> PasswordHash:
        """Hash a password with a freshly generated salt.

        Args:
            plaintext: Password to hash

        Returns:
            Encoded hash and hex salt
        """
        salt = secrets.token_bytes(self.settings.salt_len)
        digest = self._derive(
            plaintext,
            salt,
            time_cost=self.settings.time_cost,
            memory_cost=self.settings.memory_cost,
            parallelism=self.settings.parallelism,
            hash_len=self.settings.hash_len,
        )
        params = (
            f"t={self.settings.time_cost},"
            f"m={self.settings.memory_cost},"
            f"p={self.settings.parallelism}"
        )
        return PasswordHash(
            hash=SecretStr(f"{_SCHEME}${params}${digest.hex()}"),
            salt=SecretStr(salt.hex()),
        )

    def verify(self, plaintext: str, password_hash: str, salt: str) -> bool:
        """Check a password against a stored hash and salt.

        Never raises for bad input: a malformed hash or salt simply fails
        verification.

        Args:
            plaintext: Submitted password
            password_hash: Stored encoded hash
            salt: Stored hex salt

        Returns:
            True if the password matches
        """
        try:
            scheme, params, hex_digest = password_hash.split("$")
            if scheme != _SCHEME:
                return False
            costs = dict(part.split("=", 1) for part in params.split(","))
            expected = bytes.fromhex(hex_digest)
            digest = self._derive(
                plaintext,
                bytes.fromhex(salt),
                time_cost=int(costs["t"]),
                memory_cost=int(costs["m"]),
                parallelism=int(costs["p"]),
                hash_len=len(expected),
            )
        except (ValueError, KeyError, OverflowError, HashingError):
            return False
        return hmac.compare_digest(digest, expected)

    async def hash_async(self, plaintext: str) -> PasswordHash:
        """Hash a password in a worker thread."""
        return await asyncio.to_thread(self.hash, plaintext)

    async def verify_async(self, plaintext: str, password_hash: str, salt: str) -> bool:
        """Verify a password in a worker thread."""
        return await asyncio.to_thread(self.verify, plaintext, password_hash, salt)

    @staticmethod
    def _derive(
        plaintext: str,
        salt: bytes,
        *,
        time_cost: int,
        memory_cost: int,
        parallelism: int,
        hash_len: int,
    ) -> bytes:
        return hash_secret_raw(
            secret=plaintext.encode("utf-8"),
            salt=salt,
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=hash_len,
            type=Type.ID,
        )
