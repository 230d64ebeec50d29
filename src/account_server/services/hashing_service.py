"""Hashing service for credentials stored at rest.

This module wraps a passlib bcrypt context used to hash passwords and email
addresses before they are persisted, and to compare raw values against the
stored hashes.
"""

from passlib.context import CryptContext

from ..config import Settings


class HashingService:
    """One-way salted hashing with a configurable cost factor.

    Hashes are non-deterministic: hashing the same value twice yields two
    different strings, so stored values must be checked with ``compare``
    rather than by equality.
    """

    def __init__(self, rounds: int) -> None:
        """Initialize hashing service.

        Args:
            rounds: bcrypt cost factor (log2 of the number of iterations)
        """
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "HashingService":
        """Build a hashing service from application settings."""
        return cls(settings.salt_rounds)

    def hash(self, plaintext: str) -> str:
        """Hash a raw value."""
        return self._context.hash(plaintext)

    def compare(self, plaintext: str, hashed: str) -> bool:
        """Check a raw value against a stored hash.

        Raises:
            ValueError: If the stored value is not a recognizable hash
        """
        return self._context.verify(plaintext, hashed)
