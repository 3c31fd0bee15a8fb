"""
Password hashing utilities using bcrypt
"""

import bcrypt
from loguru import logger


class PasswordHasher:
    """bcrypt hashing for ``ref_users.password_hash``"""

    @staticmethod
    def hash_password(password: str, rounds: int = 12) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password
            rounds: bcrypt cost factor

        Returns:
            Hashed password as string
        """
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds))
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        """
        Verify a password against a stored hash.

        A stored value that is not a bcrypt hash never matches.

        Returns:
            True if password matches, False otherwise
        """
        if not password or not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error(f"Stored password hash is not a valid bcrypt hash: {e}")
            return False
