"""
Unit tests for password hashing utilities
"""

from app.utils.password_hashing import PasswordHasher


class TestPasswordHasher:
    """Test cases for PasswordHasher class"""

    def test_hash_password_basic(self):
        """Test basic password hashing functionality"""
        password = "test_password_123"
        hashed = PasswordHasher.hash_password(password, rounds=4)

        assert isinstance(hashed, str)
        assert hashed != password
        assert hashed.startswith("$2b$04$")

    def test_hash_password_uses_salt(self):
        """Test that hashing produces different results for same password (salt)"""
        password = "consistent_test_password"

        hash1 = PasswordHasher.hash_password(password, rounds=4)
        hash2 = PasswordHasher.hash_password(password, rounds=4)

        assert hash1 != hash2
        assert PasswordHasher.verify_password(password, hash1)
        assert PasswordHasher.verify_password(password, hash2)

    def test_default_cost_factor(self):
        assert PasswordHasher.hash_password("secret").startswith("$2b$12$")

    def test_verify_password_correct(self):
        hashed = PasswordHasher.hash_password("P@ssw0rd!#$%^&*()", rounds=4)

        assert PasswordHasher.verify_password("P@ssw0rd!#$%^&*()", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = PasswordHasher.hash_password("correct", rounds=4)

        assert PasswordHasher.verify_password("wrong", hashed) is False
        assert PasswordHasher.verify_password("Correct", hashed) is False

    def test_verify_password_unicode(self):
        password = "密码测试🔐"
        hashed = PasswordHasher.hash_password(password, rounds=4)

        assert PasswordHasher.verify_password(password, hashed) is True

    def test_verify_empty_inputs(self):
        hashed = PasswordHasher.hash_password("secret", rounds=4)

        assert PasswordHasher.verify_password("", hashed) is False
        assert PasswordHasher.verify_password("secret", "") is False
        assert PasswordHasher.verify_password(None, hashed) is False

    def test_verify_against_non_bcrypt_value(self):
        """A plain text or malformed stored value never matches"""
        assert PasswordHasher.verify_password("secret", "secret") is False
        assert PasswordHasher.verify_password("secret", "$2b$12$short") is False
