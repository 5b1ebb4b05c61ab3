"""Password hashing and strength rules."""

import pytest

from batshit.auth.password import (
    PasswordStrengthError,
    hash_password,
    needs_rehash,
    validate_password_strength,
    verify_password,
)


class TestHashing:
    def test_round_trip(self):
        hashed = hash_password("correct horse 9")
        assert hashed.startswith("$argon2id$")
        assert verify_password("correct horse 9", hashed)
        assert not verify_password("wrong horse 9", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("anything1", "not-a-hash") is False

    def test_fresh_hash_needs_no_rehash(self):
        assert needs_rehash(hash_password("password123")) is False


class TestStrength:
    def test_accepts_letters_and_digits(self):
        validate_password_strength("password123")

    @pytest.mark.parametrize(
        ("password", "message"),
        [
            ("", "empty"),
            ("   ", "empty"),
            ("abc12", "at least 8"),
            ("abcdefgh", "digit"),
            ("12345678", "letter"),
        ],
    )
    def test_rejects(self, password, message):
        with pytest.raises(PasswordStrengthError, match=message):
            validate_password_strength(password)

    def test_max_length(self):
        with pytest.raises(PasswordStrengthError, match="exceed"):
            validate_password_strength("a1" * 65)
