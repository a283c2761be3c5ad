"""Tests for password handling and the token codec."""

from datetime import UTC, datetime, timedelta

from jose import jwt

from medchain.config import settings
from medchain.core.security import (
    FULL_NAME_CLAIM,
    create_auth_token,
    decode_auth_token,
    get_password_hash,
    read_unverified_claims,
    token_expiry,
    validate_password,
    verify_password,
)


class TestPasswordPolicy:
    """Tests for the account password policy."""

    def test_strong_password_passes(self):
        assert validate_password("Str0ng!Pass") == []

    def test_each_rule_reports_its_own_error(self):
        errors = validate_password("abc")

        assert errors == [
            "Passwords must be at least 8 characters.",
            "Passwords must have at least one non alphanumeric character.",
            "Passwords must have at least one digit ('0'-'9').",
            "Passwords must have at least one uppercase ('A'-'Z').",
        ]

    def test_missing_lowercase(self):
        assert validate_password("ADMIN@123") == [
            "Passwords must have at least one lowercase ('a'-'z')."
        ]

    def test_non_ascii_letters_count_as_non_alphanumeric(self):
        assert validate_password("Grüße123") == []

    def test_non_ascii_letters_do_not_count_as_lowercase(self):
        assert validate_password("ÖLBAUM#12") == [
            "Passwords must have at least one lowercase ('a'-'z')."
        ]

    def test_ascii_letters_and_digits_only(self):
        assert validate_password("Passw0rdX") == [
            "Passwords must have at least one non alphanumeric character."
        ]

    def test_bootstrap_admin_password_is_valid(self):
        assert validate_password("Admin@123") == []


def test_password_hash_round_trip():
    """Test hashing and verifying a password."""
    hashed = get_password_hash("Str0ng!Pass")

    assert hashed != "Str0ng!Pass"
    assert verify_password("Str0ng!Pass", hashed)
    assert not verify_password("wrong", hashed)


class TestAuthToken:
    """Tests for token issuance and verification."""

    def test_claims_shape(self, test_user):
        token = create_auth_token(test_user, ["Doctor"])
        claims = decode_auth_token(token)

        assert claims is not None
        assert claims["sub"] == str(test_user["id"])
        assert claims["name"] == test_user["user_name"]
        assert claims["email"] == test_user["email"]
        assert claims[FULL_NAME_CLAIM] == "Jane Doe"
        assert claims["role"] == "Doctor"
        assert claims["iss"] == settings.jwt_issuer
        assert claims["aud"] == settings.jwt_audience
        assert claims["jti"]

    def test_signed_with_hs512(self, test_user):
        token = create_auth_token(test_user, [])
        assert jwt.get_unverified_header(token)["alg"] == "HS512"

    def test_expires_after_one_day(self, test_user):
        before = datetime.now(UTC)
        claims = decode_auth_token(create_auth_token(test_user, []))

        expires_at = token_expiry(claims)
        assert expires_at is not None
        assert timedelta(hours=23, minutes=59) <= expires_at - before <= timedelta(days=1, seconds=5)

    def test_multiple_roles_become_a_list(self, test_user):
        claims = decode_auth_token(create_auth_token(test_user, ["Admin", "Doctor"]))
        assert claims["role"] == ["Admin", "Doctor"]

    def test_no_roles_omits_role_claim(self, test_user):
        claims = decode_auth_token(create_auth_token(test_user, []))
        assert "role" not in claims

    def test_each_token_gets_a_fresh_jti(self, test_user):
        first = decode_auth_token(create_auth_token(test_user, []))
        second = decode_auth_token(create_auth_token(test_user, []))
        assert first["jti"] != second["jti"]

    def test_expired_token_fails_verification(self, test_user):
        token = create_auth_token(test_user, [], expires_delta=timedelta(minutes=-5))
        assert decode_auth_token(token) is None

    def test_foreign_signature_fails_verification(self, test_user):
        forged = jwt.encode(
            {"sub": str(test_user["id"]), "aud": settings.jwt_audience, "iss": settings.jwt_issuer},
            "some-other-key",
            algorithm="HS512",
        )
        assert decode_auth_token(forged) is None

    def test_wrong_audience_fails_verification(self, test_user):
        token = jwt.encode(
            {
                "sub": str(test_user["id"]),
                "aud": "someone-else",
                "iss": settings.jwt_issuer,
                "exp": datetime.now(UTC) + timedelta(hours=1),
            },
            settings.jwt_key,
            algorithm="HS512",
        )
        assert decode_auth_token(token) is None


class TestUnverifiedClaims:
    """Tests for structural token reading."""

    def test_reads_claims_without_key(self, test_user):
        token = jwt.encode({"sub": "abc", "role": "Patient"}, "not-our-key", algorithm="HS256")
        assert read_unverified_claims(token) == {"sub": "abc", "role": "Patient"}

    def test_garbage_is_unreadable(self):
        assert read_unverified_claims("not-a-jwt") is None
        assert read_unverified_claims("") is None
        assert read_unverified_claims("   ") is None

    def test_token_expiry_requires_numeric_exp(self):
        assert token_expiry({}) is None
        assert token_expiry({"exp": "tomorrow"}) is None
        assert token_expiry({"exp": 0}) == datetime.fromtimestamp(0, tz=UTC)

    def test_token_expiry_out_of_range_is_none(self):
        assert token_expiry({"exp": 10**20}) is None
        assert token_expiry({"exp": -(10**20)}) is None
        assert token_expiry({"exp": float("nan")}) is None
