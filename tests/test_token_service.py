from datetime import datetime, timedelta, timezone

import pytest

from app.application.services import token_service
from app.core.exceptions import ErrorResponse


def test_access_and_refresh_carry_identity(user):
    access = token_service.decode_access_token(token_service.create_access_token(user))
    refresh = token_service.decode_refresh_token(token_service.create_refresh_token(user))

    for claims in (access, refresh):
        assert claims["id"] == user.id
        assert claims["email"] == user.email
        assert claims["role"] == user.role


def test_families_use_separate_secrets(user):
    assert token_service.decode_refresh_token(token_service.create_access_token(user)) is None
    assert token_service.decode_access_token(token_service.create_refresh_token(user)) is None


def test_access_token_lifetime(user):
    claims = token_service.decode_access_token(token_service.create_access_token(user))
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_reissue_from_claims(user):
    refresh_claims = token_service.decode_refresh_token(token_service.create_refresh_token(user))
    claims = token_service.decode_access_token(token_service.create_access_token_from_claims(refresh_claims))

    assert {k: claims[k] for k in ("id", "email", "role")} == {"id": user.id, "email": user.email, "role": user.role}


def test_otp_is_six_digits():
    for _ in range(50):
        assert 100000 <= token_service.generate_otp() <= 999999


def test_otp_range_is_inclusive(monkeypatch):
    monkeypatch.setattr(token_service.secrets, "randbelow", lambda n: n - 1)
    assert token_service.generate_otp() == 999999

    monkeypatch.setattr(token_service.secrets, "randbelow", lambda n: 0)
    assert token_service.generate_otp() == 100000


def test_otp_token_round_trip(user):
    token, code = token_service.create_otp_token(user, token_service.PURPOSE_FORGOT_PASSWORD)
    payload = token_service.decode_purpose_token(token, token_service.PURPOSE_FORGOT_PASSWORD)

    assert payload["code"] == code
    assert payload["user"]["email"] == user.email


def test_purpose_mismatch_is_invalid(user):
    reset = token_service.create_reset_token(user)
    with pytest.raises(ErrorResponse) as exc:
        token_service.decode_purpose_token(reset, token_service.PURPOSE_FORGOT_PASSWORD)
    assert exc.value.message == "Invalid Token"
    assert exc.value.status_code == 400


def test_activation_token_needs_activation_secret(user):
    token, _ = token_service.create_otp_token(user, token_service.PURPOSE_ACTIVATION)
    with pytest.raises(ErrorResponse):
        token_service.decode_purpose_token(token, token_service.PURPOSE_FORGOT_PASSWORD)


def test_unknown_otp_purpose(user):
    with pytest.raises(ValueError):
        token_service.create_otp_token(user, "somethingElse")


def test_fingerprint_is_stable():
    assert token_service.token_fingerprint("abc") == token_service.token_fingerprint("abc")
    assert len(token_service.token_fingerprint("abc")) == 64


def test_token_expiry():
    moment = datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert token_service.token_expiry({"exp": int(moment.timestamp())}) == moment
    assert moment - timedelta(seconds=1) < token_service.token_expiry({"exp": int(moment.timestamp())})
