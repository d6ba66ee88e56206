import logging
from datetime import datetime, timedelta, timezone

import pytest

from utils.exceptions import HashingError, InvalidToken
from utils.security import (
    INSECURE_DEFAULT_SECRET,
    TokenIssuer,
    generate_token_id,
    hash_password,
    verify_password,
)


def test_hash_password_uses_argon2id_with_fixed_cost():
    password_hash = hash_password("my_secure_password123")

    assert password_hash.startswith("$argon2id$")
    assert "m=19456,t=2,p=1" in password_hash


def test_verify_password_round_trip():
    password_hash = hash_password("my_secure_password123")

    assert verify_password("my_secure_password123", password_hash) is True
    assert verify_password("wrong_password", password_hash) is False


def test_hash_password_salts_every_call():
    assert hash_password("same-password") != hash_password("same-password")


def test_verify_password_rejects_malformed_hash():
    with pytest.raises(HashingError):
        verify_password("whatever1", "not-an-argon2-hash")


def test_generate_token_id_is_128_bit_hex():
    token_id = generate_token_id()

    assert len(token_id) == 32
    int(token_id, 16)
    assert generate_token_id() != token_id


def test_issue_then_verify_recovers_identity():
    issuer = TokenIssuer("s3cret")

    claims = issuer.verify(issuer.issue(42, "bob@example.com"))

    assert claims.sub == "42"
    assert claims.user_id == 42
    assert claims.email == "bob@example.com"
    assert claims.exp - claims.iat == 15 * 60


def test_verify_rejects_foreign_signature():
    token = TokenIssuer("other-secret").issue(1, "a@x.com")

    with pytest.raises(InvalidToken):
        TokenIssuer("s3cret").verify(token)


def test_verify_rejects_tampered_payload():
    issuer = TokenIssuer("s3cret")
    header, _, signature = issuer.issue(1, "a@x.com").split(".")
    _, forged_payload, _ = issuer.issue(2, "evil@x.com").split(".")

    with pytest.raises(InvalidToken):
        issuer.verify(".".join([header, forged_payload, signature]))


def test_verify_rejects_garbage():
    with pytest.raises(InvalidToken):
        TokenIssuer("s3cret").verify("invalid.token.here")


def test_verify_rejects_expired_token():
    issuer = TokenIssuer("s3cret")
    issued = datetime.now(timezone.utc) - timedelta(minutes=15, seconds=1)

    with pytest.raises(InvalidToken):
        issuer.verify(issuer.issue(1, "a@x.com", now=issued))


def test_verify_accepts_token_at_its_exact_expiry_second(monkeypatch):
    issuer = TokenIssuer("s3cret")
    token = issuer.issue(1, "a@x.com")
    exp = issuer.verify(token).exp

    monkeypatch.setattr("utils.security._now", lambda: datetime.fromtimestamp(exp, timezone.utc))

    assert issuer.verify(token).exp == exp


def test_verify_rejects_token_one_second_past_expiry(monkeypatch):
    issuer = TokenIssuer("s3cret")
    token = issuer.issue(1, "a@x.com")
    exp = issuer.verify(token).exp

    monkeypatch.setattr(
        "utils.security._now", lambda: datetime.fromtimestamp(exp + 1, timezone.utc)
    )

    with pytest.raises(InvalidToken):
        issuer.verify(token)


def test_from_config_warns_and_falls_back_without_secret(caplog):
    with caplog.at_level(logging.WARNING, logger="utils.security"):
        issuer = TokenIssuer.from_config({"JWT_SECRET": None})

    assert issuer.secret == INSECURE_DEFAULT_SECRET
    assert "NOT SECURE FOR PRODUCTION" in caplog.text


def test_from_config_refuses_missing_secret_when_required():
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        TokenIssuer.from_config({"JWT_SECRET": "", "REQUIRE_JWT_SECRET": True})


def test_from_config_reads_settings():
    issuer = TokenIssuer.from_config(
        {"JWT_SECRET": "abc", "JWT_ALGORITHM": "HS512", "ACCESS_TOKEN_EXPIRES": timedelta(minutes=5)}
    )

    assert issuer.secret == "abc"
    assert issuer.algorithm == "HS512"
    assert issuer.max_age == 300
