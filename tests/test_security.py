"""
Unit tests for credential, token, OTP, error-envelope and upload helpers.
"""
import io
from datetime import datetime, timedelta

import pytest
from fastapi import UploadFile
from jose import jwt
from starlette.requests import Request

from jobboard.core import errors
from jobboard.core.auth_dependency import extract_token
from jobboard.core.config import ALGORITHM, SECRET_KEY
from jobboard.core.logging_config import sanitize_log_data
from jobboard.core.security import (
    TokenExpiredError,
    TokenInvalidError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from jobboard.services.job_service import like_pattern
from jobboard.services.otp import generate_otp, otp_expiry, otp_matches
from jobboard.services.upload_service import UploadStore


def make_request(headers: dict) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_hash_and_verify_password():
    hashed = hash_password("secret1")

    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)
    assert not verify_password("", hashed)
    assert not verify_password("secret1", "not-a-hash")


def test_long_passwords_are_truncated_consistently():
    base = "a" * 72
    hashed = hash_password(base + "tail")

    # bcrypt only sees the first 72 bytes
    assert verify_password(base + "other-tail", hashed)

    emoji = "\U0001F680" * 19  # 76 bytes
    hashed = hash_password(emoji)
    assert verify_password(emoji, hashed)


def test_token_round_trip():
    token = create_access_token(42, "company")
    payload = decode_access_token(token)

    assert payload["id"] == 42
    assert payload["sub"] == "42"
    assert payload["kind"] == "company"
    assert payload["jti"]
    assert payload["exp"] > datetime.utcnow().timestamp()


def test_token_ids_are_unique():
    assert decode_access_token(create_access_token(1, "user"))["jti"] != decode_access_token(create_access_token(1, "user"))["jti"]


def test_token_errors():
    expired = create_access_token(1, "user", expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        decode_access_token(expired)

    with pytest.raises(TokenInvalidError):
        decode_access_token("garbage")

    forged = jwt.encode({"sub": "1", "kind": "user"}, "wrong-secret", algorithm=ALGORITHM)
    with pytest.raises(TokenInvalidError):
        decode_access_token(forged)

    kindless = jwt.encode({"sub": "1"}, SECRET_KEY, algorithm=ALGORITHM)
    with pytest.raises(TokenInvalidError):
        decode_access_token(kindless)

    # Expired is a kind of invalid
    assert issubclass(TokenExpiredError, TokenInvalidError)


def test_extract_token():
    assert extract_token(make_request({})) is None
    assert extract_token(make_request({"token": "abc"})) == "abc"
    assert extract_token(make_request({"Authorization": "Bearer abc"})) == "abc"
    assert extract_token(make_request({"Authorization": "abc"})) == "abc"
    assert extract_token(make_request({"token": "one", "Authorization": "Bearer two"})) == "one"
    assert extract_token(make_request({"Authorization": "Bearer "})) is None


def test_otp_generation():
    code = generate_otp()
    assert len(code) == 6 and code.isdigit()

    for _ in range(50):
        assert generate_otp(previous=code) != code


def test_otp_matching():
    now = datetime(2026, 1, 1, 12, 0, 0)
    expires = otp_expiry(now)

    assert expires == now + timedelta(minutes=10)
    assert otp_matches("123456", expires, "123456", now=now)
    assert otp_matches("123456", expires, " 123456 ", now=now)
    assert not otp_matches("123456", expires, "654321", now=now)
    assert not otp_matches("123456", expires, "123456", now=expires + timedelta(seconds=1))
    assert not otp_matches(None, expires, "123456", now=now)


def test_like_pattern_escapes_wildcards():
    assert like_pattern("abc") == "%abc%"
    assert like_pattern("50%") == "%50\\%%"
    assert like_pattern("a_b") == "%a\\_b%"


def test_error_body_hides_detail_in_production(monkeypatch):
    assert errors.error_body("Boom", error="trace") == {"success": False, "message": "Boom", "error": "trace"}

    monkeypatch.setattr(errors, "is_production", lambda: True)
    assert errors.error_body("Boom", error="trace", errors=["x"]) == {
        "success": False,
        "message": "Boom",
        "errors": ["x"],
    }


def test_error_status_codes():
    assert errors.ValidationError().status_code == 400
    assert errors.UnauthorizedError().status_code == 401
    assert errors.ForbiddenError().status_code == 403
    assert errors.NotFoundError().status_code == 404
    assert errors.ConflictError().status_code == 409
    assert errors.PayloadTooLargeError().status_code == 413
    assert errors.InternalError().status_code == 500


def test_sanitize_log_data():
    cleaned = sanitize_log_data({"password": "x", "Authorization": "Bearer y", "email": "a@b.c"})

    assert cleaned["password"] == "***REDACTED***"
    assert cleaned["Authorization"] == "***REDACTED***"
    assert cleaned["email"] == "a@b.c"


def test_upload_store_staged_discards_on_failure(tmp_path):
    store = UploadStore(str(tmp_path / "uploads"), max_bytes=1024)
    upload = UploadFile(file=io.BytesIO(b"%PDF"), filename="cv.pdf")

    with pytest.raises(RuntimeError):
        with store.staged(upload, "resume", {".pdf"}) as reference:
            assert reference.endswith(".pdf")
            raise RuntimeError("record not saved")

    assert not list((tmp_path / "uploads" / "resume").glob("*"))


def test_upload_store_limits(tmp_path):
    store = UploadStore(str(tmp_path / "uploads"), max_bytes=4)

    with pytest.raises(errors.PayloadTooLargeError):
        store.store(UploadFile(file=io.BytesIO(b"12345"), filename="a.pdf"), "resume")
    assert not list((tmp_path / "uploads" / "resume").glob("*"))

    with pytest.raises(errors.ValidationError):
        store.store(UploadFile(file=io.BytesIO(b"1"), filename="a.sh"), "resume", {".pdf"})


def test_upload_store_never_deletes_outside_its_directory(tmp_path):
    outside = tmp_path / "keep.txt"
    outside.write_text("keep")
    store = UploadStore(str(tmp_path / "uploads"), max_bytes=1024)

    store.discard(str(outside))

    assert outside.exists()
