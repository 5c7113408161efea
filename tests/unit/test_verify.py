from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from tlssig.core.codec import decode_token, encode_token
from tlssig.core.record import serialize_record
from tlssig.signer import Signer
from tlssig.verify import Verifier

from ..vectors import MOCK_APPID, MOCK_EXPIRE, MOCK_KEY, MOCK_TIME, MOCK_TIME_SECONDS

pytestmark = pytest.mark.security


def _verifier(now=MOCK_TIME + timedelta(days=1), **kwargs: object) -> Verifier:
    return Verifier(MOCK_APPID, MOCK_KEY, clock=lambda: now, **kwargs)


def _reencode(token: str, **changes: object) -> str:
    record = decode_token(token)
    for key, value in changes.items():
        name = f"TLS.{key}"
        if value is None:
            record.pop(name, None)
        else:
            record[name] = value
    return encode_token(serialize_record(record))


@pytest.fixture
def token() -> str:
    signer = Signer(MOCK_APPID, MOCK_KEY)
    return signer.sign_at("user-1", MOCK_TIME, MOCK_EXPIRE, b"abc")


def test_valid_token_report(token: str) -> None:
    report = _verifier().verify(token, identifier="user-1")
    assert report.valid, report.errors
    assert report.identifier == "user-1"
    assert report.sdkappid == MOCK_APPID
    assert report.issued_at == MOCK_TIME_SECONDS
    assert report.expire == 15552000
    assert report.expires_at == MOCK_TIME_SECONDS + 15552000
    assert report.user_payload == b"abc"
    assert report.record["TLS.ver"] == "2.0"


def test_token_without_payload_verifies() -> None:
    token = Signer(MOCK_APPID, MOCK_KEY).sign_at("user-1", MOCK_TIME, MOCK_EXPIRE)
    report = _verifier().verify(token)
    assert report.valid
    assert report.user_payload is None


def test_expiry_boundary(token: str) -> None:
    assert _verifier(now=MOCK_TIME + MOCK_EXPIRE).check(token)
    late = _verifier(now=MOCK_TIME + MOCK_EXPIRE + timedelta(seconds=1))
    assert late.verify(token).error_types == ["expired"]


def test_negative_expire_is_already_expired() -> None:
    token = Signer(MOCK_APPID, MOCK_KEY).sign_at("u", MOCK_TIME, -60)
    assert _verifier(now=MOCK_TIME).verify(token).error_types == ["expired"]


def test_wrong_key_is_signature_mismatch(token: str) -> None:
    verifier = Verifier(MOCK_APPID, "other", clock=lambda: MOCK_TIME)
    assert verifier.verify(token).error_types == ["signature_mismatch"]


def test_verifier_after_rotation() -> None:
    signer = Signer(MOCK_APPID, MOCK_KEY)
    old = signer.sign_at("u", MOCK_TIME, MOCK_EXPIRE)
    signer.update_key("new-key")
    new = signer.sign_at("u", MOCK_TIME, MOCK_EXPIRE)

    assert _verifier().check(old)
    assert not _verifier().check(new)
    assert Verifier(MOCK_APPID, "new-key", clock=lambda: MOCK_TIME).check(new)


def test_wrong_sdkappid(token: str) -> None:
    verifier = Verifier(MOCK_APPID + 1, MOCK_KEY, clock=lambda: MOCK_TIME)
    assert verifier.verify(token).error_types == [
        "sdkappid_mismatch",
        "signature_mismatch",
    ]


def test_identifier_pin(token: str) -> None:
    assert _verifier().verify(token, identifier="user-2").error_types == [
        "identifier_mismatch"
    ]


def test_tampered_identifier(token: str) -> None:
    forged = _reencode(token, identifier="admin")
    assert _verifier().verify(forged).error_types == ["signature_mismatch"]


def test_tampered_expire(token: str) -> None:
    forged = _reencode(token, expire=10**9)
    assert _verifier().verify(forged).error_types == ["signature_mismatch"]


def test_stripped_payload(token: str) -> None:
    forged = _reencode(token, userbuf=None)
    assert _verifier().verify(forged).error_types == ["signature_mismatch"]


def test_version_is_checked(token: str) -> None:
    report = _verifier().verify(_reencode(token, ver="1.0"))
    assert report.error_types == ["version_mismatch"]


def test_missing_signature(token: str) -> None:
    report = _verifier().verify(_reencode(token, sig=None))
    assert report.error_types == ["missing_field"]


def test_malformed_fields(token: str) -> None:
    report = _verifier().verify(_reencode(token, time="yesterday"))
    assert report.error_types == ["malformed_field"]
    report = _verifier().verify(_reencode(token, userbuf="@@@"))
    assert report.error_types == ["malformed_field"]


def test_bad_signature_encoding(token: str) -> None:
    report = _verifier().verify(_reencode(token, sig="not base64!"))
    assert report.error_types == ["signature_mismatch"]


@pytest.mark.parametrize("garbage", ["", "abc", "eJyrVgrxCdY_", "*-8_"])
def test_undecodable_token(garbage: str) -> None:
    report = _verifier().verify(garbage)
    assert not report.valid
    assert report.error_types == ["decode_error"]


def test_milliseconds_verifier() -> None:
    signer = Signer(MOCK_APPID, MOCK_KEY, time_unit="milliseconds")
    token = signer.sign_at("u", MOCK_TIME, MOCK_EXPIRE)
    assert _verifier(time_unit="milliseconds").check(token)
    assert not _verifier(
        now=MOCK_TIME + timedelta(days=181), time_unit="milliseconds"
    ).check(token)


def test_rejection_emits_warning(
    token: str, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="tlssig"):
        _verifier().verify(token, identifier="someone-else")
    rejected = [r for r in caplog.records if r.name == "tlssig.verifier"]
    assert len(rejected) == 1
    assert rejected[0].tlssig_fields["errors"] == ["identifier_mismatch"]
