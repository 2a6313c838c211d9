"""Tests for webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

from streampay_cli.webhooks import SIGNATURE_HEADER, WEBHOOK_EVENTS, sign_payload, verify_signature

BODY = '{"event":"payment.succeeded","data":{"id":"p1"}}'
SECRET = "whsec_test"


def _expected(body: bytes, secret: bytes) -> str:
    return hmac.new(secret, body, hashlib.sha256).hexdigest()


class TestSignPayload:
    def test_matches_hmac_sha256_hex(self) -> None:
        assert sign_payload(BODY, SECRET) == _expected(BODY.encode(), SECRET.encode())

    def test_lowercase_hex_of_fixed_length(self) -> None:
        signature = sign_payload(BODY, SECRET)
        assert len(signature) == 64
        assert signature == signature.lower()

    def test_str_and_bytes_agree(self) -> None:
        assert sign_payload(BODY, SECRET) == sign_payload(BODY.encode("utf-8"), SECRET.encode("utf-8"))

    def test_non_ascii_body_is_utf8_encoded(self) -> None:
        body = '{"name":"سارة"}'
        assert sign_payload(body, SECRET) == _expected(body.encode("utf-8"), SECRET.encode())


class TestVerifySignature:
    def test_valid_signature(self) -> None:
        assert verify_signature(BODY, sign_payload(BODY, SECRET), SECRET) is True

    def test_tampered_body(self) -> None:
        signature = sign_payload(BODY, SECRET)
        assert verify_signature(BODY.replace("p1", "p2"), signature, SECRET) is False

    def test_wrong_secret(self) -> None:
        signature = sign_payload(BODY, "other")
        assert verify_signature(BODY, signature, SECRET) is False

    def test_length_mismatch(self) -> None:
        signature = sign_payload(BODY, SECRET)
        assert verify_signature(BODY, signature[:-1], SECRET) is False
        assert verify_signature(BODY, signature + "0", SECRET) is False
        assert verify_signature(BODY, "", SECRET) is False

    def test_single_bit_flip_is_rejected(self) -> None:
        signature = sign_payload(BODY, SECRET)
        for position in range(len(signature)):
            flipped = format(int(signature[position], 16) ^ 1, "x")
            mutated = signature[:position] + flipped + signature[position + 1 :]
            assert len(mutated) == 64
            assert verify_signature(BODY, mutated, SECRET) is False, position

    def test_uppercase_hex_is_rejected(self) -> None:
        signature = sign_payload(BODY, SECRET).upper()
        assert verify_signature(BODY, signature, SECRET) is False

    def test_empty_secret_and_body(self) -> None:
        signature = _expected(b"", b"")
        assert verify_signature("", signature, "") is True
        assert verify_signature(b"", signature, b"") is True

    def test_non_ascii_signature_is_rejected(self) -> None:
        assert verify_signature(BODY, "é" * 64, SECRET) is False


class TestConstants:
    def test_header_name(self) -> None:
        assert SIGNATURE_HEADER == "x-stream-signature"

    def test_event_list(self) -> None:
        assert len(WEBHOOK_EVENTS) == 24
        assert len(set(WEBHOOK_EVENTS)) == 24
        assert "payment.succeeded" in WEBHOOK_EVENTS
        assert "payment_link.completed" in WEBHOOK_EVENTS
