"""Webhook signature verification.

StreamPay signs every webhook delivery with HMAC-SHA256 over the raw
request body, keyed with the endpoint's shared secret, and sends the
lowercase hex digest in the ``x-stream-signature`` header.

:func:`verify_signature` is a pure function with no I/O; it is safe to
call from any thread.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Union

SIGNATURE_HEADER = "x-stream-signature"

WEBHOOK_EVENTS: tuple[str, ...] = (
    "consumer.created",
    "consumer.updated",
    "consumer.deleted",
    "subscription.created",
    "subscription.updated",
    "subscription.canceled",
    "subscription.frozen",
    "subscription.unfrozen",
    "payment.succeeded",
    "payment.failed",
    "payment.refunded",
    "payment.pending",
    "invoice.created",
    "invoice.updated",
    "invoice.paid",
    "invoice.voided",
    "product.created",
    "product.updated",
    "product.deleted",
    "coupon.created",
    "coupon.updated",
    "coupon.deleted",
    "payment_link.created",
    "payment_link.completed",
)

Payload = Union[str, bytes]


def _as_bytes(value: Payload) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def sign_payload(body: Payload, secret: Payload) -> str:
    """Return the lowercase hex HMAC-SHA256 of *body* keyed with *secret*.

    Args:
        body: Raw request body exactly as delivered. ``str`` is UTF-8
            encoded first.
        secret: Shared webhook secret.
    """
    return hmac.new(_as_bytes(secret), _as_bytes(body), hashlib.sha256).hexdigest()


def verify_signature(body: Payload, signature: str, secret: Payload) -> bool:
    """Check a webhook signature in constant time.

    The expected digest is always computed first. A signature of the wrong
    length is rejected before the constant-time comparison, so only the
    length (which is public: 64 hex characters) can leak through timing.

    Args:
        body: Raw request body as received, before any JSON parsing.
        signature: Value of the ``x-stream-signature`` header.
        secret: Shared webhook secret. An empty secret is not special-cased.

    Returns:
        ``True`` only when *signature* equals the expected digest exactly.
    """
    expected = sign_payload(body, secret)
    if len(signature) != len(expected):
        return False
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))
