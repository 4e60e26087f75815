import hashlib
import hmac
import time
from collections.abc import Mapping
from dataclasses import dataclass

from stripe_listener.errors import (
    ExpiredSignatureError,
    MalformedSignatureError,
    SignatureMismatchError,
)

SIGNATURE_HEADER = "Stripe-Signature"
EXPECTED_SCHEME = "v1"
DEFAULT_TOLERANCE = 300


@dataclass(frozen=True)
class SignatureHeader:
    timestamp: int
    signatures: tuple[str, ...] = ()


def _to_bytes(body: bytes | str) -> bytes:
    return body.encode("utf-8") if isinstance(body, str) else body


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def compute_signature(body: bytes | str, secret: str, timestamp: int) -> str:
    signed_payload = f"{timestamp}.".encode() + _to_bytes(body)
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def generate_header(body: bytes | str, secret: str, timestamp: int | None = None) -> str:
    """Build a ``Stripe-Signature`` value for ``body``, as Stripe would send it."""
    if timestamp is None:
        timestamp = int(time.time())
    return f"t={timestamp},{EXPECTED_SCHEME}={compute_signature(body, secret, timestamp)}"


def parse_header(header: str) -> SignatureHeader:
    timestamp = None
    signatures = []
    for part in header.split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise MalformedSignatureError(f"Invalid timestamp in signature header: {value!r}") from None
        elif key == EXPECTED_SCHEME and value:
            signatures.append(value)
    if timestamp is None:
        raise MalformedSignatureError("No timestamp found in signature header")
    if not signatures:
        raise MalformedSignatureError(f"No {EXPECTED_SCHEME} signatures found in signature header")
    return SignatureHeader(timestamp=timestamp, signatures=tuple(signatures))


def verify(
    headers: Mapping[str, str],
    body: bytes | str,
    secret: str,
    tolerance: int | None = DEFAULT_TOLERANCE,
    now: float | None = None,
) -> None:
    """Check the ``Stripe-Signature`` header of a delivery against ``secret``.

    Returns ``None`` when at least one ``v1`` digest matches the HMAC-SHA256
    of ``"{t}.{body}"`` and the timestamp is no older than ``tolerance``
    seconds. A falsy ``tolerance`` disables the age check. Raises a
    ``SignatureError`` subclass otherwise.
    """
    header = _get_header(headers, SIGNATURE_HEADER)
    if not header:
        raise MalformedSignatureError(f"Missing {SIGNATURE_HEADER} header")
    parsed = parse_header(header)

    expected = compute_signature(body, secret, parsed.timestamp).encode("ascii")
    if not any(hmac.compare_digest(expected, candidate.encode("utf-8")) for candidate in parsed.signatures):
        raise SignatureMismatchError("No signatures found matching the expected signature for payload")

    if now is None:
        now = time.time()
    if tolerance and parsed.timestamp < now - tolerance:
        raise ExpiredSignatureError(parsed.timestamp, tolerance)
