"""Wallet signature verification (EIP-191 personal_sign)."""

import json
import logging
import re
from dataclasses import dataclass

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError

from minicast.config import settings
from minicast.models.enums import SignatureErrorKind

logger = logging.getLogger(__name__)

WALLET_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
_SIGNATURE_PATTERN = re.compile(r"^0x[0-9a-f]{130}$")
_EMBEDDED_SIGNATURE = re.compile(r"(?:0x)?([0-9a-fA-F]{130})")

VERIFICATION_MESSAGE_PREFIX = "Verify your developer account for Mini App Store"


@dataclass(frozen=True)
class SignatureCheck:
    valid: bool
    error: SignatureErrorKind | None = None
    detail: str | None = None


def is_wallet_address(value: str) -> bool:
    return bool(WALLET_PATTERN.match(value or ""))


def verification_message(domain: str | None = None) -> str:
    """Build the domain-bound message a wallet signs to prove control."""
    return f"{VERIFICATION_MESSAGE_PREFIX}\n\nDomain: {domain or settings.verification_domain}"


def normalize_signature(raw: str) -> str | None:
    """Coerce the signature shapes wallets hand back into ``0x`` + 130 hex.

    Some mobile wallets wrap the signature in JSON or pad it with
    whitespace and trailing bytes. Returns None when no usable
    signature can be extracted.
    """
    candidate = raw.strip()
    if candidate[:1] in ("{", "[", '"'):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            candidate = str(parsed.get("signature") or parsed.get("sig") or "")
        elif isinstance(parsed, str):
            candidate = parsed

    candidate = re.sub(r"\s+", "", candidate)
    if len(candidate) > 132:
        match = _EMBEDDED_SIGNATURE.search(candidate)
        candidate = f"0x{match.group(1)}" if match else candidate
    if not candidate.startswith("0x"):
        candidate = f"0x{candidate}"
    candidate = candidate.lower()

    if not _SIGNATURE_PATTERN.match(candidate):
        return None
    return candidate


def verify_signature(address: str, message: str, signature: str) -> SignatureCheck:
    """Check that ``signature`` over ``message`` was produced by ``address``.

    An empty signature is reported as malformed rather than passing;
    callers that trust an injected first-party wallet must decide that
    themselves before calling here.
    """
    if not is_wallet_address(address):
        return SignatureCheck(False, SignatureErrorKind.MALFORMED_INPUT, "Invalid wallet address format")
    if not signature or not signature.strip():
        return SignatureCheck(False, SignatureErrorKind.MALFORMED_INPUT, "Signature is required")

    normalized = normalize_signature(signature)
    if normalized is None:
        return SignatureCheck(
            False,
            SignatureErrorKind.MALFORMED_INPUT,
            "Invalid signature format: expected 0x followed by 130 hex characters",
        )

    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=normalized)
    except (ValueError, BadSignature, KeyValidationError) as exc:
        logger.info("signature_recovery_failed", extra={"address": address.lower(), "error": str(exc)})
        return SignatureCheck(False, SignatureErrorKind.INVALID_SIGNATURE, "Signature could not be recovered")

    if recovered.lower() != address.lower():
        return SignatureCheck(False, SignatureErrorKind.INVALID_SIGNATURE, "Signature does not match wallet address")
    return SignatureCheck(True)
