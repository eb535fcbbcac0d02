"""Tests for EIP-191 wallet signature verification."""

import json

from conftest import Wallet

from minicast.models.enums import SignatureErrorKind
from minicast.services.verification.signature import (
    is_wallet_address,
    normalize_signature,
    verification_message,
    verify_signature,
)


def test_verification_message_binds_domain():
    message = verification_message("apps.example")
    assert message.startswith("Verify your developer account for Mini App Store")
    assert message.endswith("Domain: apps.example")


def test_verification_message_defaults_to_configured_domain():
    assert verification_message().endswith("Domain: minicast.store")


def test_valid_signature_accepted():
    wallet = Wallet(0x11)
    check = verify_signature(wallet.address, verification_message(), wallet.sign())
    assert check.valid is True
    assert check.error is None


def test_address_comparison_is_case_insensitive():
    wallet = Wallet(0x11)
    check = verify_signature(wallet.account.address, verification_message(), wallet.sign())
    assert check.valid is True


def test_signature_from_other_wallet_is_invalid():
    signer, claimed = Wallet(0x11), Wallet(0x22)
    check = verify_signature(claimed.address, verification_message(), signer.sign())
    assert check.valid is False
    assert check.error == SignatureErrorKind.INVALID_SIGNATURE


def test_signature_over_other_message_is_invalid():
    wallet = Wallet(0x11)
    signature = wallet.sign(verification_message("evil.example"))
    check = verify_signature(wallet.address, verification_message(), signature)
    assert check.valid is False
    assert check.error == SignatureErrorKind.INVALID_SIGNATURE


def test_empty_signature_is_malformed():
    wallet = Wallet(0x11)
    check = verify_signature(wallet.address, verification_message(), "   ")
    assert check.valid is False
    assert check.error == SignatureErrorKind.MALFORMED_INPUT


def test_bad_address_is_malformed():
    wallet = Wallet(0x11)
    check = verify_signature("0x1234", verification_message(), wallet.sign())
    assert check.valid is False
    assert check.error == SignatureErrorKind.MALFORMED_INPUT


def test_short_signature_is_malformed():
    wallet = Wallet(0x11)
    check = verify_signature(wallet.address, verification_message(), "0xdeadbeef")
    assert check.error == SignatureErrorKind.MALFORMED_INPUT


def test_normalize_signature_shapes():
    wallet = Wallet(0x11)
    signature = wallet.sign()
    bare = signature[2:]

    assert normalize_signature(signature) == signature
    assert normalize_signature(bare.upper()) == signature
    assert normalize_signature(f"  {signature}\n") == signature
    assert normalize_signature(json.dumps({"signature": signature})) == signature
    assert normalize_signature(json.dumps({"sig": signature})) == signature
    assert normalize_signature(signature + "0000") == signature
    assert normalize_signature("not-a-signature") is None


def test_wrapped_signature_verifies():
    wallet = Wallet(0x11)
    wrapped = json.dumps({"signature": wallet.sign()})
    assert verify_signature(wallet.address, verification_message(), wrapped).valid is True


def test_is_wallet_address():
    assert is_wallet_address("0x" + "a" * 40)
    assert is_wallet_address("0x" + "A" * 40)
    assert not is_wallet_address("0x" + "a" * 39)
    assert not is_wallet_address("farcaster:123")
    assert not is_wallet_address("")
