"""Record wallet control for a developer from a signed message."""

import logging

from minicast.db.models.developer import DeveloperRow
from minicast.errors.exceptions import InvalidSignatureError, ValidationError
from minicast.models.enums import SignatureErrorKind
from minicast.services.verification.signature import (
    is_wallet_address,
    verification_message,
    verify_signature,
)
from minicast.services.verification.state_machine import (
    VerificationFacts,
    apply_facts,
    prove_wallet,
)

logger = logging.getLogger(__name__)


def prove_wallet_control(developer: DeveloperRow, signature: str, domain: str | None = None) -> DeveloperRow:
    """Verify ``signature`` against the developer's wallet and add the wallet fact.

    Raises ValidationError for malformed input (including identities that
    are not wallets) and InvalidSignatureError when the signer differs.
    The caller flushes and commits.
    """
    if not is_wallet_address(developer.identity):
        raise ValidationError("Wallet verification requires a wallet identity")

    check = verify_signature(developer.identity, verification_message(domain), signature)
    if not check.valid:
        if check.error == SignatureErrorKind.INVALID_SIGNATURE:
            raise InvalidSignatureError(check.detail or "Invalid signature")
        raise ValidationError(check.detail or "Malformed signature")

    apply_facts(developer, prove_wallet(VerificationFacts.from_row(developer)))
    logger.info(
        "wallet_verified",
        extra={
            "developer_id": developer.developer_id,
            "verification_status": developer.verification_status,
        },
    )
    return developer
