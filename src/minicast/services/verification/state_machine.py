"""Developer verification state machine.

Two independent facts, wallet proven and domain proven, combine into one
of four statuses. Transitions only ever add facts, which makes them
idempotent and order-independent. An admin grant is recorded separately
and does not touch the facts.
"""

from dataclasses import dataclass, replace

from minicast.db.base import utcnow
from minicast.db.models.developer import DeveloperRow
from minicast.models.enums import AdminRole, VerificationStatus, VerifiedVia

_STATUS_RANK = {
    VerificationStatus.UNVERIFIED: 0,
    VerificationStatus.WALLET_VERIFIED: 1,
    VerificationStatus.DOMAIN_VERIFIED: 1,
    VerificationStatus.VERIFIED: 2,
}


@dataclass(frozen=True)
class VerificationFacts:
    wallet_proven: bool = False
    domain_proven: bool = False

    @classmethod
    def from_row(cls, developer: DeveloperRow) -> "VerificationFacts":
        return cls(
            wallet_proven=bool(developer.wallet_proven),
            domain_proven=bool(developer.domain_proven),
        )

    @property
    def status(self) -> VerificationStatus:
        return derive_status(self.wallet_proven, self.domain_proven)


def derive_status(wallet_proven: bool, domain_proven: bool) -> VerificationStatus:
    if wallet_proven and domain_proven:
        return VerificationStatus.VERIFIED
    if wallet_proven:
        return VerificationStatus.WALLET_VERIFIED
    if domain_proven:
        return VerificationStatus.DOMAIN_VERIFIED
    return VerificationStatus.UNVERIFIED


def prove_wallet(facts: VerificationFacts) -> VerificationFacts:
    return replace(facts, wallet_proven=True)


def prove_domain(facts: VerificationFacts) -> VerificationFacts:
    return replace(facts, domain_proven=True)


def has_wallet_proof(developer: DeveloperRow) -> bool:
    """Wallet control is established by the fact or implied by the status."""
    return bool(developer.wallet_proven) or developer.verification_status in (
        VerificationStatus.WALLET_VERIFIED,
        VerificationStatus.VERIFIED,
    )


def has_admin_access(developer: DeveloperRow) -> bool:
    return developer.admin_role in (AdminRole.ADMIN, AdminRole.MODERATOR)


def status_values(developer: DeveloperRow, facts: VerificationFacts) -> dict:
    """Column values for persisting ``facts`` onto ``developer``.

    Facts are merged with what is already stored and the status never
    ranks below the current one, so a stale caller cannot downgrade a
    developer.
    """
    merged = VerificationFacts(
        wallet_proven=facts.wallet_proven or bool(developer.wallet_proven),
        domain_proven=facts.domain_proven or bool(developer.domain_proven),
    )
    status = merged.status
    current = VerificationStatus(developer.verification_status or VerificationStatus.UNVERIFIED)
    if _STATUS_RANK[current] > _STATUS_RANK[status]:
        status = current

    values = {
        "wallet_proven": merged.wallet_proven,
        "domain_proven": merged.domain_proven,
        "verification_status": status.value,
    }
    if status == VerificationStatus.VERIFIED and not developer.verified:
        values.update(
            verified=True,
            verified_via=VerifiedVia.ALGORITHMIC.value,
            verified_at=utcnow(),
        )
    return values


def apply_facts(developer: DeveloperRow, facts: VerificationFacts) -> DeveloperRow:
    for key, value in status_values(developer, facts).items():
        setattr(developer, key, value)
    return developer


def grant_verification(developer: DeveloperRow, granted_by: str) -> DeveloperRow:
    """Out-of-band admin grant; bypasses the two-factor requirement."""
    developer.verified = True
    developer.verification_status = VerificationStatus.VERIFIED.value
    developer.verified_via = VerifiedVia.ADMIN_GRANT.value
    developer.verified_by = granted_by
    developer.verified_at = utcnow()
    return developer


def revoke_grant(developer: DeveloperRow) -> DeveloperRow:
    """Drop an admin grant, falling back to what the facts alone prove."""
    if developer.verified_via != VerifiedVia.ADMIN_GRANT:
        return developer
    facts = VerificationFacts.from_row(developer)
    developer.verification_status = facts.status.value
    if facts.status == VerificationStatus.VERIFIED:
        developer.verified_via = VerifiedVia.ALGORITHMIC.value
    else:
        developer.verified = False
        developer.verified_via = None
        developer.verified_at = None
    developer.verified_by = None
    return developer
