"""App approval decision table.

Rules are evaluated in precedence order; the first match decides:

1. developer fully verified, or holds ADMIN/MODERATOR  -> approved
2. wallet proven and the wallet owns the fresh manifest -> approved
3. contract address supplied                          -> pending_contract
4. manual review requested                            -> pending_review
5. otherwise                                          -> pending
"""

from dataclasses import dataclass

from minicast.db.models.developer import DeveloperRow
from minicast.models.enums import AppStatus
from minicast.services.verification.state_machine import has_admin_access, has_wallet_proof


@dataclass(frozen=True)
class DecisionInputs:
    ownership_proven: bool = False
    contract_address: str | None = None
    review_message: str | None = None


@dataclass(frozen=True)
class Decision:
    status: AppStatus
    rule: str


def decide_status(developer: DeveloperRow, inputs: DecisionInputs) -> Decision:
    if developer.verified:
        return Decision(AppStatus.APPROVED, "developer_verified")
    if has_admin_access(developer):
        return Decision(AppStatus.APPROVED, "admin_submission")
    if has_wallet_proof(developer) and inputs.ownership_proven:
        return Decision(AppStatus.APPROVED, "manifest_owner")
    if inputs.contract_address and inputs.contract_address.strip():
        return Decision(AppStatus.PENDING_CONTRACT, "contract_review")
    if inputs.review_message and inputs.review_message.strip():
        return Decision(AppStatus.PENDING_REVIEW, "manual_review")
    return Decision(AppStatus.PENDING, "default")


def resolve_resubmission(current: str, decision: Decision) -> Decision:
    """Re-derived status for an existing listing; approved is never downgraded."""
    if current == AppStatus.APPROVED and decision.status != AppStatus.APPROVED:
        return Decision(AppStatus.APPROVED, "previously_approved")
    return decision
