"""Tests for the app approval decision table."""

from minicast.db.models.developer import DeveloperRow
from minicast.models.enums import AppStatus
from minicast.services.approval.decision_engine import (
    Decision,
    DecisionInputs,
    decide_status,
    resolve_resubmission,
)

CONTRACT = "0x" + "ab" * 20


def developer(**overrides) -> DeveloperRow:
    values = dict(
        developer_id="dev_test",
        identity="0x" + "11" * 20,
        verification_status="unverified",
        wallet_proven=False,
        domain_proven=False,
        verified=False,
        admin_role=None,
    )
    values.update(overrides)
    return DeveloperRow(**values)


def test_unverified_without_extras_is_pending():
    decision = decide_status(developer(), DecisionInputs())
    assert decision == Decision(AppStatus.PENDING, "default")


def test_verified_developer_is_approved():
    decision = decide_status(developer(verified=True, verification_status="verified"), DecisionInputs())
    assert decision.status == AppStatus.APPROVED
    assert decision.rule == "developer_verified"


def test_admin_and_moderator_are_approved_without_ownership():
    for role in ("ADMIN", "MODERATOR"):
        decision = decide_status(developer(admin_role=role), DecisionInputs(contract_address=CONTRACT))
        assert decision.status == AppStatus.APPROVED
        assert decision.rule == "admin_submission"


def test_wallet_owner_is_approved():
    dev = developer(wallet_proven=True, verification_status="wallet_verified")
    decision = decide_status(dev, DecisionInputs(ownership_proven=True))
    assert decision == Decision(AppStatus.APPROVED, "manifest_owner")


def test_wallet_status_without_fact_still_counts():
    dev = developer(verification_status="wallet_verified")
    assert decide_status(dev, DecisionInputs(ownership_proven=True)).status == AppStatus.APPROVED


def test_ownership_without_wallet_proof_is_not_enough():
    decision = decide_status(developer(), DecisionInputs(ownership_proven=True))
    assert decision.status == AppStatus.PENDING


def test_domain_only_developer_is_not_auto_approved():
    dev = developer(domain_proven=True, verification_status="domain_verified")
    assert decide_status(dev, DecisionInputs(ownership_proven=True)).status == AppStatus.PENDING


def test_contract_beats_review_message():
    decision = decide_status(
        developer(), DecisionInputs(contract_address=CONTRACT, review_message="please look")
    )
    assert decision == Decision(AppStatus.PENDING_CONTRACT, "contract_review")


def test_review_message_requests_manual_review():
    decision = decide_status(developer(), DecisionInputs(review_message="please look"))
    assert decision == Decision(AppStatus.PENDING_REVIEW, "manual_review")


def test_blank_extras_are_ignored():
    decision = decide_status(developer(), DecisionInputs(contract_address="  ", review_message=" "))
    assert decision.status == AppStatus.PENDING


def test_resubmission_never_downgrades_approved():
    pending = Decision(AppStatus.PENDING, "default")
    assert resolve_resubmission("approved", pending) == Decision(AppStatus.APPROVED, "previously_approved")


def test_resubmission_upgrades_and_requeues():
    approved = Decision(AppStatus.APPROVED, "manifest_owner")
    assert resolve_resubmission("pending", approved) == approved
    pending = Decision(AppStatus.PENDING_REVIEW, "manual_review")
    assert resolve_resubmission("rejected", pending) == pending
