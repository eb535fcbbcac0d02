"""Developer routes: wallet signature, domain challenge and listing re-review requests."""

from fastapi import APIRouter

from minicast.dependencies import CurrentDeveloper, CurrentIdentity, DBSession, Fetcher
from minicast.errors.exceptions import ChallengeNotFoundError
from minicast.models.developer import (
    DeveloperView,
    DomainChallengeRequest,
    ModificationRequest,
    WalletVerificationRequest,
)
from minicast.repositories.developer_repo import DeveloperRepository
from minicast.services.approval.review import ReviewService
from minicast.services.verification.domain_challenge import DomainChallengeService
from minicast.services.verification.signature import verification_message
from minicast.services.verification.wallet import prove_wallet_control

router = APIRouter(prefix="/developers", tags=["Developers"])


def _verification_message(developer) -> str:
    if developer.verified:
        return "Your developer account is fully verified."
    if developer.wallet_proven:
        return "Wallet verified! Verify a domain as well to complete verification."
    if developer.domain_proven:
        return "Domain verified! Please also verify your wallet to complete verification."
    return "Your developer account is not verified yet."


@router.get("/me")
async def get_me(developer: CurrentDeveloper, db: DBSession) -> dict:
    await db.commit()
    return DeveloperView.model_validate(developer).model_dump(mode="json")


@router.get("/verify-wallet/message")
async def get_wallet_message(domain: str | None = None) -> dict:
    """The exact text the wallet must sign."""
    return {"message": verification_message(domain)}


@router.post("/verify-wallet")
async def verify_wallet(
    body: WalletVerificationRequest,
    developer: CurrentDeveloper,
    db: DBSession,
) -> dict:
    prove_wallet_control(developer, body.signature, body.domain)
    await db.commit()
    return {
        "success": True,
        "status": developer.verification_status,
        "verified": developer.verified,
        "message": _verification_message(developer),
    }


@router.post("/verify-domain/start")
async def start_domain_verification(
    body: DomainChallengeRequest,
    developer: CurrentDeveloper,
    db: DBSession,
    fetcher: Fetcher,
) -> dict:
    instructions = await DomainChallengeService(db, fetcher).start(developer, body.domain)
    await db.commit()
    return {
        "success": True,
        "domain": instructions.domain,
        "token": instructions.token,
        "expires_at": instructions.expires_at.isoformat(),
        "instructions": {
            "file_path": instructions.file_path,
            "file_url": instructions.file_url,
            "file_content": instructions.file_content,
        },
    }


@router.post("/verify-domain/confirm")
async def confirm_domain_verification(
    identity: CurrentIdentity,
    db: DBSession,
    fetcher: Fetcher,
) -> dict:
    developer = await DeveloperRepository(db).get_by_identity(identity)
    if developer is None:
        raise ChallengeNotFoundError()
    await DomainChallengeService(db, fetcher).confirm(developer)
    await db.commit()
    return {
        "success": True,
        "status": developer.verification_status,
        "verified": developer.verified,
        "domain": developer.verified_domain,
        "message": _verification_message(developer),
    }


@router.post("/apps/{app_id}/request-modification")
async def request_modification(
    app_id: str,
    body: ModificationRequest,
    developer: CurrentDeveloper,
    db: DBSession,
) -> dict:
    """Send an owned listing back to moderators with a change request."""
    app = await ReviewService(db).request_modification(app_id, developer, body.message, body.changes)
    await db.commit()
    return {
        "success": True,
        "status": app.status,
        "message": "Modification request submitted successfully. Admin will review your request.",
    }
