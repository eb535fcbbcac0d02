"""String enums for developer verification and app lifecycle."""

from enum import StrEnum


class VerificationStatus(StrEnum):
    UNVERIFIED = "unverified"
    WALLET_VERIFIED = "wallet_verified"
    DOMAIN_VERIFIED = "domain_verified"
    VERIFIED = "verified"


class AppStatus(StrEnum):
    PENDING = "pending"
    PENDING_CONTRACT = "pending_contract"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class AdminRole(StrEnum):
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


class VerifiedVia(StrEnum):
    ALGORITHMIC = "algorithmic"
    ADMIN_GRANT = "admin_grant"


class SignatureErrorKind(StrEnum):
    INVALID_SIGNATURE = "invalid_signature"
    MALFORMED_INPUT = "malformed_input"


REVIEW_QUEUE_STATUSES = (
    AppStatus.PENDING,
    AppStatus.PENDING_REVIEW,
    AppStatus.PENDING_CONTRACT,
)
