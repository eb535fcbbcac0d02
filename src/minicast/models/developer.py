"""Pydantic request and response models for developers and listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from minicast.models.enums import AdminRole, AppStatus


class WalletVerificationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    signature: str = Field(..., min_length=1)
    domain: str | None = None


class DomainChallengeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    domain: str = Field(..., min_length=1, max_length=500)


class DeveloperView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    developer_id: str
    identity: str
    verification_status: str
    wallet_proven: bool
    domain_proven: bool
    verified: bool
    verified_via: str | None = None
    verified_domain: str | None = None
    admin_role: str | None = None
    challenge_domain: str | None = None
    challenge_issued_at: datetime | None = None


class AppView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    app_id: str
    url: str
    developer_id: str
    name: str
    description: str
    category: str
    icon_url: str | None = None
    header_image_url: str | None = None
    base_mini_app_url: str | None = None
    farcaster_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    developer_tags: list[str] = Field(default_factory=list)
    screenshots: list[str] = Field(default_factory=list)
    review_message: str | None = None
    support_email: str | None = None
    twitter_url: str | None = None
    status: str
    verified: bool
    contract_address: str | None = None
    contract_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AppStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: AppStatus


class IdentityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    identity: str = Field(..., min_length=1, max_length=200)


class RoleAssignment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    identity: str = Field(..., min_length=1, max_length=200)
    role: AdminRole | None = None


class ModificationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    message: str = Field(..., min_length=1, max_length=1000)
    changes: str | None = Field(None, max_length=1000)
