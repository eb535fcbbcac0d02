"""Pydantic models for app submissions and their outcomes."""

import re
from urllib.parse import urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

CONTRACT_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
MAX_TAGS = 5


def canonical_url(value: str) -> str:
    """Dedup key for a listing: https only, lower-cased origin, no fragment or trailing slash."""
    parts = urlsplit(value.strip())
    if parts.scheme.lower() != "https":
        raise ValueError("URL must use HTTPS")
    if not parts.hostname:
        raise ValueError("URL must include a host")
    path = parts.path.rstrip("/")
    return urlunsplit(("https", parts.netloc.lower(), path, parts.query, ""))


def _is_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class SubmissionRequest(BaseModel):
    """A developer's request to list (or re-list) a mini app.

    Empty strings mean "not provided"; on resubmission they keep the
    stored value.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    url: str = Field(..., min_length=1, max_length=2048)
    name: str = Field("", max_length=100)
    description: str = Field("", max_length=500)
    category: str = Field("", max_length=100)
    base_mini_app_url: str = ""
    farcaster_url: str = ""
    icon_url: str = ""
    header_image_url: str = ""
    review_message: str = Field("", max_length=1000)
    notes_to_admin: str = Field("", max_length=1000)
    developer_tags: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    contract_address: str = ""
    screenshots: list[str] = Field(default_factory=list)
    support_email: EmailStr | None = None
    twitter_url: str = Field("", max_length=500)
    signature: str | None = None
    signature_domain: str | None = None

    @field_validator("url")
    @classmethod
    def _canonical(cls, value: str) -> str:
        return canonical_url(value)

    @field_validator("base_mini_app_url", "farcaster_url", "icon_url", "header_image_url")
    @classmethod
    def _optional_url(cls, value: str) -> str:
        if value and not _is_http_url(value):
            raise ValueError("must be a valid URL")
        return value

    @field_validator("screenshots")
    @classmethod
    def _screenshot_urls(cls, value: list[str]) -> list[str]:
        for item in value:
            if not _is_http_url(item):
                raise ValueError(f"Screenshot URL must be a valid URL: {item!r}")
        return value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        tags = [t.strip().lower() for t in value if t and t.strip()]
        if len(tags) > MAX_TAGS:
            raise ValueError(f"Maximum {MAX_TAGS} tags allowed")
        return tags

    @field_validator("contract_address")
    @classmethod
    def _contract_address(cls, value: str) -> str:
        if not value:
            return ""
        if not CONTRACT_ADDRESS_PATTERN.match(value):
            raise ValueError("Invalid contract address format")
        return value.lower()

    @field_validator("support_email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SubmissionResponse(BaseModel):
    app: dict
    status: str
    created: bool
    updated: bool
    ownership_proven: bool
    decided_by: str
    message: str
