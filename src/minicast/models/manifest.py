"""Pydantic model for a parsed farcaster.json manifest."""

from pydantic import BaseModel, ConfigDict, Field


class Manifest(BaseModel):
    """Fields of a domain's manifest that the approval engine consumes.

    ``owner`` and ``owners`` are kept verbatim: manifests in the wild use
    either a single address or a list for both.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    og_image: str | None = None
    home_url: str | None = None
    owner: str | list[str] | None = None
    owners: str | list[str] | None = None
    screenshots: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
