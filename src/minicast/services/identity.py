"""Normalization of requester identities supplied by the identity provider."""

import re

from minicast.errors.exceptions import AuthenticationError, ValidationError
from minicast.services.verification.signature import is_wallet_address

EXTERNAL_IDENTITY_PATTERN = re.compile(r"^[a-z][a-z0-9_-]{1,31}:[a-z0-9_.-]{1,128}$")


def normalize_identity(identity: str | None) -> str:
    """Lower-case wallet address or namespaced external identity (e.g. ``farcaster:1234``)."""
    if identity is None or not identity.strip() or identity.strip() == "anonymous":
        raise AuthenticationError()
    value = identity.strip().lower()
    if is_wallet_address(value) or EXTERNAL_IDENTITY_PATTERN.match(value):
        return value
    raise ValidationError("Identity must be a wallet address or a namespaced external identity")
