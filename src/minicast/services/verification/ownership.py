"""Match a wallet against the owner fields a manifest declares."""

from minicast.models.manifest import Manifest


def _flatten(value) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def declared_owners(manifest: Manifest, default_owner: str) -> set[str]:
    """Normalized union of ``owner`` and ``owners``.

    A manifest that declares neither falls back to ``default_owner`` so
    the listing is never permanently unclaimable.
    """
    owners = {
        entry.strip().lower()
        for entry in _flatten(manifest.owner) + _flatten(manifest.owners)
        if entry.strip()
    }
    if not owners:
        owners = {default_owner.strip().lower()}
    return owners


def is_owner(wallet: str, manifest: Manifest | None, default_owner: str) -> bool:
    """True iff the wallet appears among the manifest's declared owners."""
    if manifest is None or not wallet or not wallet.strip():
        return False
    return wallet.strip().lower() in declared_owners(manifest, default_owner)


def snapshot_manifest(manifest: Manifest | None, default_owner: str) -> dict:
    """Serialized copy of the manifest stored on the app for later re-checks.

    Missing owner fields are filled with the default owner, mirroring
    each other when only one of them is declared.
    """
    if manifest is None:
        return {"owner": default_owner, "owners": default_owner}
    snapshot = manifest.model_dump(mode="json", exclude_none=True)
    owner = manifest.owner or manifest.owners or default_owner
    owners = manifest.owners or manifest.owner or default_owner
    snapshot["owner"] = owner
    snapshot["owners"] = owners
    return snapshot
