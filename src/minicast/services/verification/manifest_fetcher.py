"""Fetch and parse the farcaster.json manifest a domain publishes.

Manifest absence is the common case, so every failure mode (timeout,
transport error, non-2xx, oversized or malformed body) degrades to
``None`` instead of raising.
"""

import json
import logging
from urllib.parse import urlsplit

import httpx

from minicast.config import settings
from minicast.errors.exceptions import RemoteUnavailable
from minicast.models.manifest import Manifest

logger = logging.getLogger(__name__)

MANIFEST_PATH = "/.well-known/farcaster.json"
ICON_PATH = "/.well-known/icon.png"
MAX_BODY_BYTES = 256 * 1024


def site_origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for a URL, assuming https when bare."""
    candidate = url.strip()
    if not candidate.startswith(("http://", "https://")):
        candidate = f"https://{candidate}"
    parts = urlsplit(candidate)
    if not parts.netloc:
        raise ValueError(f"URL has no host: {url!r}")
    return f"{parts.scheme}://{parts.netloc}".lower()


def _absolute(origin: str, ref: str | None) -> str | None:
    if not ref or not isinstance(ref, str):
        return None
    if ref.startswith(("http://", "https://")):
        return ref
    if ref.startswith("/"):
        return f"{origin}{ref}"
    return f"{origin}/{ref}"


def _first_str(*values) -> str | None:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _owner_field(value) -> str | list[str] | None:
    # Remote manifests put anything here; keep only string entries
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return None


def parse_manifest(data: dict, origin: str) -> Manifest:
    """Map a raw manifest document onto :class:`Manifest`.

    Mini app manifests nest most metadata under ``frame`` (older) or
    ``miniapp`` (newer); flat documents are accepted too. Owner fields
    are only read from the top level.
    """
    frame = data.get("frame") or data.get("miniapp") or data
    if not isinstance(frame, dict):
        frame = data

    screenshots = frame.get("screenshotUrls") or data.get("screenshots") or []
    if not isinstance(screenshots, list):
        screenshots = []
    tags = frame.get("tags") or data.get("tags") or []
    if not isinstance(tags, list):
        tags = []

    return Manifest(
        name=_first_str(frame.get("name"), data.get("name")),
        description=_first_str(frame.get("description"), data.get("description")),
        icon=_absolute(origin, _first_str(frame.get("iconUrl"), frame.get("icon"), data.get("icon"))),
        category=_first_str(frame.get("primaryCategory"), data.get("category"), data.get("primaryCategory")),
        og_image=_absolute(
            origin,
            _first_str(
                frame.get("heroImageUrl"),
                frame.get("imageUrl"),
                data.get("ogImage"),
                data.get("og-image"),
                data.get("og_image"),
            ),
        ),
        home_url=_first_str(frame.get("homeUrl"), data.get("url")) or origin,
        owner=_owner_field(data.get("owner")),
        owners=_owner_field(data.get("owners")),
        screenshots=[s for s in (_absolute(origin, ref) for ref in screenshots) if s],
        tags=[t for t in tags if isinstance(t, str)],
    )


class ManifestFetcher:
    """Bounded-time reader for a claimed domain's well-known resources."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float | None = None,
        user_agent: str | None = None,
    ):
        self.client = client
        self.timeout = min(timeout or settings.fetch_timeout_seconds, 5.0)
        self.user_agent = user_agent or settings.user_agent

    async def _read(self, url: str, accept: str) -> bytes:
        headers = {"Accept": accept, "User-Agent": self.user_agent}
        try:
            async with self.client.stream(
                "GET", url, headers=headers, timeout=self.timeout, follow_redirects=True
            ) as response:
                if not response.is_success:
                    raise RemoteUnavailable(f"{url} returned HTTP {response.status_code}")
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > MAX_BODY_BYTES:
                        raise RemoteUnavailable(f"{url} exceeded {MAX_BODY_BYTES} bytes")
                return bytes(body)
        except httpx.HTTPError as exc:
            raise RemoteUnavailable(f"{url} unreachable: {exc.__class__.__name__}") from exc

    async def fetch_text(self, url: str) -> str:
        """GET a small text resource; raises RemoteUnavailable on any failure."""
        body = await self._read(url, "text/plain, */*")
        return body.decode("utf-8", errors="replace")

    async def probe_icon(self, origin: str) -> str | None:
        """HEAD the conventional icon path; return its URL if it exists."""
        icon_url = f"{origin}{ICON_PATH}"
        try:
            response = await self.client.head(
                icon_url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            logger.debug("icon_probe_failed", extra={"url": icon_url, "error": str(exc)})
            return None
        return icon_url if response.is_success else None

    async def fetch(self, url: str) -> Manifest | None:
        """Fetch ``<origin>/.well-known/farcaster.json`` for a submission URL."""
        try:
            origin = site_origin(url)
        except ValueError:
            return None

        manifest_url = f"{origin}{MANIFEST_PATH}"
        try:
            body = await self._read(manifest_url, "application/json")
            data = json.loads(body)
        except RemoteUnavailable as exc:
            logger.info("manifest_fetch_failed", extra={"url": manifest_url, "error": str(exc)})
            return None
        except ValueError as exc:
            logger.info("manifest_fetch_failed", extra={"url": manifest_url, "error": f"malformed JSON: {exc}"})
            return None

        if not isinstance(data, dict):
            logger.info("manifest_fetch_failed", extra={"url": manifest_url, "error": "manifest is not an object"})
            return None

        try:
            manifest = parse_manifest(data, origin)
        except ValueError as exc:
            # pydantic.ValidationError is a ValueError
            logger.info("manifest_fetch_failed", extra={"url": manifest_url, "error": f"invalid manifest: {exc}"})
            return None
        if not manifest.icon:
            manifest.icon = await self.probe_icon(origin)
        return manifest
