"""Remote document store used for the shared plant catalog."""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp
from yarl import URL

from .const import DEFAULT_API_BASE_URL, DEFAULT_HTTP_TIMEOUT
from .errors import ConcurrentModificationError, MissingCredentialError, RemoteSyncError

_LOGGER = logging.getLogger(__name__)

__all__ = ["VersionedDocument", "DocumentStore", "GitHubContentsStore"]

_CONFLICT_HINTS = ("does not match", "sha")


@dataclass(frozen=True, slots=True)
class VersionedDocument:
    """Raw document bytes together with the version token they were read at."""

    content: bytes
    version: str


class DocumentStore(Protocol):
    """Store of whole documents guarded by a version token."""

    async def read(self, path: str) -> VersionedDocument: ...

    async def write(self, path: str, content: bytes, *, version: str, message: str) -> str:
        """Replace ``path`` if it is still at ``version``; return the new version."""
        ...


class GitHubContentsStore:
    """Read and write single files through the GitHub repository contents API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        owner: str,
        repo: str,
        token_provider: Callable[[], str | None],
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self.session = session
        self.owner = owner
        self.repo = repo
        self._token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, path: str) -> URL:
        url = URL(self.base_url) / "repos" / self.owner / self.repo / "contents"
        for part in path.strip("/").split("/"):
            url = url / part
        return url

    def _headers(self) -> dict[str, str]:
        token = self._token_provider()
        if not token:
            raise MissingCredentialError("a GitHub token is required to update the catalog")
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }

    # ------------------------------------------------------------------
    async def read(self, path: str) -> VersionedDocument:
        url = self.url_for(path)
        headers = self._headers()
        try:
            async with self.session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    raise RemoteSyncError(
                        f"Failed to fetch {path}: {resp.status} {text}",
                        status=resp.status,
                        reason="read",
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise RemoteSyncError(f"Failed to fetch {path}: {err}", reason="read") from err

        payload = self._parse_json(text, path)
        content = payload.get("content")
        sha = payload.get("sha")
        if not isinstance(content, str) or not isinstance(sha, str) or not sha:
            raise RemoteSyncError(f"Response for {path} is missing content or sha", reason="decode")
        try:
            raw = base64.b64decode(content)
        except (binascii.Error, ValueError) as err:
            raise RemoteSyncError(f"Could not decode {path}: {err}", reason="decode") from err
        _LOGGER.debug("Read %s at %s (%d bytes)", path, sha, len(raw))
        return VersionedDocument(content=raw, version=sha)

    async def write(self, path: str, content: bytes, *, version: str, message: str) -> str:
        url = self.url_for(path)
        headers = self._headers()
        body = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "sha": version,
        }
        try:
            async with self.session.put(
                url,
                json=body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                text = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise RemoteSyncError(f"Failed to update {path}: {err}", reason="write") from err

        if self._is_conflict(status, text):
            raise ConcurrentModificationError(
                f"{path} changed since it was read at {version}",
                status=status,
                reason="conflict",
            )
        if status >= 400:
            raise RemoteSyncError(f"Failed to update {path}: {status} {text}", status=status, reason="write")

        payload = self._parse_json(text, path)
        meta = payload.get("content")
        new_version = meta.get("sha") if isinstance(meta, dict) else None
        _LOGGER.debug("Wrote %s: %s -> %s", path, version, new_version)
        return str(new_version or "")

    # ------------------------------------------------------------------
    def _is_conflict(self, status: int, text: str) -> bool:
        if status == 409:
            return True
        if status == 422:
            lowered = text.lower()
            return all(hint in lowered for hint in _CONFLICT_HINTS)
        return False

    def _parse_json(self, text: str, path: str) -> dict[str, Any]:
        try:
            payload = json.loads(text) if text else {}
        except json.JSONDecodeError as err:
            raise RemoteSyncError(f"Malformed response for {path}: {err}", reason="decode") from err
        if not isinstance(payload, dict):
            raise RemoteSyncError(f"Malformed response for {path}: expected an object", reason="decode")
        return payload
