"""
Remote mirror: keeps a copy of the word list in one JSON file of a GitHub
repository, through the contents API.

Every write to an existing file must carry the file's current blob `sha`;
GitHub rejects a stale one. The mirror never retries on its own; callers
keep the returned sha and hand it back on the next push.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import List, Optional, Tuple

import requests

from config import Settings
from errors import RemoteSyncError
from word_store import WordEntry, dump_entries, parse_entries

logger = logging.getLogger(__name__)

STATUS_DISABLED = "disabled"
STATUS_IDLE = "idle"
STATUS_OK = "ok"
STATUS_ERROR = "error"


def encode_content(entries: List[WordEntry]) -> str:
    return base64.b64encode(dump_entries(entries).encode("utf-8")).decode("ascii")


def decode_content(content: str) -> str:
    # GitHub wraps base64 bodies at 60 columns
    compact = "".join((content or "").split())
    return base64.b64decode(compact, validate=True).decode("utf-8")


class RemoteMirror:
    """Client for a single JSON document on the GitHub contents API."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.status = STATUS_IDLE if self.enabled else STATUS_DISABLED
        self.last_error: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return self.settings.remote_enabled

    @property
    def url(self) -> str:
        s = self.settings
        return f"{s.github_api_url}/repos/{s.github_owner}/{s.github_repo}/contents/{s.github_path}"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.settings.github_token}",
            "Accept": "application/vnd.github+json",
        }

    def _fail(self, message: str) -> None:
        self.status = STATUS_ERROR
        self.last_error = message
        logger.warning("Remote sync error: %s", message)

    def _get(self, raw: bool = False) -> requests.Response:
        headers = self._headers()
        if raw:
            headers["Accept"] = "application/vnd.github.raw+json"
        return self.session.get(
            self.url,
            headers=headers,
            params={"ref": self.settings.github_branch},
            timeout=self.settings.http_timeout,
        )

    # -------- read --------
    def pull(self) -> Tuple[Optional[List[WordEntry]], Optional[str]]:
        """
        Fetch and decode the remote word list.

        Returns:
            (entries, sha) on success; ([], None) when the file does not
            exist yet; (None, None) when the fetch fails; (None, sha) when
            the file exists but does not hold a word list.
        """
        if not self.enabled:
            return None, None

        try:
            r = self._get()
        except requests.RequestException as e:
            self._fail(f"pull failed: {e}")
            return None, None
        if r.status_code == 404:
            # not created yet, same as an empty list
            self.status = STATUS_OK
            self.last_error = None
            logger.info("No remote word list at %s yet", self.settings.github_path)
            return [], None
        if not r.ok:
            self._fail(f"pull failed: HTTP {r.status_code}")
            return None, None

        try:
            body = r.json()
        except ValueError as e:
            self._fail(f"pull failed: bad response body: {e}")
            return None, None
        sha = body.get("sha") if isinstance(body, dict) else None

        try:
            if body.get("encoding") == "none":
                # files over 1 MB come without inline content
                text = self._get_raw()
            else:
                text = decode_content(body.get("content", ""))
            entries = parse_entries(text)
        except requests.RequestException as e:
            self._fail(f"pull failed: {e}")
            return None, None
        except (ValueError, AttributeError, binascii.Error) as e:
            self._fail(f"remote document is not a word list: {e}")
            return None, sha

        self.status = STATUS_OK
        self.last_error = None
        logger.info("Pulled %d words from %s (sha %s)", len(entries), self.settings.github_path, sha)
        return entries, sha

    def _get_raw(self) -> str:
        r = self._get(raw=True)
        r.raise_for_status()
        return r.content.decode("utf-8")

    def fetch_revision(self) -> Optional[str]:
        """Current sha of the remote file, or None when it does not exist yet."""
        try:
            r = self._get()
        except requests.RequestException as e:
            raise RemoteSyncError(f"metadata fetch failed: {e}") from e
        if r.status_code == 404:
            return None
        if not r.ok:
            raise RemoteSyncError(f"metadata fetch failed: HTTP {r.status_code}", r.status_code)
        try:
            return r.json()["sha"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteSyncError(f"metadata response has no sha: {e}", r.status_code) from e

    # -------- write --------
    def push(self, entries: List[WordEntry], known_sha: Optional[str] = None) -> Optional[str]:
        """
        Write the full collection, guarded by the remote sha.

        Returns:
            The new sha assigned by GitHub (None when the mirror is disabled).

        Raises:
            RemoteSyncError: on a stale sha, auth failure or network error.
        """
        if not self.enabled:
            return None

        try:
            sha = known_sha if known_sha else self.fetch_revision()

            payload = {
                "message": f"Update word list ({len(entries)} words)",
                "content": encode_content(entries),
                "branch": self.settings.github_branch,
            }
            if sha:
                payload["sha"] = sha

            try:
                r = self.session.put(
                    self.url,
                    headers=self._headers(),
                    json=payload,
                    timeout=self.settings.http_timeout,
                )
            except requests.RequestException as e:
                raise RemoteSyncError(f"push failed: {e}") from e

            if r.status_code not in (200, 201):
                raise RemoteSyncError(f"push failed: HTTP {r.status_code}", r.status_code)
            try:
                new_sha = r.json()["content"]["sha"]
            except (ValueError, KeyError, TypeError) as e:
                raise RemoteSyncError(f"push response has no sha: {e}", r.status_code) from e
        except RemoteSyncError as e:
            self._fail(str(e))
            raise

        self.status = STATUS_OK
        self.last_error = None
        logger.info("Pushed %d words (sha %s)", len(entries), new_sha)
        return new_sha

