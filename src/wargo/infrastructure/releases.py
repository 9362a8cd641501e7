"""GitHub release lookup and tarball download for the web asset package.

Uses the GitHub REST API (``GET /repos/{owner}/{repo}/releases``). Set the
token env var (``GITHUB_TOKEN`` by default) for higher rate limits.
"""

from __future__ import annotations

import http.client
import io
import json
import logging
import tarfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wargo import __version__
from wargo.domain.errors import AssetResolutionError
from wargo.domain.versions import Version, parse_tag_version

logger = logging.getLogger(__name__)

USER_AGENT = f"wargo/{__version__}"


@dataclass(frozen=True)
class Release:
    """One published release of the asset repository."""

    tag_name: str
    tarball_url: str

    @property
    def version(self) -> Version | None:
        return parse_tag_version(self.tag_name)


class ReleaseClient:
    """Minimal read-only client for a repository's releases."""

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        token: str | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._token = token

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _request(self, url: str, accept: str) -> bytes:
        req = urllib.request.Request(
            url,
            headers={
                "Accept": accept,
                "User-Agent": USER_AGENT,
                **({"Authorization": f"Bearer {self._token}"} if self._token else {}),
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as e:
            if e.code == 403:
                msg = "GitHub rate limit reached; set GITHUB_TOKEN for more requests"
                raise AssetResolutionError(msg) from e
            msg = f"GitHub API error {e.code} for {url}"
            raise AssetResolutionError(msg) from e
        except urllib.error.URLError as e:
            msg = f"Network error fetching {url}: {e.reason}"
            raise AssetResolutionError(msg) from e
        except (OSError, http.client.HTTPException) as e:
            msg = f"Network error fetching {url}: {str(e) or type(e).__name__}"
            raise AssetResolutionError(msg) from e

    def list_releases(self) -> list[Release]:
        """Return the repository's releases, newest first as GitHub orders them."""
        url = f"{self._api_url}/repos/{self.owner}/{self.repo}/releases"
        raw = self._request(url, "application/vnd.github+json")
        try:
            data: Any = json.loads(raw.decode())
        except ValueError as e:
            msg = f"Malformed release listing for {self.slug}"
            raise AssetResolutionError(msg) from e

        releases: list[Release] = []
        for item in data if isinstance(data, list) else []:
            if not isinstance(item, dict):
                continue
            tag = item.get("tag_name")
            tarball = item.get("tarball_url")
            if tag and tarball:
                releases.append(Release(tag_name=tag, tarball_url=tarball))
        return releases

    def download(self, release: Release, dest: Path) -> Path:
        """Download and unpack *release* into *dest*.

        GitHub tarballs wrap their contents in a single top-level
        directory, which becomes the asset root and is returned.

        Raises:
            AssetResolutionError: the download or unpacking failed, or the
                archive does not hold exactly one top-level directory.
        """
        logger.debug("Downloading %s", release.tarball_url)
        raw = self._request(release.tarball_url, "application/octet-stream")
        try:
            with tarfile.open(fileobj=io.BytesIO(raw), mode="r:gz") as archive:
                archive.extractall(dest, filter="data")
        except (tarfile.TarError, OSError) as e:
            msg = f"Could not unpack release {release.tag_name}: {e}"
            raise AssetResolutionError(msg) from e

        entries = [p for p in dest.iterdir() if not p.name.startswith(".")]
        if len(entries) != 1 or not entries[0].is_dir():
            names = ", ".join(sorted(p.name for p in entries)) or "nothing"
            msg = (
                f"Release {release.tag_name} archive should hold one top-level directory,"
                f" found: {names}"
            )
            raise AssetResolutionError(msg)
        return entries[0]
