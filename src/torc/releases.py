"""GitHub release lookup and asset download."""

from __future__ import annotations

import http.client
import json
import logging
import shutil
import ssl
import urllib.error
import urllib.request
from pathlib import Path

from torc.config import DEFAULT_RELEASE_DOWNLOAD_URL, DEFAULT_RELEASES_API_URL
from torc.errors import DownloadFailed

logger = logging.getLogger(__name__)

USER_AGENT = "torc-updater"


class GitHubReleases:
    """Reads published torc releases from GitHub."""

    def __init__(
        self,
        api_url: str = DEFAULT_RELEASES_API_URL,
        download_url: str = DEFAULT_RELEASE_DOWNLOAD_URL,
        timeout: float = 30,
    ) -> None:
        """Initialize the release client.

        Args:
            api_url: URL of the "latest release" API endpoint.
            download_url: Base URL for release asset downloads.
            timeout: Network timeout in seconds.
        """
        self.api_url = api_url
        self.download_url = download_url.rstrip("/")
        self.timeout = timeout

    def latest_version(self) -> str | None:
        """Query the API for the latest release tag.

        Returns:
            Tag name, or None if the query fails.
        """
        request = urllib.request.Request(
            self.api_url,
            headers={"Accept": "application/vnd.github.v3+json", "User-Agent": USER_AGENT},
        )
        try:
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=ssl.create_default_context()
            ) as response:
                data = json.loads(response.read().decode("utf-8"))
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            logger.debug("GitHub API query failed: %s", e)
            return None

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if tag:
            logger.debug("Latest release is %s", tag)
        return tag or None

    def asset_url(self, version: str, asset_name: str) -> str:
        """Build the download URL of a release asset."""
        return f"{self.download_url}/{version}/{asset_name}"

    def download(self, url: str, dest: Path) -> None:
        """Stream a URL into dest.

        Raises:
            DownloadFailed: On any HTTP or I/O error.
        """
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=ssl.create_default_context()
            ) as response, dest.open("wb") as handle:
                shutil.copyfileobj(response, handle)
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise DownloadFailed(f"Failed to download {url}: {e}") from e
