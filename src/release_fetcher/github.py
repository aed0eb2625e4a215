"""Minimal GitHub releases API client built on requests."""

import logging
from pathlib import Path
from typing import List, Optional

import requests

from .config import DEFAULT_API_URL
from .errors import DownloadError
from .models import Release

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
CHUNK_SIZE = 1024 * 256


class GitHubClient:
    """Talks to the releases endpoints of the GitHub REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Bearer token sent with every request
            api_url: API base URL, without trailing slash
            timeout: Per-request timeout in seconds
            session: Session to reuse; a new one is created if omitted
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
            }
        )

    def _url(self, owner: str, repo: str, suffix: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}/releases{suffix}"

    def _get(self, url: str, **kwargs) -> requests.Response:
        try:
            return self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise DownloadError(f"request to {url} failed: {e}") from e

    @staticmethod
    def _check(response: requests.Response, what: str) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise DownloadError(f"failed to get {what}: {e}") from e

    def list_releases(self, owner: str, repo: str) -> List[Release]:
        """Return the first page of releases, in the order the API gives them."""
        response = self._get(self._url(owner, repo, ""))
        self._check(response, "releases")
        return [Release.model_validate(item) for item in response.json()]

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Optional[Release]:
        """Return the release tagged ``tag``, or None if there is none."""
        quoted = requests.utils.quote(tag, safe="")
        response = self._get(self._url(owner, repo, f"/tags/{quoted}"))
        if response.status_code == 404:
            return None
        self._check(response, f"release {tag}")
        return Release.model_validate(response.json())

    def download_asset(
        self, owner: str, repo: str, asset_id: int, destination: Path
    ) -> Path:
        """
        Stream a release asset to ``destination``.

        Returns:
            The path written
        """
        url = self._url(owner, repo, f"/assets/{asset_id}")
        response = self._get(
            url, headers={"Accept": "application/octet-stream"}, stream=True
        )
        with response:
            self._check(response, f"release asset {asset_id}")
            try:
                with Path(destination).open("wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            except requests.RequestException as e:
                raise DownloadError(f"download of asset {asset_id} failed: {e}") from e
            except OSError as e:
                raise DownloadError(f"failed to write {destination}: {e}") from e

        logger.debug(f"Downloaded asset {asset_id} to {destination}")
        return Path(destination)
