"""Select a release and the asset to download from it."""

import logging
import re
from typing import Optional, Pattern, Tuple

from .errors import (
    NoMatchingAssetError,
    NoReleasesError,
    PatternError,
    ReleaseNotFoundError,
)
from .github import GitHubClient
from .models import Asset, Release

logger = logging.getLogger(__name__)


def compile_asset_pattern(pattern: str) -> Pattern[str]:
    """
    Compile an asset name pattern.

    Raises:
        PatternError: The pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern.strip())
    except re.error as e:
        raise PatternError(
            f"asset-pattern ({pattern}) was not a valid regexp: {e}"
        ) from e


def select_release(
    client: GitHubClient, owner: str, repo: str, tag: Optional[str] = None
) -> Release:
    """
    Fetch the release tagged ``tag``, or the latest one when no tag is given.

    "Latest" is the first release in the API's listing order; no version
    comparison is done.
    """
    logger.info(f"listing releases for {owner}/{repo}")

    if not tag:
        releases = client.list_releases(owner, repo)
        if not releases:
            raise NoReleasesError(f"There were no releases for {owner}/{repo}")
        release = releases[0]
    else:
        release = client.get_release_by_tag(owner, repo, tag)
        if release is None:
            raise ReleaseNotFoundError(
                f"No release tagged '{tag}' found for {owner}/{repo}"
            )

    logger.debug(f"using release: {release.display_name}")
    return release


def select_asset(release: Release, pattern: Pattern[str]) -> Asset:
    """
    Return the first asset whose name contains a match for ``pattern``.

    The pattern is searched, not anchored; use ``^``/``$`` to pin it.
    """
    for asset in release.assets:
        logger.debug(f"checking asset with name: {asset.name}")
        if pattern.search(asset.name):
            logger.debug(f"selected asset with name: {asset.name}")
            return asset

    raise NoMatchingAssetError(
        f"No release assets of {release.display_name} match '{pattern.pattern}'"
    )


def resolve(
    client: GitHubClient,
    owner: str,
    repo: str,
    tag: Optional[str],
    pattern: Pattern[str],
) -> Tuple[Release, Asset]:
    """Resolve the release and the single asset to install. Nothing is downloaded."""
    release = select_release(client, owner, repo, tag)
    return release, select_asset(release, pattern)
