"""
Release Fetcher - install binaries from GitHub releases.

Finds a release asset by pattern, downloads it, unpacks .tar.gz archives and
picks out the executable, installs it and registers its directory on the
GitHub Actions PATH.
"""

__version__ = "1.0.0"

from .archive import extract
from .classifier import classify
from .config import FetchConfig
from .github import GitHubClient
from .installer import InstallResult, ReleaseInstaller
from .models import Asset, Release
from .resolver import compile_asset_pattern, resolve

__all__ = [
    "FetchConfig",
    "GitHubClient",
    "Asset",
    "Release",
    "ReleaseInstaller",
    "InstallResult",
    "extract",
    "classify",
    "compile_asset_pattern",
    "resolve",
]
