"""Main fetch-and-install orchestration."""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .archive import extract
from .classifier import classify
from .config import FetchConfig
from .errors import InstallError, RegistrationError
from .github import GitHubClient
from .models import Asset, Release
from .resolver import compile_asset_pattern, resolve

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755
PATH_FILE_MODE = 0o644


@dataclass
class InstallResult:
    """Outcome of a successful run."""

    release: Release
    asset: Asset
    install_path: Path
    registered_directory: Path


def install_binary(source: Path, install_path: Path) -> Path:
    """
    Move ``source`` to ``install_path`` and mark it executable.

    Raises:
        InstallError: The install path is a directory, or the move or chmod failed
    """
    if install_path.is_dir():
        raise InstallError(f"install path {install_path} is a directory")

    try:
        install_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(install_path))
    except OSError as e:
        raise InstallError(f"failed to move binary to desired output path: {e}") from e

    try:
        os.chmod(install_path, EXECUTABLE_MODE)
    except OSError as e:
        raise InstallError(f"failed to set binary as executable: {e}") from e

    return install_path


def register_path(github_path: Path, directory: Path) -> None:
    """
    Append ``directory`` to the path file read by later workflow steps.

    Raises:
        RegistrationError: The file could not be opened or written
    """
    try:
        fd = os.open(github_path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, PATH_FILE_MODE)
        with os.fdopen(fd, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")
    except OSError as e:
        raise RegistrationError(f"failed to update GH path {github_path}: {e}") from e


class ReleaseInstaller:
    """Resolves, downloads, unpacks and installs one release binary."""

    def __init__(
        self, config: FetchConfig, client: Optional[GitHubClient] = None
    ) -> None:
        """
        Initialize installer.

        Args:
            config: Run configuration
            client: API client; built from the config if omitted
        """
        self.config = config
        self.client = client or GitHubClient(
            token=config.token or "",
            api_url=config.api_url,
            timeout=config.timeout,
        )

    def fetch_binary(self, asset: Asset, scratch: Path) -> Path:
        """
        Download ``asset`` into ``scratch`` and return the path of the binary.

        Tarballs are extracted and classified; anything else is taken to be
        the binary itself.
        """
        logger.info(f"downloading matching asset: {asset.name}")

        if not asset.is_tarball:
            return self.client.download_asset(
                self.config.owner, self.config.repo, asset.id, scratch / "binary"
            )

        archive_path = self.client.download_asset(
            self.config.owner, self.config.repo, asset.id, scratch / asset.name
        )

        logger.info("unpacking tar.gz to temp dir")
        extracted = scratch / "extracted"
        extracted.mkdir()
        with archive_path.open("rb") as f:
            extract(extracted, f)

        return classify(extracted)

    def run(self) -> InstallResult:
        """
        Execute the whole run.

        Returns:
            Details of what was installed

        Raises:
            FetchError: Any step failed; nothing is rolled back
        """
        config = self.config
        pattern = compile_asset_pattern(config.asset_pattern)

        release, asset = resolve(
            self.client, config.owner, config.repo, config.version, pattern
        )

        with tempfile.TemporaryDirectory(prefix="release-asset-") as tmp:
            binary = self.fetch_binary(asset, Path(tmp))
            install_binary(binary, config.install_path)

        logger.info(f"installed {asset.name} to {config.install_path}")

        register_path(config.github_path, config.install_dir)
        logger.debug(f"added {config.install_dir} to {config.github_path}")

        return InstallResult(
            release=release,
            asset=asset,
            install_path=config.install_path,
            registered_directory=config.install_dir,
        )
