"""CLI entry point for fetching release binaries."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import DEFAULT_API_URL, FetchConfig
from .errors import FetchError
from .installer import InstallResult, ReleaseInstaller

console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@click.command()
@click.option("--owner", default=None, help="Owner of the repo with the release asset")
@click.option("--repo", default=None, help="Repo with the release asset")
@click.option(
    "--version",
    default="",
    help="Version of the release asset to fetch, if unset, use latest",
)
@click.option("--asset-pattern", default=None, help="Pattern the asset name must match")
@click.option(
    "--install-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to put the installed binary",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    help="GitHub token to use for authentication (default: $GITHUB_TOKEN)",
)
@click.option(
    "--github-path",
    envvar="GITHUB_PATH",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File to append the install directory to (default: $GITHUB_PATH)",
)
@click.option(
    "--api-url",
    envvar="GITHUB_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
    help="GitHub API base URL",
)
@click.option(
    "--timeout",
    type=float,
    default=60.0,
    show_default=True,
    help="HTTP request timeout in seconds",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    owner: Optional[str],
    repo: Optional[str],
    version: str,
    asset_pattern: Optional[str],
    install_path: Optional[Path],
    token: Optional[str],
    github_path: Optional[Path],
    api_url: str,
    timeout: float,
    verbose: bool,
) -> None:
    """
    Download a binary from a GitHub release and install it.

    The matching asset is downloaded, unpacked if it is a .tar.gz, moved to
    the install path and made executable. Its directory is then appended to
    GITHUB_PATH so later workflow steps can run it.
    """
    setup_logging(verbose)

    try:
        config = FetchConfig.load(
            owner=owner,
            repo=repo,
            version=version,
            asset_pattern=asset_pattern,
            install_path=install_path,
            token=token,
            github_path=github_path,
            api_url=api_url,
            timeout=timeout,
            verbose=verbose,
        )

        if verbose:
            _print_plan(config)

        result = ReleaseInstaller(config).run()
        _print_result(result)

    except FetchError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\n⚠️ Interrupted by user", err=True)
        sys.exit(1)

    except Exception as e:
        click.echo(f"❌ Unexpected error: {e}", err=True)
        sys.exit(1)


def _print_plan(config: FetchConfig) -> None:
    """Print what is about to be fetched."""
    table = Table(title="Fetch Plan", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Repository", f"{config.owner}/{config.repo}")
    table.add_row("Version", config.version or "latest")
    table.add_row("Asset pattern", config.asset_pattern)
    table.add_row("Install path", str(config.install_path))
    table.add_row("API", config.api_url)
    console.print(table)


def _print_result(result: InstallResult) -> None:
    """Print a summary of the installed binary."""
    console.print(
        Panel.fit(
            f"[bold]Release:[/bold] {result.release.display_name}\n"
            f"[bold]Asset:[/bold] {result.asset.name}\n"
            f"[bold]Installed:[/bold] {result.install_path}\n"
            f"[bold]Added to PATH:[/bold] {result.registered_directory}",
            title="✅ Binary installed",
            border_style="green",
        )
    )


if __name__ == "__main__":
    main()
