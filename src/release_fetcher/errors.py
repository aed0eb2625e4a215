"""Exception hierarchy for release fetching."""


class FetchError(Exception):
    """Base class for every failure that aborts a run."""

    pass


class ConfigError(FetchError):
    """Required input missing or invalid."""

    pass


class AuthError(FetchError):
    """No credential available for the GitHub API."""

    pass


class PatternError(FetchError):
    """Asset pattern is not a valid regular expression."""

    pass


class ResolveError(FetchError):
    """Release or asset could not be resolved."""

    pass


class NoReleasesError(ResolveError):
    pass


class ReleaseNotFoundError(ResolveError):
    pass


class NoMatchingAssetError(ResolveError):
    pass


class DownloadError(FetchError):
    """Transport failure talking to the GitHub API."""

    pass


class ExtractError(FetchError):
    """Archive could not be extracted."""

    pass


class CorruptArchiveError(ExtractError):
    """Archive stream is not valid gzip or tar data."""

    pass


class UnsafeArchiveEntryError(ExtractError):
    """Archive entry would be written outside the destination directory."""

    pass


class ClassifyError(FetchError):
    """Could not decide which extracted file is the binary."""

    pass


class AmbiguousBinaryError(ClassifyError):
    """Zero or several binary candidates were found."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"single binary expected, got {count}")


class InstallError(FetchError):
    """Binary could not be moved into place or made executable."""

    pass


class RegistrationError(FetchError):
    """Install directory could not be appended to the path file."""

    pass
