from pathlib import Path

import pytest
import requests

from release_fetcher.errors import DownloadError
from release_fetcher.github import GitHubClient

API = "https://api.github.com"
RELEASES = f"{API}/repos/acme/tool/releases"

RELEASE_JSON = {
    "tag_name": "v1.2.0",
    "name": "Tool 1.2.0",
    "draft": False,
    "assets": [
        {
            "id": 101,
            "name": "tool_1.2.0_linux_amd64.tar.gz",
            "size": 2048,
            "content_type": "application/gzip",
            "browser_download_url": "https://github.com/acme/tool/releases/download/v1.2.0/tool_1.2.0_linux_amd64.tar.gz",
            "uploader": {"login": "acme-bot"},
        }
    ],
}


def test_sets_auth_headers(stub_session) -> None:
    session = stub_session()
    GitHubClient("s3cret", session=session)

    assert session.headers["Authorization"] == "Bearer s3cret"
    assert session.headers["Accept"] == "application/vnd.github+json"
    assert "X-GitHub-Api-Version" in session.headers


def test_list_releases(stub_session, response) -> None:
    session = stub_session({RELEASES: response(200, [RELEASE_JSON])})
    client = GitHubClient("t", timeout=12.5, session=session)

    releases = client.list_releases("acme", "tool")

    assert [r.tag_name for r in releases] == ["v1.2.0"]
    asset = releases[0].assets[0]
    assert asset.id == 101
    assert asset.is_tarball
    assert session.calls[0]["timeout"] == 12.5


def test_custom_api_url(stub_session, response) -> None:
    url = "https://ghe.example.com/api/v3/repos/acme/tool/releases"
    session = stub_session({url: response(200, [])})
    client = GitHubClient("t", api_url="https://ghe.example.com/api/v3/", session=session)

    assert client.list_releases("acme", "tool") == []
    assert session.calls[0]["url"] == url


def test_release_by_tag(stub_session, response) -> None:
    session = stub_session({f"{RELEASES}/tags/v1.2.0": response(200, RELEASE_JSON)})
    client = GitHubClient("t", session=session)

    release = client.get_release_by_tag("acme", "tool", "v1.2.0")

    assert release is not None
    assert release.display_name == "Tool 1.2.0"


def test_release_by_tag_missing(stub_session) -> None:
    client = GitHubClient("t", session=stub_session())

    assert client.get_release_by_tag("acme", "tool", "v0.0.1") is None


def test_http_errors_raise_download_error(stub_session, response) -> None:
    session = stub_session({RELEASES: response(500, {"message": "boom"}, RELEASES)})
    client = GitHubClient("t", session=session)

    with pytest.raises(DownloadError):
        client.list_releases("acme", "tool")


def test_missing_repository_is_not_treated_as_empty(stub_session) -> None:
    client = GitHubClient("t", session=stub_session())

    with pytest.raises(DownloadError):
        client.list_releases("acme", "tool")


def test_transport_errors_raise_download_error(stub_session) -> None:
    session = stub_session({RELEASES: requests.ConnectionError("connection refused")})
    client = GitHubClient("t", session=session)

    with pytest.raises(DownloadError) as excinfo:
        client.list_releases("acme", "tool")

    assert "connection refused" in str(excinfo.value)


def test_download_asset(tmp_path: Path, stub_session, response) -> None:
    payload = b"\x1f\x8b\x08" + bytes(range(256)) * 8
    session = stub_session({f"{RELEASES}/assets/101": response(200, payload)})
    client = GitHubClient("t", session=session)

    written = client.download_asset("acme", "tool", 101, tmp_path / "asset.tar.gz")

    assert written == tmp_path / "asset.tar.gz"
    assert written.read_bytes() == payload
    assert session.calls[0]["headers"] == {"Accept": "application/octet-stream"}
    assert session.calls[0]["stream"] is True


def test_download_asset_failure(tmp_path: Path, stub_session) -> None:
    client = GitHubClient("t", session=stub_session())

    with pytest.raises(DownloadError):
        client.download_asset("acme", "tool", 999, tmp_path / "asset")


def test_release_tag_is_quoted_in_url(stub_session, response) -> None:
    body = dict(RELEASE_JSON, tag_name="release/1.0")
    session = stub_session({f"{RELEASES}/tags/release%2F1.0": response(200, body)})
    client = GitHubClient("t", session=session)

    release = client.get_release_by_tag("acme", "tool", "release/1.0")

    assert release is not None
    assert release.tag_name == "release/1.0"
    assert session.calls[0]["url"] == f"{RELEASES}/tags/release%2F1.0"
