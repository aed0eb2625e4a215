from __future__ import annotations

import io
import json
import tarfile
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
import requests

from release_fetcher.models import Asset, Release

ELF_BINARY = b"\x7fELF\x02\x01\x01\x00" + b"\x00" * 8 + b"\x02\x00\x3e\x00" + b"\x00" * 200


def build_tarball(entries: List[tuple]) -> bytes:
    """Build a .tar.gz in memory.

    Entries are ``("dir", name)``, ``("file", name, data, mode)`` or
    ``("symlink", name, target)``, written in the given order.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for entry in entries:
            kind, name = entry[0], entry[1]
            info = tarfile.TarInfo(name)
            if kind == "dir":
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            elif kind == "file":
                data, mode = entry[2], entry[3]
                info.size = len(data)
                info.mode = mode
                tar.addfile(info, io.BytesIO(data))
            elif kind == "symlink":
                info.type = tarfile.SYMTYPE
                info.linkname = entry[2]
                tar.addfile(info)
    return buf.getvalue()


@pytest.fixture
def make_tarball() -> Callable[[List[tuple]], bytes]:
    return build_tarball


@pytest.fixture
def elf_binary() -> bytes:
    return ELF_BINARY


@pytest.fixture
def release_tarball() -> bytes:
    return build_tarball(
        [
            ("file", "LICENSE", b"MIT License\n\nPermission is hereby granted...\n", 0o644),
            ("file", "README.md", b"# tool\n\nA useful tool.\n", 0o644),
            ("file", "tool", ELF_BINARY, 0o755),
        ]
    )


def make_response(status: int = 200, body=b"", url: str = "https://api.github.com/") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.reason = "OK" if status < 400 else "Error"
    response.encoding = "utf-8"
    if not isinstance(body, bytes):
        body = json.dumps(body).encode("utf-8")
    response._content = body
    response._content_consumed = True
    return response


class StubSession(requests.Session):
    """Session answering GETs from a URL table instead of the network."""

    def __init__(self, routes: Optional[Dict[str, object]] = None) -> None:
        super().__init__()
        self.routes = routes or {}
        self.calls: List[dict] = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        answer = self.routes.get(url)
        if answer is None:
            return make_response(404, {"message": "Not Found"}, url)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def stub_session() -> Callable[..., StubSession]:
    return StubSession


@pytest.fixture
def response() -> Callable[..., requests.Response]:
    return make_response


class FakeClient:
    """In-memory stand-in for GitHubClient."""

    def __init__(
        self,
        releases: Optional[List[Release]] = None,
        payloads: Optional[Dict[int, bytes]] = None,
    ) -> None:
        self.releases = releases or []
        self.payloads = payloads or {}
        self.downloads: List[int] = []
        self.tag_lookups: List[str] = []

    def list_releases(self, owner: str, repo: str) -> List[Release]:
        return list(self.releases)

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Optional[Release]:
        self.tag_lookups.append(tag)
        for release in self.releases:
            if release.tag_name == tag:
                return release
        return None

    def download_asset(self, owner: str, repo: str, asset_id: int, destination: Path) -> Path:
        self.downloads.append(asset_id)
        Path(destination).write_bytes(self.payloads[asset_id])
        return Path(destination)


@pytest.fixture
def fake_client() -> Callable[..., FakeClient]:
    return FakeClient


def make_release(tag: str, asset_names: List[str], name: Optional[str] = None) -> Release:
    return Release(
        tag_name=tag,
        name=name,
        assets=[Asset(id=index + 1, name=asset) for index, asset in enumerate(asset_names)],
    )


@pytest.fixture
def release_factory() -> Callable[..., Release]:
    return make_release
