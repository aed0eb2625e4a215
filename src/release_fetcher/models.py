"""Release metadata models parsed from the GitHub API."""

from typing import List, Optional

from pydantic import BaseModel, Field

TARBALL_SUFFIXES = (".tar.gz", ".tgz")


class Asset(BaseModel):
    """A downloadable file attached to a release."""

    id: int = Field(..., description="Asset identifier used for downloads")
    name: str = Field(..., description="Asset file name")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    content_type: Optional[str] = Field(None, description="Declared content type")
    browser_download_url: Optional[str] = Field(
        None, description="Public download URL"
    )

    @property
    def is_tarball(self) -> bool:
        """Whether the asset is a gzip-compressed tar archive."""
        return self.name.endswith(TARBALL_SUFFIXES)


class Release(BaseModel):
    """A tagged release and its assets, in API order."""

    tag_name: str = Field(..., description="Git tag of the release")
    name: Optional[str] = Field(None, description="Release title")
    assets: List[Asset] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.tag_name
