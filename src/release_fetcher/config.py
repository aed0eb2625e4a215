"""Run configuration with Pydantic validation."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import AuthError, ConfigError

DEFAULT_API_URL = "https://api.github.com"


class FetchConfig(BaseModel):
    """Everything a single fetch-and-install run needs."""

    owner: str = Field(..., description="Owner of the repo with the release asset")
    repo: str = Field(..., description="Repo with the release asset")
    version: str = Field(
        default="", description="Release tag to fetch; latest release if empty"
    )
    asset_pattern: str = Field(..., description="Pattern the asset name must match")
    install_path: Path = Field(..., description="Where to put the installed binary")
    token: Optional[str] = Field(None, description="GitHub token for authentication")
    github_path: Optional[Path] = Field(
        None, description="File collecting directories to add to PATH"
    )
    api_url: str = Field(default=DEFAULT_API_URL, description="GitHub API base URL")
    timeout: float = Field(default=60.0, gt=0, description="HTTP timeout in seconds")
    verbose: bool = Field(default=False, description="Enable verbose logging")

    @field_validator("owner", "repo", "asset_pattern")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be set")
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        return v.strip()

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("install_path", mode="before")
    @classmethod
    def validate_install_path(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("must be set")
        return Path(str(v).strip()).expanduser().absolute()

    @field_validator("github_path", mode="before")
    @classmethod
    def validate_github_path(cls, v):
        if v is None or not str(v).strip():
            return None
        return v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return v

    @classmethod
    def load(cls, **values) -> "FetchConfig":
        """
        Build and check a configuration.

        Raises:
            ConfigError: A required value is missing or invalid
            AuthError: No token was supplied
        """
        try:
            config = cls.model_validate(values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(f"invalid configuration: {problems}") from e

        if config.token is None:
            raise AuthError("GITHUB_TOKEN must be set")
        if config.github_path is None:
            raise ConfigError("GITHUB_PATH must be set")
        return config

    @property
    def install_dir(self) -> Path:
        return self.install_path.parent
