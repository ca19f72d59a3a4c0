# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# DOMAIN MODELS - RELEASE INSTRUCTIONS
# -----------------------------------------------------------------------------
# ReleaseConfig mirrors skylight.json (version + per-platform checksums).
# ReleaseSettings is the full run configuration, built once at startup and
# handed to every pipeline phase.
# Release / ReleaseAsset are the parts of GitHub's responses we keep.
# -----------------------------------------------------------------------------

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_REPO = "tildeio/skylight-otlp"
DEFAULT_BASE_URL = "https://s3.amazonaws.com/skylight-agent-packages/skylight-native"
DEFAULT_TARGET_BRANCH = "main"
DEFAULT_LAYER_REGIONS = ("us-east-1", "us-west-2")


class ReleaseConfig(BaseModel):
    """
    The externally supplied release definition.

    Fields:
    - version: Release tag, also the path segment in the object store
    - otlp_checksums: platform identifier -> expected SHA-256 (hex)
    """

    version: str = Field(..., min_length=1, description="Release version (e.g. '4.2.0')")
    otlp_checksums: dict[str, str] = Field(
        ..., min_length=1, description="Expected SHA-256 per platform"
    )

    @field_validator("otlp_checksums")
    @classmethod
    def _check_digests(cls, value: dict[str, str]) -> dict[str, str]:
        normalized = {}
        for platform, checksum in value.items():
            checksum = checksum.strip().lower()
            if len(checksum) != 64 or any(c not in "0123456789abcdef" for c in checksum):
                raise ValueError(f"checksum for {platform} is not a SHA-256 hex digest")
            normalized[platform] = checksum
        return normalized

    class Config:
        str_strip_whitespace = True
        extra = "ignore"


class ReleaseSettings(BaseModel):
    """Everything a release run needs. Built once, passed explicitly."""

    config: ReleaseConfig
    github_token: str = Field(..., min_length=1, repr=False)
    repo: str = DEFAULT_REPO
    base_url: str = DEFAULT_BASE_URL
    target_branch: str = DEFAULT_TARGET_BRANCH
    regions: list[str] = Field(default_factory=lambda: list(DEFAULT_LAYER_REGIONS), min_length=1)
    artifacts_dir: Path = Path("artifacts")
    extensions_dir: Path = Path("extensions")

    @property
    def version(self) -> str:
        return self.config.version


class Release(BaseModel):
    """A release created on GitHub."""

    id: int
    url: str
    html_url: str = ""
    upload_url: str

    class Config:
        extra = "ignore"


class ReleaseAsset(BaseModel):
    """A file attached to a GitHub release."""

    id: int
    name: str
    label: str | None = None
    url: str
    browser_download_url: str = ""

    class Config:
        extra = "ignore"
