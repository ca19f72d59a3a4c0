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
# GITHUB RELEASE CLIENT
# -----------------------------------------------------------------------------
# Responsibility: Create releases and upload release assets via the REST API.
#
# Security:
# - Token is only ever sent in the Authorization header
# - Token is NEVER printed
# -----------------------------------------------------------------------------

import re
from pathlib import Path

import requests
from rich.console import Console

from skylight_release.domain.models import Release, ReleaseAsset
from skylight_release.errors import ReleaseToolError

console = Console()

# GitHub API configuration
GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
REQUEST_TIMEOUT_SECONDS = 30
UPLOAD_TIMEOUT_SECONDS = 300


class ReleaseCreationError(ReleaseToolError):
    """Raised when GitHub release creation fails."""

    pass


class AssetUploadError(ReleaseToolError):
    """Raised when a release asset upload fails."""

    pass


def _error_detail(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    message = data.get("message", "")
    errors = data.get("errors")
    return f"{message} - {errors}" if errors else message


class GitHubReleaseClient:
    """Release operations for a single repository."""

    def __init__(self, token: str, repo: str, session: requests.Session | None = None) -> None:
        """
        Args:
            token: GitHub token with contents:write on repo
            repo: "owner/name"
            session: Optional requests session
        """
        self._token = token
        self.repo = repo
        self._session = session or requests.Session()

    def _headers(self, **extra: str) -> dict:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        headers.update(extra)
        return headers

    def create_release(
        self,
        tag: str,
        name: str,
        target: str,
        body: str,
        draft: bool = True,
        prerelease: bool = True,
    ) -> Release:
        """
        Create a release tagged `tag`.

        Returns:
            The created Release

        Raises:
            ReleaseCreationError: If the API rejects the request
        """
        console.print(f"[cyan][GITHUB API] Creating release {tag} on {self.repo}[/cyan]")

        payload = {
            "tag_name": tag,
            "name": name,
            "target_commitish": target,
            "body": body,
            "draft": draft,
            "prerelease": prerelease,
        }

        try:
            response = self._session.post(
                f"{GITHUB_API_URL}/repos/{self.repo}/releases",
                headers=self._headers(),
                json=payload,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise ReleaseCreationError(f"GitHub API request failed: {e}") from e

        if response.status_code == 201:
            release = Release.model_validate(response.json())
            console.print(
                f"[green][GITHUB API] Release id {release.id} tagged {tag} ({release.url})[/green]"
            )
            return release

        if response.status_code == 401:
            raise ReleaseCreationError("Invalid GitHub token")
        if response.status_code == 404:
            raise ReleaseCreationError(f"Repository not found: {self.repo}")

        raise ReleaseCreationError(
            f"GitHub API error {response.status_code}: {_error_detail(response)}"
        )

    def upload_asset(
        self,
        release: Release,
        path: str | Path,
        content_type: str,
        label: str | None = None,
    ) -> ReleaseAsset:
        """
        Upload a local file to `release`.

        Raises:
            AssetUploadError: If the file cannot be read or the upload fails
        """
        path = Path(path)
        upload_url = re.sub(r"\{.*\}$", "", release.upload_url)
        params = {"name": path.name}
        if label:
            params["label"] = label

        console.print(f"[cyan][GITHUB API] uploading {path}...[/cyan]")

        try:
            with open(path, "rb") as f:
                response = self._session.post(
                    upload_url,
                    headers=self._headers(**{"Content-Type": content_type}),
                    params=params,
                    data=f,
                    timeout=UPLOAD_TIMEOUT_SECONDS,
                )
        except requests.RequestException as e:
            raise AssetUploadError(f"Upload of {path.name} failed: {e}") from e
        except OSError as e:
            raise AssetUploadError(f"Cannot read {path}: {e}") from e

        if response.status_code != 201:
            raise AssetUploadError(
                f"Upload of {path.name} failed with {response.status_code}: "
                f"{_error_detail(response)}"
            )

        asset = ReleaseAsset.model_validate(response.json())
        console.print(f"[green][GITHUB API] {asset.url}[/green]")
        return asset
