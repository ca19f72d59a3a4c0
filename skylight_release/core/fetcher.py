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
# THE FETCHER - DOWNLOAD + VERIFY
# -----------------------------------------------------------------------------
# Responsibility: Stream one platform archive from the object store to disk,
# hashing as it goes, and only hand back an Artifact when the SHA-256 matches.
#
# No retries: one bad status or one bad digest aborts the run. A file that
# fails verification stays on disk for inspection.
# -----------------------------------------------------------------------------

import hashlib
from pathlib import Path

import requests
from rich.console import Console

from skylight_release.core.artifact import Artifact
from skylight_release.errors import ReleaseToolError

console = Console()

CHUNK_SIZE = 64 * 1024
DOWNLOAD_TIMEOUT_SECONDS = 60


class DownloadError(ReleaseToolError):
    """Raised when the object store does not answer with HTTP 200."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ChecksumMismatchError(ReleaseToolError):
    """Raised when a download's digest differs from the configured checksum."""

    def __init__(self, platform: str, expected: str, actual: str) -> None:
        super().__init__(
            f"non-matching checksum (expected = {expected}; actual = {actual}) for {platform}"
        )
        self.platform = platform
        self.expected = expected
        self.actual = actual


def artifact_url(base_url: str, version: str, platform: str) -> str:
    return f"{base_url.rstrip('/')}/{version}/skylight_otlp_{platform}.tar.gz"


def artifact_path(artifacts_dir: str | Path, version: str, platform: str) -> Path:
    return Path(artifacts_dir) / f"skylight_{version}_{platform}.tar.gz"


def fetch_artifact(
    platform: str,
    checksum: str,
    version: str,
    base_url: str,
    artifacts_dir: str | Path,
    session: requests.Session | None = None,
) -> Artifact:
    """
    Download and verify one platform archive.

    Args:
        platform: Platform identifier (e.g. "x86_64-linux")
        checksum: Expected SHA-256 hex digest
        version: Release version (object store path segment)
        base_url: Object store prefix
        artifacts_dir: Local directory for downloads
        session: Optional requests session (defaults to module-level requests)

    Returns:
        A verified Artifact

    Raises:
        DownloadError: On a non-200 response or transport failure
        ChecksumMismatchError: If the digest does not match
    """
    url = artifact_url(base_url, version, platform)
    path = artifact_path(artifacts_dir, version, platform)
    path.parent.mkdir(parents=True, exist_ok=True)

    console.print(f"[cyan][FETCH] fetching Skylight for OTLP; platform={platform}[/cyan]")

    http = session or requests
    digest = hashlib.sha256()

    try:
        with http.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS) as response:
            if response.status_code != 200:
                raise DownloadError(
                    f"Download of {url} failed with HTTP {response.status_code}",
                    status_code=response.status_code,
                )

            with open(path, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    digest.update(chunk)
                    f.write(chunk)
    except requests.RequestException as e:
        raise DownloadError(f"Download of {url} failed: {e}") from e

    fetched = digest.hexdigest()
    if fetched != checksum.lower():
        console.print(f"[red][FETCH] Checksum mismatch for {platform}[/red]")
        raise ChecksumMismatchError(platform, checksum, fetched)

    console.print(f"[green][FETCH] Verified {path.name} ({fetched[:12]}...)[/green]")
    return Artifact(platform=platform, checksum=fetched, path=path)
