"""
Pytest configuration and fixtures for skylight-release tests.
"""

import hashlib
import io
import json
import os
import sys
import tarfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from skylight_release.domain.models import Release, ReleaseConfig  # noqa: E402

# Set test environment variables
os.environ.setdefault("GITHUB_TOKEN", "test-github-token")

BINARY_BYTES = b"\x7fELF fake skylight agent binary"


def make_tarball(path: Path, members: dict[str, bytes]) -> Path:
    """Write a tar.gz at `path` containing `members` (name -> bytes)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return path


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@pytest.fixture
def agent_tarball(tmp_path):
    """A well-formed agent archive: exactly one file named 'skylight'."""
    return make_tarball(
        tmp_path / "artifacts" / "skylight_4.2.0_x86_64-linux.tar.gz",
        {"skylight": BINARY_BYTES},
    )


@pytest.fixture
def release_config():
    return ReleaseConfig(
        version="4.2.0",
        otlp_checksums={"x86_64-linux": "a" * 64},
    )


@pytest.fixture
def config_file(tmp_path):
    """Write a skylight.json and return its path."""

    def _write(data) -> Path:
        path = tmp_path / "skylight.json"
        path.write_text(json.dumps(data) if not isinstance(data, str) else data)
        return path

    return _write


@pytest.fixture
def release():
    return Release(
        id=42,
        url="https://api.github.com/repos/tildeio/skylight-otlp/releases/42",
        html_url="https://github.com/tildeio/skylight-otlp/releases/tag/4.2.0",
        upload_url=(
            "https://uploads.github.com/repos/tildeio/skylight-otlp/releases/42/assets"
            "{?name,label}"
        ),
    )


@pytest.fixture
def mock_layer_client_factory():
    """Build MagicMock LambdaLayerClients that return unique ARNs per region."""

    def _make(region: str) -> MagicMock:
        client = MagicMock()
        client.region = region
        counter = {"n": 0}

        def _publish(layer_name, zip_bytes, arch, description):
            counter["n"] += 1
            published = MagicMock()
            published.version = counter["n"]
            published.layer_version_arn = (
                f"arn:aws:lambda:{region}:123456789012:layer:{layer_name}:{counter['n']}"
            )
            return published

        client.publish_layer_version.side_effect = _publish
        return client

    return _make


def mock_download_response(body: bytes, status_code: int = 200, chunk: int = 7) -> MagicMock:
    """A streaming requests.Response stand-in usable as a context manager."""
    response = MagicMock()
    response.status_code = status_code
    response.iter_content.return_value = [body[i : i + chunk] for i in range(0, len(body), chunk)]
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response
