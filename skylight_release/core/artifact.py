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
# THE ARTIFACT - ONE VERIFIED PLATFORM BUILD
# -----------------------------------------------------------------------------
# An Artifact only exists once its download matched the configured checksum
# (see core.fetcher.fetch_artifact). It can:
# - repackage itself as a Lambda extension layer and publish it per region
# - upload itself as a GitHub release asset
#
# Only platforms listed in LAYER_ARCHITECTURES get a layer; the rest are
# release assets only.
# -----------------------------------------------------------------------------

import re
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from skylight_release.core.packaging import LayerPackagingError, build_extension_zip
from skylight_release.domain.models import Release, ReleaseAsset
from skylight_release.infra.github_client import GitHubReleaseClient
from skylight_release.infra.lambda_client import LambdaLayerClient

console = Console()

ASSET_CONTENT_TYPE = "application/gzip"

# platform identifier -> Lambda architecture
LAYER_ARCHITECTURES = {
    "x86_64-linux": "x86_64",
    "aarch64-linux": "arm64",
}


def layer_architecture(platform: str) -> str | None:
    return LAYER_ARCHITECTURES.get(platform)


def is_layer_eligible(platform: str) -> bool:
    """True if `platform` is published as a Lambda layer."""
    return platform in LAYER_ARCHITECTURES


def normalize_identifier(value: str) -> str:
    """Make `value` usable as a layer name or statement id ([A-Za-z0-9_-])."""
    return re.sub(r"[^A-Za-z0-9_-]", "_", value)


def layer_name(version: str, arch: str) -> str:
    return normalize_identifier(f"skylight-otlp-{version}-{arch}")


def statement_id(version: str) -> str:
    # Same id for every run of a version: re-publishing a version collides.
    return normalize_identifier(f"skylight-otlp-{version}")


@dataclass
class Artifact:
    """A downloaded, checksum-verified platform archive."""

    platform: str
    checksum: str
    path: Path
    layer_version_arns: list[str] = field(default_factory=list)

    @property
    def architecture(self) -> str | None:
        return layer_architecture(self.platform)

    @property
    def layer_eligible(self) -> bool:
        return is_layer_eligible(self.platform)

    def build_layer_zip(self, extensions_dir: str | Path) -> Path:
        """
        Raises:
            LayerPackagingError: If the platform has no Lambda architecture
        """
        if not self.layer_eligible:
            raise LayerPackagingError(
                f"No Lambda layer architecture for platform={self.platform}"
            )
        return build_extension_zip(self.path, extensions_dir, self.architecture)

    def publish_layers(
        self,
        layer_clients: list[LambdaLayerClient],
        version: str,
        extensions_dir: str | Path,
    ) -> list[str]:
        """
        Publish this artifact as a public Lambda layer in every region.

        Args:
            layer_clients: One client per target region, in publish order
            version: Release version (layer name, description, statement id)
            extensions_dir: Working directory for packaging

        Returns:
            Layer version ARNs published by this call (empty if ineligible)
        """
        if not self.layer_eligible:
            console.print(f"[yellow][LAYER] No layer for platform={self.platform}[/yellow]")
            return []

        arch = self.architecture
        zip_bytes = self.build_layer_zip(extensions_dir).read_bytes()
        name = layer_name(version, arch)
        sid = statement_id(version)

        published_arns = []
        for client in layer_clients:
            published = client.publish_layer_version(
                layer_name=name,
                zip_bytes=zip_bytes,
                arch=arch,
                description=f"Skylight for OTLP {version} ({arch})",
            )
            client.grant_public_access(name, published.version, sid)
            self.layer_version_arns.append(published.layer_version_arn)
            published_arns.append(published.layer_version_arn)

        return published_arns

    def upload(self, github: GitHubReleaseClient, release: Release) -> ReleaseAsset:
        """Attach the archive to `release`, labelled with the platform."""
        return github.upload_asset(
            release, self.path, content_type=ASSET_CONTENT_TYPE, label=self.platform
        )
