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
# THE PIPELINE - RELEASE ORCHESTRATOR
# -----------------------------------------------------------------------------
# Phases run strictly in order, each consuming the previous phase's output:
#
#   fetch_all -> publish_layers -> create_release -> upload_assets
#
# The release body lists every layer version ARN, so the release is only
# created once all layers are published.
#
# Nothing is rolled back. After a failure the operator inspects (and deletes)
# any draft release or layer versions left behind.
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field

import requests
from rich.console import Console

from skylight_release.core.artifact import Artifact
from skylight_release.core.fetcher import fetch_artifact
from skylight_release.domain.models import Release, ReleaseAsset, ReleaseSettings
from skylight_release.infra.github_client import GitHubReleaseClient
from skylight_release.infra.lambda_client import LambdaLayerClient, build_layer_clients

console = Console()


@dataclass
class PipelineResult:
    """Everything a completed run produced."""

    artifacts: list[Artifact]
    release: Release
    assets: list[ReleaseAsset] = field(default_factory=list)

    @property
    def layer_version_arns(self) -> list[str]:
        return [arn for artifact in self.artifacts for arn in artifact.layer_version_arns]


def release_name(version: str) -> str:
    return f"Skylight for OTLP {version}"


def compose_release_body(artifacts: list[Artifact]) -> str:
    """Newline-joined layer version ARNs, artifact-then-region order."""
    return "\n".join(arn for artifact in artifacts for arn in artifact.layer_version_arns)


class ReleasePipeline:
    """
    Fetch, verify, publish layers, and cut the GitHub release.

    Collaborators are injectable so the phases can run against mocks.
    """

    def __init__(
        self,
        settings: ReleaseSettings,
        github: GitHubReleaseClient | None = None,
        layer_clients: list[LambdaLayerClient] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self._session = session
        self._github = github
        self._layer_clients = layer_clients

    @property
    def github(self) -> GitHubReleaseClient:
        if self._github is None:
            self._github = GitHubReleaseClient(self.settings.github_token, self.settings.repo)
        return self._github

    @property
    def layer_clients(self) -> list[LambdaLayerClient]:
        if self._layer_clients is None:
            self._layer_clients = build_layer_clients(self.settings.regions)
        return self._layer_clients

    def fetch_all(self) -> list[Artifact]:
        """Download and verify every configured platform. First failure aborts."""
        config = self.settings.config
        console.print(
            f"[bold cyan][PIPELINE] Fetching {len(config.otlp_checksums)} artifacts[/bold cyan]"
        )

        return [
            fetch_artifact(
                platform=platform,
                checksum=checksum,
                version=config.version,
                base_url=self.settings.base_url,
                artifacts_dir=self.settings.artifacts_dir,
                session=self._session,
            )
            for platform, checksum in config.otlp_checksums.items()
        ]

    def publish_layers(self, artifacts: list[Artifact]) -> list[str]:
        """Publish a layer per eligible artifact per region."""
        eligible = [a for a in artifacts if a.layer_eligible]
        console.print(
            f"[bold cyan][PIPELINE] Publishing layers for {len(eligible)} of "
            f"{len(artifacts)} artifacts[/bold cyan]"
        )

        arns = []
        for artifact in eligible:
            arns.extend(
                artifact.publish_layers(
                    self.layer_clients, self.settings.version, self.settings.extensions_dir
                )
            )
        return arns

    def create_release(self, artifacts: list[Artifact]) -> Release:
        version = self.settings.version
        console.print("[bold cyan][PIPELINE] creating release...[/bold cyan]")
        return self.github.create_release(
            tag=version,
            name=release_name(version),
            target=self.settings.target_branch,
            body=compose_release_body(artifacts),
            draft=True,
            prerelease=True,
        )

    def upload_assets(self, release: Release, artifacts: list[Artifact]) -> list[ReleaseAsset]:
        console.print(f"[bold cyan][PIPELINE] Uploading {len(artifacts)} assets[/bold cyan]")
        return [artifact.upload(self.github, release) for artifact in artifacts]

    def run(self) -> PipelineResult:
        artifacts = self.fetch_all()
        self.publish_layers(artifacts)
        release = self.create_release(artifacts)
        assets = self.upload_assets(release, artifacts)
        return PipelineResult(artifacts=artifacts, release=release, assets=assets)
