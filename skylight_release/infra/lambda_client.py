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
# LAMBDA LAYER CLIENT
# -----------------------------------------------------------------------------
# Thin wrapper around one regional boto3 Lambda client.
# Credentials come from the standard AWS chain (env, profile, instance role)
# and are read once when the client is built.
# -----------------------------------------------------------------------------

from dataclasses import dataclass

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console

from skylight_release.errors import ReleaseToolError

console = Console()

LAYER_LICENSE = "https://www.skylight.io/terms"
LAYER_PERMISSION_ACTION = "lambda:GetLayerVersion"
PUBLIC_PRINCIPAL = "*"


class LayerPublishError(ReleaseToolError):
    """Raised when Lambda rejects a layer publish or permission grant."""

    pass


@dataclass
class PublishedLayer:
    """Result of publish_layer_version."""

    layer_arn: str
    layer_version_arn: str
    version: int


class LambdaLayerClient:
    """Publishes layer versions in a single region."""

    def __init__(self, region: str, client=None) -> None:
        self.region = region
        self._client = client or boto3.client("lambda", region_name=region)

    def publish_layer_version(
        self, layer_name: str, zip_bytes: bytes, arch: str, description: str
    ) -> PublishedLayer:
        """
        Publish a new version of layer_name from zip_bytes.

        Raises:
            LayerPublishError: If the Lambda API call fails
        """
        console.print(f"[cyan][LAYER] Publishing {layer_name} in {self.region}[/cyan]")
        try:
            response = self._client.publish_layer_version(
                LayerName=layer_name,
                Description=description,
                Content={"ZipFile": zip_bytes},
                CompatibleArchitectures=[arch],
                LicenseInfo=LAYER_LICENSE,
            )
        except (ClientError, BotoCoreError) as e:
            raise LayerPublishError(
                f"publish_layer_version failed for {layer_name} in {self.region}: {e}"
            ) from e

        published = PublishedLayer(
            layer_arn=response["LayerArn"],
            layer_version_arn=response["LayerVersionArn"],
            version=response["Version"],
        )
        console.print(f"[green][LAYER] {published.layer_version_arn}[/green]")
        return published

    def grant_public_access(self, layer_name: str, version: int, statement_id: str) -> None:
        """
        Allow every AWS account to use this layer version.

        Raises:
            LayerPublishError: If the permission cannot be added (including
                a statement id that already exists on the layer version)
        """
        try:
            self._client.add_layer_version_permission(
                LayerName=layer_name,
                VersionNumber=version,
                StatementId=statement_id,
                Action=LAYER_PERMISSION_ACTION,
                Principal=PUBLIC_PRINCIPAL,
            )
        except (ClientError, BotoCoreError) as e:
            raise LayerPublishError(
                f"add_layer_version_permission failed for {layer_name}:{version} "
                f"in {self.region}: {e}"
            ) from e

        console.print(f"[cyan][LAYER] Public access granted on {layer_name}:{version}[/cyan]")


def build_layer_clients(regions: list[str]) -> list[LambdaLayerClient]:
    return [LambdaLayerClient(region) for region in regions]
