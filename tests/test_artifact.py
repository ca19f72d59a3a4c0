# =============================================================================
# SKYLIGHT RELEASE ARTIFACT TESTS
# =============================================================================
# Tests for layer eligibility, naming, layer publishing and asset upload.
# =============================================================================

import zipfile
from unittest.mock import MagicMock

import pytest

from conftest import BINARY_BYTES, make_tarball, sha256
from skylight_release.core.artifact import (
    ASSET_CONTENT_TYPE,
    Artifact,
    is_layer_eligible,
    layer_architecture,
    layer_name,
    normalize_identifier,
    statement_id,
)
from skylight_release.core.packaging import LAYER_ENTRY, LayerPackagingError


def _artifact(path, platform="x86_64-linux") -> Artifact:
    return Artifact(platform=platform, checksum=sha256(path.read_bytes()), path=path)


class TestEligibility:
    """Test the platform -> architecture table."""

    @pytest.mark.parametrize(
        "platform,arch", [("x86_64-linux", "x86_64"), ("aarch64-linux", "arm64")]
    )
    def test_linux_platforms_eligible(self, platform, arch):
        assert is_layer_eligible(platform)
        assert layer_architecture(platform) == arch

    @pytest.mark.parametrize("platform", ["x86_64-darwin", "aarch64-darwin", "x86_64-linux-musl"])
    def test_other_platforms_skipped(self, platform):
        assert not is_layer_eligible(platform)
        assert layer_architecture(platform) is None


class TestNaming:
    """Test layer name and statement id derivation."""

    def test_normalize_identifier(self):
        assert normalize_identifier("skylight-otlp-4.2.0-beta+1") == "skylight-otlp-4_2_0-beta_1"

    def test_layer_name(self):
        assert layer_name("4.2.0", "x86_64") == "skylight-otlp-4_2_0-x86_64"

    def test_statement_id_depends_only_on_version(self):
        assert statement_id("4.2.0") == "skylight-otlp-4_2_0"
        assert statement_id("4.2.0") == statement_id("4.2.0")


class TestPublishLayers:
    """Test Artifact.publish_layers."""

    def test_publishes_once_per_region(self, agent_tarball, tmp_path, mock_layer_client_factory):
        """One publish + one grant per region; ARNs accumulate in region order."""
        artifact = _artifact(agent_tarball)
        clients = [mock_layer_client_factory("us-east-1"), mock_layer_client_factory("us-west-2")]

        arns = artifact.publish_layers(clients, "4.2.0", tmp_path / "extensions")

        assert len(arns) == 2
        assert artifact.layer_version_arns == arns
        assert ":us-east-1:" in arns[0] and ":us-west-2:" in arns[1]
        for client in clients:
            client.publish_layer_version.assert_called_once()
            kwargs = client.publish_layer_version.call_args.kwargs
            assert kwargs["layer_name"] == "skylight-otlp-4_2_0-x86_64"
            assert kwargs["arch"] == "x86_64"
            assert "4.2.0" in kwargs["description"]
            client.grant_public_access.assert_called_once_with(
                "skylight-otlp-4_2_0-x86_64", 1, "skylight-otlp-4_2_0"
            )

    def test_published_zip_contents(self, agent_tarball, tmp_path, mock_layer_client_factory):
        """The bytes sent to Lambda are the extension zip."""
        artifact = _artifact(agent_tarball)
        client = mock_layer_client_factory("us-east-1")

        artifact.publish_layers([client], "4.2.0", tmp_path / "extensions")

        zip_bytes = client.publish_layer_version.call_args.kwargs["zip_bytes"]
        zip_path = tmp_path / "sent.zip"
        zip_path.write_bytes(zip_bytes)
        with zipfile.ZipFile(zip_path) as zf:
            assert zf.namelist() == [LAYER_ENTRY]
            assert zf.read(LAYER_ENTRY) == BINARY_BYTES

    def test_ineligible_platform_is_noop(self, tmp_path, mock_layer_client_factory):
        archive = make_tarball(tmp_path / "mac.tar.gz", {"skylight": BINARY_BYTES})
        artifact = _artifact(archive, platform="aarch64-darwin")
        client = mock_layer_client_factory("us-east-1")

        assert artifact.publish_layers([client], "4.2.0", tmp_path / "extensions") == []
        assert artifact.layer_version_arns == []
        client.publish_layer_version.assert_not_called()
        assert not (tmp_path / "extensions").exists()

    def test_build_layer_zip_rejects_ineligible_platform(self, tmp_path):
        """No extensions_None.zip is written for platforms without a layer."""
        archive = make_tarball(tmp_path / "mac.tar.gz", {"skylight": BINARY_BYTES})
        artifact = _artifact(archive, platform="aarch64-darwin")

        with pytest.raises(LayerPackagingError, match="aarch64-darwin"):
            artifact.build_layer_zip(tmp_path / "extensions")

        assert not (tmp_path / "extensions" / "extensions_None.zip").exists()
        assert not (tmp_path / "extensions").exists()

    def test_bad_archive_never_publishes(self, tmp_path, mock_layer_client_factory):
        archive = make_tarball(
            tmp_path / "bad.tar.gz", {"skylight": BINARY_BYTES, "extra": b"surprise"}
        )
        artifact = _artifact(archive)
        client = mock_layer_client_factory("us-east-1")

        with pytest.raises(LayerPackagingError):
            artifact.publish_layers([client], "4.2.0", tmp_path / "extensions")

        client.publish_layer_version.assert_not_called()
        client.grant_public_access.assert_not_called()
        assert artifact.layer_version_arns == []


class TestUpload:
    """Test Artifact.upload."""

    def test_upload_labels_with_platform(self, agent_tarball, release):
        artifact = _artifact(agent_tarball)
        github = MagicMock()

        artifact.upload(github, release)

        github.upload_asset.assert_called_once_with(
            release, agent_tarball, content_type=ASSET_CONTENT_TYPE, label="x86_64-linux"
        )
        assert ASSET_CONTENT_TYPE == "application/gzip"
