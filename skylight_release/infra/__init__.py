# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level API wrappers:
# - GitHubReleaseClient: GitHub releases + asset uploads (requests)
# - LambdaLayerClient: Lambda layer publishing per region (boto3)
# -----------------------------------------------------------------------------

from .github_client import AssetUploadError, GitHubReleaseClient, ReleaseCreationError
from .lambda_client import LambdaLayerClient, LayerPublishError, build_layer_clients

__all__ = [
    "AssetUploadError", "GitHubReleaseClient", "ReleaseCreationError",
    "LambdaLayerClient", "LayerPublishError", "build_layer_clients",
]
