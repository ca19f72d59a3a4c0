# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The release logic:
# - Settings: skylight.json + environment -> ReleaseSettings
# - Fetcher: download + SHA-256 verification
# - Artifact: verified archive, layer publishing, asset upload
# - Packaging: tar.gz -> Lambda extension zip
# - ReleasePipeline: phase orchestrator
# -----------------------------------------------------------------------------

from .artifact import Artifact, is_layer_eligible
from .fetcher import ChecksumMismatchError, DownloadError, fetch_artifact
from .packaging import LayerPackagingError, build_extension_zip
from .pipeline import PipelineResult, ReleasePipeline, compose_release_body
from .settings import load_release_config, load_settings

__all__ = [
    "Artifact", "is_layer_eligible",
    "ChecksumMismatchError", "DownloadError", "fetch_artifact",
    "LayerPackagingError", "build_extension_zip",
    "PipelineResult", "ReleasePipeline", "compose_release_body",
    "load_release_config", "load_settings",
]
