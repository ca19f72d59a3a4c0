# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Pydantic models for the release definition, run settings and GitHub objects.
# -----------------------------------------------------------------------------

from .models import Release, ReleaseAsset, ReleaseConfig, ReleaseSettings

__all__ = ["Release", "ReleaseAsset", "ReleaseConfig", "ReleaseSettings"]
