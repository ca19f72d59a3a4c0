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
# SETTINGS - CONFIG FILE + ENVIRONMENT
# -----------------------------------------------------------------------------
# Responsibility: Read skylight.json and the environment exactly once and
# produce a ReleaseSettings object for the pipeline.
#
# Environment:
# - GITHUB_TOKEN (required)
# - SKYLIGHT_LAYER_REGIONS (optional): comma-separated publish regions,
#   replaces DEFAULT_LAYER_REGIONS
# - AWS_REGION is boto3's own setting; it does not change the publish list
# -----------------------------------------------------------------------------

import json
import os
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from skylight_release.domain.models import (
    DEFAULT_LAYER_REGIONS,
    ReleaseConfig,
    ReleaseSettings,
)
from skylight_release.errors import ConfigError

console = Console()

DEFAULT_CONFIG_PATH = Path("skylight.json")
LAYER_REGIONS_ENV = "SKYLIGHT_LAYER_REGIONS"


def load_release_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ReleaseConfig:
    """
    Load and validate the release definition.

    Args:
        path: JSON file with "version" and "otlp_checksums"

    Returns:
        The validated ReleaseConfig

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config {path} is not valid JSON: {e}") from e

    try:
        config = ReleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config {path} is invalid: {e}") from e

    console.print(
        f"[cyan][CONFIG] version={config.version} "
        f"platforms={', '.join(config.otlp_checksums)}[/cyan]"
    )
    return config


def layer_regions() -> list[str]:
    """
    Regions to publish layers to.

    SKYLIGHT_LAYER_REGIONS (comma-separated) replaces the defaults when set.
    AWS_REGION is left to boto3 and never narrows the publish list.
    """
    override = os.getenv(LAYER_REGIONS_ENV, "")
    regions = [r.strip() for r in override.split(",") if r.strip()]
    if regions:
        return list(dict.fromkeys(regions))
    return list(DEFAULT_LAYER_REGIONS)


def load_settings(
    config_path: str | Path = DEFAULT_CONFIG_PATH,
    artifacts_dir: str | Path = "artifacts",
    extensions_dir: str | Path = "extensions",
) -> ReleaseSettings:
    """
    Build the settings for one release run.

    Raises:
        ConfigError: If GITHUB_TOKEN is missing or the config is invalid
    """
    token = os.getenv("GITHUB_TOKEN")
    if not token:
        raise ConfigError("GITHUB_TOKEN not set - cannot create the GitHub release")

    config = load_release_config(config_path)
    regions = layer_regions()
    console.print(f"[cyan][CONFIG] Layer regions: {', '.join(regions)}[/cyan]")

    return ReleaseSettings(
        config=config,
        github_token=token,
        regions=regions,
        artifacts_dir=Path(artifacts_dir),
        extensions_dir=Path(extensions_dir),
    )
