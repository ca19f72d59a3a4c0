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
# LAYER PACKAGING - TAR.GZ -> LAMBDA EXTENSION ZIP
# -----------------------------------------------------------------------------
# Lambda loads extensions from /opt/extensions, so the layer zip must hold
# the agent binary at extensions/skylight and nothing else.
#
# Working layout under extensions_dir (reused across runs, cleaned first):
#   extensions_<arch>.zip
#   <arch>/bin/skylight
# -----------------------------------------------------------------------------

import shutil
import stat
import tarfile
import zipfile
from pathlib import Path, PurePosixPath

from rich.console import Console

from skylight_release.errors import ReleaseToolError

console = Console()

BINARY_NAME = "skylight"
LAYER_ENTRY = "extensions/skylight"


class LayerPackagingError(ReleaseToolError):
    """Raised when an archive cannot be turned into an extension layer."""

    pass


def _archive_stem(archive_path: Path) -> str:
    name = archive_path.name
    for suffix in (".tar.gz", ".tgz"):
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return archive_path.stem


def _clean(*paths: Path) -> None:
    for path in paths:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()


def _extract(archive_path: Path, target: Path) -> None:
    """Extract every member of archive_path into target."""
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()
            for member in members:
                parts = PurePosixPath(member.name).parts
                if member.name.startswith("/") or ".." in parts:
                    raise LayerPackagingError(
                        f"Refusing to extract {member.name!r} from {archive_path.name}"
                    )
                if member.issym() or member.islnk():
                    raise LayerPackagingError(
                        f"Unexpected link {member.name!r} in {archive_path.name}"
                    )
            tar.extractall(target, members=members, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise LayerPackagingError(f"Cannot extract {archive_path}: {e}") from e


def _single_binary(bin_dir: Path) -> Path:
    entries = sorted(bin_dir.iterdir())
    if len(entries) != 1:
        names = ", ".join(e.name for e in entries) or "nothing"
        raise LayerPackagingError(
            f"Expected exactly one file named '{BINARY_NAME}' in the archive, found: {names}"
        )

    binary = entries[0]
    if binary.name != BINARY_NAME or not binary.is_file():
        raise LayerPackagingError(
            f"Expected a single file named '{BINARY_NAME}' in the archive, found '{binary.name}'"
        )
    return binary


def build_extension_zip(archive_path: str | Path, extensions_dir: str | Path, arch: str) -> Path:
    """
    Repackage a verified agent archive as a Lambda extension layer zip.

    Args:
        archive_path: Downloaded skylight_<version>_<platform>.tar.gz
        extensions_dir: Working directory for extraction and the zip
        arch: Lambda architecture (x86_64 / arm64)

    Returns:
        Path to extensions_<arch>.zip

    Raises:
        LayerPackagingError: If the archive does not contain exactly one
            file named "skylight". No zip is written in that case.
    """
    archive_path = Path(archive_path)
    extensions_dir = Path(extensions_dir)

    zip_path = extensions_dir / f"extensions_{arch}.zip"
    work_dir = extensions_dir / arch
    bin_dir = work_dir / "bin"

    _clean(zip_path, work_dir, extensions_dir / _archive_stem(archive_path))
    bin_dir.mkdir(parents=True)

    console.print(f"[cyan][LAYER] Extracting {archive_path.name} for {arch}[/cyan]")
    _extract(archive_path, bin_dir)
    binary = _single_binary(bin_dir)

    info = zipfile.ZipInfo(LAYER_ENTRY)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = (stat.S_IFREG | 0o755) << 16

    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr(info, binary.read_bytes())

    console.print(f"[green][LAYER] Built {zip_path}[/green]")
    return zip_path
