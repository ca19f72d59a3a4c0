# -----------------------------------------------------------------------------
# SKYLIGHT RELEASE - COMMAND LINE
# -----------------------------------------------------------------------------
# Responsibility: Entry point for a release run.
#
#   skylight-release --config skylight.json
#
# Reads .env, builds ReleaseSettings, runs the pipeline and prints a summary.
# Any release error halts the run with exit code 1. Partially published
# layers or a draft release may remain and must be cleaned up by hand.
# -----------------------------------------------------------------------------

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

from skylight_release.core.pipeline import PipelineResult, ReleasePipeline
from skylight_release.core.settings import DEFAULT_CONFIG_PATH, load_settings
from skylight_release.errors import ReleaseToolError

SYSTEM_NAME = "SKYLIGHT FOR OTLP RELEASE"
console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skylight-release",
        description="Fetch, verify and publish Skylight for OTLP release artifacts.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="JSON file with version and otlp_checksums (default: skylight.json)",
    )
    parser.add_argument(
        "--artifacts-dir",
        type=Path,
        default=Path("artifacts"),
        help="Where downloaded archives are written",
    )
    parser.add_argument(
        "--extensions-dir",
        type=Path,
        default=Path("extensions"),
        help="Working directory for Lambda layer packaging",
    )
    return parser


def print_summary(result: PipelineResult) -> None:
    release_url = result.release.html_url or result.release.url
    lines = [
        f"[bold green]Draft release created:[/bold green] {release_url}",
        f"Assets uploaded: {len(result.assets)}",
        f"Layer versions published: {len(result.layer_version_arns)}",
    ]
    lines.extend(f"  {arn}" for arn in result.layer_version_arns)
    console.print(Panel("\n".join(lines), title=SYSTEM_NAME, border_style="green"))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        settings = load_settings(
            args.config,
            artifacts_dir=args.artifacts_dir,
            extensions_dir=args.extensions_dir,
        )
        result = ReleasePipeline(settings).run()
    except ReleaseToolError as e:
        console.print(
            Panel(
                f"[bold red]{e}[/bold red]\n\n"
                "Check GitHub for a draft release and AWS for layer versions\n"
                "left behind by this run before retrying.",
                title="RELEASE HALTED",
                border_style="red",
            )
        )
        return 1

    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
