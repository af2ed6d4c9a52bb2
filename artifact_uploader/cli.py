"""Command line interface for artifact_uploader package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .cli_progress import UploadResultDisplay, render_configuration_summary
from .errors import UploaderError
from .models import UploadConfig
from .orchestrator import UploadOrchestrator
from .services.settings import ServerCredentials, UploadManifest, load_credentials, load_manifest


DEFAULT_MANIFEST = "artifact-upload.json"


# Libraries that log every request at INFO; kept at WARNING unless --debug
NOISY_LOGGERS = ("httpx", "httpcore")


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _resolve_log_level(debug: bool, silent: bool, log_level: Optional[str]) -> Optional[int]:
    """Effective level, or None when the run should stay silent."""
    if silent:
        return None
    if debug:
        return logging.DEBUG
    name = log_level or os.getenv("LOG_LEVEL")
    if not name:
        return None
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Route artifact_uploader logs through rich on stderr.

    Silent unless --debug, --log-level or LOG_LEVEL asks for output.
    Returns the effective mode for the configuration panel.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    logging.disable(logging.NOTSET)

    level = _resolve_log_level(debug, silent, log_level)
    if level is None:
        logging.disable(logging.CRITICAL)
        return "silent"

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=debug,
        markup=False,
        show_time=debug,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
    return logging.getLevelName(level)


def _parse_env_line(raw_line: str) -> Optional[Tuple[str, str]]:
    """``KEY=value`` / ``export KEY="value"`` -> (key, value); None for blanks and comments."""
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return key, value[1:-1]
    # Unquoted values may carry a trailing comment
    return key, value.split(" #", 1)[0].rstrip()


def _load_env_file(path: Path, override: bool = False) -> List[str]:
    """
    Export the variables of a .env file (credentials, LOG_LEVEL, settings path).

    Existing environment values win unless ``override`` is set.
    Returns the names that were applied.
    """
    if not path.is_file():
        raise CLIError(f"env file not found: {path}")
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    applied = []
    for parsed in filter(None, map(_parse_env_line, lines)):
        key, value = parsed
        if override or key not in os.environ:
            os.environ[key] = value
            applied.append(key)
    return applied


def _find_env_file(explicit: Optional[Path]) -> Optional[Path]:
    if explicit is not None:
        return Path(explicit).expanduser()
    default_env = Path(".env")
    return default_env if default_env.is_file() else None


def _apply_overrides(config: UploadConfig, args: argparse.Namespace) -> UploadConfig:
    """Command line flags win over manifest options."""
    overrides: Dict[str, Any] = {}
    if args.project_name:
        overrides["project_name"] = args.project_name
    if args.host_suffix:
        overrides["host_suffix"] = args.host_suffix
    if args.url:
        overrides["upload_url"] = args.url
    if args.server_id:
        overrides["server_id"] = args.server_id
    if args.strategy:
        overrides["strategy"] = args.strategy
    if args.dry_run:
        overrides["dry_run"] = True
    if args.allow_snapshots:
        overrides["allow_snapshots"] = True
    return replace(config, **overrides) if overrides else config


async def _run_upload(
    manifest: UploadManifest,
    config: UploadConfig,
    credentials: Optional[ServerCredentials],
) -> int:
    display = UploadResultDisplay(response_limit=config.response_log_limit)
    async with UploadOrchestrator(config, credentials) as orchestrator:
        results = await orchestrator.run(
            manifest.uploads,
            manifest.project,
            on_result=display.on_result,
        )
    display.on_finish(results)
    return 0 if all(result.success for result in results) else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artifact-up",
        description="Upload build artifacts to a file-hosting endpoint as multipart/form-data.",
    )
    parser.add_argument(
        "-m",
        "--manifest",
        type=Path,
        default=None,
        help=f"Upload manifest (JSON, default ./{DEFAULT_MANIFEST})",
    )
    parser.add_argument("-p", "--project-name", default=None, help="Hosting project name")
    parser.add_argument(
        "--host-suffix",
        default=None,
        help="Host suffix of the upload URL (https://<project>.<suffix>/files)",
    )
    parser.add_argument("--url", default=None, help="Explicit upload URL (overrides the derived one)")
    parser.add_argument("--server-id", default=None, help="Server id to look up credentials for")
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings file with server credentials (default from ARTIFACT_UPLOADER_SETTINGS)",
    )
    parser.add_argument(
        "--strategy",
        choices=("classifier", "filename"),
        default=None,
        help="How upload entries address artifacts",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Resolve and validate descriptors without uploading",
    )
    parser.add_argument(
        "--allow-snapshots",
        action="store_true",
        help="Allow uploading SNAPSHOT versions",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"artifact-up {__version__}",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = _find_env_file(args.env_file)
    if used_env_file is not None:
        try:
            _load_env_file(used_env_file)
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    manifest_path = Path(args.manifest or DEFAULT_MANIFEST).expanduser()
    try:
        manifest = load_manifest(manifest_path)
        config = _apply_overrides(manifest.config, args)
        credentials = None
        if not config.dry_run:
            credentials = load_credentials(config.server_id, args.settings)
    except UploaderError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    project = manifest.project
    render_configuration_summary(
        {
            "Manifest": str(manifest_path),
            "Project": f"{project.group_id}:{project.artifact_id}:{project.version}",
            "Packaging": project.packaging,
            "Uploads": len(manifest.uploads) or "(default)",
            "Strategy": config.strategy,
            "Server": config.server_id,
            "User": credentials.username if credentials else "-",
            "Dry Run": "yes" if config.dry_run else "no",
            "Allow Snapshots": "yes" if config.allow_snapshots else "no",
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(manifest, config, credentials))
    except UploaderError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
