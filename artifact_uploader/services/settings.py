"""
Settings - server credentials and upload manifests.

Credentials live in a JSON settings file keyed by server id::

    {"servers": [{"id": "code.google.com", "username": "...", "password": "..."}]}

The ``ARTIFACT_UPLOADER_USERNAME`` / ``ARTIFACT_UPLOADER_PASSWORD`` environment
variables take precedence over the file.

A manifest describes the project and what to upload::

    {
      "project": {"group_id": "...", "artifact_id": "...", "version": "...",
                  "packaging": "jar", "artifacts": {"": "target/app-1.0.jar"}},
      "uploads": [{"classifier": "sources"}],
      "options": {"project_name": "app", "dry_run": false}
    }
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError
from ..models import ProjectMetadata, RawUploadSpec, UploadConfig

logger = logging.getLogger(__name__)

USERNAME_ENV = "ARTIFACT_UPLOADER_USERNAME"
PASSWORD_ENV = "ARTIFACT_UPLOADER_PASSWORD"
SETTINGS_ENV = "ARTIFACT_UPLOADER_SETTINGS"


@dataclass(frozen=True)
class ServerCredentials:
    server_id: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UploadManifest:
    project: ProjectMetadata
    uploads: List[RawUploadSpec]
    config: UploadConfig


def _read_json(path: Path, what: str) -> Any:
    if not path.exists():
        raise ConfigurationError(f"{what} not found: {path}")
    if not path.is_file():
        raise ConfigurationError(f"{what} is not a file: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"could not read {what} {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"invalid JSON in {what} {path}: {exc}") from exc


def _servers_by_id(data: Any) -> Dict[str, Dict[str, Any]]:
    servers = data.get("servers", []) if isinstance(data, dict) else []
    if isinstance(servers, dict):
        return {str(key): value for key, value in servers.items() if isinstance(value, dict)}
    return {
        str(entry["id"]): entry
        for entry in servers
        if isinstance(entry, dict) and "id" in entry
    }


def load_credentials(server_id: str, settings_path: Optional[Path] = None) -> ServerCredentials:
    """
    Look up credentials for ``server_id``.

    Raises:
        ConfigurationError: if no credentials are available
    """
    env_username = os.getenv(USERNAME_ENV)
    env_password = os.getenv(PASSWORD_ENV)
    if env_username is not None and env_password is not None:
        logger.debug("Using credentials from environment for server %s", server_id)
        return ServerCredentials(server_id, env_username, env_password)

    if settings_path is None:
        env_settings = os.getenv(SETTINGS_ENV)
        settings_path = Path(env_settings) if env_settings else None
    if settings_path is None:
        raise ConfigurationError(
            f"no credentials for server {server_id!r}: set {USERNAME_ENV}/{PASSWORD_ENV} "
            "or provide a settings file"
        )

    server = _servers_by_id(_read_json(Path(settings_path), "settings file")).get(server_id)
    if server is None:
        raise ConfigurationError(f"server {server_id!r} not found in {settings_path}")

    username = server.get("username")
    if username is None:
        raise ConfigurationError(f"server {server_id!r} in {settings_path} has no username")
    return ServerCredentials(server_id, str(username), str(server.get("password") or ""))


def _config_from_options(options: Dict[str, Any]) -> UploadConfig:
    known = {f.name for f in fields(UploadConfig)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ConfigurationError(f"unknown manifest options: {', '.join(unknown)}")
    return replace(UploadConfig(), **options)


def load_manifest(path: Path) -> UploadManifest:
    """
    Load project metadata, upload entries and options from a JSON manifest.

    Raises:
        ConfigurationError: if the manifest is missing or malformed
    """
    path = Path(path)
    data = _read_json(path, "manifest")
    if not isinstance(data, dict) or not isinstance(data.get("project"), dict):
        raise ConfigurationError(f"manifest {path} needs a 'project' object")

    try:
        project = ProjectMetadata.from_dict(data["project"], base_dir=path.parent)
    except KeyError as exc:
        raise ConfigurationError(f"manifest {path} project is missing {exc.args[0]!r}") from exc

    uploads = data.get("uploads") or []
    if not isinstance(uploads, list) or not all(isinstance(entry, dict) for entry in uploads):
        raise ConfigurationError(f"manifest {path} 'uploads' must be a list of objects")

    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise ConfigurationError(f"manifest {path} 'options' must be an object")

    return UploadManifest(project=project, uploads=uploads, config=_config_from_options(options))
