"""
Models for artifact_uploader.

Immutable dataclasses following Single Responsibility Principle.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple


# Caller-supplied configuration entry, e.g. {"classifier": "sources"}
RawUploadSpec = Mapping[str, str]

SNAPSHOT_MARKER = "SNAPSHOT"


@dataclass(frozen=True)
class ProjectMetadata:
    """Read-only snapshot of the build project that produced the artifacts."""
    group_id: str
    artifact_id: str
    version: str
    packaging: str
    name: str = ""
    description: Optional[str] = None
    # classifier -> file; "" is the primary artifact
    artifacts: Mapping[str, Path] = field(default_factory=dict)
    build_directory: Optional[Path] = None

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(SNAPSHOT_MARKER)

    @property
    def primary_artifact(self) -> Optional[Path]:
        return self.artifacts.get("")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "ProjectMetadata":
        """
        Build project metadata from a manifest ``project`` section.

        Relative paths are resolved against ``base_dir`` (usually the
        directory holding the manifest).

        Raises:
            KeyError: if a required field is missing
        """
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        def _path(value: str) -> Path:
            path = Path(value).expanduser()
            return path if path.is_absolute() else base / path

        artifacts = {
            str(classifier): _path(path)
            for classifier, path in (data.get("artifacts") or {}).items()
        }
        build_directory = data.get("build_directory")

        return cls(
            group_id=data["group_id"],
            artifact_id=data["artifact_id"],
            version=data["version"],
            packaging=data.get("packaging", "jar"),
            name=data.get("name") or data["artifact_id"],
            description=data.get("description"),
            artifacts=artifacts,
            build_directory=_path(build_directory) if build_directory else None,
        )


@dataclass(frozen=True)
class ResolvedUploadDescriptor:
    """Fully resolved upload: which file to send and with what metadata."""
    classifier: str
    file: Path
    summary: str
    labels: Tuple[str, ...] = ()

    @property
    def id(self) -> str:
        """Display id used in log messages (the classifier)."""
        return self.classifier

    @property
    def filename(self) -> str:
        return self.file.name

    def describe(self) -> str:
        return (
            f"id={self.id!r} file={self.file} "
            f"summary={self.summary!r} labels={list(self.labels)}"
        )


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"
    DRY_RUN = "dry_run"  # Resolved and validated, nothing sent
    SKIPPED = "skipped"  # Empty artifact, nothing sent


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of a single descriptor upload."""
    descriptor_id: str
    filename: str
    status: UploadStatus = UploadStatus.SUCCESS
    response_body: str = ""
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status in (UploadStatus.SUCCESS, UploadStatus.DRY_RUN, UploadStatus.SKIPPED)

    def truncated_body(self, limit: int = 500) -> str:
        body = self.response_body.strip()
        if limit <= 0 or len(body) <= limit:
            return body
        return body[:limit] + "..."

    @classmethod
    def ok(cls, descriptor_id: str, filename: str, response_body: str, status_code: Optional[int] = None):
        return cls(
            descriptor_id=descriptor_id,
            filename=filename,
            status=UploadStatus.SUCCESS,
            response_body=response_body,
            status_code=status_code,
        )

    @classmethod
    def fail(cls, descriptor_id: str, filename: str, error: str, response_body: str = "", status_code: Optional[int] = None):
        return cls(
            descriptor_id=descriptor_id,
            filename=filename,
            status=UploadStatus.FAILED,
            response_body=response_body,
            status_code=status_code,
            error=error,
        )

    @classmethod
    def dry_run(cls, descriptor_id: str, filename: str):
        return cls(
            descriptor_id=descriptor_id,
            filename=filename,
            status=UploadStatus.DRY_RUN,
        )

    @classmethod
    def skipped(cls, descriptor_id: str, filename: str, reason: str):
        return cls(
            descriptor_id=descriptor_id,
            filename=filename,
            status=UploadStatus.SKIPPED,
            error=reason,
        )


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for upload operations."""
    project_name: Optional[str] = None
    host_suffix: str = "googlecode.com"
    upload_url: Optional[str] = None  # Overrides the derived URL
    server_id: str = "code.google.com"
    dry_run: bool = False
    allow_snapshots: bool = False
    strategy: str = "classifier"  # classifier | filename
    timeout: float = 60.0
    chunk_size: int = 8192
    response_log_limit: int = 500
