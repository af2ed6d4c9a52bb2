"""
Error hierarchy for artifact uploads.

Configuration, policy and missing-artifact errors are global: they stop the
run before anything is sent. Transport and server errors belong to one
descriptor and the run carries on with the next one.
"""
from pathlib import Path
from typing import Iterable, Optional


class UploaderError(RuntimeError):
    """Base class for all artifact_uploader errors."""


class ConfigurationError(UploaderError):
    """Raised for unknown keys or otherwise malformed upload configuration."""

    def __init__(self, message: str, unknown_keys: Iterable[str] = ()):
        super().__init__(message)
        self.unknown_keys = tuple(unknown_keys)

    @classmethod
    def for_unknown_keys(cls, keys: Iterable[str], allowed: Iterable[str]) -> "ConfigurationError":
        offending = sorted(str(key) for key in keys)
        return cls(
            "The following property keys are not allowed in an upload descriptor: "
            f"{', '.join(offending)} (allowed: {', '.join(sorted(allowed))})",
            unknown_keys=offending,
        )


class PolicyViolationError(UploaderError):
    """Raised when a pre-release version would be uploaded without permission."""


class MissingArtifactError(UploaderError):
    """Raised when the file a descriptor points at does not exist."""

    def __init__(self, descriptor_id: str, path: Optional[Path]):
        self.descriptor_id = descriptor_id
        self.path = path
        where = str(path) if path is not None else "(no artifact attached to the project)"
        super().__init__(
            f"File {where} requested by upload descriptor {descriptor_id!r} does not exist. "
            "Make sure the goals that produce it ran before the upload."
        )


class UploadError(UploaderError):
    """Per-descriptor failure during upload."""


class TransportError(UploadError):
    """Connection, timeout or stream I/O failure."""


class ServerRejectedError(UploadError):
    """The remote endpoint answered but rejected the upload."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
