"""
artifact_uploader - upload build artifacts to a file-hosting endpoint.

Descriptors are resolved from sparse upload entries plus project metadata,
then each one is sent as an authenticated multipart/form-data POST.

Usage:
    from artifact_uploader import UploadOrchestrator, ProjectMetadata, UploadConfig

    project = ProjectMetadata(
        group_id="org.example.widgets",
        artifact_id="widgets",
        version="1.0",
        packaging="jar",
        artifacts={"": Path("target/widgets-1.0.jar")},
    )
    async with UploadOrchestrator(UploadConfig(), credentials) as orchestrator:
        results = await orchestrator.run([{"classifier": ""}], project)
"""
__version__ = "0.3.0"

from .errors import (
    ConfigurationError,
    MissingArtifactError,
    PolicyViolationError,
    ServerRejectedError,
    TransportError,
    UploaderError,
    UploadError,
)
from .models import (
    ProjectMetadata,
    RawUploadSpec,
    ResolvedUploadDescriptor,
    UploadConfig,
    UploadResult,
    UploadStatus,
)
from .orchestrator import UploadOrchestrator
from .services import (
    ClassifierLocator,
    DescriptorResolver,
    FileNameLocator,
    MultipartUploader,
    ServerCredentials,
    build_upload_url,
    default_labels,
    encode_auth_token,
)

__all__ = [
    # Main
    "UploadOrchestrator",
    # Models
    "ProjectMetadata",
    "RawUploadSpec",
    "ResolvedUploadDescriptor",
    "UploadConfig",
    "UploadResult",
    "UploadStatus",
    # Services
    "ClassifierLocator",
    "DescriptorResolver",
    "FileNameLocator",
    "MultipartUploader",
    "ServerCredentials",
    "build_upload_url",
    "default_labels",
    "encode_auth_token",
    # Errors
    "UploaderError",
    "ConfigurationError",
    "PolicyViolationError",
    "MissingArtifactError",
    "UploadError",
    "TransportError",
    "ServerRejectedError",
]
