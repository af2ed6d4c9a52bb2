"""
Protocols (Interfaces) for Dependency Inversion.

Following Interface Segregation Principle - small, focused interfaces.
"""
from pathlib import Path
from typing import FrozenSet, List, Protocol, Tuple, runtime_checkable

from .models import ProjectMetadata, RawUploadSpec, ResolvedUploadDescriptor, UploadResult


@runtime_checkable
class IArtifactLocator(Protocol):
    """Strategy that maps one configuration entry onto project artifact files."""

    allowed_keys: FrozenSet[str]

    def locate(self, spec: RawUploadSpec, project: ProjectMetadata) -> List[Tuple[str, Path]]:
        """Return (classifier, file) pairs targeted by the entry, in order."""
        ...


@runtime_checkable
class IUploader(Protocol):
    """Interface for sending one resolved descriptor to the endpoint."""

    async def upload(
        self,
        descriptor: ResolvedUploadDescriptor,
        endpoint: str,
        username: str,
        password: str,
    ) -> UploadResult:
        """Upload the descriptor's file and return the server response."""
        ...
