"""
Upload Orchestrator - Coordinates the upload workflow using services.

Flow:
1. Check snapshot policy and resolve descriptors (DescriptorResolver)
2. Derive the upload URL
3. Upload each descriptor in order (MultipartUploader), or skip in dry run

Steps 1-2 fail globally before anything is sent. A failed upload in step 3
is recorded and the remaining descriptors are still processed.
"""
import logging
from typing import Callable, List, Optional, Sequence

from .errors import ConfigurationError, ServerRejectedError, UploadError
from .models import (
    ProjectMetadata,
    RawUploadSpec,
    ResolvedUploadDescriptor,
    UploadConfig,
    UploadResult,
)
from .protocols import IUploader
from .services.endpoint import build_upload_url
from .services.locators import get_locator
from .services.resolver import DescriptorResolver
from .services.settings import ServerCredentials
from .services.uploader import MultipartUploader

logger = logging.getLogger(__name__)

ResultCallback = Callable[[ResolvedUploadDescriptor, str, UploadResult], None]


class UploadOrchestrator:
    """
    Orchestrates artifact uploads using injected services.

    Usage:
        async with UploadOrchestrator(config, credentials) as orchestrator:
            results = await orchestrator.run(uploads, project)
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        credentials: Optional[ServerCredentials] = None,
        uploader: Optional[IUploader] = None,
        resolver: Optional[DescriptorResolver] = None,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            config: Upload configuration
            credentials: Server credentials, required unless dry_run
            uploader: Pre-built uploader (defaults to MultipartUploader)
            resolver: Pre-built resolver (defaults to the configured strategy)
        """
        self._config = config or UploadConfig()
        self._credentials = credentials
        self._uploader = uploader
        self._resolver = resolver

    async def __aenter__(self):
        """Initialize services."""
        if self._resolver is None:
            self._resolver = DescriptorResolver(
                locator=get_locator(self._config.strategy),
                allow_snapshots=self._config.allow_snapshots,
            )
        if self._uploader is None:
            self._uploader = MultipartUploader(
                timeout=self._config.timeout,
                chunk_size=self._config.chunk_size,
            )
        return self

    async def __aexit__(self, *args):
        self._uploader = None

    def endpoint_for(self, project: ProjectMetadata) -> str:
        return build_upload_url(
            self._config.project_name,
            self._config.host_suffix,
            override=self._config.upload_url,
            group_id=project.group_id,
        )

    async def run(
        self,
        raw_specs: Sequence[RawUploadSpec],
        project: ProjectMetadata,
        on_result: Optional[ResultCallback] = None,
    ) -> List[UploadResult]:
        """
        Resolve and upload every descriptor sequentially.

        Raises:
            ConfigurationError / PolicyViolationError / MissingArtifactError:
                before any upload is attempted
        """
        if self._resolver is None or self._uploader is None:
            raise RuntimeError("UploadOrchestrator not initialized. Use 'async with' context.")

        descriptors = self._resolver.resolve(raw_specs, project)
        endpoint = self.endpoint_for(project)

        if not self._config.dry_run and self._credentials is None:
            raise ConfigurationError(
                f"no credentials available for server {self._config.server_id!r}"
            )

        results: List[UploadResult] = []
        for descriptor in descriptors:
            logger.info(
                "Uploading %r: %s (summary=%r, labels=%s) to %s",
                descriptor.id,
                descriptor.filename,
                descriptor.summary,
                list(descriptor.labels),
                endpoint,
            )
            result = await self._upload_one(descriptor, endpoint)
            results.append(result)
            if on_result is not None:
                on_result(descriptor, endpoint, result)

        logger.info(
            "Processed %d/%d descriptors successfully",
            sum(1 for result in results if result.success),
            len(results),
        )
        return results

    async def _upload_one(self, descriptor: ResolvedUploadDescriptor, endpoint: str) -> UploadResult:
        if self._config.dry_run:
            logger.info("Dry run: skipping upload of %s", descriptor.filename)
            return UploadResult.dry_run(descriptor.id, descriptor.filename)

        try:
            result = await self._uploader.upload(
                descriptor,
                endpoint,
                self._credentials.username,
                self._credentials.password,
            )
        except ServerRejectedError as exc:
            logger.error("Problem when processing upload %r: %s", descriptor.id, exc)
            return UploadResult.fail(
                descriptor.id,
                descriptor.filename,
                str(exc),
                response_body=exc.response_body,
                status_code=exc.status_code,
            )
        except UploadError as exc:
            logger.error("Problem when processing upload %r: %s", descriptor.id, exc)
            return UploadResult.fail(descriptor.id, descriptor.filename, str(exc))

        logger.info("Response for %r: %s", descriptor.id, result.truncated_body(self._config.response_log_limit))
        return result
