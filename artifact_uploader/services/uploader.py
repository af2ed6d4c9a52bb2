"""
Multipart Uploader - Single Responsibility: send one descriptor to the endpoint.

One POST per descriptor, authenticated with HTTP Basic, body streamed from
disk. No retries: a failed attempt surfaces to the caller, which decides
whether to carry on with the remaining descriptors.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

from .. import __version__
from ..errors import ConfigurationError, ServerRejectedError, TransportError
from ..models import ResolvedUploadDescriptor, UploadResult
from .auth import basic_auth_header
from .multipart import CONTENT_TYPE, DEFAULT_CHUNK_SIZE, MultipartBody

logger = logging.getLogger(__name__)

USER_AGENT = f"artifact-uploader/{__version__}"


def _describe_exception(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return message
    return f"{type(exc).__name__}: {repr(exc)}"


class MultipartUploader:
    """
    HTTP adapter for multipart artifact uploads.

    Implements IUploader protocol. Each upload owns its own client and file
    handle and releases both before returning.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._chunk_size = chunk_size
        self._user_agent = user_agent
        self._transport = transport

    async def upload(
        self,
        descriptor: ResolvedUploadDescriptor,
        endpoint: str,
        username: str,
        password: str,
    ) -> UploadResult:
        """
        Upload the descriptor's file.

        Args:
            descriptor: Resolved descriptor to send
            endpoint: Upload URL
            username: Basic auth user
            password: Basic auth password

        Returns:
            Successful UploadResult carrying the response body, or a
            skipped one for an empty artifact (nothing is sent)

        Raises:
            TransportError: file cannot be read, or the connection fails
            ServerRejectedError: the endpoint answers with an error status
            ConfigurationError: the endpoint URL is malformed
        """
        path = descriptor.file
        try:
            fileobj = open(path, "rb")
        except OSError as exc:
            raise TransportError(f"cannot open {path}: {_describe_exception(exc)}") from exc

        try:
            file_size = os.fstat(fileobj.fileno()).st_size
            if file_size == 0:
                logger.warning("Skipping %s: artifact is empty", descriptor.filename)
                return UploadResult.skipped(descriptor.id, descriptor.filename, "artifact is empty")

            body = MultipartBody(
                summary=descriptor.summary,
                labels=descriptor.labels,
                filename=descriptor.filename,
                fileobj=fileobj,
                file_size=file_size,
                chunk_size=self._chunk_size,
            )
            headers = {
                "Authorization": basic_auth_header(username, password),
                "Content-Type": CONTENT_TYPE,
                "Content-Length": str(body.content_length),
                "User-Agent": self._user_agent,
            }

            logger.info("Attempting to connect to %s (username is %s)", endpoint, username)
            if descriptor.labels:
                logger.debug("Setting %d label(s)", len(descriptor.labels))
            logger.debug("Sending file %s (%d bytes)", descriptor.filename, file_size)

            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                try:
                    response = await client.post(endpoint, content=body.stream(), headers=headers)
                except httpx.InvalidURL as exc:
                    raise ConfigurationError(f"invalid upload URL {endpoint!r}: {exc}") from exc
                except (httpx.RequestError, httpx.StreamError, OSError) as exc:
                    raise TransportError(
                        f"upload of {descriptor.filename} to {endpoint} failed: {_describe_exception(exc)}"
                    ) from exc
        finally:
            fileobj.close()

        response_body = response.content.decode("utf-8", errors="replace")
        logger.info("Upload finished (%d). Reading response.", response.status_code)
        logger.debug("HTTP response headers: %s", dict(response.headers))

        if response.status_code >= 400:
            raise ServerRejectedError(
                f"server rejected {descriptor.filename}: HTTP {response.status_code}",
                status_code=response.status_code,
                response_body=response_body,
            )

        return UploadResult.ok(
            descriptor_id=descriptor.id,
            filename=descriptor.filename,
            response_body=response_body,
            status_code=response.status_code,
        )
