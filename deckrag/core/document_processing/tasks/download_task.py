"""
Document download task.

Fetches the raw bytes of an uploaded document from its file URL.

Dependencies: httpx, tenacity
System role: First stage of document ingestion pipeline
"""

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from deckrag.core.exceptions import DocumentFetchError

logger = logging.getLogger(__name__)


class DownloadTask:
    """Download document bytes over HTTP."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        max_attempts: int = 3,
        retry_wait_initial: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize download task.

        Args:
            timeout_seconds: Request timeout
            max_attempts: Attempts for connection errors and timeouts
            retry_wait_initial: Initial backoff between attempts in seconds
            client: Shared client (a short-lived one is opened per call if None)
        """
        self._timeout = timeout_seconds
        self._max_attempts = max_attempts
        self._retry_wait_initial = retry_wait_initial
        self._client = client

    async def download(self, file_url: str) -> bytes:
        """
        Download a document.

        Only transport failures are retried; an HTTP error status is final.

        Args:
            file_url: Absolute URL of the document

        Returns:
            bytes: Response body

        Raises:
            DocumentFetchError: When the URL is empty, unreachable, or answers with an error status
        """
        if not file_url:
            raise DocumentFetchError("File URL is required")

        try:
            if self._client is not None:
                response = await self._get(self._client, file_url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    response = await self._get(client, file_url)
        except httpx.TransportError as e:
            raise DocumentFetchError(f"Failed to fetch document: {e}", file_url) from e

        if response.is_error:
            raise DocumentFetchError(
                f"Failed to fetch document: HTTP {response.status_code}",
                file_url,
                details={"status_code": response.status_code},
            )

        logger.info(
            f"{__name__}:download - Downloaded document",
            extra={"file_url": file_url, "size_bytes": len(response.content)},
        )
        return response.content

    async def _get(self, client: httpx.AsyncClient, file_url: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=self._retry_wait_initial, max=10, jitter=self._retry_wait_initial),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:download - Retry {retry_state.attempt_number}/{self._max_attempts} "
                f"after transport error"
            ),
            reraise=True,
        ):
            with attempt:
                return await client.get(file_url)
        raise DocumentFetchError("Failed to fetch document", file_url)
