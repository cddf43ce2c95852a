"""HTTP client for the object store write API."""

import uuid
from typing import AsyncIterable, Callable, Dict, Optional, Union
from urllib.parse import quote

import httpx

from common.config import Config
from common.constants import (
    COPY_SOURCE_HEADER,
    DIRECTORY_CONTENT_TYPE,
    THUMBNAIL_PREFIX,
    WRITE_API_ROOT,
    WRITE_ITEMS_PATH,
)
from common.exceptions import TransportError, ValidationError
from common.logging_config import get_logger
from common.types import ThumbnailRecord

logger = get_logger(__name__)

RequestContent = Union[bytes, AsyncIterable[bytes]]


def _log_redirect(url: str) -> None:
    logger.warning(f"Write API session expired, sign in again at {url}")


class WriteAPIClient:
    """Request builder for /api/write/items/<key> and the session recovery probe."""

    def __init__(
        self,
        config: Config,
        on_redirect: Optional[Callable[[str], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize write API client.

        Args:
            config: Configuration instance
            on_redirect: Host callback receiving the sign-in URL when the recovery
                probe is redirected. Defaults to logging a warning.
            transport: HTTP transport for the session; httpx default when omitted
        """
        self.config = config
        self.session = httpx.AsyncClient(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            transport=transport,
        )
        self.on_redirect = on_redirect or _log_redirect
        logger.info(f"Initialized WriteAPIClient [base_url={config.get_base_url()}]")

    @staticmethod
    def item_path(key: str) -> str:
        return f"{WRITE_ITEMS_PATH}/{quote(key, safe='/$')}"

    @staticmethod
    def thumbnail_key(digest: str) -> str:
        return f"{THUMBNAIL_PREFIX}/{digest}.png"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send one request, mapping transport exceptions and non-2xx statuses to TransportError.

        No retry is attempted here; callers decide what a failure means.
        """
        request_id = str(uuid.uuid4())
        headers = dict(kwargs.pop('headers', None) or {})
        headers['X-Request-ID'] = request_id

        logger.debug(f"Making request: {method} {path} [request_id={request_id}]")
        try:
            response = await self.session.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.debug(f"Request failed: {method} {path} error={type(e).__name__} [request_id={request_id}]")
            raise TransportError(method, path, detail=str(e) or type(e).__name__) from e

        logger.debug(
            f"Response received: {method} {path} status={response.status_code} [request_id={request_id}]"
        )
        if not response.is_success:
            raise TransportError(method, path, status_code=response.status_code, detail=response.text[:200])
        return response

    async def put_object(
        self,
        key: str,
        content: RequestContent,
        headers: Optional[Dict[str, str]] = None,
        content_length: Optional[int] = None,
    ) -> httpx.Response:
        """
        Store a whole object with a single PUT.

        Args:
            key: Remote object key
            content: Body bytes or an async byte stream
            headers: Extra request headers (content-type, fd-thumbnail, ...)
            content_length: Body length, required when content is a stream
        """
        request_headers = dict(headers or {})
        if content_length is not None:
            request_headers['Content-Length'] = str(content_length)
        return await self._request('PUT', self.item_path(key), content=content, headers=request_headers)

    async def initiate_multipart(self, key: str, headers: Optional[Dict[str, str]] = None) -> str:
        """
        Start a multipart upload for key.

        Returns:
            The uploadId assigned by the store
        """
        path = f"{self.item_path(key)}?uploads"
        response = await self._request('POST', path, headers=headers)
        try:
            upload_id = response.json()['uploadId']
        except (ValueError, KeyError, TypeError) as e:
            raise TransportError('POST', path, status_code=response.status_code,
                                 detail="response did not contain an uploadId") from e
        logger.info(f"Initiated multipart upload for {key} [upload_id={upload_id}]")
        return upload_id

    async def upload_part(
        self,
        key: str,
        upload_id: str,
        part_number: int,
        content: RequestContent,
        content_length: int,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Upload one part of a multipart upload.

        Returns:
            The etag response header recorded for this part
        """
        path = self.item_path(key)
        request_headers = dict(headers or {})
        request_headers['Content-Length'] = str(content_length)
        response = await self._request(
            'PUT',
            path,
            params={'partNumber': str(part_number), 'uploadId': upload_id},
            content=content,
            headers=request_headers,
        )
        etag = response.headers.get('etag')
        if not etag:
            raise TransportError('PUT', path, status_code=response.status_code,
                                 detail=f"part {part_number} response has no etag")
        return etag

    async def complete_multipart(self, key: str, upload_id: str, payload: dict) -> httpx.Response:
        """POST the {partNumber, etag} list that finalizes a multipart upload."""
        return await self._request(
            'POST',
            self.item_path(key),
            params={'uploadId': upload_id},
            json=payload,
        )

    async def put_thumbnail(self, record: ThumbnailRecord) -> str:
        """
        Store a rendered thumbnail under its digest-keyed path.

        Returns:
            The thumbnail object key
        """
        key = self.thumbnail_key(record.digest)
        await self.put_object(key, record.data, headers={'Content-Type': 'image/png'})
        return key

    async def copy_object(self, source: str, target: str) -> None:
        """Ask the server to copy source to target; the source body is never downloaded."""
        encoded_source = quote(source, safe="!'()*")
        await self._request('PUT', self.item_path(target), headers={COPY_SOURCE_HEADER: encoded_source})
        logger.info(f"Copied {source} to {target}")

    async def create_folder(self, cwd: str, name: str) -> str:
        """
        Mark cwd + name as a directory.

        Raises:
            ValidationError: If name is empty or contains '/', before any request is sent
        """
        if not name:
            raise ValidationError("Folder name is required")
        if '/' in name:
            raise ValidationError(f"Invalid folder name: {name!r}")
        key = f"{cwd}{name}"
        await self._request('PUT', self.item_path(key), headers={'Content-Type': DIRECTORY_CONTENT_TYPE})
        logger.info(f"Created folder {key}")
        return key

    async def recover_session(self) -> Optional[str]:
        """
        Probe the write API root after a failure.

        If the probe was redirected (expired session), hands the final URL to
        on_redirect. Probe failures are logged and swallowed.

        Returns:
            The redirect target, or None
        """
        try:
            response = await self.session.get(WRITE_API_ROOT, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.debug(f"Recovery probe failed: {type(e).__name__}")
            return None

        if not response.history:
            return None

        target = str(response.url)
        self.on_redirect(target)
        return target

    async def close(self) -> None:
        await self.session.aclose()
