"""Single-PUT and multipart uploads of a FileHandle to the write API."""

import asyncio
from typing import AsyncIterator, Callable, Dict, List, Optional

from common.constants import MAX_CONCURRENT_PARTS, PART_SIZE_LIMIT, STREAM_CHUNK_SIZE
from common.logging_config import get_logger
from common.types import FileHandle, PartDescriptor, ProgressEvent, UploadSession
from transfer.write_api_client import WriteAPIClient

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


def plan_parts(size: int, part_size: int = PART_SIZE_LIMIT) -> List[PartDescriptor]:
    """
    Split [0, size) into consecutive parts of part_size bytes, the last one shorter.

    Args:
        size: File size in bytes
        part_size: Bytes per part

    Returns:
        ceil(size / part_size) descriptors, part numbers 1..N
    """
    if part_size <= 0:
        raise ValueError("part_size must be positive")
    total_parts = -(-size // part_size)
    return [
        PartDescriptor(
            part_number=number,
            start=(number - 1) * part_size,
            end=min(number * part_size, size),
        )
        for number in range(1, total_parts + 1)
    ]


class ProgressTracker:
    """
    Aggregates bytes sent across parts into one ProgressEvent stream.

    Events are only emitted when the total grows, so the sequence is strictly
    increasing and hits the file size exactly once, after the last part has
    been accepted.
    """

    def __init__(self, total: int, callback: Optional[ProgressCallback]):
        self.total = total
        self.callback = callback
        self._sent: Dict[int, int] = {}
        self._reported = 0

    @property
    def loaded(self) -> int:
        return sum(self._sent.values())

    def update(self, part_number: int, sent_in_part: int) -> None:
        if sent_in_part <= self._sent.get(part_number, 0):
            return
        self._sent[part_number] = sent_in_part
        loaded = self.loaded
        if loaded > self._reported:
            self._reported = loaded
            if self.callback is not None:
                self.callback(ProgressEvent(loaded=loaded, total=self.total))


class ChunkedTransferEngine:
    """
    Uploads files with a single PUT below part_size and the multipart protocol at or above it.

    Parts are dispatched in ascending order through a semaphore that allows
    max_concurrent_parts requests in flight; etags are kept by part number since
    completion order is not dispatch order. There is no retry: one failed part
    fails the whole transfer. Parts already in flight run to completion, parts
    still waiting on the semaphore are skipped.
    """

    def __init__(
        self,
        client: WriteAPIClient,
        part_size: int = PART_SIZE_LIMIT,
        max_concurrent_parts: int = MAX_CONCURRENT_PARTS,
        stream_chunk_size: int = STREAM_CHUNK_SIZE,
    ):
        self.client = client
        self.part_size = part_size
        self.max_concurrent_parts = max_concurrent_parts
        self.stream_chunk_size = stream_chunk_size

    def uses_multipart(self, size: int) -> bool:
        return size >= self.part_size

    async def upload(
        self,
        key: str,
        file: FileHandle,
        headers: Optional[Dict[str, str]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Optional[UploadSession]:
        """
        Upload file to key.

        Returns:
            The completed UploadSession for multipart uploads, None for a single PUT

        Raises:
            TransportError: If any request of the transfer fails
        """
        request_headers = dict(headers or {})
        if file.media_type:
            request_headers['content-type'] = file.media_type

        if self.uses_multipart(file.size):
            return await self.upload_multipart(key, file, request_headers, on_progress)

        await self.upload_single(key, file, request_headers, on_progress)
        return None

    async def upload_single(
        self,
        key: str,
        file: FileHandle,
        headers: Dict[str, str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        tracker = ProgressTracker(file.size, on_progress)
        whole = PartDescriptor(part_number=1, start=0, end=file.size)
        logger.info(f"Uploading {key} with a single PUT ({file.size} bytes)")
        await self.client.put_object(
            key,
            self._stream_range(file, whole, tracker),
            headers=headers,
            content_length=file.size,
        )
        tracker.update(whole.part_number, whole.length)
        logger.info(f"Uploaded {key}")

    async def upload_multipart(
        self,
        key: str,
        file: FileHandle,
        headers: Dict[str, str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadSession:
        upload_id = await self.client.initiate_multipart(key, headers=headers)
        session = UploadSession(key=key, upload_id=upload_id)
        parts = plan_parts(file.size, self.part_size)
        tracker = ProgressTracker(file.size, on_progress)
        gate = asyncio.Semaphore(self.max_concurrent_parts)
        failed = asyncio.Event()

        logger.info(
            f"Uploading {key} in {len(parts)} parts of up to {self.part_size} bytes [upload_id={upload_id}]"
        )

        async def send_part(part: PartDescriptor) -> None:
            async with gate:
                # parts still waiting when another part fails are never sent
                if failed.is_set():
                    return
                logger.debug(f"Uploading part {part.part_number}/{len(parts)} of {key}")
                try:
                    etag = await self.client.upload_part(
                        key,
                        upload_id,
                        part.part_number,
                        self._stream_range(file, part, tracker),
                        content_length=part.length,
                        headers=headers,
                    )
                except Exception:
                    failed.set()
                    raise
                session.record_part(part.part_number, etag)
                tracker.update(part.part_number, part.length)

        tasks = [asyncio.create_task(send_part(part)) for part in parts]
        try:
            await asyncio.gather(*tasks)
        except Exception:
            failed.set()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning(f"Multipart upload of {key} failed [upload_id={upload_id}]")
            raise

        await self.client.complete_multipart(key, upload_id, session.completion_payload(len(parts)))
        logger.info(f"Completed multipart upload of {key} [upload_id={upload_id}]")
        return session

    async def _stream_range(
        self,
        file: FileHandle,
        part: PartDescriptor,
        tracker: ProgressTracker,
    ) -> AsyncIterator[bytes]:
        """
        Yield part's bytes in stream_chunk_size slices, reporting each slice once sent.

        The final slice is not reported here; the caller reports it when the
        server has accepted the body.
        """
        offset = part.start
        while offset < part.end:
            stop = min(offset + self.stream_chunk_size, part.end)
            chunk = file.read_range(offset, stop)
            offset = stop
            yield chunk
            if offset < part.end:
                tracker.update(part.part_number, offset - part.start)
