"""FIFO upload queue drained one file at a time on the running event loop."""

import asyncio
from collections import deque
from typing import Callable, Deque, List, Optional, Set

from common.constants import FINISHED_HISTORY_SIZE, THUMBNAIL_HEADER
from common.exceptions import RenderError, TransportError
from common.logging_config import get_logger
from common.types import (
    FileHandle,
    ProgressEvent,
    ThumbnailRecord,
    TransferRecord,
    TransferState,
    TransferTask,
)
from transfer.chunked_engine import ChunkedTransferEngine
from transfer.content_hasher import compute_digest
from transfer.thumbnails import ThumbnailRenderer, is_thumbnail_eligible
from transfer.write_api_client import WriteAPIClient

logger = get_logger(__name__)

TaskProgressCallback = Callable[[TransferTask, ProgressEvent], None]


class TransferQueue:
    """
    Pending uploads, processed strictly in enqueue order, one at a time.

    Producers may enqueue at any point, including while a drain pass runs.
    Each drain pass handles exactly one task and then schedules the next pass
    as a new task on the loop, so other coroutines run between files. A failed
    task is logged and dropped; the queue always moves on. Processed tasks are
    released and only their TransferRecord is kept, in a bounded history.
    """

    def __init__(
        self,
        client: WriteAPIClient,
        engine: Optional[ChunkedTransferEngine] = None,
        renderer: Optional[ThumbnailRenderer] = None,
        digest: Callable[[bytes], str] = compute_digest,
        on_progress: Optional[TaskProgressCallback] = None,
        history_size: int = FINISHED_HISTORY_SIZE,
    ):
        """
        Args:
            client: Write API client shared with the engine
            engine: Transfer engine; one bound to client is created if omitted
            renderer: Thumbnail renderer; no thumbnails are produced if omitted
            digest: Content hasher naming thumbnail objects
            on_progress: Called with (task, event) as the main upload progresses
            history_size: Number of finished transfers remembered in history
        """
        self.client = client
        self.engine = engine or ChunkedTransferEngine(client)
        self.renderer = renderer
        self.digest = digest
        self.on_progress = on_progress
        self.stored_thumbnails: Set[str] = set()
        self.history: Deque[TransferRecord] = deque(maxlen=history_size)
        self._tasks: Deque[TransferTask] = deque()
        self._draining = False
        self._next_pass: Optional[asyncio.Task] = None
        self._recoveries: Set[asyncio.Task] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    def __len__(self) -> int:
        return len(self._tasks)

    def pending(self) -> List[TransferTask]:
        return list(self._tasks)

    @property
    def is_draining(self) -> bool:
        return self._draining

    def enqueue(self, task: TransferTask) -> None:
        """Append task at the tail. Does not start draining."""
        task.state = TransferState.QUEUED
        self._tasks.append(task)
        self._idle.clear()
        logger.debug(f"Queued {task.key} ({len(self._tasks)} pending)")

    def enqueue_file(self, base_directory: str, file: FileHandle) -> TransferTask:
        task = TransferTask(base_directory=base_directory, file=file)
        self.enqueue(task)
        return task

    async def drain(self) -> None:
        """
        Process the head task, then schedule the next pass.

        Returns immediately if the queue is empty or a pass is already running.
        """
        if self._draining:
            return
        if not self._tasks:
            self._idle.set()
            return

        self._draining = True
        try:
            task = self._tasks.popleft()
            await self._process(task)
        finally:
            self._draining = False
            self._schedule_next_pass()

    def start(self) -> None:
        """Schedule a drain pass on the running loop unless one is already pending or running."""
        if self._draining or (self._next_pass is not None and not self._next_pass.done()):
            return
        self._next_pass = asyncio.get_running_loop().create_task(self.drain())

    async def join(self) -> None:
        """
        Wait until every enqueued task has been processed and every session recovery
        check it triggered has finished. Draining must have been started.
        """
        await self._idle.wait()
        while self._recoveries:
            await asyncio.gather(*self._recoveries)

    def _start_session_recovery(self) -> None:
        """Run recover_session as its own task so a slow server never holds up the next file."""
        recovery = asyncio.get_running_loop().create_task(self.client.recover_session())
        self._recoveries.add(recovery)
        recovery.add_done_callback(self._recoveries.discard)

    def _schedule_next_pass(self) -> None:
        if not self._tasks:
            self._idle.set()
            return
        self._next_pass = asyncio.get_running_loop().create_task(self.drain())

    async def _process(self, task: TransferTask) -> None:
        logger.info(f"Processing {task.key} ({task.file.size} bytes, {task.file.media_type})")

        if self.renderer is not None and is_thumbnail_eligible(task.file.media_type):
            task.state = TransferState.THUMBNAILING
            task.thumbnail_digest = await self._store_thumbnail(task.file)

        task.state = TransferState.UPLOADING
        headers = {}
        if task.thumbnail_digest:
            headers[THUMBNAIL_HEADER] = task.thumbnail_digest

        def report(event: ProgressEvent) -> None:
            if self.on_progress is not None:
                self.on_progress(task, event)

        try:
            await self.engine.upload(task.key, task.file, headers=headers, on_progress=report)
        except TransportError as e:
            task.state = TransferState.FAILED
            self._start_session_recovery()
            logger.error(f"Upload {task.file.name} failed: {e}")
        except Exception as e:
            task.state = TransferState.FAILED
            self._start_session_recovery()
            logger.error(f"Upload {task.file.name} failed: {e}", exc_info=True)
        else:
            task.state = TransferState.DONE
            logger.info(f"Upload {task.key} done")

        self.history.append(TransferRecord(key=task.key, state=task.state))

    async def _store_thumbnail(self, file: FileHandle) -> Optional[str]:
        """
        Render, digest and store a thumbnail for file.

        Returns:
            The thumbnail digest, or None if rendering or storing failed
        """
        try:
            data = await self.renderer.render(file)
            record = ThumbnailRecord(digest=self.digest(data), data=data)
        except RenderError as e:
            logger.warning(f"Generate thumbnail failed for {file.name}: {e}")
            return None
        except Exception as e:
            logger.warning(f"Generate thumbnail failed for {file.name}: {e}", exc_info=True)
            return None

        if record.digest in self.stored_thumbnails:
            logger.debug(f"Thumbnail {record.digest}.png already stored")
            return record.digest

        try:
            await self.client.put_thumbnail(record)
        except TransportError as e:
            self._start_session_recovery()
            logger.warning(f"Upload {record.digest}.png failed: {e}")
            return None

        self.stored_thumbnails.add(record.digest)
        return record.digest
