"""Application-scoped transfer state owned by the CLI session."""

from dataclasses import dataclass
from typing import Callable, Optional

from cli.utils import ProgressPrinter
from common.config import Config
from transfer.thumbnails import MediaTypeRenderer
from transfer.transfer_queue import TransferQueue
from transfer.write_api_client import WriteAPIClient


@dataclass
class TransferContext:
    """Config, write API client and upload queue for one CLI session."""

    config: Config
    client: WriteAPIClient
    queue: TransferQueue

    @classmethod
    def create(
        cls,
        config: Config,
        on_redirect: Optional[Callable[[str], None]] = None,
    ) -> 'TransferContext':
        client = WriteAPIClient(config, on_redirect=on_redirect)
        queue = TransferQueue(client, renderer=MediaTypeRenderer(), on_progress=ProgressPrinter())
        return cls(config=config, client=client, queue=queue)

    async def close(self) -> None:
        """Wait for queued uploads, then release the HTTP connection pool."""
        self.queue.start()
        await self.queue.join()
        await self.client.close()
