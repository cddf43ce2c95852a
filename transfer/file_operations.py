"""Copy and folder operations with failures absorbed at the top level."""

from common.exceptions import TransportError
from common.logging_config import get_logger
from transfer.write_api_client import WriteAPIClient

logger = get_logger(__name__)


async def copy_paste(client: WriteAPIClient, source: str, target: str) -> bool:
    """
    Copy source to target on the server.

    Returns:
        True on success, False if the request failed (after the recovery probe)
    """
    try:
        await client.copy_object(source, target)
        return True
    except TransportError as e:
        await client.recover_session()
        logger.error(f"Copy {source} to {target} failed: {e}")
        return False


async def create_folder(client: WriteAPIClient, cwd: str, name: str) -> bool:
    """
    Create folder name under cwd.

    Returns:
        True on success, False if the request failed (after the recovery probe)

    Raises:
        ValidationError: If name is illegal; no request is sent
    """
    try:
        await client.create_folder(cwd, name)
        return True
    except TransportError as e:
        await client.recover_session()
        logger.error(f"Create folder {cwd}{name} failed: {e}")
        return False
