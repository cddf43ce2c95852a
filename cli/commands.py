"""Command handler functions for CLI operations."""

from pathlib import Path

from common.exceptions import ValidationError
from common.logging_config import get_logger
from cli.context import TransferContext
from cli.models import (
    CdCommand,
    CopyCommand,
    MkdirCommand,
    PwdCommand,
    QueueCommand,
    UploadCommand,
)
from cli.utils import format_file_size, resolve_remote_directory
from transfer.file_handles import LocalFileHandle
from transfer.file_operations import copy_paste, create_folder

logger = get_logger(__name__)


async def handle_upload(cmd: UploadCommand, ctx: TransferContext) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with local file paths
        ctx: Session context holding the upload queue

    Returns:
        One line per file, queued or rejected
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} files")
    directory = ctx.config.get_remote_directory()
    results = []
    queued = 0

    for file_path in cmd.file_list:
        path = Path(file_path).expanduser()
        if not path.exists():
            results.append(f"Error: File not found: {file_path}")
            continue
        if not path.is_file():
            results.append(f"Error: Not a file: {file_path}")
            continue

        task = ctx.queue.enqueue_file(directory, LocalFileHandle(path))
        queued += 1
        results.append(f"Queued: {task.key} ({format_file_size(task.file.size)})")

    if queued:
        ctx.queue.start()

    return '\n'.join(results)


async def handle_copy(cmd: CopyCommand, ctx: TransferContext) -> str:
    """
    Handle 'copy' command.

    Returns:
        Success or error message
    """
    logger.info(f"Executing copy command: {cmd.source} -> {cmd.target}")
    if await copy_paste(ctx.client, cmd.source, cmd.target):
        return f"Copied {cmd.source} to {cmd.target}"
    return f"Error: Copy {cmd.source} to {cmd.target} failed"


async def handle_mkdir(cmd: MkdirCommand, ctx: TransferContext) -> str:
    """
    Handle 'mkdir' command.

    Returns:
        Success or error message; an invalid name is reported without contacting the server
    """
    directory = ctx.config.get_remote_directory()
    try:
        created = await create_folder(ctx.client, directory, cmd.name)
    except ValidationError as e:
        return f"Error: {e}"

    if created:
        return f"Created folder /{directory}{cmd.name}"
    return f"Error: Create folder {cmd.name} failed"


async def handle_cd(cmd: CdCommand, ctx: TransferContext) -> str:
    directory = resolve_remote_directory(ctx.config.get_remote_directory(), cmd.directory)
    ctx.config.set_remote_directory(directory)
    return f"/{directory}"


async def handle_pwd(cmd: PwdCommand, ctx: TransferContext) -> str:
    return f"/{ctx.config.get_remote_directory()}"


async def handle_queue(cmd: QueueCommand, ctx: TransferContext) -> str:
    """
    Handle 'queue' command.

    Returns:
        Pending uploads in processing order followed by the most recent finished ones
    """
    pending = ctx.queue.pending()
    finished = ctx.queue.history

    if not pending and not finished and not ctx.queue.is_draining:
        return "Upload queue is empty."

    output = [f"{len(pending)} pending upload(s)"]
    for task in pending:
        output.append(f"  - {task.key} ({format_file_size(task.file.size)})")
    if finished:
        output.append(f"{len(finished)} finished upload(s)")
        for record in finished:
            output.append(f"  - {record.key}: {record.state.value}")
    return '\n'.join(output)
