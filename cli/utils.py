"""Utility functions for CLI operations."""

import sys
from typing import TextIO

from cli.constants import GREEN, RESET
from common.types import ProgressEvent, TransferTask


class ProgressPrinter:
    """Queue progress callback that draws a one-line progress display."""

    def __init__(self, stream: TextIO = sys.stdout):
        self.stream = stream

    def __call__(self, task: TransferTask, event: ProgressEvent) -> None:
        progress = (event.loaded / event.total) * 100 if event.total else 100.0
        self.stream.write(
            f"\rUploading {task.file.name}: {format_file_size(event.loaded)} / "
            f"{format_file_size(event.total)} ({GREEN}{progress:.1f}%{RESET})"
        )
        if event.loaded >= event.total:
            self.stream.write('\n')
        self.stream.flush()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def resolve_remote_directory(current: str, target: str | None) -> str:
    """
    Resolve a cd target against the current remote directory.

    Args:
        current: Current directory key ('' or ending with '/')
        target: Absolute ('/a/b'), relative ('b', '../c') or None for the root

    Returns:
        Directory key ending with '/', or '' for the root
    """
    if not target or target == '/':
        return ''

    parts = [] if target.startswith('/') else [p for p in current.split('/') if p]
    for segment in target.split('/'):
        if segment in ('', '.'):
            continue
        if segment == '..':
            if parts:
                parts.pop()
            continue
        parts.append(segment)

    return ''.join(f"{p}/" for p in parts)
