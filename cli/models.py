"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class UploadCommand:
    """Queue local files for upload."""

    file_list: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class CopyCommand:
    """Copy a remote object to another key."""

    source: str
    target: str
    command: Literal["copy"] = "copy"


@dataclass(frozen=True)
class MkdirCommand:
    """Create a folder in the current remote directory."""

    name: str
    command: Literal["mkdir"] = "mkdir"


@dataclass(frozen=True)
class CdCommand:
    """Change the current remote directory."""

    directory: Optional[str] = None
    command: Literal["cd"] = "cd"


@dataclass(frozen=True)
class PwdCommand:
    command: Literal["pwd"] = "pwd"


@dataclass(frozen=True)
class QueueCommand:
    command: Literal["queue"] = "queue"


CommandRequest = (
    UploadCommand
    | CopyCommand
    | MkdirCommand
    | CdCommand
    | PwdCommand
    | QueueCommand
)
