"""Shared data type definitions (TransferTask, UploadSession, PartDescriptor, etc.)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class FileHandle(Protocol):
    """A local file that can be read by byte range."""

    name: str
    size: int
    media_type: str

    def read_range(self, start: int, end: int) -> bytes:
        ...


class TransferState(str, Enum):
    QUEUED = "queued"
    THUMBNAILING = "thumbnailing"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TransferTask:
    """
    A pending upload of one file into a remote directory.
    """
    base_directory: str
    file: FileHandle
    state: TransferState = TransferState.QUEUED
    thumbnail_digest: Optional[str] = None

    @property
    def key(self) -> str:
        base = self.base_directory
        if base and not base.endswith("/"):
            base += "/"
        return f"{base}{self.file.name}"


@dataclass(frozen=True)
class TransferRecord:
    """Outcome of a processed task, kept after the task and its file are released."""
    key: str
    state: TransferState


@dataclass(frozen=True)
class PartDescriptor:
    """
    Byte range [start, end) of one multipart part, 1-indexed.
    """
    part_number: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class UploadSession:
    """
    State of one multipart upload between initiation and completion.
    """
    key: str
    upload_id: str
    parts: Dict[int, str] = field(default_factory=dict)

    def record_part(self, part_number: int, etag: str) -> None:
        if part_number in self.parts:
            raise ValueError(f"Part {part_number} already recorded for {self.key}")
        self.parts[part_number] = etag

    def is_complete(self, total_parts: int) -> bool:
        return set(self.parts) == set(range(1, total_parts + 1))

    def completion_payload(self, total_parts: int) -> Dict[str, List[Dict[str, object]]]:
        """
        Build the completion body, ascending by part number.

        Raises:
            ValueError: If any part 1..total_parts is missing or an extra part is present
        """
        if not self.is_complete(total_parts):
            missing = sorted(set(range(1, total_parts + 1)) - set(self.parts))
            raise ValueError(f"Upload {self.upload_id} is not complete, missing parts {missing}")
        return {
            "parts": [
                {"partNumber": number, "etag": self.parts[number]}
                for number in sorted(self.parts)
            ]
        }


@dataclass(frozen=True)
class ThumbnailRecord:
    """
    A rendered thumbnail identified by the SHA-1 digest of its bytes.
    """
    digest: str
    data: bytes


@dataclass(frozen=True)
class ProgressEvent:
    loaded: int
    total: int
