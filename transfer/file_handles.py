"""FileHandle implementation for files on disk."""

import mimetypes
import os
from pathlib import Path
from typing import Optional


class LocalFileHandle:
    """File on the local filesystem, read lazily by byte range."""

    def __init__(self, path: Path, media_type: Optional[str] = None):
        """
        Args:
            path: Path of the file to upload
            media_type: Declared media type; guessed from the file name if omitted
        """
        self.path = Path(path)
        self.name = self.path.name
        self.size = os.path.getsize(self.path)
        if media_type is None:
            media_type = mimetypes.guess_type(self.name)[0] or "application/octet-stream"
        self.media_type = media_type

    def read_range(self, start: int, end: int) -> bytes:
        with open(self.path, 'rb') as f:
            f.seek(start)
            return f.read(max(0, end - start))

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self.path)!r}, size={self.size}, media_type={self.media_type!r})"
