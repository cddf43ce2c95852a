"""Project-wide constants (size threshold, endpoint paths, header names)."""

SIZE_LIMIT: int = 100 * 1000 * 1000  # 100 MB, single PUT below, multipart at or above
PART_SIZE_LIMIT: int = SIZE_LIMIT
MAX_CONCURRENT_PARTS: int = 2
STREAM_CHUNK_SIZE: int = 1024 * 1024
FINISHED_HISTORY_SIZE: int = 100

THUMBNAIL_SIZE: int = 144
THUMBNAIL_PREFIX: str = "_$flaredrive$/thumbnails"
VIDEO_RENDER_TIMEOUT_SECONDS: float = 2.0
THUMBNAIL_MEDIA_TYPES = ("video/mp4", "application/pdf")

WRITE_API_ROOT: str = "/api/write/"
WRITE_ITEMS_PATH: str = "/api/write/items"

THUMBNAIL_HEADER: str = "fd-thumbnail"
COPY_SOURCE_HEADER: str = "x-amz-copy-source"
DIRECTORY_CONTENT_TYPE: str = "application/x-directory"
