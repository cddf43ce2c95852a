"""Exception classes shared by the transfer subsystem."""

from typing import Optional


class TransferError(Exception):
    """
    Base exception class for all transfer-related errors.
    """
    pass


class TransportError(TransferError):
    """
    Raised when an HTTP call to the write API fails or returns a non-2xx status.
    """

    def __init__(self, method: str, url: str, status_code: Optional[int] = None, detail: str = ""):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.detail = detail
        message = f"{method} {url} failed"
        if status_code is not None:
            message += f" with status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class RenderError(TransferError):
    """
    Raised when a thumbnail cannot be rendered (unsupported type, decode failure, timeout).
    """
    pass


class ValidationError(TransferError):
    """
    Raised before any request is sent when caller input is illegal (e.g. a folder name with '/').
    """
    pass
