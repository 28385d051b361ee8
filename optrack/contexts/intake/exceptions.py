"""Custom exceptions for the intake context."""

from typing import Optional


class MetadataFetchError(Exception):
    """
    Exception raised when a listing page cannot be fetched through the proxy.

    Attributes:
        message: Error description
        url: Target URL that was requested
        status_code: HTTP status returned by the proxy, if any
        original_error: The underlying transport error, if any
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.url = url
        self.status_code = status_code
        self.original_error = original_error

        parts = [message, f"URL: {url}"]

        if status_code is not None:
            parts.append(f"Status: {status_code}")

        if original_error:
            parts.append(f"Original error: {str(original_error)}")

        super().__init__("\n".join(parts))


class FetchInProgressError(RuntimeError):
    """Exception raised when a fetch is requested while another is still outstanding."""

    def __init__(self, url: str, pending_url: str):
        self.url = url
        self.pending_url = pending_url
        super().__init__(f"Already fetching {pending_url}; not starting {url}")
