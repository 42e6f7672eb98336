"""Error taxonomy for agenda fetching and normalization."""

from typing import Optional


class AgendaError(Exception):
    """Base class for everything raised by the agenda pipeline."""


class LocatorError(AgendaError):
    """A URL does not match any known conference or category shape."""


class InvalidParameter(AgendaError, ValueError):
    """Caller supplied an argument the operation can't work with."""


class FormatDeprecated(AgendaError):
    """The server says the markup representation has been retired."""


class MalformedResponse(AgendaError):
    """A fetched payload could not be parsed into the expected wire model."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message if url is None else f"{message} ({url})")
        self.url = url


class FetchError(AgendaError):
    """The transport could not deliver the content of a URL."""

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.url = url
        self.status = status
        self.reason = reason or (str(status) if status else "unknown")
        super().__init__(f"Failed to fetch {url}: {self.reason}")
