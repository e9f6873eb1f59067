"""Exceptions that end a request with a generic failure response.

Policy violations (disallowed paths, missing referer) are not exceptions:
the dispatcher answers them directly with a 403 response.
"""


class MirrorError(Exception):
    """Base class for request-fatal errors.

    Attributes:
        status_code: HTTP status returned to the client
        detail: Plain-text body returned to the client
    """

    status_code: int = 500
    detail: str = "Internal Server Error"

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if detail is not None:
            self.detail = detail


class OriginUnavailableError(MirrorError):
    """The upstream could not be reached or did not answer in time."""

    status_code = 502
    detail = "Bad gateway"


class ContentDecodeError(MirrorError):
    """An upstream body did not match its declared content type."""

    status_code = 500
    detail = "Internal Server Error"
