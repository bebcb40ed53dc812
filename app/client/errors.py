from typing import Any, Optional


class ClientError(Exception):
    """Base class for errors raised by the CrownSide client."""


class ApiError(ClientError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API error {status_code}: {detail}")


class SlotUnavailableError(ClientError):
    """A closed calendar slot was picked; no request was sent."""

    def __init__(self, message: str, when: Optional[Any] = None):
        self.when = when
        super().__init__(message)
