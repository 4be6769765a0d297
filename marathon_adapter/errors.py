from typing import Optional


class MarathonError(Exception):
    code = "MARATHON_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidArgumentError(MarathonError):
    code = "INVALID_ARGUMENT"


class NotFoundError(MarathonError):
    code = "NOT_FOUND"


class AlreadyExistsError(MarathonError):
    code = "ALREADY_EXISTS"


class TransportError(MarathonError):
    """Failure of the request/response exchange itself.

    Raised for connection failures, non-2xx statuses and bodies that cannot be
    decoded. ``status_code`` is None when no response was received.
    """

    code = "TRANSPORT"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.request_id = request_id
