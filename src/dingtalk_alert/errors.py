"""Custom exceptions for the DingTalk alert channel.

Exception Hierarchy:
    DingtalkError (base)
    ├── DingtalkConfigError (enabled without an access token)
    ├── DingtalkUpdateError (malformed reconfiguration batch)
    ├── DingtalkSendError (base for delivery failures)
    │   ├── DingtalkTransportError (connection, timeout, read failures)
    │   ├── DingtalkProtocolError (non-200 response with an unreadable body)
    │   └── DingtalkRemoteError (well-formed error response from DingTalk)
    └── DingtalkTypeMismatchError (wrong payload passed to the test path)

Every failure is scoped to a single operation. Nothing here is fatal to the
process and nothing is retried.
"""

from __future__ import annotations


class DingtalkError(Exception):
    """Base exception for all DingTalk alert channel errors.

    Attributes:
        message: Human-readable error description.
        details: Optional additional error details.

    Examples:
        >>> try:
        ...     service.send("disk almost full")
        ... except DingtalkError as e:
        ...     logger.error("dingtalk_failed", error=str(e))
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize DingtalkError.

        Args:
            message: Human-readable error description.
            details: Optional additional error details for debugging.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class DingtalkConfigError(DingtalkError):
    """Raised when a configuration fails validation.

    Examples:
        >>> raise DingtalkConfigError("must specify token")
    """

    pass


class DingtalkUpdateError(DingtalkError):
    """Raised when a reconfiguration batch cannot be applied.

    The batch must hold exactly one element of the configuration shape.
    """

    pass


class DingtalkSendError(DingtalkError):
    """Base exception for failures of a single webhook delivery."""

    pass


class DingtalkTransportError(DingtalkSendError):
    """Raised when the webhook could not be reached.

    Wraps the underlying httpx transport error (connect, timeout, read).

    Attributes:
        original_error: The underlying exception that caused this error.

    Examples:
        >>> try:
        ...     client.post(url, content=body)
        ... except httpx.ConnectError as e:
        ...     raise DingtalkTransportError(
        ...         "failed to POST alert data", original_error=e
        ...     ) from e
    """

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        details: str | None = None,
    ) -> None:
        """Initialize DingtalkTransportError.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
            details: Optional additional error details.
        """
        super().__init__(message, details)
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation including original error type."""
        base = super().__str__()
        if self.original_error:
            return f"{base} (caused by: {type(self.original_error).__name__})"
        return base


class DingtalkProtocolError(DingtalkSendError):
    """Raised when a non-200 response body is not a DingTalk error document.

    Attributes:
        status_code: HTTP status code of the response.
        body: Raw response body.
    """

    def __init__(self, status_code: int, body: str, details: str | None = None) -> None:
        """Initialize DingtalkProtocolError.

        Args:
            status_code: HTTP status code of the response.
            body: Raw response body as received.
            details: Optional parse error description.
        """
        super().__init__("failed to understand Dingtalk response", details)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        """Return string representation including status code and body."""
        return f"{super().__str__()}. code: {self.status_code} content: {self.body}"


class DingtalkRemoteError(DingtalkSendError):
    """Raised when DingTalk answers with an error document.

    Attributes:
        error_code: The ``errcode`` value returned by DingTalk.
        error_message: The ``errmsg`` value returned by DingTalk.

    Examples:
        >>> raise DingtalkRemoteError(300, "token invalid")
        Traceback (most recent call last):
            ...
        DingtalkRemoteError: sendMessage error (300) description: token invalid
    """

    def __init__(self, error_code: int, error_message: str) -> None:
        """Initialize DingtalkRemoteError.

        Args:
            error_code: Remote error code.
            error_message: Remote error description.
        """
        super().__init__(f"sendMessage error ({error_code}) description: {error_message}")
        self.error_code = error_code
        self.error_message = error_message


class DingtalkTypeMismatchError(DingtalkError, TypeError):
    """Raised when the test path receives a payload of the wrong type.

    Attributes:
        received_type: Name of the type that was received.
    """

    def __init__(self, received_type: str) -> None:
        """Initialize DingtalkTypeMismatchError.

        Args:
            received_type: Name of the unexpected payload type.
        """
        super().__init__(f"unexpected options type {received_type}")
        self.received_type = received_type


__all__ = [
    "DingtalkConfigError",
    "DingtalkError",
    "DingtalkProtocolError",
    "DingtalkRemoteError",
    "DingtalkSendError",
    "DingtalkTransportError",
    "DingtalkTypeMismatchError",
    "DingtalkUpdateError",
]
