from typing import TYPE_CHECKING, Optional

from hubshipper.constants import (
    EXIT_CODE_DELIVERY_FAILED,
    EXIT_CODE_FAILURE,
    EXIT_CODE_INVALID_CONFIGURATION,
)

if TYPE_CHECKING:
    import httpx


class HubShipperError(Exception):
    """
    Base error for hubshipper.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An error occurred while shipping records."):
        self.message = message
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this error.

        Returns:
            int: The exit code.
        """
        return EXIT_CODE_FAILURE


class ConfigurationError(HubShipperError):
    """
    Error raised when the connection string or the output settings are invalid.

    Args:
        message (str): The error message, a template when ``key`` is given.
        key (Optional[str]): The offending configuration key, if any.
    """
    def __init__(self, message: str = "Invalid configuration.",
                 key: Optional[str] = None):
        self.key = key
        self.message = message.format(key=key) if key is not None else message
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_INVALID_CONFIGURATION


class DeliveryError(HubShipperError):
    """
    Error raised when a delivery unit could not be sent.

    The HTTP response is attached when one was received, so callers can
    inspect ``response.status_code`` before deciding to retry.

    Args:
        message (str): The error message.
        response (Optional[httpx.Response]): The response, if one was obtained.
    """
    def __init__(self, message: str = "Event Hubs HTTP request failed.",
                 response: Optional["httpx.Response"] = None):
        self.response = response
        super().__init__(message)

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    def get_exit_code(self) -> int:
        return EXIT_CODE_DELIVERY_FAILED


class DeliveryStatusError(DeliveryError):
    """
    Error raised when the endpoint answers with a non 2xx/3xx status.

    Args:
        response (httpx.Response): The rejected response.
        message (str): The error message template.
    """
    def __init__(self, response: "httpx.Response",
                 message: str = "Event Hubs HTTP request failed with status {status}"):
        detail = response.text.strip() if response.text else ""
        formatted = message.format(status=response.status_code)
        if detail:
            formatted += f"\nDetails: {detail}"
        super().__init__(formatted, response=response)


class DeliveryTimeoutError(DeliveryError):
    """
    Error raised when connecting to or reading from the endpoint timed out.

    Args:
        reason (Optional[str]): The reason for the error.
        message (str): The error message.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Event Hubs HTTP request timed out: the endpoint did not respond in time."):
        if reason:
            message += f"\nDetails: {reason}"
        super().__init__(message)


class DeliveryConnectionError(DeliveryError):
    """
    Error raised when the endpoint could not be reached (DNS, TLS, proxy, reset).

    Args:
        reason (Optional[str]): The reason for the error.
        message (str): The error message.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Event Hubs HTTP request failed: unable to reach the endpoint.\n"
                                "If you're behind a proxy or firewall, check the proxy settings."):
        if reason:
            message += f"\nDetails: {reason}"
        super().__init__(message)


class DeliveryEncodingError(DeliveryError):
    """
    Error raised when a delivery unit cannot be turned into a valid request,
    for example message properties that are not JSON or header values that
    are not ASCII. Sending it again cannot succeed.

    Args:
        reason (Optional[str]): The reason for the error.
        message (str): The error message.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Event Hubs HTTP request could not be built."):
        if reason:
            message += f"\nDetails: {reason}"
        super().__init__(message)
