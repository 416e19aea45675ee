"""Exceptions raised by message builders and the delivery pipeline."""

from typing import Optional


class NotifyError(Exception):
    """Base class for chatnotify errors."""


class ConfigurationError(NotifyError):
    """
    A message or its destination is misconfigured.

    Raised synchronously to the caller of ``send()``: missing required
    text/summary, no webhook for the destination, malformed webhook URL.
    """


class DeliveryError(NotifyError):
    """
    The provider rejected a message or could not be reached.

    Only raised inside the dispatcher, which logs it and returns a failed
    ``DeliveryResult`` instead of propagating.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
