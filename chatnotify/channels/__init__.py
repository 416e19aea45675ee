"""Base types for notification channel adapters."""

import enum
from dataclasses import dataclass
from typing import Optional


@dataclass
class ChannelPayload:
    """Represents the HTTP request payload for a notification channel."""
    method: str
    url: str
    headers: dict[str, str]
    body: str  # JSON string or urlencoded form


class DeliveryStatus(str, enum.Enum):
    SENT = "sent"
    LOGGED = "logged"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """
    Outcome of ``send()``.

    Delivery never raises past validation; a failed delivery is reported
    here and in the logs only.
    """
    status: DeliveryStatus
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_sent(self) -> bool:
        return self.status == DeliveryStatus.SENT
