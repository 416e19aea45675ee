"""Build Slack and Teams notifications with one fluent API and deliver them over HTTP."""

from chatnotify.channels import ChannelPayload, DeliveryResult, DeliveryStatus
from chatnotify.channels.base import MessageBuilder
from chatnotify.channels.slack import Slack
from chatnotify.channels.teams import Teams
from chatnotify.config import Settings, settings
from chatnotify.errors import ConfigurationError, DeliveryError, NotifyError
from chatnotify.http import HttpClient, HttpResponse

__all__ = [
    "ChannelPayload",
    "ConfigurationError",
    "DeliveryError",
    "DeliveryResult",
    "DeliveryStatus",
    "HttpClient",
    "HttpResponse",
    "MessageBuilder",
    "NotifyError",
    "Settings",
    "Slack",
    "Teams",
    "settings",
]
