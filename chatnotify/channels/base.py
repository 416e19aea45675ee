"""Base message builder shared by all providers."""

import datetime
import traceback
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, Optional, Union
from urllib.parse import quote

from chatnotify.channels import ChannelPayload, DeliveryResult
from chatnotify.channels.dispatcher import log_message, send_payload
from chatnotify.channels.format_value import humanize_key, stringify_value
from chatnotify.channels.formatting import TextFormatter
from chatnotify.config import Settings, get_settings
from chatnotify.http import HttpClient, HttpResponse
from chatnotify.package_info import get_package_info

ISSUE_BUTTON_TEXT = "Create an issue for this error?"


def format_stack(err: BaseException) -> str:
    """Traceback of *err* as text, or just the error line if it was never raised."""
    return "".join(traceback.format_exception(type(err), err, err.__traceback__)).rstrip()


def error_message(err: BaseException) -> str:
    """Message of *err*; a single string argument is used as-is (``KeyError`` quotes it in ``str()``)."""
    if len(err.args) == 1 and isinstance(err.args[0], str):
        return err.args[0]
    return str(err)


def _as_list(items) -> list:
    if isinstance(items, (list, tuple)):
        return list(items)
    return [items]


class MessageBuilder(ABC):
    """
    Common interface for chat providers.

    A builder accumulates text, attachments/sections, actions and errors
    through chained calls and delivers a snapshot of that state on
    ``send()``. Capabilities a provider lacks are still callable and
    return the builder unchanged, so call sites stay provider agnostic.

    ``send()`` raises ``ConfigurationError`` for a misconfigured message
    or destination. Anything that goes wrong on the network is logged
    and reported through the returned ``DeliveryResult`` instead.
    """

    label: str = ""
    formatter: type[TextFormatter]

    def __init__(
        self,
        text: Optional[str] = None,
        channel: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
    ):
        self.settings = get_settings(settings)
        self.http_client = http_client

        self._text: Optional[str] = None
        self._channel: Optional[str] = None
        self._attachments: list[dict] = []
        self._actions: list[dict] = []
        self._errors: list[BaseException] = []
        self._extra_props: dict[str, Any] = {}

        if channel:
            self.channel(channel)
        if text:
            self.text(text)

    # --- Formatting helpers ---

    @classmethod
    def format(cls, text: str, **options: bool) -> str:
        return cls.formatter.format(text, **options)

    @classmethod
    def format_url(cls, url: str, text: str) -> str:
        return cls.formatter.format_url(url, text)

    @classmethod
    def escape_text(cls, text: str) -> str:
        return cls.formatter.escape_text(text)

    # --- Introspection ---

    @property
    def errors(self) -> list[BaseException]:
        return list(self._errors)

    @property
    def attachments(self) -> list[dict]:
        return list(self._attachments)

    @property
    def actions(self) -> list[dict]:
        return list(self._actions)

    # --- Shared chainable operations ---

    def text(self, text: str) -> "MessageBuilder":
        self._text = text
        return self

    def channel(self, channel: str) -> "MessageBuilder":
        self._channel = channel
        return self

    def attachment(self, attachments: Union[dict, list[dict]]) -> "MessageBuilder":
        self._attachments.extend(_as_list(attachments))
        return self

    def action(self, actions: Union[dict, list[dict]]) -> "MessageBuilder":
        self._actions.extend(_as_list(actions))
        return self

    # --- Provider specific operations ---

    @abstractmethod
    def title(self, title: str) -> "MessageBuilder":
        ...

    @abstractmethod
    def color(self, color: str) -> "MessageBuilder":
        ...

    @abstractmethod
    def summary(self, summary: str) -> "MessageBuilder":
        ...

    @abstractmethod
    def username(self, name: str) -> "MessageBuilder":
        ...

    @abstractmethod
    def icon(self, link_or_emoji: str) -> "MessageBuilder":
        ...

    @abstractmethod
    def button(self, text: str, url: str, style: Optional[str] = None) -> "MessageBuilder":
        ...

    @abstractmethod
    def error(self, err: BaseException, label: str = "", title: str = "") -> "MessageBuilder":
        """Add *err* as a visible error block, with a "create issue" button when a bug tracker is known."""

    @abstractmethod
    def stats(
        self,
        title: str,
        key_values: dict[str, Any],
        extra_props: Optional[dict] = None,
        ignore_undefined: bool = True,
    ) -> "MessageBuilder":
        """Add one block whose fields/facts are the humanized *key_values*."""

    # --- Delivery ---

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if the message cannot be sent."""

    @abstractmethod
    def resolve_channel(self, channel: Optional[str] = None) -> str:
        ...

    @abstractmethod
    def build_message(self, channel: str, default_attachment: bool, extra_props: dict) -> dict:
        """Snapshot of the current state in the provider's wire shape."""

    @abstractmethod
    def build_payload(
        self, message: dict, channel: str
    ) -> tuple[ChannelPayload, Callable[[HttpResponse], None]]:
        """Select the transport and serialize *message* for it."""

    def log_condition(self) -> bool:
        """
        Log messages instead of sending them when this returns True.

        Defaults to the test environment check; override in a subclass or
        patch it to change when delivery is skipped.
        """
        return self.settings.is_test_environment()

    async def send(
        self,
        default_attachment: bool = True,
        extra_props: Optional[dict] = None,
    ) -> DeliveryResult:
        self.validate()
        channel = self.resolve_channel(self._channel)
        message = self.build_message(channel, default_attachment, extra_props or {})
        return await self.deliver(message, channel)

    async def deliver(self, message: dict, channel: str) -> DeliveryResult:
        if self.log_condition():
            return log_message(self.label, message)

        payload, check_response = self.build_payload(message, channel)
        http_client = self.http_client or HttpClient(timeout=self.settings.http_timeout)
        return await send_payload(
            payload,
            message,
            self.label,
            http_client,
            check_response,
        )

    # --- Helpers for subclasses ---

    def _capture_error(self, err: BaseException, label: str, title: str) -> tuple[str, Optional[str]]:
        """Record *err* and return its stack and the issue URL (None without a bug tracker)."""
        self._errors.append(err)
        stack = format_stack(err)
        info = get_package_info(self.settings)
        if not info.bugs_url:
            return stack, None

        issue_title = f"[{label or type(err).__name__}] {title or error_message(err)}"
        issue_body = (
            f"Error encountered on {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
            f"App version: v{info.version}\n\n"
            f"Full Stack: {stack}"
        )
        issue_url = (
            f"{info.bugs_url}/new?title={quote(issue_title, safe='')}"
            f"&body={quote(issue_body, safe='')}&labels=bug"
        )
        return stack, issue_url

    @staticmethod
    def _stats_entries(key_values: dict[str, Any], ignore_undefined: bool) -> Iterator[tuple[str, str]]:
        for key, value in key_values.items():
            if ignore_undefined and value is None:
                continue
            yield humanize_key(key), stringify_value(value)
