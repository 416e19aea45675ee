"""Microsoft Teams channel adapter."""

import json
from typing import Any, Optional

from chatnotify.channels import ChannelPayload, DeliveryResult
from chatnotify.channels.base import ISSUE_BUTTON_TEXT, MessageBuilder, error_message
from chatnotify.channels.context import default_teams_section
from chatnotify.channels.dispatcher import check_status
from chatnotify.channels.formatting import TeamsFormatter
from chatnotify.channels.validate import require_webhook_url
from chatnotify.config import Settings, get_settings
from chatnotify.errors import ConfigurationError
from chatnotify.http import HttpClient

DEFAULT_WEBHOOK_NAME = "default"

DEFAULT_THEME_COLOR = "439FE0"  # blue
ERROR_COLOR = "F00"  # red


def split_destination(destination: str) -> tuple[str, str]:
    """``<channel>[.<webhookName>]`` -> ``(channel, webhookName)``."""
    channel, _, webhook_name = destination.partition(".")
    return channel, webhook_name or DEFAULT_WEBHOOK_NAME


class Teams(MessageBuilder):
    """
    Teams MessageCard with sections, facts and OpenUri actions.

    Text is escaped for Teams markdown as soon as it is set. Teams has no
    per-message identity, so ``username()`` and ``icon()`` are ignored.
    Either ``summary()`` or ``text()`` is required before sending.

    Delivery always goes through an incoming webhook configured under
    ``teams.webhooks[<channel>][<webhookName>]``.
    """

    label = "Teams"
    formatter = TeamsFormatter

    def __init__(
        self,
        text: Optional[str] = None,
        channel: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
    ):
        self._summary: Optional[str] = None
        self._title: Optional[str] = None
        self._theme_color = DEFAULT_THEME_COLOR
        super().__init__(text, channel, settings=settings, http_client=http_client)

    def username(self, name: str) -> "Teams":
        return self

    def icon(self, link_or_emoji: str) -> "Teams":
        return self

    def summary(self, summary: str) -> "Teams":
        self._summary = summary
        return self

    def color(self, color: str) -> "Teams":
        self._theme_color = color.replace("#", "")
        return self

    def title(self, title: str) -> "Teams":
        self._title = title
        return self

    def text(self, text: str) -> "Teams":
        self._text = self.escape_text(text)
        return self

    def attachment(self, sections) -> "Teams":
        if not isinstance(sections, (list, tuple)):
            sections = [sections]
        escaped = []
        for section in sections:
            if section.get("text"):
                section = {**section, "text": self.escape_text(section["text"])}
            escaped.append(section)
        return super().attachment(escaped)

    def button(self, text: str, url: str, style: Optional[str] = None) -> "Teams":
        button = {
            "@type": "OpenUri",
            "name": text,
            "targets": [{
                "os": "default",
                "uri": url,
            }],
        }
        return self.action(button)

    def error(self, err: BaseException, label: str = "", title: str = "") -> "Teams":
        stack, issue_url = self._capture_error(err, label, title)
        heading = f"Error: {error_message(err)}"

        self.color(ERROR_COLOR)
        self.title(heading)
        if not self._summary:
            self.summary(heading)

        # Keep the traceback indentation through markdown rendering
        self.attachment({
            "title": heading,
            "text": stack.replace(" ", "&nbsp;"),
        })
        if issue_url:
            self.button(ISSUE_BUTTON_TEXT, issue_url)
        return self

    def stats(
        self,
        title: str,
        key_values: dict[str, Any],
        extra_props: Optional[dict] = None,
        ignore_undefined: bool = True,
    ) -> "Teams":
        section = {
            "title": title,
            "facts": [
                {"name": key, "value": self.escape_text(value)}
                for key, value in self._stats_entries(key_values, ignore_undefined)
            ],
        }
        section.update(extra_props or {})
        return self.attachment(section)

    # --- Delivery ---

    def validate(self) -> None:
        if not self._summary and not self._text:
            raise ConfigurationError("Either summary or text is required")

    def resolve_channel(self, channel: Optional[str] = None) -> str:
        return channel or self.settings.teams.default_channel

    def build_message(self, channel: str, default_attachment: bool, extra_props: dict) -> dict:
        message = {
            "@type": "MessageCard",
            "@context": "https://schema.org/extensions",
            "summary": self._summary,
            "themeColor": self._theme_color,
            "title": self._title,
            "text": self._text,
            "sections": list(self._attachments),
            "potentialAction": list(self._actions),
        }
        message.update(extra_props)
        return self._with_default_section(message, default_attachment)

    def _with_default_section(self, message: dict, default_attachment: bool) -> dict:
        # Do not modify the caller's message
        message = {k: v for k, v in message.items() if v is not None}
        sections = list(message.get("sections") or [])
        if default_attachment:
            sections.append(default_teams_section(self.settings))
        message["sections"] = sections
        return message

    def webhook_url(self, destination: str) -> Optional[str]:
        channel, webhook_name = split_destination(destination)
        return self.settings.teams.webhooks.get(channel, {}).get(webhook_name)

    def build_payload(self, message: dict, channel: str):
        webhook_url = self.webhook_url(channel)
        if not webhook_url:
            raise ConfigurationError(f'No webhook url for channel: "{channel}"')

        return ChannelPayload(
            method="POST",
            url=webhook_url,
            headers={"Content-Type": "application/json"},
            body=json.dumps(message),
        ), check_status

    @classmethod
    async def post_message(
        cls,
        message: dict,
        channel: Optional[str] = None,
        default_attachment: bool = True,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
    ) -> DeliveryResult:
        """Send a ready-made MessageCard to ``<channel>[.<webhookName>]``."""
        builder = cls(settings=settings, http_client=http_client)
        channel = builder.resolve_channel(channel)
        message = builder._with_default_section(message, default_attachment)
        return await builder.deliver(message, channel)

    # --- Startup configuration ---

    @staticmethod
    def set_webhook(webhook_url: str, channel: Optional[str] = None, settings: Optional[Settings] = None) -> None:
        """Register *webhook_url* for ``<channel>[.<webhookName>]`` (default channel if omitted)."""
        settings = get_settings(settings)
        require_webhook_url(webhook_url)
        channel, webhook_name = split_destination(channel or settings.teams.default_channel)
        settings.teams.webhooks.setdefault(channel, {})[webhook_name] = webhook_url

    @staticmethod
    def set_default_channel(channel: str, settings: Optional[Settings] = None) -> None:
        get_settings(settings).set("teams.default_channel", channel)

    @staticmethod
    def set_token(token: str = "", settings: Optional[Settings] = None) -> None:
        """Teams has no token transport; accepted for interface parity with Slack."""
