"""Slack channel adapter."""

import json
from typing import Any, Optional
from urllib.parse import urlencode

from chatnotify.channels import ChannelPayload, DeliveryResult
from chatnotify.channels.base import ISSUE_BUTTON_TEXT, MessageBuilder, error_message
from chatnotify.channels.context import default_slack_attachment
from chatnotify.channels.dispatcher import check_api_body, check_status
from chatnotify.channels.formatting import SlackFormatter
from chatnotify.channels.validate import require_webhook_url
from chatnotify.config import Settings, get_settings
from chatnotify.errors import ConfigurationError
from chatnotify.http import HttpClient

SLACK_API_URL = "https://slack.com/api/chat.postMessage"

STATS_COLOR = "#439FE0"  # blue
ERROR_COLOR = "danger"

# Fields whose title and value both fit are rendered side by side
SHORT_FIELD_MAX_LENGTH = 30


class Slack(MessageBuilder):
    """
    Slack message built from text and attachments.

    Slack messages have no title or color of their own; ``title()`` and
    ``color()`` are accepted and ignored. Buttons are collected and sent
    as a trailing attachment.

    Delivery uses the channel's webhook when one is configured
    (``slack.webhooks[channel]``, then ``slack.webhook``), otherwise the
    Web API with ``slack.token``.
    """

    label = "Slack"
    formatter = SlackFormatter

    def title(self, title: str) -> "Slack":
        return self

    def color(self, color: str) -> "Slack":
        return self

    def summary(self, fallback: str) -> "Slack":
        """Set the fallback text of the first attachment, if there is one."""
        # Copy so the caller's attachment dict is left untouched
        if self._attachments:
            self._attachments[0] = {**self._attachments[0], "fallback": fallback}
        return self

    def username(self, name: str) -> "Slack":
        self._extra_props["username"] = name
        return self

    def icon(self, link_or_emoji: str) -> "Slack":
        """Use an emoji (``:robot_face:``) or an image URL as the message icon."""
        if link_or_emoji.startswith(":"):
            self._extra_props["icon_emoji"] = link_or_emoji
        else:
            self._extra_props["icon_url"] = link_or_emoji
        return self

    def button(self, text: str, url: str, style: Optional[str] = None) -> "Slack":
        button = {
            "type": "button",
            "text": text,
            "url": url,
        }
        if style:
            button["style"] = style
        return self.action(button)

    def error(self, err: BaseException, label: str = "", title: str = "") -> "Slack":
        stack, issue_url = self._capture_error(err, label, title)

        pretext = self.escape_text(f"{self.format('Error')}: {error_message(err)}")
        attachment = {
            "pretext": pretext,
            "text": self.escape_text(stack),
            "color": ERROR_COLOR,
            "fallback": pretext,
        }
        if issue_url:
            attachment["actions"] = [{
                "type": "button",
                "text": ISSUE_BUTTON_TEXT,
                "style": "danger",
                "url": issue_url,
            }]
        return self.attachment(attachment)

    def stats(
        self,
        title: str,
        key_values: dict[str, Any],
        extra_props: Optional[dict] = None,
        ignore_undefined: bool = True,
    ) -> "Slack":
        attachment = {
            "color": STATS_COLOR,
            "fallback": title,
            "title": title,
            "fields": [],
        }
        attachment.update(extra_props or {})

        for key, value in self._stats_entries(key_values, ignore_undefined):
            attachment["fields"].append({
                "title": key,
                "value": value,
                "short": len(key) <= SHORT_FIELD_MAX_LENGTH and len(value) <= SHORT_FIELD_MAX_LENGTH,
            })
        return self.attachment(attachment)

    # --- Delivery ---

    def resolve_channel(self, channel: Optional[str] = None) -> str:
        return channel or self.settings.slack.channel

    def build_message(self, channel: str, default_attachment: bool, extra_props: dict) -> dict:
        attachments = list(self._attachments)
        if self._actions:
            attachments.append({
                "title": "",
                "actions": list(self._actions),
            })
        return self._assemble(
            self._text,
            channel,
            attachments,
            {**self._extra_props, **extra_props},
            default_attachment,
        )

    def _assemble(
        self,
        text: Optional[str],
        channel: str,
        attachments: list[dict],
        extra_props: dict,
        default_attachment: bool,
    ) -> dict:
        if default_attachment:
            attachments = attachments + [default_slack_attachment(self.settings)]

        message = {
            "text": text,
            "channel": channel,
            "username": self.settings.slack.username,
            "attachments": attachments,
        }
        message.update(extra_props)
        return {k: v for k, v in message.items() if v is not None and v != ""}

    def webhook_url(self, channel: Optional[str] = None) -> str:
        slack = self.settings.slack
        return (channel and slack.webhooks.get(channel)) or slack.webhook

    def build_payload(self, message: dict, channel: str):
        webhook_url = self.webhook_url(channel)
        if webhook_url:
            return ChannelPayload(
                method="POST",
                url=webhook_url,
                headers={"Content-Type": "application/json"},
                body=json.dumps(message),
            ), check_status

        token = self.settings.slack.token
        if not token:
            raise ConfigurationError(f'No Slack webhook or token configured for channel: "{channel}"')

        # The Web API takes form fields; nested values are sent as JSON
        fields = {
            k: v if isinstance(v, str) else json.dumps(v)
            for k, v in message.items()
        }
        return ChannelPayload(
            method="POST",
            url=SLACK_API_URL,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Authorization": f"Bearer {token}",
            },
            body=urlencode(fields),
        ), check_api_body

    @classmethod
    async def post_message(
        cls,
        text: Optional[str],
        channel: Optional[str] = None,
        attachments: Optional[list[dict]] = None,
        extra_props: Optional[dict] = None,
        default_attachment: bool = True,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
    ) -> DeliveryResult:
        """
        Send a message without chaining a builder.

        *extra_props* overwrite any other top level property.
        """
        builder = cls(settings=settings, http_client=http_client)
        channel = builder.resolve_channel(channel)
        message = builder._assemble(
            text,
            channel,
            list(attachments or []),
            extra_props or {},
            default_attachment,
        )
        return await builder.deliver(message, channel)

    # --- Startup configuration ---

    @staticmethod
    def set_webhook(webhook_url: str, channel: Optional[str] = None, settings: Optional[Settings] = None) -> None:
        """Set the fallback webhook, or the webhook of one channel."""
        settings = get_settings(settings)
        require_webhook_url(webhook_url)
        if channel:
            settings.slack.webhooks[channel] = webhook_url
        else:
            settings.set("slack.webhook", webhook_url)

    @staticmethod
    def set_token(token: str, settings: Optional[Settings] = None) -> None:
        get_settings(settings).set("slack.token", token)

    @staticmethod
    def set_username(username: str, settings: Optional[Settings] = None) -> None:
        get_settings(settings).set("slack.username", username)

    @staticmethod
    def set_default_channel(channel: str, settings: Optional[Settings] = None) -> None:
        get_settings(settings).set("slack.channel", channel)
