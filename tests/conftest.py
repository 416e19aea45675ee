"""Test fixtures for chatnotify tests."""

from typing import Optional
from unittest.mock import AsyncMock, patch

import pytest

from chatnotify.config import Settings, SlackSettings, TeamsSettings
from chatnotify.http import HttpClient, HttpResponse
from chatnotify.package_info import _read_distribution

SLACK_WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"
TEAMS_WEBHOOK = "https://example.webhook.office.com/webhookb2/abc"


@pytest.fixture(autouse=True)
def isolated_process(monkeypatch):
    """Fixed hostname and no process manager identity."""
    monkeypatch.delenv("name", raising=False)
    monkeypatch.delenv("pm_id", raising=False)
    _read_distribution.cache_clear()
    with patch("chatnotify.channels.context.socket.gethostname", return_value="test-host"):
        yield


@pytest.fixture
def settings_factory():
    """Factory for creating Settings isolated from the environment and .env files.

    Example:
        settings = settings_factory(slack_webhook=SLACK_WEBHOOK)
        teams_settings = settings_factory(teams_webhooks={"ops": {"default": TEAMS_WEBHOOK}})
    """

    def _factory(
        app_env: str = "production",
        bugs_url: str = "",
        slack_webhook: str = "",
        slack_token: str = "",
        slack_channel: str = "",
        slack_webhooks: Optional[dict] = None,
        teams_webhooks: Optional[dict] = None,
    ) -> Settings:
        return Settings(
            _env_file=None,
            app_env=app_env,
            app_name="myapp",
            app_version="1.2.3",
            bugs_url=bugs_url,
            slack=SlackSettings(
                webhook=slack_webhook,
                token=slack_token,
                channel=slack_channel,
                webhooks=slack_webhooks or {},
            ),
            teams=TeamsSettings(webhooks=teams_webhooks or {}),
        )

    return _factory


@pytest.fixture
def mock_http_client():
    """HttpClient whose request() answers 200 without touching the network."""
    client = AsyncMock(spec=HttpClient)
    client.request.return_value = HttpResponse(status_code=200, body="ok")
    return client


def raised(err: BaseException) -> BaseException:
    """Return *err* with a traceback attached."""
    try:
        raise err
    except BaseException as caught:
        return caught
