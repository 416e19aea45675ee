"""Unit tests for the default app info block."""

import pytest

from chatnotify.channels.context import (
    default_slack_attachment,
    default_teams_section,
    process_suffix,
)


@pytest.mark.unit
class TestProcessSuffix:
    def test_absent(self):
        assert process_suffix({}) == ""

    def test_name_and_id(self):
        assert process_suffix({"name": "worker", "pm_id": "3"}) == "| worker 3"

    def test_id_defaults_to_minus_one(self):
        assert process_suffix({"name": "worker"}) == "| worker -1"


@pytest.mark.unit
class TestDefaultBlocks:
    def test_slack_attachment(self, settings_factory):
        attachment = default_slack_attachment(settings_factory(app_env="staging"))

        assert attachment["title"] == "App Info:"
        assert attachment["fields"] == [
            {"title": "Hostname", "value": "test-host", "short": True},
            {"title": "Environment", "value": "staging", "short": True},
        ]
        assert attachment["footer"] == "myapp v1.2.3"
        assert isinstance(attachment["ts"], float)

    def test_slack_footer_includes_process_identity(self, settings_factory, monkeypatch):
        monkeypatch.setenv("name", "api")
        monkeypatch.setenv("pm_id", "7")
        attachment = default_slack_attachment(settings_factory())
        assert attachment["footer"] == "myapp v1.2.3 | api 7"

    def test_teams_section(self, settings_factory):
        section = default_teams_section(settings_factory(app_env="staging"))

        assert section["activityTitle"] == "App Info:"
        assert section["activitySubtitle"].startswith("myapp v1.2.3 | ")
        assert section["facts"] == [
            {"name": "Hostname", "value": "test-host"},
            {"name": "Environment", "value": "staging"},
        ]
