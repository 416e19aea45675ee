"""Unit tests for package metadata lookup."""

from email.message import Message
from unittest.mock import patch

import pytest

from chatnotify.package_info import PackageInfo, get_package_info


def _metadata(name, version, urls):
    meta = Message()
    meta["Name"] = name
    meta["Version"] = version
    for url in urls:
        meta["Project-URL"] = url
    return meta


@pytest.mark.unit
class TestGetPackageInfo:
    def test_overrides_win(self, settings_factory):
        settings = settings_factory(bugs_url="https://github.com/acme/app/issues/")
        info = get_package_info(settings)
        assert info == PackageInfo(
            name="myapp",
            version="1.2.3",
            bugs_url="https://github.com/acme/app/issues",
        )

    def test_reads_installed_distribution(self, settings_factory):
        settings = settings_factory()
        settings.app_name = ""
        settings.app_version = ""
        settings.app_package = "acme-app"
        meta = _metadata(
            "acme-app",
            "4.5.6",
            ["Homepage, https://acme.dev", "Bug Tracker, https://github.com/acme/app/issues"],
        )

        with patch("chatnotify.package_info.metadata.metadata", return_value=meta):
            info = get_package_info(settings)

        assert info.name == "acme-app"
        assert info.version == "4.5.6"
        assert info.bugs_url == "https://github.com/acme/app/issues"

    def test_missing_distribution(self, settings_factory):
        settings = settings_factory()
        settings.app_name = ""
        settings.app_version = ""
        settings.app_package = "definitely-not-installed-pkg"

        info = get_package_info(settings)

        assert info.name == "definitely-not-installed-pkg"
        assert info.version == "0.0.0"
        assert info.bugs_url is None

    def test_no_package_configured(self, settings_factory):
        settings = settings_factory()
        settings.app_name = ""
        settings.app_version = ""
        assert get_package_info(settings) == PackageInfo(name="unknown", version="0.0.0")
