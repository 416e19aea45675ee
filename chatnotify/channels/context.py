"""Default "App Info" block appended to every message unless suppressed."""

import datetime
import os
import socket
import time
from dataclasses import dataclass
from typing import Optional

from chatnotify.config import Settings
from chatnotify.package_info import get_package_info

# Set by process managers such as pm2
PROCESS_NAME_ENV = "name"
PROCESS_ID_ENV = "pm_id"

APP_INFO_TITLE = "App Info:"


@dataclass
class AppContext:
    hostname: str
    environment: str
    app_name: str
    app_version: str
    process_suffix: str
    timestamp: float

    @property
    def app_label(self) -> str:
        return f"{self.app_name} v{self.app_version} {self.process_suffix}".rstrip()

    @property
    def rendered_at(self) -> str:
        return datetime.datetime.fromtimestamp(self.timestamp).strftime("%Y-%m-%d %H:%M:%S")


def process_suffix(environ: Optional[dict] = None) -> str:
    """``| <name> <id>`` when a process manager identity is present, else ``""``."""
    environ = os.environ if environ is None else environ
    name = environ.get(PROCESS_NAME_ENV)
    proc_id = environ.get(PROCESS_ID_ENV)
    if not name and not proc_id:
        return ""
    return f"| {name or ''} {proc_id or -1}"


def collect_app_context(settings: Settings) -> AppContext:
    info = get_package_info(settings)
    return AppContext(
        hostname=socket.gethostname(),
        environment=settings.current_environment_name(),
        app_name=info.name,
        app_version=info.version,
        process_suffix=process_suffix(),
        timestamp=time.time(),
    )


def default_slack_attachment(settings: Settings) -> dict:
    ctx = collect_app_context(settings)
    return {
        "title": APP_INFO_TITLE,
        "fields": [
            {"title": "Hostname", "value": ctx.hostname, "short": True},
            {"title": "Environment", "value": ctx.environment, "short": True},
        ],
        "footer": ctx.app_label,
        "ts": ctx.timestamp,
    }


def default_teams_section(settings: Settings) -> dict:
    ctx = collect_app_context(settings)
    return {
        "activityTitle": APP_INFO_TITLE,
        "activitySubtitle": f"{ctx.app_label} | {ctx.rendered_at}",
        "facts": [
            {"name": "Hostname", "value": ctx.hostname},
            {"name": "Environment", "value": ctx.environment},
        ],
    }
