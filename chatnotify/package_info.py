"""Identify the running application from its installed package metadata."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import metadata
from typing import Optional

from chatnotify.config import Settings

logger = logging.getLogger(__name__)

# Project-URL labels that point at an issue tracker
_BUG_URL_LABELS = ("bug tracker", "bugs", "issues", "issue tracker", "tracker")


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str
    bugs_url: Optional[str] = None


@lru_cache(maxsize=None)
def _read_distribution(dist_name: str) -> PackageInfo:
    if not dist_name:
        return PackageInfo(name="unknown", version="0.0.0")
    try:
        meta = metadata.metadata(dist_name)
    except metadata.PackageNotFoundError:
        logger.warning("Package metadata not found for %s", dist_name)
        return PackageInfo(name=dist_name, version="0.0.0")

    bugs_url = None
    for entry in meta.get_all("Project-URL") or []:
        label, _, url = entry.partition(",")
        if label.strip().lower() in _BUG_URL_LABELS and url.strip():
            bugs_url = url.strip().rstrip("/")
            break

    return PackageInfo(name=meta["Name"], version=meta["Version"], bugs_url=bugs_url)


def get_package_info(settings: Settings) -> PackageInfo:
    """
    Name, version and bug tracker URL of the app sending notifications.

    Explicit ``app_name``/``app_version``/``bugs_url`` settings take
    precedence over the metadata of ``app_package``.
    """
    info = _read_distribution(settings.app_package)
    return PackageInfo(
        name=settings.app_name or info.name,
        version=settings.app_version or info.version,
        bugs_url=settings.bugs_url.rstrip("/") or info.bugs_url,
    )
