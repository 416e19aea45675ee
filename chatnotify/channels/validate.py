"""Config validation for provider webhooks."""

from typing import Optional
from urllib.parse import urlparse

from chatnotify.errors import ConfigurationError


def validate_webhook_url(value, field_name: str = "webhook") -> Optional[str]:
    """
    Validate a webhook URL.
    Returns None if valid, or an error message string if invalid.
    """
    if not isinstance(value, str) or not value:
        return f"Missing required field: {field_name}"
    try:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https"):
            return f"{field_name} must use http or https protocol"
        if not parsed.netloc:
            return f"{field_name} is not a valid URL"
    except ValueError:
        return f"{field_name} is not a valid URL"
    return None


def require_webhook_url(value, field_name: str = "webhook") -> str:
    err = validate_webhook_url(value, field_name)
    if err:
        raise ConfigurationError(err)
    return value
