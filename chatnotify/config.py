from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

_MISSING = object()


class SlackSettings(BaseModel):
    token: str = ""
    webhook: str = ""
    channel: str = ""
    username: str = "slackbot"

    # Per-channel webhooks; `webhook` is the fallback for every channel
    webhooks: dict[str, str] = Field(default_factory=dict)


class TeamsSettings(BaseModel):
    default_channel: str = "default"

    # channel -> webhook name -> url
    webhooks: dict[str, dict[str, str]] = Field(default_factory=dict)


class Settings(BaseSettings):
    app_env: str = "development"
    test_environments: list[str] = ["test", "testing"]

    # Installed distribution describing the running app
    app_package: str = ""
    app_name: str = ""
    app_version: str = ""
    bugs_url: str = ""

    http_timeout: float = 10.0

    slack: SlackSettings = Field(default_factory=SlackSettings)
    teams: TeamsSettings = Field(default_factory=TeamsSettings)

    model_config = {"env_file": ".env", "extra": "ignore", "env_nested_delimiter": "__"}

    def current_environment_name(self) -> str:
        return self.app_env

    def is_test_environment(self) -> bool:
        return self.app_env.lower() in {env.lower() for env in self.test_environments}

    def get(self, path: str, default: Any = None) -> Any:
        """
        Read a dotted path such as ``slack.token`` or ``teams.ops.alerts``.

        Model attributes and dict keys are both walked. Missing or empty
        values return *default*.
        """
        node: Any = self
        for part in path.split("."):
            node = _child(node, part)
            if node is _MISSING:
                return default
        if node in ("", None):
            return default
        return node

    def set(self, path: str, value: Any) -> None:
        """Write a dotted path, creating intermediate dicts as needed."""
        parts = path.split(".")
        node: Any = self
        for part in parts[:-1]:
            child = _child(node, part)
            if child is _MISSING:
                child = {}
                _assign(node, part, child)
            node = child
        _assign(node, parts[-1], value)


def _child(node: Any, key: str) -> Any:
    if isinstance(node, dict):
        return node.get(key, _MISSING)
    if isinstance(node, BaseModel) and key in type(node).model_fields:
        return getattr(node, key)
    return _MISSING


def _assign(node: Any, key: str, value: Any) -> None:
    if isinstance(node, dict):
        node[key] = value
    elif isinstance(node, BaseModel) and key in type(node).model_fields:
        setattr(node, key, value)
    else:
        raise KeyError(f"Cannot set '{key}' on {type(node).__name__}")


settings = Settings()


def get_settings(override: Optional[Settings] = None) -> Settings:
    return override if override is not None else settings
