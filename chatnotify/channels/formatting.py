"""Inline markup rules for each provider."""

import re
from abc import ABC, abstractmethod

_SLACK_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_SLACK_ESCAPE_RE = re.compile(r"[&<>]")
_NEWLINES_RE = re.compile(r"\n+")

# Markdown collapses blank lines; Teams needs trailing spaces plus &nbsp;
TEAMS_LINE_BREAK = "   \n"
TEAMS_BLANK_LINE_MARKER = "&nbsp;"


class TextFormatter(ABC):
    """
    Provider-native inline markup.

    Subclasses set the delimiters; ``format`` applies them in the order
    code, bold, italics, strikethrough.
    """

    code_delimiter = "`"
    bold_delimiter = "*"
    italics_delimiter = "_"
    strikethrough_delimiter = "~"

    @classmethod
    def format(cls, text: str, **options: bool) -> str:
        """Wrap *text* in markup. Without options the text is made bold."""
        if not options:
            options = {"bold": True}
        if options.get("code"):
            text = f"{cls.code_delimiter}{text}{cls.code_delimiter}"
        if options.get("bold"):
            text = f"{cls.bold_delimiter}{text}{cls.bold_delimiter}"
        if options.get("italics"):
            text = f"{cls.italics_delimiter}{text}{cls.italics_delimiter}"
        if options.get("strikethrough"):
            text = f"{cls.strikethrough_delimiter}{text}{cls.strikethrough_delimiter}"
        return text

    @classmethod
    def bold(cls, text: str) -> str:
        return cls.format(text, bold=True)

    @classmethod
    def italics(cls, text: str) -> str:
        return cls.format(text, italics=True)

    @classmethod
    def strikethrough(cls, text: str) -> str:
        return cls.format(text, strikethrough=True)

    @staticmethod
    @abstractmethod
    def format_url(url: str, text: str) -> str:
        ...

    @staticmethod
    @abstractmethod
    def escape_text(text: str) -> str:
        ...


class SlackFormatter(TextFormatter):
    """Slack mrkdwn."""

    @staticmethod
    def format_url(url: str, text: str) -> str:
        return f"<{url}|{text}>"

    @staticmethod
    def escape_text(text: str) -> str:
        """
        Escape ``&``, ``<`` and ``>`` in a single pass.

        See https://api.slack.com/reference/surfaces/formatting#escaping
        """
        if not text:
            return text
        return _SLACK_ESCAPE_RE.sub(lambda m: _SLACK_ESCAPES[m.group(0)], text)


class TeamsFormatter(TextFormatter):
    """MessageCard markdown."""

    bold_delimiter = "**"
    italics_delimiter = "*"
    strikethrough_delimiter = "~~"

    @staticmethod
    def format_url(url: str, text: str) -> str:
        return f"[{text}]({url})"

    @staticmethod
    def escape_text(text: str) -> str:
        """
        Turn every run of N newlines into N Teams line breaks.

        Breaks after the first one in a run are prefixed with ``&nbsp;`` so
        the blank lines are not collapsed.
        """
        if not text:
            return text

        def _replace(match: re.Match) -> str:
            count = len(match.group(0))
            return f"{TEAMS_LINE_BREAK}{TEAMS_BLANK_LINE_MARKER}" * (count - 1) + TEAMS_LINE_BREAK

        return _NEWLINES_RE.sub(_replace, text)
