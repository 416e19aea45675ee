"""Unit tests for provider markup rules."""

import inspect

import pytest

from chatnotify.channels.formatting import SlackFormatter, TeamsFormatter, TextFormatter


@pytest.mark.unit
class TestSlackFormatter:
    def test_format_defaults_to_bold(self):
        assert SlackFormatter.format("hi") == "*hi*"

    def test_format_applies_code_bold_italics_strikethrough_in_order(self):
        formatted = SlackFormatter.format("hi", code=True, bold=True, italics=True, strikethrough=True)
        assert formatted == "~_*`hi`*_~"

    def test_format_with_only_false_options_is_plain(self):
        assert SlackFormatter.format("hi", bold=False) == "hi"

    def test_format_url(self):
        assert SlackFormatter.format_url("https://example.com", "site") == "<https://example.com|site>"

    def test_escape_text_converts_each_character_once(self):
        assert SlackFormatter.escape_text("a<b&c>d") == "a&lt;b&amp;c&gt;d"

    def test_escape_text_leaves_plain_text_alone(self):
        assert SlackFormatter.escape_text("plain text") == "plain text"

    def test_escape_text_empty(self):
        assert SlackFormatter.escape_text("") == ""


@pytest.mark.unit
class TestTeamsFormatter:
    def test_format_uses_markdown_delimiters(self):
        assert TeamsFormatter.format("hi") == "**hi**"
        assert TeamsFormatter.italics("hi") == "*hi*"
        assert TeamsFormatter.strikethrough("hi") == "~~hi~~"
        assert TeamsFormatter.format("hi", code=True) == "`hi`"

    def test_format_url(self):
        assert TeamsFormatter.format_url("https://example.com", "site") == "[site](https://example.com)"

    def test_escape_single_newline(self):
        assert TeamsFormatter.escape_text("a\nb") == "a   \nb"

    def test_escape_consecutive_newlines_marks_blank_lines(self):
        escaped = TeamsFormatter.escape_text("a\n\nb")
        assert escaped == "a   \n&nbsp;   \nb"
        assert escaped.count("\n") == 2
        assert escaped.count("&nbsp;") == 1

    def test_escape_separate_runs(self):
        assert TeamsFormatter.escape_text("a\nb\n\n\nc") == "a   \nb   \n&nbsp;   \n&nbsp;   \nc"

    @pytest.mark.parametrize("value", ["", None])
    def test_escape_falsy_input_is_returned(self, value):
        assert TeamsFormatter.escape_text(value) == value


@pytest.mark.unit
class TestTextFormatter:
    def test_base_formatter_is_abstract(self):
        assert inspect.isabstract(TextFormatter)
        with pytest.raises(TypeError):
            TextFormatter()

    def test_provider_formatters_are_concrete(self):
        assert not inspect.isabstract(SlackFormatter)
        assert not inspect.isabstract(TeamsFormatter)

    def test_subclass_missing_escape_text_cannot_be_instantiated(self):
        class LinkOnly(TextFormatter):
            @staticmethod
            def format_url(url, text):
                return url

        with pytest.raises(TypeError):
            LinkOnly()
