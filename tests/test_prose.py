"""Tests for inline markup to text conversion."""

from apigen.htmlutil import parse_document
from apigen.lib import ProseExtractor


def extract(markup: str) -> str:
    node = parse_document(f"<div>{markup}</div>").query_selector("div")
    return ProseExtractor().extract(node)


class TestProseExtractor:
    def test_emphasis_and_strong(self):
        assert extract("<em>Optional</em>. At most <strong>one</strong> field") == \
            "*Optional*. At most **one** field"

    def test_links_keep_text_only(self):
        assert extract('Returns a <a href="#user">User</a> object') == "Returns a User object"

    def test_code_and_line_breaks(self):
        assert extract("Use <code>parse_mode</code><br/>next line") == "Use `parse_mode`\nnext line"

    def test_images_use_alt_then_src(self):
        assert extract('Dice <img alt="🎲" src="dice.png"/>') == "Dice 🎲"
        assert extract('Icon <img src="icon.png"/>') == "Icon [icon.png]"

    def test_list_items(self):
        assert extract("Values:<ul><li>one</li><li>two</li></ul>") == "Values:\n  - one\n  - two"

    def test_nested_paragraphs(self):
        assert extract("<p>Inside a <em>callout</em></p>") == "Inside a *callout*"

    def test_curly_quotes_are_straightened(self):
        assert extract("the bot’s “token”") == "the bot's \"token\""

    def test_unknown_markup_is_kept(self):
        assert extract("a <sup>2</sup>") == "a <sup>2</sup>"

    def test_whitespace_is_trimmed(self):
        assert extract("\n  padded  \n") == "padded"
