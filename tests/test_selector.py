"""Tests for the selector dialect."""

import pytest

from apigen.errors import ParseStructureError, SelectorSyntaxError
from apigen.htmlutil import ANY_VALUE, Selector, compile_selector, parse_document


def first_element(markup: str):
    root = parse_document(markup)
    return root.first_child.node


class TestSelectorParse:
    """Tests for compiling selector strings."""

    def test_bare_tag(self):
        s = Selector.parse("TD")
        assert s.tag == "td"
        assert s.classes == frozenset()
        assert s.attributes == {}

    def test_tag_with_classes_and_id(self):
        s = Selector.parse("div.a.b#main")
        assert s.tag == "div"
        assert s.classes == frozenset({"a", "b"})
        assert s.attributes == {"id": "main"}

    def test_attribute_with_value(self):
        s = Selector.parse('a[href="#message"]')
        assert s.tag == "a"
        assert s.attributes == {"href": "#message"}

    def test_attribute_any_value(self):
        s = Selector.parse("a[name]")
        assert s.attributes["name"] is ANY_VALUE

    def test_dots_inside_attribute_value(self):
        s = Selector.parse("a[href=api.html].anchor")
        assert s.tag == "a"
        assert s.classes == frozenset({"anchor"})
        assert s.attributes == {"href": "api.html"}

    def test_no_tag(self):
        s = Selector.parse(".anchor")
        assert s.tag is None
        assert s.classes == frozenset({"anchor"})

    def test_unterminated_bracket_is_fatal(self):
        with pytest.raises(SelectorSyntaxError) as exc:
            Selector.parse("a[href")
        assert exc.value.selector == "a[href"

    def test_stray_closing_bracket_is_fatal(self):
        with pytest.raises(SelectorSyntaxError):
            Selector.parse("ahref]")

    def test_empty_class_is_fatal(self):
        with pytest.raises(SelectorSyntaxError):
            Selector.parse("div.")

    def test_syntax_error_is_parse_structure_error(self):
        with pytest.raises(ParseStructureError):
            compile_selector("table[")

    def test_compile_is_cached(self):
        assert compile_selector("h4") is compile_selector("h4")


class TestSelectorMatches:
    """Tests for matching compiled selectors against nodes."""

    def test_classes_use_and_semantics(self):
        s = Selector.parse("div.a.b")
        assert s.matches(first_element('<div class="a b c"></div>'))
        assert not s.matches(first_element('<div class="a"></div>'))
        assert not s.matches(first_element("<div></div>"))

    def test_tag_is_case_insensitive(self):
        assert Selector.parse("TABLE").matches(first_element("<table></table>"))
        assert not Selector.parse("table").matches(first_element("<div></div>"))

    def test_id(self):
        s = Selector.parse("#dev_page_content")
        assert s.matches(first_element('<div id="dev_page_content"></div>'))
        assert not s.matches(first_element('<div id="other"></div>'))

    def test_concrete_attribute_requires_presence(self):
        s = Selector.parse("a[name=update]")
        assert s.matches(first_element('<a name="update"></a>'))
        assert not s.matches(first_element('<a name="message"></a>'))
        assert not s.matches(first_element("<a></a>"))

    def test_any_value_predicate_accepts_any_value(self):
        s = Selector.parse("a[href]")
        assert s.matches(first_element('<a href="#x"></a>'))
        assert s.matches(first_element('<a href=""></a>'))

    def test_absent_attribute_fails_only_concrete_predicates(self):
        node = first_element("<a></a>")
        assert Selector.parse("a[name]").matches(node)
        assert not Selector.parse("a[name=x]").matches(node)

    def test_any_value_predicate_still_checks_tag_and_classes(self):
        s = Selector.parse("a.anchor[name]")
        assert s.matches(first_element('<a class="anchor"></a>'))
        assert not s.matches(first_element("<a></a>"))
        assert not s.matches(first_element('<span class="anchor"></span>'))

    def test_combined_parts_must_all_hold(self):
        s = Selector.parse("a.anchor[name=update]")
        assert s.matches(first_element('<a class="anchor" name="update"></a>'))
        assert not s.matches(first_element('<a class="anchor" name="x"></a>'))
        assert not s.matches(first_element('<a name="update"></a>'))

    def test_text_and_comment_nodes_never_match(self):
        root = parse_document("text<!-- comment -->")
        s = Selector.parse("")
        for child in root.children():
            assert not s.matches(child.node)

    def test_document_never_matches(self):
        root = parse_document("<div></div>")
        assert not Selector.parse("").matches(root.node)

    def test_empty_selector_matches_any_element(self):
        assert Selector.parse("").matches(first_element("<span></span>"))
