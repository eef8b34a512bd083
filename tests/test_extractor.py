"""
Unit tests for selector compilation and extraction.
"""

import re

import pytest
from scrape.config import ExtractionMode
from scrape.errors import InvalidSelector
from scrape.extractor import Extractor, compile_selector, parse_document, select_nodes


def extract(html, selector, **kwargs):
    return Extractor(**kwargs).extract(parse_document(html), compile_selector(selector))


class TestCompileSelector:
    """Test cases for compile_selector."""

    @pytest.mark.parametrize("selector", ["li[", "div >", ":::", "a[href=", ""])
    def test_invalid_selector_raises(self, selector):
        with pytest.raises(InvalidSelector):
            compile_selector(selector)

    def test_invalid_selector_message_names_selector(self):
        with pytest.raises(InvalidSelector, match=r"li\["):
            compile_selector("li[")

    def test_valid_selector_compiles(self):
        compiled = compile_selector("ul > li.item:not(#last)")
        assert compiled.pattern == "ul > li.item:not(#last)"


class TestSelectNodes:
    """Test cases for select_nodes."""

    def test_document_order(self, list_html):
        document = parse_document(list_html)
        nodes = select_nodes(document, compile_selector("li"))

        assert [node.get("id") for node in nodes] == ["first", None, "nested", "last"]

    def test_selector_list_keeps_document_order(self, list_html):
        """A selector list is not returned in the order its parts are written."""
        document = parse_document(list_html)
        nodes = select_nodes(document, compile_selector("#last, #nested, #first"))

        assert [node["id"] for node in nodes] == ["first", "nested", "last"]

    def test_count_limits_matches(self, list_html):
        document = parse_document(list_html)
        nodes = select_nodes(document, compile_selector("li"), count=2)

        assert len(nodes) == 2
        assert nodes[0]["id"] == "first"

    def test_no_matches(self, list_html):
        document = parse_document(list_html)
        assert select_nodes(document, compile_selector("table td")) == []


class TestExtractor:
    """Test cases for Extractor."""

    def test_outer_html_example(self):
        units = extract("<ul><li>A</li><li>B</li></ul>", "li")
        assert units == ["<li>A</li>", "<li>B</li>"]

    def test_attribute_missing_everywhere(self):
        units = extract(
            "<ul><li>A</li><li>B</li></ul>",
            "li",
            mode=ExtractionMode.ATTRIBUTE,
            attribute="id",
        )
        assert units == []

    def test_attribute_skips_nodes_without_it(self, list_html):
        units = extract(list_html, "li", mode=ExtractionMode.ATTRIBUTE, attribute="id")
        assert units == ["first", "nested", "last"]

    def test_attribute_empty_value_is_emitted(self, list_html):
        units = extract(list_html, "li", mode=ExtractionMode.ATTRIBUTE, attribute="data-empty")
        assert units == [""]

    def test_multi_valued_attribute_is_joined(self, list_html):
        units = extract(list_html, "#first", mode=ExtractionMode.ATTRIBUTE, attribute="class")
        assert units == ["item primary"]

    def test_inner_html(self, list_html):
        assert extract(list_html, "#first", mode=ExtractionMode.INNER) == ['<a href="/a">A</a>']

    def test_text(self, list_html):
        assert extract(list_html, "li > a, #nested", mode=ExtractionMode.TEXT) == ["A", "C"]

    def test_outer_html_keeps_attribute_order(self, list_html):
        assert extract(list_html, "#nested") == ['<li id="nested" class="item">C</li>']

    def test_inner_html_keeps_attribute_order(self):
        html = "<div><a href=\"/x\" class=\"btn big\" data-id=\"7\">go</a></div>"
        units = extract(html, "div", mode=ExtractionMode.INNER)

        assert units == ['<a href="/x" class="btn big" data-id="7">go</a>']

    def test_outer_html_keeps_entities_escaped(self):
        assert extract("<p>1 &lt; 2 &amp; 3</p>", "p") == ["<p>1 &lt; 2 &amp; 3</p>"]

    def test_count_cap_takes_first_in_document_order(self, list_html):
        units = extract(list_html, "li", mode=ExtractionMode.ATTRIBUTE, attribute="id", count=3)
        # the cap applies to matched nodes; the second <li> has no id
        assert units == ["first", "nested"]

    def test_count_cap_larger_than_matches(self):
        units = extract("<p>1</p><p>2</p>", "p", mode=ExtractionMode.TEXT, count=10)
        assert units == ["1", "2"]

    def test_count_cap_exact(self):
        html = "".join(f"<p>{i}</p>" for i in range(5))
        units = extract(html, "p", mode=ExtractionMode.TEXT, count=3)
        assert units == ["0", "1", "2"]

    def test_zero_matches(self, list_html):
        assert extract(list_html, "table") == []

    def test_regex_narrows_units(self, list_html):
        units = extract(list_html, "#first", regex=re.compile(r'href="[^"]*"'))
        assert units == ['href="/a"']

    def test_regex_without_match_keeps_unit(self):
        units = extract("<p>hello</p>", "p", mode=ExtractionMode.TEXT, regex=re.compile(r"\d+"))
        assert units == ["hello"]

    def test_extraction_is_idempotent_and_read_only(self, list_html):
        document = parse_document(list_html)
        before = str(document)
        selector = compile_selector("li")
        extractor = Extractor(mode=ExtractionMode.ATTRIBUTE, attribute="class")

        first = extractor.extract(document, selector)
        second = extractor.extract(document, selector)

        assert first == second
        assert str(document) == before

    def test_count_caps_nodes_not_units(self, list_html):
        """The cap counts matched nodes, whichever entry point is used."""
        document = parse_document(list_html)
        selector = compile_selector("li")
        extractor = Extractor(mode=ExtractionMode.ATTRIBUTE, attribute="id", count=2)

        assert extractor.extract(document, selector) == ["first"]
        assert list(extractor.iter_units(select_nodes(document, selector, extractor.count))) == ["first"]

    def test_iter_units_does_not_cap(self, list_html):
        nodes = select_nodes(parse_document(list_html), compile_selector("li"))
        units = list(Extractor(mode=ExtractionMode.ATTRIBUTE, attribute="id", count=2).iter_units(nodes))

        assert units == ["first", "nested", "last"]

    def test_attribute_mode_requires_name(self):
        with pytest.raises(ValueError):
            Extractor(mode=ExtractionMode.ATTRIBUTE)

    def test_empty_document(self):
        assert extract("", "p") == []
