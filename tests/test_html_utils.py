"""Tests for quoteanchor.html_utils module."""
from bs4 import BeautifulSoup

from quoteanchor.engine import AnchorConfig, Quotation, anchor_quotations
from quoteanchor.html_utils import (
    EXPLANATION_ATTR,
    MARKER_CLASS,
    MATCH_ATTR,
    apply_fragments,
    extract_leaves,
    highlight_html,
)

PAGE = "<p>The <b>Publisher</b> shall own the Work forever.</p>"
OWNERSHIP = Quotation("Publisher shall own the Work", "high", "Owns your work")


def _markers(html: str) -> list[str]:
    soup = BeautifulSoup(html, "html.parser")
    return [tag.get_text() for tag in soup.find_all("span", class_=MARKER_CLASS)]


class TestExtractLeaves:
    def test_skips_script_style_and_comments(self) -> None:
        html = (
            "<html><head><style>p { color: red }</style>"
            "<script>var s = 'shall own';</script></head>"
            "<body><p>The <b>Publisher</b> shall own</p><!-- note -->"
            "<noscript>enable js</noscript></body></html>"
        )
        leaves, nodes = extract_leaves(BeautifulSoup(html, "html.parser"))
        assert [leaf.text for leaf in leaves] == ["The ", "Publisher", " shall own"]
        assert [leaf.position for leaf in leaves] == [0, 1, 2]
        assert set(nodes) == {leaf.leaf_id for leaf in leaves}

    def test_skips_existing_markers_and_panel(self) -> None:
        html = (
            f'<p>Hello <span class="{MARKER_CLASS}">marked</span> world</p>'
            '<div class="quoteanchor-panel"><p>panel text</p></div>'
        )
        leaves, _ = extract_leaves(BeautifulSoup(html, "html.parser"))
        assert [leaf.text for leaf in leaves] == ["Hello ", " world"]

    def test_empty_document(self) -> None:
        leaves, nodes = extract_leaves(BeautifulSoup("", "html.parser"))
        assert leaves == []
        assert nodes == {}

    def test_head_text_is_not_a_leaf(self) -> None:
        html = (
            "<html><head><title>Draft shall</title></head>"
            "<body><p>own the Work</p></body></html>"
        )
        leaves, _ = extract_leaves(BeautifulSoup(html, "html.parser"))
        assert [leaf.text for leaf in leaves] == ["own the Work"]

    def test_title_skipped_without_body(self) -> None:
        html = "<title>Publishing Agreement terms</title><p>The Work</p>"
        leaves, _ = extract_leaves(BeautifulSoup(html, "html.parser"))
        assert [leaf.text for leaf in leaves] == ["The Work"]


class TestHighlightHtml:
    def test_marks_across_elements(self) -> None:
        html, result = highlight_html(PAGE, [OWNERSHIP])
        assert result.anchored == 1
        assert _markers(html) == ["Publisher", " shall own the Work"]
        soup = BeautifulSoup(html, "html.parser")
        assert soup.get_text() == BeautifulSoup(PAGE, "html.parser").get_text()

    def test_marker_attributes(self) -> None:
        html, _ = highlight_html(PAGE, [OWNERSHIP])
        tag = BeautifulSoup(html, "html.parser").find("span", class_=MARKER_CLASS)
        assert tag is not None
        assert "quoteanchor-high" in tag["class"]
        assert tag[EXPLANATION_ATTR] == "Owns your work"
        assert tag[MATCH_ATTR] == "exact"

    def test_marker_stays_inside_its_element(self) -> None:
        html, _ = highlight_html(PAGE, [OWNERSHIP])
        soup = BeautifulSoup(html, "html.parser")
        bold = soup.find("b")
        assert bold is not None
        assert bold.find("span", class_=MARKER_CLASS) is not None

    def test_no_match_leaves_html_alone(self) -> None:
        quote = Quotation("completely unrelated text not present anywhere", "low", "x")
        html, result = highlight_html(PAGE, [quote])
        assert result.outcomes[0].status == "unmatched"
        assert html == str(BeautifulSoup(PAGE, "html.parser"))

    def test_rerun_on_marked_output_does_not_double_mark(self) -> None:
        first, _ = highlight_html(PAGE, [OWNERSHIP])
        second, result = highlight_html(first, [OWNERSHIP])
        assert result.anchored == 0
        assert _markers(second) == _markers(first)

    def test_config_passed_through(self) -> None:
        _, result = highlight_html(PAGE, [OWNERSHIP], config=AnchorConfig(min_length=40))
        assert result.outcomes[0].status == "rejected"


class TestApplyFragments:
    def test_unmarked_leaves_untouched(self) -> None:
        soup = BeautifulSoup(PAGE, "html.parser")
        leaves, nodes = extract_leaves(soup)
        result = anchor_quotations(leaves, [])
        assert apply_fragments(soup, nodes, result.fragments) == 0
        assert str(soup) == str(BeautifulSoup(PAGE, "html.parser"))



class TestTitleNeverMarked:
    HTML = (
        "<html><head><title>Publishing Agreement terms</title></head>"
        "<body><p>The Publisher shall own the Work forever.</p></body></html>"
    )

    def test_title_quotation_unmatched(self) -> None:
        quote = Quotation("Publishing Agreement terms", "high", "x")
        html, result = highlight_html(self.HTML, [quote])
        assert result.outcomes[0].status == "unmatched"
        title = BeautifulSoup(html, "html.parser").find("title")
        assert title is not None
        assert title.find("span") is None
        assert title.get_text() == "Publishing Agreement terms"

    def test_no_match_across_head_and_body(self) -> None:
        html = (
            "<html><head><title>Draft shall</title></head>"
            "<body><p>own the Work forever.</p></body></html>"
        )
        _, result = highlight_html(html, [Quotation("Draft shall own the Work", "high", "x")])
        assert result.outcomes[0].status == "unmatched"


class TestMarkerClass:
    def test_category_slugged_to_one_class(self) -> None:
        quote = Quotation("Publisher shall own the Work", "Very High", "x")
        html, _ = highlight_html(PAGE, [quote])
        tag = BeautifulSoup(html, "html.parser").find("span", class_=MARKER_CLASS)
        assert tag is not None
        assert tag["class"] == [MARKER_CLASS, "quoteanchor-very-high"]

    def test_blank_category_defaults_to_medium(self) -> None:
        quote = Quotation("Publisher shall own the Work", "  ", "x")
        html, _ = highlight_html(PAGE, [quote])
        tag = BeautifulSoup(html, "html.parser").find("span", class_=MARKER_CLASS)
        assert tag is not None
        assert tag["class"] == [MARKER_CLASS, "quoteanchor-medium"]
