"""
Tests for cleanup of the selected article node.
"""

import pytest
from crux.config import PostprocessSettings
from crux.extractor import postprocess
from crux.utils.html import parse_html

from tests.helpers import link_list, prose_paragraphs

BASE = "https://example.com/news/story"


def clean(inner: str, base_url=None, settings=None, tag: str = "article"):
    node = parse_html(f"<{tag}>{inner}</{tag}>").find(tag)
    return postprocess(node, settings, base_url=base_url)


@pytest.mark.unit
class TestNoiseRemoval:
    def test_removes_share_widgets_and_hidden_elements(self):
        result = clean(
            prose_paragraphs(2)
            + '<div class="share-buttons"><a href="/s">Share this story on every network</a></div>'
            + '<p style="display:none">Invisible paragraph that should be dropped entirely.</p>'
        )
        assert "Share this" not in result.get_text()
        assert "Invisible" not in result.get_text()
        assert len(result.find_all("p")) == 2

    def test_removes_form_controls(self):
        result = clean(prose_paragraphs(1) + '<form><input name="q"><button>Go</button></form>')
        assert result.find("form") is None
        assert result.find("input") is None

    def test_keeps_video_iframes_only(self):
        result = clean(
            prose_paragraphs(1)
            + '<div><iframe src="https://www.youtube.com/embed/abc" allowfullscreen></iframe></div>'
            + '<iframe src="https://ads.example.net/frame"></iframe>'
        )
        frames = result.find_all("iframe")
        assert [frame["src"] for frame in frames] == ["https://www.youtube.com/embed/abc"]
        assert frames[0].has_attr("allowfullscreen")

    def test_removes_link_lists(self):
        result = clean(prose_paragraphs(2) + f"<div>{link_list(8)}</div>")
        assert result.find("ul") is None
        assert result.find("a") is None

    def test_keeps_paragraphs_with_inline_links(self):
        result = clean('<p>Read the <a href="/report">full report from the city council</a> today.</p>')
        assert result.find("a") is not None


@pytest.mark.unit
class TestShortBlocks:
    def test_drops_short_text_blocks(self):
        result = clean(prose_paragraphs(1) + "<div>Advertisement</div><p>Share:</p>")
        assert "Advertisement" not in result.get_text()
        assert "Share:" not in result.get_text()

    def test_keeps_short_blocks_with_media_or_headings(self):
        result = clean(prose_paragraphs(1) + '<div><img src="/a.png" alt="Chart"></div><section><h2>Next</h2></section>')
        assert result.find("img") is not None
        assert result.find("h2").get_text() == "Next"

    def test_threshold_is_configurable(self):
        result = clean("<p>Brief note.</p>" * 2 + prose_paragraphs(1), settings=PostprocessSettings(min_paragraph_length=0))
        assert "Brief note." in result.get_text()

    def test_root_is_never_removed(self):
        result = clean("tiny", tag="div")
        assert result.find("div") is not None
        assert result.get_text() == "tiny"


@pytest.mark.unit
class TestAttributesAndText:
    def test_strips_presentation_attributes(self):
        result = clean(
            '<p class="lead" style="color: red" id="first" data-x="1" title="Lead">'
            "A paragraph long enough to survive the cleanup pass.</p>"
        )
        paragraph = result.find("p")
        assert paragraph.attrs == {"title": "Lead"}

    def test_root_attributes_are_cleaned(self):
        node = parse_html(f'<article class="story" data-id="3" title="Story">{prose_paragraphs(1)}</article>')
        result = postprocess(node.find("article"))
        assert result.find("article").attrs == {"title": "Story"}

    def test_unwraps_inline_styling_tags(self):
        result = clean('<p>Some <span class="hl">highlighted</span> and <font color="red">colored</font> words here.</p>')
        assert result.find("span") is None
        assert result.find("font") is None
        assert result.find("p").get_text() == "Some highlighted and colored words here."

    def test_resolves_relative_urls(self):
        result = clean(
            '<p>See <a href="../other">the other story</a> and the chart below for details.</p>'
            '<figure><img src="/img/chart.png"></figure>',
            base_url=BASE,
        )
        assert result.find("a")["href"] == "https://example.com/other"
        assert result.find("img")["src"] == "https://example.com/img/chart.png"

    def test_drops_javascript_links(self):
        result = clean('<p>Click <a href="javascript:alert(1)">here</a> to see the rest of the content.</p>')
        assert not result.find("a").has_attr("href")

    def test_fragment_links_stay_relative(self):
        result = clean('<p>Jump to <a href="#notes">the notes</a> at the end of this long paragraph.</p>', base_url=BASE)
        assert result.find("a")["href"] == "#notes"

    def test_normalizes_whitespace_outside_pre(self):
        result = clean("<p>Lots   of\n\n   space in   this paragraph of text.</p>\n\n<pre>keep\n    indent</pre>")
        assert result.find("p").string == "Lots of space in this paragraph of text."
        assert result.find("pre").string == "keep\n    indent"

    def test_input_node_is_not_modified(self):
        node = parse_html('<article><div class="sidebar">x</div><p>text</p></article>').find("article")
        postprocess(node)
        assert node.find("div") is not None

    def test_malformed_urls_are_left_unresolved(self):
        result = clean(
            '<p>Read the <a href="http://[oops/x">broken link</a> in this otherwise ordinary paragraph.</p>'
            '<iframe src="http://[oops/embed"></iframe>',
            base_url=BASE,
        )
        assert result.find("a")["href"] == "http://[oops/x"
        assert result.find("iframe") is None
