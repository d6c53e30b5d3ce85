"""
Tests for Resource merge semantics and the tagged plugin results.
"""

import pytest
from crux.models import Contribution, Fields, Replacement, Resource
from crux.utils.html import parse_html


@pytest.mark.unit
class TestResourceMerge:
    """Right-biased, null-safe merging."""

    def test_later_value_wins(self):
        merged = Resource(fields={Fields.TITLE: "A"}).merge(Resource(fields={Fields.TITLE: "B"}))
        assert merged.fields == {Fields.TITLE: "B"}

    def test_null_never_overwrites(self):
        merged = Resource(fields={Fields.TITLE: "A"}).merge(Resource(fields={Fields.TITLE: None}))
        assert merged.fields == {Fields.TITLE: "A"}

    def test_nulls_are_stripped_on_construction(self):
        resource = Resource(fields={Fields.TITLE: None, Fields.DESCRIPTION: ""}, urls={Fields.FEED_URL: None})
        assert Fields.TITLE not in resource.fields
        assert resource.fields[Fields.DESCRIPTION] == ""
        assert resource.urls == {}

    def test_empty_string_is_a_value(self):
        merged = Resource(fields={Fields.DESCRIPTION: "long"}).merge(Resource(fields={Fields.DESCRIPTION: ""}))
        assert merged.fields[Fields.DESCRIPTION] == ""

    def test_disjoint_keys_are_unioned(self):
        left = Resource(fields={Fields.TITLE: "A"}, urls={Fields.FAVICON_URL: "https://a.example/f.ico"})
        right = Resource(fields={Fields.SITE_NAME: "Site"}, urls={Fields.FEED_URL: "https://a.example/rss"})
        merged = left + right
        assert merged.fields == {Fields.TITLE: "A", Fields.SITE_NAME: "Site"}
        assert set(merged.urls) == {Fields.FAVICON_URL, Fields.FEED_URL}

    def test_absent_url_and_document_keep_previous(self):
        document = parse_html("<p>hi</p>")
        merged = Resource(url="https://a.example/", document=document).merge(Resource(fields={Fields.TITLE: "T"}))
        assert merged.url == "https://a.example/"
        assert merged.document is document

    def test_merge_does_not_mutate_inputs(self):
        left = Resource(fields={Fields.TITLE: "A"})
        right = Resource(fields={Fields.TITLE: "B"})
        left.merge(right)
        assert left.fields == {Fields.TITLE: "A"}
        assert right.fields == {Fields.TITLE: "B"}

    def test_add_rejects_other_types(self):
        with pytest.raises(TypeError):
            Resource() + {"title": "A"}  # noqa: B018

    def test_resource_is_frozen(self):
        resource = Resource(url="https://a.example/")
        with pytest.raises(AttributeError):
            resource.url = "https://b.example/"  # type: ignore[misc]


@pytest.mark.unit
class TestReplaceOrigin:
    """Switching to a new origin document."""

    def test_takes_url_and_document_from_replacement(self):
        old_doc, new_doc = parse_html("<p>old</p>"), parse_html("<p>new</p>")
        current = Resource(url="https://a.example/amp", document=old_doc, fields={Fields.TITLE: "Old"})
        replaced = current.replace_origin(Resource(url="https://a.example/", document=new_doc))
        assert replaced.url == "https://a.example/"
        assert replaced.document is new_doc
        assert replaced.fields == {Fields.TITLE: "Old"}

    def test_drops_article_of_previous_document(self):
        current = Resource(url="https://a.example/amp", document=parse_html("<p>x</p>"), article=parse_html("<p>x</p>"))
        replaced = current.replace_origin(Resource(url="https://a.example/", document=parse_html("<p>y</p>")))
        assert replaced.article is None


@pytest.mark.unit
class TestPluginResults:
    def test_replacement_requires_url_and_document(self):
        with pytest.raises(ValueError):
            Replacement(Resource(url="https://a.example/"))
        with pytest.raises(ValueError):
            Replacement(Resource(document=parse_html("<p>x</p>")))

    def test_contribution_accepts_partial_resource(self):
        contribution = Contribution(Resource(fields={Fields.TITLE: "T"}))
        assert contribution.resource.url is None
