"""
Tests for PipelineRunner ordering, merge policy and failure containment.
"""

import asyncio
from typing import List, Optional

import pytest
from crux.models import Contribution, Fields, Replacement, Resource
from crux.observability.metrics import METRICS
from crux.pipeline import PipelineRunner, plugin_name
from crux.protocols import Plugin
from crux.utils.html import parse_html

from tests.helpers import metric_delta


class StaticPlugin:
    """Returns a fixed result and records what it was handed."""

    def __init__(self, result, *, handles: bool = True, name: str = "static"):
        self.result = result
        self.handles = handles
        self.name = name
        self.seen: List[Resource] = []

    def can_handle(self, url: Optional[str]) -> bool:
        return self.handles

    async def handle(self, resource: Resource):
        self.seen.append(resource)
        return self.result


class FailingPlugin:
    name = "failing"

    def can_handle(self, url: Optional[str]) -> bool:
        return True

    async def handle(self, resource: Resource):
        raise KeyError("malformed attribute")


class RequiresUrlPlugin:
    def can_handle(self, url: Optional[str]) -> bool:
        if url is None:
            raise ValueError("url required")
        return True

    async def handle(self, resource: Resource):
        return Contribution(Resource(fields={"seen": "yes"}))


def title(value):
    return Contribution(Resource(fields={Fields.TITLE: value}))


@pytest.mark.unit
class TestPipelineRunner:
    @pytest.mark.asyncio
    async def test_right_biased_merge(self):
        result = await PipelineRunner().run([StaticPlugin(title("A")), StaticPlugin(title("B"))], Resource())
        assert result.fields[Fields.TITLE] == "B"

    @pytest.mark.asyncio
    async def test_null_does_not_erase(self):
        result = await PipelineRunner().run([StaticPlugin(title("A")), StaticPlugin(title(None))], Resource())
        assert result.fields[Fields.TITLE] == "A"

    @pytest.mark.asyncio
    async def test_later_plugins_see_earlier_output(self):
        second = StaticPlugin(None)
        await PipelineRunner().run([StaticPlugin(title("A")), second], Resource(url="https://example.com/"))
        assert second.seen[0].fields == {Fields.TITLE: "A"}
        assert second.seen[0].url == "https://example.com/"

    @pytest.mark.asyncio
    async def test_skips_plugins_that_cannot_handle(self):
        skipped = StaticPlugin(title("never"), handles=False, name="skipped")
        with metric_delta(METRICS["plugin_runs"].labels(plugin="skipped", outcome="skipped")):
            result = await PipelineRunner().run([skipped], Resource())
        assert skipped.seen == []
        assert result.fields == {}

    @pytest.mark.asyncio
    async def test_failure_is_contained(self):
        after = StaticPlugin(title("after"))
        with metric_delta(METRICS["plugin_runs"].labels(plugin="failing", outcome="failed")):
            result = await PipelineRunner().run([StaticPlugin(title("before")), FailingPlugin(), after], Resource())
        assert result.fields[Fields.TITLE] == "after"
        assert len(after.seen) == 1

    @pytest.mark.asyncio
    async def test_can_handle_failure_is_contained(self):
        result = await PipelineRunner().run([RequiresUrlPlugin(), StaticPlugin(title("T"))], Resource())
        assert result.fields == {Fields.TITLE: "T"}

    @pytest.mark.asyncio
    async def test_unsupported_result_is_contained(self):
        with metric_delta(METRICS["plugin_runs"].labels(plugin="odd", outcome="failed")):
            result = await PipelineRunner().run(
                [StaticPlugin({"title": "dict"}, name="odd"), StaticPlugin(title("T"))], Resource()
            )
        assert result.fields == {Fields.TITLE: "T"}

    @pytest.mark.asyncio
    async def test_bare_resource_is_merged(self):
        result = await PipelineRunner().run([StaticPlugin(Resource(fields={Fields.TITLE: "bare"}))], Resource())
        assert result.fields == {Fields.TITLE: "bare"}

    @pytest.mark.asyncio
    async def test_replacement_switches_document_for_later_plugins(self):
        original = parse_html("<p>amp</p>")
        canonical = parse_html("<p>canonical</p>")
        replacement = Replacement(Resource(url="https://example.com/", document=canonical))
        after = StaticPlugin(None)

        result = await PipelineRunner().run(
            [StaticPlugin(title("kept")), StaticPlugin(replacement, name="amp"), after],
            Resource(url="https://example.com/amp", document=original),
        )

        assert after.seen[0].document is canonical
        assert after.seen[0].url == "https://example.com/"
        assert result.url == "https://example.com/"
        assert result.document is canonical
        assert result.fields == {Fields.TITLE: "kept"}

    @pytest.mark.asyncio
    async def test_empty_plugin_list_returns_seed(self):
        seed = Resource(url="https://example.com/")
        assert await PipelineRunner().run([], seed) is seed

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        class Cancelling:
            def can_handle(self, url):
                return True

            async def handle(self, resource):
                raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await PipelineRunner().run([Cancelling()], Resource())

    def test_plugin_name(self):
        assert plugin_name(FailingPlugin()) == "failing"
        assert plugin_name(RequiresUrlPlugin()) == "RequiresUrlPlugin"

    def test_plugins_satisfy_protocol(self):
        assert isinstance(StaticPlugin(None), Plugin)
        assert isinstance(FailingPlugin(), Plugin)
