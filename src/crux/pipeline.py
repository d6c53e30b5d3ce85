"""
Runs an ordered list of plugins over one resource.
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Optional, Tuple

import structlog

from .errors import PluginError
from .models import Contribution, Replacement, Resource
from .observability import metrics
from .protocols import Plugin

logger = structlog.get_logger(__name__)


def plugin_name(plugin: Any) -> str:
    """Label used for a plugin in logs and metrics."""
    name = getattr(plugin, "name", None)
    return name if isinstance(name, str) and name else type(plugin).__name__


class PipelineRunner:
    """Folds plugin results into a single resource.

    Plugins run one at a time, in order, so each sees the merged output of
    the ones before it. A failing plugin is logged and contributes nothing;
    it never aborts the run. Cancellation is not caught.
    """

    async def run(self, plugins: Iterable[Plugin], seed: Resource) -> Resource:
        resource = seed
        start_time = time.monotonic()

        for plugin in plugins:
            name = plugin_name(plugin)
            try:
                if not plugin.can_handle(resource.url):
                    logger.debug("Plugin skipped", plugin=name, url=resource.url)
                    metrics.increment("plugin_runs", plugin=name, outcome="skipped")
                    continue
                result = await plugin.handle(resource)
                resource, outcome = self._apply(name, resource, result)
            except Exception as e:
                logger.warning(
                    "Plugin failed",
                    plugin=name,
                    url=resource.url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                metrics.increment("plugin_runs", plugin=name, outcome="failed")
                continue
            metrics.increment("plugin_runs", plugin=name, outcome=outcome)

        logger.debug(
            "Pipeline finished",
            url=resource.url,
            fields=sorted(resource.fields),
            urls=sorted(resource.urls),
            has_article=resource.article is not None,
            duration_ms=round((time.monotonic() - start_time) * 1000, 2),
        )
        return resource

    @staticmethod
    def _apply(name: str, resource: Resource, result: Optional[Any]) -> Tuple[Resource, str]:
        if result is None:
            return resource, "empty"
        if isinstance(result, Replacement):
            logger.debug("Plugin replaced document", plugin=name, old_url=resource.url, new_url=result.resource.url)
            return resource.replace_origin(result.resource), "replaced"
        if isinstance(result, Contribution):
            return resource.merge(result.resource), "contributed"
        if isinstance(result, Resource):
            return resource.merge(result), "contributed"
        raise PluginError(name, f"unsupported result type {type(result).__name__}")

