from .documents import FakeFetcher, link_list, page, prose_paragraphs
from .metric_delta import get_histogram_count, histogram_observes, metric_delta

__all__ = [
    "FakeFetcher",
    "get_histogram_count",
    "histogram_observes",
    "link_list",
    "metric_delta",
    "page",
    "prose_paragraphs",
]
