"""
Article extraction: DOM pruning, candidate scoring and cleanup.
"""

from .article import ArticleResult, estimated_reading_time_ms, extract_article
from .postprocess import postprocess
from .preprocess import preprocess
from .weights import Candidate, find_best_candidate, flatten_candidates, get_weight

__all__ = [
    "ArticleResult",
    "Candidate",
    "estimated_reading_time_ms",
    "extract_article",
    "find_best_candidate",
    "flatten_candidates",
    "get_weight",
    "postprocess",
    "preprocess",
]
