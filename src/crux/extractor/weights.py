"""
Main-content scoring.

Every block-level element is a candidate. A candidate's weight combines:

- a base score for its tag,
- a bonus or penalty from class/id keywords,
- prose points for its own text (length and punctuation), scaled down by the
  share of that text sitting inside links,
- a penalty when the link density of its whole subtree is high,
- a fraction of the positive weight of each child candidate.

Weights are computed in one bottom-up pass over the flattened candidate list
(reverse document order visits children before parents), so deeply nested
markup never recurses.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from ..config.config import ScoringSettings
from ..utils.html import BLOCK_TAGS, has_negative_hint, has_positive_hint, normalize_whitespace

logger = structlog.get_logger(__name__)

_BLOCK_TAG_NAMES = sorted(BLOCK_TAGS)
_SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template"})
_PUNCTUATION = re.compile(r"[,.;:!?、。，；：！？]")


@dataclass(frozen=True)
class Candidate:
    """A scored element; only lives for the duration of one scoring pass."""

    element: Tag
    weight: int


def own_text(element: Tag) -> Tuple[str, int]:
    """Text of ``element`` that is not inside a nested block element.

    Returns:
        Tuple of (whitespace-normalized text, length of the part inside links)
    """
    parts: List[str] = []
    link_parts: List[str] = []
    stack: List[Tuple[object, bool]] = [(child, False) for child in reversed(element.contents)]
    while stack:
        node, in_link = stack.pop()
        if isinstance(node, NavigableString):
            if isinstance(node, PreformattedString):
                continue
            parts.append(str(node))
            if in_link:
                link_parts.append(str(node))
        elif isinstance(node, Tag):
            if node.name in BLOCK_TAGS or node.name in _SKIPPED_TAGS:
                continue
            child_in_link = in_link or node.name == "a"
            stack.extend((child, child_in_link) for child in reversed(node.contents))
    text = normalize_whitespace("".join(parts))
    link_text = normalize_whitespace(" ".join(link_parts))
    return text, min(len(link_text), len(text))


def structural_weight(element: Tag, settings: ScoringSettings) -> float:
    """Tag base score plus class/id hints, independent of any text."""
    weight = float(settings.tag_weights.get(element.name, settings.default_tag_weight))
    if has_positive_hint(element):
        weight += settings.class_weight
    if has_negative_hint(element):
        weight -= settings.class_weight
    return weight


def own_weight(element: Tag, text: str, link_length: int, settings: ScoringSettings) -> float:
    """Weight of an element ignoring its child candidates."""
    weight = structural_weight(element, settings)
    if text and len(text) >= settings.min_own_text_length:
        length_points = min(len(text) / settings.length_divisor, settings.length_cap)
        punctuation = len(_PUNCTUATION.findall(text))
        punctuation_points = min(punctuation * settings.punctuation_weight, settings.punctuation_cap)
        link_density = link_length / len(text)
        weight += (length_points + punctuation_points) * (1.0 - link_density)
    return weight


def flatten_candidates(root: Tag) -> List[Tag]:
    """Candidates under ``root`` in document order.

    A ``BeautifulSoup`` object itself is never a candidate; any other root is.
    """
    candidates: List[Tag] = [] if isinstance(root, BeautifulSoup) else [root]
    candidates.extend(root.find_all(_BLOCK_TAG_NAMES))
    return candidates


def _parent_indices(candidates: List[Tag]) -> List[int]:
    positions = {id(element): index for index, element in enumerate(candidates)}
    parents: List[int] = []
    for element in candidates:
        parent = element.parent
        while parent is not None and id(parent) not in positions:
            parent = parent.parent
        parents.append(positions[id(parent)] if parent is not None else -1)
    return parents


def iter_weights(
    candidates: List[Tag],
    settings: ScoringSettings,
    parents: Optional[List[int]] = None,
    skipped: Optional[Set[int]] = None,
) -> Iterator[Tuple[int, float, int]]:
    """Yield ``(index, weight, subtree text length)`` children-first.

    ``candidates`` must be in document order. Indices the consumer adds to
    ``skipped`` while iterating are passed over without being scored; they
    must be closed upwards (a skipped index's ancestors are skipped too).
    """
    if parents is None:
        parents = _parent_indices(candidates)
    skipped = skipped if skipped is not None else set()
    count = len(candidates)
    text_lengths = [0] * count
    link_lengths = [0] * count
    inherited = [0.0] * count

    for index in range(count - 1, -1, -1):
        if index in skipped:
            continue
        element = candidates[index]
        text, link_length = own_text(element)
        text_lengths[index] += len(text)
        link_lengths[index] += link_length

        weight = own_weight(element, text, link_length, settings) + inherited[index]
        if text_lengths[index]:
            link_density = link_lengths[index] / text_lengths[index]
            if link_density > settings.link_density_threshold:
                weight -= link_density * settings.link_density_penalty

        parent = parents[index]
        if parent >= 0:
            text_lengths[parent] += text_lengths[index]
            link_lengths[parent] += link_lengths[index]
            inherited[parent] += max(weight, 0.0) * settings.parent_fraction

        yield index, weight, text_lengths[index]


def get_weight(element: Tag, settings: Optional[ScoringSettings] = None) -> int:
    """Full weight of a single element, including everything nested in it."""
    settings = settings or ScoringSettings()
    weight = 0.0
    for _, weight, _ in iter_weights(flatten_candidates(element), settings):
        pass
    # The root is first in document order, so it is yielded last.
    return math.floor(weight)


def _skip_ancestors(index: int, parents: List[int], skipped: Set[int]) -> None:
    parent = parents[index]
    while parent >= 0 and parent not in skipped:
        skipped.add(parent)
        parent = parents[parent]


def _promote_to_container(index: int, candidates: List[Tag], parents: List[int], settings: ScoringSettings) -> int:
    """Climb to wrappers that hold exactly the same text under a stronger tag or class.

    ``<article><p>...</p></article>`` selects the article rather than its only paragraph.
    """
    child_counts = Counter(parents)
    while True:
        parent = parents[index]
        if parent < 0 or child_counts[parent] != 1:
            return index
        container = candidates[parent]
        if own_text(container)[0]:
            return index
        if structural_weight(container, settings) <= structural_weight(candidates[index], settings):
            return index
        index = parent


def find_best_candidate(root: Tag, settings: Optional[ScoringSettings] = None) -> Optional[Candidate]:
    """Pick the highest-weighted candidate under ``root``.

    Ties go to the element that comes first in document order. Once a candidate
    passes ``early_exit_weight`` its ancestors are no longer scored, since they
    would only echo its weight; the rest of the document still is, so an earlier
    candidate of equal weight keeps the tie. Returns None when nothing reaches
    ``min_weight`` or no candidate carries enough text.
    """
    settings = settings or ScoringSettings()
    candidates = flatten_candidates(root)
    parents = _parent_indices(candidates)
    skipped: Set[int] = set()
    best_index = -1
    best_weight = -math.inf

    for index, weight, text_length in iter_weights(candidates, settings, parents, skipped):
        if text_length < settings.min_candidate_text_length:
            continue
        # Visiting in reverse document order: >= lets the earlier element win a tie.
        if weight >= best_weight:
            best_index, best_weight = index, weight
        if weight > settings.early_exit_weight:
            if not skipped:
                logger.debug("Early exit while scoring", tag=candidates[index].name, weight=weight)
            _skip_ancestors(index, parents, skipped)

    if best_index < 0 or best_weight < settings.min_weight:
        return None
    selected = _promote_to_container(best_index, candidates, parents, settings)
    return Candidate(element=candidates[selected], weight=math.floor(best_weight))
