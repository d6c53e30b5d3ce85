"""
DOM pruning before scoring.

Removes everything that can never hold article text so boilerplate cannot
inflate candidate weights.
"""

from __future__ import annotations

import copy

from bs4 import BeautifulSoup, Comment

from ..utils.html import is_hidden, is_unlikely_candidate

REMOVE_TAGS = [
    "script",
    "style",
    "noscript",
    "template",
    "link",
    "meta",
    "nav",
    "aside",
    "footer",
    "header",
    "menu",
    "dialog",
    "svg",
    "canvas",
    "button",
    "input",
    "select",
    "textarea",
]

# Never pruned by class/id or visibility heuristics.
PROTECTED_TAGS = frozenset({"html", "head", "body", "article", "main"})


def preprocess(document: BeautifulSoup) -> BeautifulSoup:
    """Return a pruned copy of ``document``; the original is left untouched."""
    pruned = copy.copy(document)

    for comment in pruned.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for element in pruned.find_all(REMOVE_TAGS):
        if not element.decomposed:
            element.decompose()

    for element in pruned.find_all(True):
        if element.decomposed or element.name in PROTECTED_TAGS:
            continue
        if is_hidden(element) or is_unlikely_candidate(element):
            element.decompose()

    return pruned
