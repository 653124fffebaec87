"""Locate the trailing text node of a container."""

from __future__ import annotations

import logging

from bs4 import NavigableString, Tag

from textclamp.core.dom import is_text_node, last_leaf

logger = logging.getLogger(__name__)


def last_valid_text_node(container: Tag) -> NavigableString | None:
    """Return the last text node in document order with non-blank content.

    Blank leaves found at the end of the last-child chain (empty or
    whitespace-only strings, comments, childless elements such as ``<br>``)
    are detached and the walk restarts from ``container``, since removing a
    node changes what "last child" means. Each retry removes one node, so the
    walk always terminates.
    """
    while True:
        leaf = last_leaf(container)
        if leaf is None:
            return None
        if is_text_node(leaf) and leaf.strip():
            return leaf
        logger.debug("pruning blank trailing node %r", leaf)
        leaf.extract()
