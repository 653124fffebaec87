"""BeautifulSoup helpers for the node operations the engine needs.

``NavigableString`` is immutable, so "writing a node value" means swapping in
a new string object; :func:`set_text` returns the replacement and callers keep
that as their new reference.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString


def owner_document(element: PageElement | None) -> BeautifulSoup | None:
    """Return the document ``element`` is attached to, or None when detached."""
    if element is None:
        return None
    root: PageElement = element
    while root.parent is not None:
        root = root.parent
    if isinstance(root, BeautifulSoup) and root is not element:
        return root
    return None


def is_text_node(node: PageElement | None) -> bool:
    """True for character data that renders (comments, doctypes etc. don't)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def last_leaf(node: PageElement) -> PageElement | None:
    """Deepest node along the last-child chain of ``node``."""
    if not isinstance(node, Tag) or not node.contents:
        return None
    child = node.contents[-1]
    while isinstance(child, Tag) and child.contents:
        child = child.contents[-1]
    return child


def set_text(node: NavigableString, value: str) -> NavigableString:
    """Replace ``node`` with a string of the same class holding ``value``."""
    if str(node) == value:
        return node
    replacement = type(node)(value)
    node.replace_with(replacement)
    return replacement


def parse_fragment(markup: str) -> list[PageElement]:
    """Parse an HTML fragment into detached top-level nodes."""
    fragment = BeautifulSoup(markup, "html.parser")
    return [child.extract() for child in list(fragment.contents)]


def text_length(container: Tag) -> int:
    """Total length of the rendered character data under ``container``."""
    return sum(len(node) for node in container.descendants if is_text_node(node))


def parse_style(element: Tag) -> dict[str, str]:
    """Inline ``style`` attribute as an ordered property map."""
    raw = element.get("style") or ""
    if isinstance(raw, list):
        raw = " ".join(raw)
    props: dict[str, str] = {}
    for declaration in raw.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        if name:
            props[name] = value.strip()
    return props


def update_style(element: Tag, updates: dict[str, str]) -> None:
    """Merge ``updates`` into the inline style, keeping existing order."""
    props = parse_style(element)
    props.update(updates)
    element["style"] = "; ".join(f"{name}: {value}" for name, value in props.items())
