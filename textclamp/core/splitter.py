"""Split text into shortenable chunks at one boundary priority level."""

from __future__ import annotations

SINGLE_CHARACTER = ""


def split_on_boundary(text: str, token: str) -> list[str]:
    """Split ``text`` on ``token``; the empty token yields single characters.

    Always returns at least one element so a one-element result reliably means
    "nothing left to drop at this level".

    >>> split_on_boundary("Hello world. Bye", ".")
    ['Hello world', ' Bye']
    >>> split_on_boundary("abc", "")
    ['a', 'b', 'c']
    """
    if token == SINGLE_CHARACTER:
        return list(text) or [""]
    return text.split(token)


def join_tokens(tokens: list[str], token: str) -> str:
    return token.join(tokens)


def boundary_levels(priority: tuple[str, ...] | list[str]) -> list[str]:
    """Expand a configured priority list into the levels a node is tried at.

    A non-empty list gets the single-character level appended when it doesn't
    already end with it. An empty list stays empty: only whole nodes are removed.
    """
    levels = list(priority)
    if levels and levels[-1] != SINGLE_CHARACTER:
        levels.append(SINGLE_CHARACTER)
    return levels
