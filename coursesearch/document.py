"""
Minimal document query layer.

The parsers only need a handful of operations on an HTML tree (select by CSS,
read an attribute, read text, check a class, walk following siblings).
They are expressed by the Node protocol so that extraction logic never
touches BeautifulSoup directly, and tests can hand in synthetic trees.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from bs4 import BeautifulSoup, Tag


class Node(Protocol):
    def select(self, selector: str) -> List["Node"]: ...

    def select_one(self, selector: str) -> Optional["Node"]: ...

    def attr(self, name: str) -> Optional[str]: ...

    def text(self) -> str: ...

    def has_class(self, name: str) -> bool: ...

    def matches(self, selector: str) -> bool: ...

    def following_siblings(self) -> List["Node"]: ...


class SoupNode:
    """
    Node implementation backed by a BeautifulSoup Tag.
    """

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def select(self, selector: str) -> List["SoupNode"]:
        return [SoupNode(t) for t in self._tag.select(selector)]

    def select_one(self, selector: str) -> Optional["SoupNode"]:
        found = self._tag.select_one(selector)
        return SoupNode(found) if found is not None else None

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        # multi-valued attributes (class, rel, ...) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text(self) -> str:
        return self._tag.get_text()

    def has_class(self, name: str) -> bool:
        return name in (self._tag.get("class") or [])

    def matches(self, selector: str) -> bool:
        return bool(self._tag.css.match(selector))

    def following_siblings(self) -> List["SoupNode"]:
        # find_next_siblings() without filters only yields Tags (no strings)
        return [SoupNode(t) for t in self._tag.find_next_siblings()]

    def __repr__(self) -> str:
        return f"SoupNode(<{self._tag.name}>)"


def load_document(html: str) -> SoupNode:
    """
    Parse raw HTML text into a root Node.
    """
    return SoupNode(BeautifulSoup(html or "", "html.parser"))
