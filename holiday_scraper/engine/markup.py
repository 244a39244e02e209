"""Markup navigation capabilities and the selectolax-backed implementation."""

from __future__ import annotations

from typing import Protocol

from selectolax.lexbor import LexborHTMLParser, LexborNode, SelectolaxError

from ..errors import SelectorCompilationError


class MarkupNode(Protocol):
    """Element of a parsed document that can be queried structurally."""

    def select(self, query: str) -> list["MarkupNode"]:
        """Return matching descendants in document order."""

    def inner_markup(self) -> str:
        """Serialized markup of the node's children."""

    def inner_text(self) -> str:
        """Concatenated text of the node's descendants."""


class MarkupBackend(Protocol):
    """Parser able to validate queries and build a queryable tree."""

    def compile(self, query: str) -> str:
        """Validate ``query``, raising :class:`SelectorCompilationError` if malformed."""

    def parse(self, text: str) -> MarkupNode:
        """Parse ``text`` into a root node."""


class SelectolaxNode:
    """Adapter exposing a selectolax ``LexborNode`` through :class:`MarkupNode`."""

    __slots__ = ("_node",)

    def __init__(self, node: LexborNode) -> None:
        self._node = node

    def select(self, query: str) -> list["SelectolaxNode"]:
        return [SelectolaxNode(match) for match in self._node.css(query)]

    def inner_markup(self) -> str:
        parts: list[str] = []
        for child in self._node.iter(include_text=True):
            piece = child.html
            if piece is None:
                piece = child.text(deep=True)
            parts.append(piece)
        return "".join(parts)

    def inner_text(self) -> str:
        return self._node.text(deep=True)


class SelectolaxBackend:
    """Markup backend built on selectolax's lexbor HTML parser."""

    def compile(self, query: str) -> str:
        try:
            LexborHTMLParser("<html></html>").css(query)
        except (SelectolaxError, ValueError) as exc:
            raise SelectorCompilationError(query, str(exc)) from exc
        return query

    def parse(self, text: str) -> SelectolaxNode:
        tree = LexborHTMLParser(text)
        root = tree.root
        if root is None:
            # No document element for blank input
            root = LexborHTMLParser("<html></html>").root
        return SelectolaxNode(root)


__all__ = ["MarkupBackend", "MarkupNode", "SelectolaxBackend", "SelectolaxNode"]
