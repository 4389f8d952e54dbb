"""Queryable markup tree built on BeautifulSoup."""

from typing import Optional

from bs4 import BeautifulSoup, Doctype, Tag
from bs4.builder import ParserRejectedMarkup


class ParseError(ValueError):
    """Raised when markup cannot be turned into a document tree."""


class HtmlDocument:
    """Read-only query surface over a parsed document.

    The analyzers only need to select nodes by tag name or CSS selector
    and read attribute values.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    def find(self, tag: str) -> Optional[Tag]:
        """First node with the given tag name, anywhere in the tree."""
        return self.soup.find(tag)

    def find_all(self, tag) -> list[Tag]:
        """All nodes matching a tag name (or list of names) in document order."""
        return self.soup.find_all(tag)

    def select_one(self, selector: str, scope: Optional[Tag] = None) -> Optional[Tag]:
        return (scope if scope is not None else self.soup).select_one(selector)

    def select(self, selector: str, scope: Optional[Tag] = None) -> list[Tag]:
        return (scope if scope is not None else self.soup).select(selector)

    @staticmethod
    def attribute(node: Tag, name: str, default: str = "") -> str:
        """Attribute value as a string; multi-valued attributes are joined."""
        value = node.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return value

    def has_doctype_node(self) -> bool:
        return any(isinstance(node, Doctype) for node in self.soup.contents)

    def count_elements(self) -> int:
        """Number of element nodes in the tree."""
        return len(self.soup.find_all(True))


def parse_document(text: str, parser: str = "html.parser") -> HtmlDocument:
    """Parse markup into an HtmlDocument.

    Args:
        text: Raw markup
        parser: BeautifulSoup tree builder name

    Returns:
        HtmlDocument wrapping the parsed tree

    Raises:
        ParseError: If the tree builder rejects the markup
    """
    try:
        soup = BeautifulSoup(text, parser)
    except ParserRejectedMarkup as e:
        raise ParseError(str(e)) from e
    return HtmlDocument(soup)
