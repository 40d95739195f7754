"""Routines that pull typed values out of scraped catbox pages.

Pages are parsed once into a :class:`Document`, an arena that gives every node
a stable integer index in document order. Lookups hand out indices and resolve
them back through the document, so a dangling index is an explicit error
instead of a silent ``None``.

Every failure point has its own exception so callers can tell which part of
the page structure changed.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from catbox_client.exceptions import (
    InvalidEncodingError,
    MissingAttributeError,
    MissingChildrenError,
    MissingContainerError,
    MissingLabelError,
    MissingNodeError,
)

logger = logging.getLogger(__name__)

NodeId = int


@dataclass(frozen=True)
class ById:
    """Select an element by its ``id`` attribute."""

    name: str


@dataclass(frozen=True)
class ByClass:
    """Select elements carrying a CSS class."""

    name: str


Selector = ById | ByClass


class Document:
    """A parsed HTML page with every node indexed in document order."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup
        self._nodes: list[PageElement] = [soup, *soup.descendants]
        self._index = {id(node): node_id for node_id, node in enumerate(self._nodes)}

    @classmethod
    def parse(cls, html: str) -> "Document":
        return cls(BeautifulSoup(html, "html.parser"))

    def __len__(self) -> int:
        return len(self._nodes)

    def node_id(self, node: PageElement) -> NodeId:
        """Return the index of a node belonging to this document.

        Raises:
            MissingNodeError: If the node is not part of this document
        """
        try:
            return self._index[id(node)]
        except KeyError:
            raise MissingNodeError("Node does not belong to the parsed document") from None

    def node(self, node_id: NodeId) -> PageElement:
        """Resolve an index back to its node.

        Raises:
            MissingNodeError: If the index is outside the document
        """
        if not 0 <= node_id < len(self._nodes):
            raise MissingNodeError(f"Node id {node_id} is not part of the parsed document")
        return self._nodes[node_id]


def inner_text(node: PageElement) -> str:
    """Concatenated text of a node and everything below it."""
    if isinstance(node, NavigableString):
        return str(node)
    return node.get_text()


def find_container(doc: Document, selector: Selector) -> NodeId:
    """Find the first element matching an id or class selector.

    Raises:
        MissingContainerError: If nothing on the page matches
    """
    if isinstance(selector, ById):
        element = doc.soup.find(id=selector.name)
    else:
        element = doc.soup.find(class_=selector.name)

    if element is None:
        raise MissingContainerError(f"Page has no container matching {selector}")
    return doc.node_id(element)


def require_node(doc: Document, node_id: NodeId) -> PageElement:
    return doc.node(node_id)


def require_children(doc: Document, node: PageElement) -> list[NodeId]:
    """Return the indices of a node's direct children.

    Raises:
        MissingChildrenError: If the node has no child nodes
    """
    children = list(getattr(node, "children", ()))
    if not children:
        raise MissingChildrenError(f"Container <{getattr(node, 'name', '?')}> has no children")
    return [doc.node_id(child) for child in children]


def tags(doc: Document, node_ids: Iterable[NodeId]) -> list[Tag]:
    """Resolve indices, keeping only the ones that are tags."""
    resolved = (require_node(doc, node_id) for node_id in node_ids)
    return [node for node in resolved if isinstance(node, Tag)]


def collect_attribute_values(
    nodes: Iterable[PageElement], attribute_names: Sequence[str]
) -> list[str]:
    """Read the first present attribute of each tag, in document order.

    Text and comment nodes are skipped. For each tag the names are tried in
    order, so ``["src", "href"]`` falls back to ``href`` only when ``src`` is
    absent.

    Args:
        nodes: Nodes to read from
        attribute_names: Attribute names to try, in priority order

    Returns:
        The raw attribute values

    Raises:
        MissingAttributeError: If a tag carries none of the names
        InvalidEncodingError: If a value is not valid text
    """
    values: list[str] = []
    for node in nodes:
        if not isinstance(node, Tag):
            continue

        name = next((name for name in attribute_names if node.has_attr(name)), None)
        if name is None:
            raise MissingAttributeError(
                f"<{node.name}> has none of the attributes {list(attribute_names)}"
            )

        value = node[name]
        if isinstance(value, list):
            value = " ".join(value)
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidEncodingError(f"`{name}` of <{node.name}> is not valid text") from e
        values.append(value)
    return values


def find_labeled_value(doc: Document, container: PageElement, label: str) -> str:
    """Find the value printed right after a label.

    The label must match a node's full text exactly, without trimming. The
    value is the text of the label node's next sibling with leading
    whitespace removed; nothing else is altered. Whitespace-only text
    between the label and its value is skipped.

    Raises:
        MissingLabelError: If no node carries the label followed by a
            non-empty value
    """
    for node in getattr(container, "descendants", ()):
        if inner_text(node) != label:
            continue
        sibling = node.next_sibling
        while isinstance(sibling, NavigableString) and not sibling.strip():
            sibling = sibling.next_sibling
        if sibling is None:
            continue
        value = inner_text(sibling).lstrip()
        if not value:
            continue
        logger.debug(f"Found value for label {label!r} at node {doc.node_id(node)}")
        return value

    raise MissingLabelError(f"Page has no value labeled {label!r}")


def select_all(doc: Document, css_selector: str) -> Iterator[Tag]:
    """Lazily yield the elements matching a CSS selector, in document order."""
    yield from doc.soup.css.iselect(css_selector)
