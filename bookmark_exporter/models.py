"""
Data model for extracted bookmarks.

BookmarkRecord is the canonical (title, url) pair produced by every reader.
FolderNode and LeafNode are the two shapes a node of a Chrome bookmark tree
can take; parse_node() classifies raw JSON objects into one or the other.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

from bookmark_exporter.errors import ParseError


URL_TYPE = "url"


@dataclass(frozen=True)
class BookmarkRecord:
    """A single exported bookmark."""
    title: str
    url: str


@dataclass
class LeafNode:
    """
    A tree entry without children.

    Only leaves whose type is "url" become bookmarks; the name and url are kept
    raw until to_record() validates them.
    """
    type: Optional[str]
    name: Any = None
    url: Any = None

    @property
    def is_url(self) -> bool:
        return self.type == URL_TYPE

    def to_record(self) -> BookmarkRecord:
        """Convert a "url" leaf into a record, rejecting incomplete entries."""
        for key, value in (("name", self.name), ("url", self.url)):
            if value is None:
                raise ParseError(f"bookmark entry is missing '{key}'")
            if not isinstance(value, str):
                raise ParseError(
                    f"bookmark entry field '{key}' must be a string, "
                    f"got {type(value).__name__}"
                )
        return BookmarkRecord(title=self.name, url=self.url)


@dataclass
class FolderNode:
    """A tree entry with a non-empty list of children."""
    children: List["TreeNode"] = field(default_factory=list)
    name: Optional[str] = None


TreeNode = Union[FolderNode, LeafNode]


def _classify(raw: Any) -> Tuple[TreeNode, Optional[list]]:
    """Classify one node, returning it with its raw children still to parse."""
    if not isinstance(raw, dict):
        raise ParseError(f"bookmark node must be an object, got {type(raw).__name__}")

    children = raw.get("children")
    if children is not None:
        if not isinstance(children, list):
            raise ParseError(f"'children' must be an array, got {type(children).__name__}")
        if children:
            return FolderNode(name=raw.get("name")), children

    return LeafNode(type=raw.get("type"), name=raw.get("name"), url=raw.get("url")), None


def parse_children(raw: Any) -> List[TreeNode]:
    """
    Parse a raw `children` array into tree nodes.

    Nested folders are expanded with an explicit stack, so nesting depth is
    not bounded by the interpreter's recursion limit.
    """
    if not isinstance(raw, list):
        raise ParseError(f"'children' must be an array, got {type(raw).__name__}")

    nodes: List[TreeNode] = []
    pending = [(nodes, raw)]
    while pending:
        target, items = pending.pop()
        for item in items:
            node, children = _classify(item)
            target.append(node)
            if children is not None:
                pending.append((node.children, children))
    return nodes


def parse_node(raw: Any) -> TreeNode:
    """
    Classify a raw JSON object as a folder or a leaf.

    A node with a non-empty children array is a folder. Everything else,
    including a folder with no children, is a leaf carrying its type.
    """
    return parse_children([raw])[0]
