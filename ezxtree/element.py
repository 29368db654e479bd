"""Element tree with document-wide parser state held on the root element."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional

DEFAULT_ENTITIES: dict[str, str] = {
    "lt;": "&#60;",
    "gt;": "&#62;",
    "quot;": "&#34;",
    "apos;": "&#39;",
    "amp;": "&#38;",
}


class DefaultAttr(NamedTuple):
    """A default attribute declared in an internal DTD subset.

    ``mode`` is ``" "`` for CDATA attributes and ``"*"`` for others;
    ``value`` is ``None`` when the declaration gives no default.
    """

    name: str
    value: Optional[str]
    mode: str


class Instruction(NamedTuple):
    """A processing instruction and whether it appeared after the root tag opened."""

    text: str
    after_root: bool


@dataclass
class Document:
    """Data shared by a whole tree: entities, DTD defaults, instructions, errors."""

    entities: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ENTITIES))
    default_attrs: dict[str, list[DefaultAttr]] = field(default_factory=dict)
    instructions: dict[str, list[Instruction]] = field(default_factory=dict)
    standalone: bool = False
    error: str = ""


class Element:
    """One tag: its name, attributes, character content and links to related tags.

    ``next`` is the following tag with the same name under the same parent,
    ``sibling`` the first tag of the next name (set on the first tag of each
    name), ``ordered`` the following tag in document order and ``child`` the
    first sub tag.
    """

    def __init__(self, name: Optional[str], txt: str = "", off: int = 0) -> None:
        self.name = name
        self.attrs: dict[str, str] = {}
        self.txt = txt
        self.off = off
        self.next: Optional[Element] = None
        self.sibling: Optional[Element] = None
        self.ordered: Optional[Element] = None
        self.child_head: Optional[Element] = None
        self.parent: Optional[Element] = None
        self.document: Optional[Document] = None

    def __repr__(self) -> str:
        return f"<Element {self.name!r}>"

    # navigation

    def child(self, name: str) -> Optional[Element]:
        """Return the first sub tag with the given name, or None."""
        cur = self.child_head
        while cur is not None and cur.name != name:
            cur = cur.sibling
        return cur

    def idx(self, index: int) -> Optional[Element]:
        """Return the tag ``index`` steps along the same-name list; 0 is self."""
        if index < 0:
            return None
        cur: Optional[Element] = self
        for _ in range(index):
            if cur is None:
                break
            cur = cur.next
        return cur

    def get(self, *args) -> Optional[Element]:
        """Follow alternating tag names and indexes down the tree.

        The path ends at an index below zero, an empty name, or the end of
        the arguments: ``lib.get("shelf", 0, "book", 2, "title", -1)``.
        """
        cur: Optional[Element] = self
        items = iter(args)
        for name in items:
            if not name:
                return cur
            index = next(items, -1)
            cur = cur.child(name) if cur is not None else None
            if index < 0:
                return cur
            cur = cur.idx(index) if cur is not None else None
        return cur

    def children(self) -> Iterator[Element]:
        """Yield the sub tags in document order."""
        cur = self.child_head
        while cur is not None:
            yield cur
            cur = cur.ordered

    def root(self) -> Element:
        """Return the top of the tree this tag belongs to."""
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    def attr(self, name: str) -> Optional[str]:
        """Return an attribute value, falling back to DTD defaults, or None."""
        if name in self.attrs:
            return self.attrs[name]
        doc = self.root().document
        if doc is None:
            return None
        for default in doc.default_attrs.get(self.name, ()):
            if default.name == name:
                return default.value
        return None

    def pi(self, target: str) -> list[str]:
        """Return the processing instructions recorded for a target."""
        doc = self.root().document
        if doc is None:
            return []
        return [inst.text for inst in doc.instructions.get(target, ())]

    def error(self) -> str:
        """Return the parser error message of the tree, or an empty string."""
        doc = self.root().document
        return doc.error if doc is not None else ""

    # modification

    def add_child(self, name: str, off: int) -> Element:
        """Create a sub tag at ``off`` characters into this tag's content."""
        return Element(name).insert(self, off)

    def set_txt(self, txt: str) -> Element:
        """Replace the character content and return self."""
        self.txt = txt
        return self

    def set_attr(self, name: str, value: Optional[str]) -> Element:
        """Set an attribute, or remove it when ``value`` is None; return self."""
        if value is None:
            self.attrs.pop(name, None)
        else:
            self.attrs[name] = value
        return self

    def cut(self) -> Element:
        """Detach this tag and its sub tags from the tree; return self."""
        parent = self.parent
        if parent is not None:
            if parent.child_head is self:
                parent.child_head = self.ordered
            else:
                cur = parent.child_head
                while cur is not None and cur.ordered is not self:
                    cur = cur.ordered
                if cur is not None:
                    cur.ordered = self.ordered
            _relink(parent)
        self.parent = None
        self.ordered = self.sibling = self.next = None
        return self

    def insert(self, dest: Element, off: int) -> Element:
        """Place this tag under ``dest`` at offset ``off``; return self."""
        self.next = self.sibling = self.ordered = None
        self.off = off
        self.parent = dest
        head = dest.child_head
        if head is None or head.off > off:
            self.ordered = head
            dest.child_head = self
        else:
            cur = head
            while cur.ordered is not None and cur.ordered.off <= off:
                cur = cur.ordered
            self.ordered = cur.ordered
            cur.ordered = self
        _relink(dest)
        return self

    def move(self, dest: Element, off: int) -> Element:
        """Cut this tag and insert it under ``dest`` at ``off``."""
        return self.cut().insert(dest, off)

    def remove(self) -> None:
        """Take this tag and its sub tags out of the tree."""
        self.cut()


def _relink(parent: Element) -> None:
    """Rebuild the same-name and sibling links from the document-order list."""
    last_by_name: dict[Optional[str], Element] = {}
    prev_first: Optional[Element] = None
    cur = parent.child_head
    while cur is not None:
        cur.next = None
        cur.sibling = None
        last = last_by_name.get(cur.name)
        if last is None:
            if prev_first is not None:
                prev_first.sibling = cur
            prev_first = cur
        else:
            last.next = cur
        last_by_name[cur.name] = cur
        cur = cur.ordered


def new(name: Optional[str]) -> Element:
    """Return a new root tag carrying an empty document."""
    root = Element(name)
    root.document = Document()
    return root