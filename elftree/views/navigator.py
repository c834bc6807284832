"""
Fold-aware tree traversal and viewport scrolling.

A TreeItem tree is shared by the dependency pane and the detail panes.
Every item keeps ``total``, the number of currently visible rows below it,
so scrolling never needs random access into the tree.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from elftree.core.model import LibraryNode

INDENT = 3


@dataclass(frozen=True)
class LibraryRow:
    node: LibraryNode


@dataclass(frozen=True)
class TextRow:
    text: str


RowContent = Union[LibraryRow, TextRow]


class TreeItem:
    __slots__ = ("content", "parent", "prev", "next", "child", "folded", "total")

    def __init__(self, content: RowContent, parent: Optional['TreeItem'] = None) -> None:
        self.content = content
        self.parent = parent
        self.prev: Optional[TreeItem] = None
        self.next: Optional[TreeItem] = None
        self.child: Optional[TreeItem] = None
        self.folded = False
        self.total = 0

    def __repr__(self) -> str:
        return f"TreeItem({self.content!r}, folded={self.folded}, total={self.total})"

    def children(self) -> Iterable['TreeItem']:
        c = self.child
        while c is not None:
            yield c
            c = c.next

    def append(self, item: 'TreeItem') -> 'TreeItem':
        """Links `item` as the last child and counts it as visible."""
        item.parent = self
        last = None
        for last in self.children():
            pass

        if last is None:
            self.child = item
        else:
            last.next = item
            item.prev = last

        if not self.folded:
            self._add_to_totals(1 + item.total)
        return item

    def next_item(self) -> Optional['TreeItem']:
        """Next visible row in pre-order, or None past the last row."""
        if self.child is not None and not self.folded:
            return self.child

        ti = self
        while ti is not None:
            if ti.next is not None:
                return ti.next
            ti = ti.parent
        return None

    def prev_item(self) -> Optional['TreeItem']:
        if self.prev is None:
            return self.parent

        # last visible descendant of the previous sibling
        ti = self.prev
        while ti.child is not None and not ti.folded:
            ti = ti.child
            while ti.next is not None:
                ti = ti.next
        return ti

    def expand(self) -> None:
        if not self.folded or self.child is None:
            return

        self.folded = False
        delta = sum(1 + c.total for c in self.children())
        self._add_to_totals(delta)

    def fold(self) -> None:
        if self.folded or self.child is None:
            return

        self._add_to_totals(-self.total)
        self.folded = True

    def toggle(self) -> None:
        if self.folded:
            self.expand()
        else:
            self.fold()

    def _add_to_totals(self, delta: int) -> None:
        # stops at the first folded ancestor, whose total stays 0
        self.total += delta
        p = self.parent
        while p is not None and not p.folded:
            p.total += delta
            p = p.parent

    def label(self, show_path=None) -> str:
        content = self.content
        if isinstance(content, TextRow):
            return "  " + content.text

        marker = "+" if self.folded else "-"
        text = content.node.name
        if show_path is not None:
            text = f"{text}  => {show_path(content.node.name)}"
        return " " * (INDENT * content.node.depth) + marker + " " + text


def make_dependency_items(node: LibraryNode, parent: Optional[TreeItem] = None) -> TreeItem:
    """Mirrors a LibraryNode tree as fully expanded TreeItems."""
    item = TreeItem(LibraryRow(node), parent)

    prev = None
    for child in node.children:
        c = make_dependency_items(child, item)
        if prev is None:
            item.child = c
        else:
            prev.next = c
            c.prev = prev
        prev = c
        item.total += 1 + c.total

    return item


@dataclass
class ViewportState:
    selected: int = 0
    first: int = 0
    offset: int = 0


@dataclass(frozen=True)
class PaintedRow:
    text: str
    selected: bool
    content: RowContent


class Viewport:
    """
    Cursor and scroll position of one pane over a TreeItem tree.

    ``idx`` is the selected row and ``off`` the first visible row, both
    counted in visible rows from the root. ``curr`` and ``top`` are the
    items at those rows, kept in step with them by walking next/prev.
    """

    def __init__(self, root: TreeItem, rows: int = 1) -> None:
        self.root = root
        self.curr = root
        self.top = root
        self.idx = 0
        self.off = 0
        self.pos = 0
        self.rows = max(rows, 1)

    @property
    def state(self) -> ViewportState:
        return ViewportState(self.idx, self.off, self.pos)

    def restore(self, state: ViewportState) -> None:
        self.home()
        self.pos = max(state.offset, 0)

        selected = min(max(state.selected, 0), self.root.total)
        first = min(max(state.first, 0), selected)
        self.top = _walk(self.root, first)
        self.curr = _walk(self.top, selected - first)
        self.off = first
        self.idx = selected
        self._follow_cursor()

    def resize(self, rows: int) -> None:
        self.rows = max(rows, 1)
        self._follow_cursor()

    def down(self) -> None:
        if self.idx < self.root.total:
            self.idx += 1
            self.curr = self.curr.next_item()
        if self.idx - self.off >= self.rows:
            self.off += 1
            self.top = self.top.next_item()

    def up(self) -> None:
        if self.idx > 0:
            self.idx -= 1
            self.curr = self.curr.prev_item()
        if self.idx < self.off:
            self.off = self.idx
            self.top = self.curr

    def page_down(self) -> None:
        bottom = min(self.off + self.rows - 1, self.root.total)

        # the first press only moves to the bottom of the current page
        if self.idx != bottom:
            self.curr = _walk(self.curr, bottom - self.idx)
            self.idx = bottom
            return

        target = min(self.idx + self.rows, self.root.total)
        self.curr = _walk(self.curr, target - self.idx)
        self.idx = target

        if self.idx - self.off >= self.rows:
            first = self.idx - self.rows + 1
            self.top = _walk(self.top, first - self.off)
            self.off = first

    def page_up(self) -> None:
        if self.idx != self.off:
            self.idx = self.off
            self.curr = self.top
            return

        target = max(self.idx - self.rows, 0)
        self.curr = _walk_back(self.curr, self.idx - target)
        self.idx = target
        self.off = target
        self.top = self.curr

    def home(self) -> None:
        self.idx = 0
        self.off = 0
        self.curr = self.root
        self.top = self.root

    def end(self) -> None:
        last = self.curr
        while True:
            nxt = last.next_item()
            if nxt is None:
                break
            last = nxt

        self.curr = last
        self.idx = self.root.total
        self.off = max(self.idx - self.rows + 1, 0)
        self.top = _walk_back(last, self.idx - self.off)

    def left(self, n: int = 1) -> None:
        self.pos = max(self.pos - n, 0)

    def right(self, n: int = 1) -> None:
        self.pos += n

    def toggle(self) -> None:
        self.curr.toggle()

    def paint(self, width: int, height: Optional[int] = None, show_path=None) -> List[PaintedRow]:
        """Returns `height` rows of exactly `width` characters."""
        if height is None:
            height = self.rows

        painted = []
        ti = self.top
        row = self.off
        while ti is not None and len(painted) < height:
            text = ti.label(show_path)[self.pos:self.pos + width]
            painted.append(PaintedRow(text.ljust(width), row == self.idx, ti.content))
            ti = ti.next_item()
            row += 1

        while len(painted) < height:
            painted.append(PaintedRow(" " * width, False, TextRow("")))
        return painted

    def _follow_cursor(self) -> None:
        if self.idx - self.off >= self.rows:
            first = self.idx - self.rows + 1
            self.top = _walk(self.top, first - self.off)
            self.off = first


def _walk(item: TreeItem, steps: int) -> TreeItem:
    for _ in range(steps):
        item = item.next_item()
    return item


def _walk_back(item: TreeItem, steps: int) -> TreeItem:
    for _ in range(steps):
        item = item.prev_item()
    return item
