from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable

from elftree.core.model import LibraryMetadata
from elftree.views.navigator import TextRow, TreeItem


class DetailMode(Enum):
    FILE = "file"
    SYMBOL = "symbol"
    DYNAMIC = "dynamic"
    SECTION = "section"


class DetailView(ABC):
    """Base class of the per-library detail panes."""

    @property
    @abstractmethod
    def mode(self) -> DetailMode:
        pass

    @property
    @abstractmethod
    def title(self) -> str:
        """Friendly pane name (e.g., File Info, Symbols)."""
        pass

    @abstractmethod
    def populate(self, root: TreeItem, info: LibraryMetadata) -> None:
        pass

    def build(self, name: str, info: LibraryMetadata) -> TreeItem:
        root = TreeItem(TextRow(name))
        self.populate(root, info)
        return root


def add_subtree(parent: TreeItem, label: str, lines: Iterable[str]) -> TreeItem:
    """Appends a label row with one text row per line below it."""
    group = TreeItem(TextRow(label))
    for line in lines:
        group.append(TreeItem(TextRow(line)))
    return parent.append(group)


def add_section(parent: TreeItem, label: str, lines: Iterable[str]) -> TreeItem:
    add_subtree(parent, "", ())
    return add_subtree(parent, label, lines)
