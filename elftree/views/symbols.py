from elftree.core.model import LibraryMetadata
from elftree.views.base import DetailMode, DetailView, add_section
from elftree.views.formatting import symbol_string
from elftree.views.navigator import TreeItem


class SymbolView(DetailView):
    @property
    def mode(self) -> DetailMode:
        return DetailMode.SYMBOL

    @property
    def title(self) -> str:
        return "Symbols"

    def populate(self, root: TreeItem, info: LibraryMetadata) -> None:
        add_section(root, "Dynamic Symbols", [symbol_string(s) for s in info.dynamic_symbols])
        add_section(root, "Imported Symbols", [symbol_string(s) for s in info.imported_symbols])

        # stripped binaries just show an empty group
        add_section(root, "Symbols", [symbol_string(s) for s in info.symbols])
