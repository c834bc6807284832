from elftree.core.model import LibraryMetadata
from elftree.views.base import DetailMode, DetailView, add_section
from elftree.views.formatting import dynamic_strings
from elftree.views.navigator import TreeItem


class DynamicView(DetailView):
    @property
    def mode(self) -> DetailMode:
        return DetailMode.DYNAMIC

    @property
    def title(self) -> str:
        return "Dynamic Info"

    def populate(self, root: TreeItem, info: LibraryMetadata) -> None:
        add_section(root, "Dynamic Info", dynamic_strings(info.dynamic))
