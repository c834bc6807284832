from elftree.core.model import LibraryMetadata
from elftree.views.base import DetailMode, DetailView, add_section
from elftree.views.formatting import SECTION_COLUMNS, section_string
from elftree.views.navigator import TreeItem


class SectionView(DetailView):
    @property
    def mode(self) -> DetailMode:
        return DetailMode.SECTION

    @property
    def title(self) -> str:
        return "Section Info"

    def populate(self, root: TreeItem, info: LibraryMetadata) -> None:
        rows = [SECTION_COLUMNS]
        rows.extend(section_string(i, sec) for i, sec in enumerate(info.section_headers))
        add_section(root, "Section Info", rows)
