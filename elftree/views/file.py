from elftree.core.model import LibraryMetadata
from elftree.views.base import DetailMode, DetailView, add_section
from elftree.views.formatting import program_header_string
from elftree.views.navigator import TreeItem


class FileView(DetailView):
    @property
    def mode(self) -> DetailMode:
        return DetailMode.FILE

    @property
    def title(self) -> str:
        return "File Info"

    def populate(self, root: TreeItem, info: LibraryMetadata) -> None:
        summary = [
            "  Path: " + info.path,
            "  Type: " + info.object_type + ", " + info.machine,
            "  Data: " + info.elf_class + ", " + info.byte_order,
            "  ABI:  " + info.os_abi + ", version " + str(info.abi_version),
        ]
        if info.interpreter:
            summary.append("  Interpreter: " + info.interpreter)
        add_section(root, "File Info", summary)

        add_section(
            root,
            "Program Info       flags      vaddr      size     align",
            ["  " + program_header_string(p) for p in info.program_headers],
        )

        add_section(root, "Dependencies", ["  " + lib for lib in info.needed])
