from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class DynamicEntry:
    tag: int
    value: Union[str, int]


@dataclass(frozen=True)
class Symbol:
    name: str
    value: int
    type: str  # e.g. STT_FUNC
    bind: str  # e.g. STB_GLOBAL
    section: Union[str, int]  # SHN_UNDEF or a section index


@dataclass(frozen=True)
class ProgramHeader:
    type: Union[str, int]
    flags: int
    vaddr: int
    memsz: int
    align: int


@dataclass(frozen=True)
class SectionHeader:
    name: str
    type: Union[str, int]
    offset: int
    size: int
    flags: int


@dataclass
class LibraryMetadata:
    """Everything read from one unique library, created once per name."""

    path: str
    machine: str
    elf_class: str
    byte_order: str
    object_type: str
    os_abi: str
    abi_version: int
    interpreter: Optional[str] = None

    needed: List[str] = field(default_factory=list)
    dynamic: List[DynamicEntry] = field(default_factory=list)
    program_headers: List[ProgramHeader] = field(default_factory=list)
    section_headers: List[SectionHeader] = field(default_factory=list)
    imported_symbols: List[Symbol] = field(default_factory=list)
    dynamic_symbols: List[Symbol] = field(default_factory=list)
    # Empty for stripped binaries
    symbols: List[Symbol] = field(default_factory=list)

    def dynamic_values(self, tag: int) -> List[Union[str, int]]:
        return [entry.value for entry in self.dynamic if entry.tag == tag]


@dataclass
class LibraryNode:
    name: str
    depth: int = 0
    children: List['LibraryNode'] = field(default_factory=list)
    parent: Optional['LibraryNode'] = field(default=None, repr=False, compare=False)

    def add_child(self, name: str) -> 'LibraryNode':
        child = LibraryNode(name, depth=self.depth + 1, parent=self)
        self.children.append(child)
        return child

    def lineage(self) -> List[str]:
        """Names from the root down to this node."""
        names = []
        node = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        names.reverse()
        return names

    def count(self) -> int:
        return 1 + sum(child.count() for child in self.children)
