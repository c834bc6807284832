from typing import List, Sequence, Tuple, Union

from elftree.core.dynamic import DynamicTag, STRING_TAGS, lookup_tag, tag_name
from elftree.core.model import DynamicEntry, ProgramHeader, SectionHeader, Symbol

PF_X = 0x1
PF_W = 0x2
PF_R = 0x4

DT_FLAGS_NAMES = [
    (0x1, "ORIGIN"),
    (0x2, "SYMBOLIC"),
    (0x4, "TEXTREL"),
    (0x8, "BIND_NOW"),
    (0x10, "STATIC_TLS"),
]

DT_FLAGS_1_NAMES = [
    (0x1, "NOW"),
    (0x2, "GLOBAL"),
    (0x4, "GROUP"),
    (0x8, "NODELETE"),
    (0x10, "LOADFLTR"),
    (0x20, "INITFIRST"),
    (0x40, "NOOPEN"),
    (0x80, "ORIGIN"),
    (0x100, "DIRECT"),
    (0x200, "TRANS"),
    (0x400, "INTERPOSE"),
    (0x800, "NODEFLIB"),
    (0x1000, "NODUMP"),
    (0x2000, "CONFLAT"),
    (0x4000, "ENDFILTEE"),
    (0x8000, "DISPRELDNE"),
    (0x10000, "DISPRELPND"),
    (0x20000, "NODIRECT"),
    (0x40000, "IGNMULDEF"),
    (0x80000, "NOKSYMS"),
    (0x100000, "NOHDR"),
    (0x200000, "EDITED"),
    (0x400000, "NORELOC"),
    (0x800000, "SYMINTPOSE"),
    (0x1000000, "GLOBAUDIT"),
    (0x2000000, "SINGLETON"),
    (0x4000000, "STUB"),
    (0x8000000, "PIE"),
]

# sh_flags bits: write, alloc, exec, merge, strings, info link,
# link order, OS non-conforming, group, TLS, compressed
SECTION_FLAG_LETTERS = [
    (0x1, "W"),
    (0x2, "A"),
    (0x4, "X"),
    (0x10, "M"),
    (0x20, "S"),
    (0x40, "I"),
    (0x80, "L"),
    (0x100, "O"),
    (0x200, "G"),
    (0x400, "T"),
    (0x800, "C"),
]

SYMBOL_TYPES = {
    "STT_NOTYPE": "NON",
    "STT_OBJECT": "OBJ",
    "STT_FUNC": "FUN",
    "STT_SECTION": "SEC",
    "STT_FILE": "FIL",
    "STT_COMMON": "COM",
    "STT_TLS": "TLS",
}

SYMBOL_BINDINGS = {
    "STB_LOCAL": "L",
    "STB_GLOBAL": "G",
    "STB_WEAK": "W",
}

COUNT_TAGS = {
    DynamicTag.DT_RELACOUNT,
    DynamicTag.DT_RELCOUNT,
    DynamicTag.DT_VERDEFNUM,
    DynamicTag.DT_VERNEEDNUM,
}


def strip_prefix(value: Union[str, int], prefix: str) -> str:
    if isinstance(value, int):
        return f"{value:#x}"
    if value.startswith(prefix):
        return value[len(prefix):]
    return value


def join_flags(value: int, names: Sequence[Tuple[int, str]], sep: str = "|") -> str:
    return sep.join(name for bit, name in names if value & bit)


def segment_flags(flags: int) -> str:
    if flags & ~(PF_R | PF_W | PF_X) or not flags:
        return "???"
    return "".join([
        "R" if flags & PF_R else "_",
        "W" if flags & PF_W else "_",
        "X" if flags & PF_X else "_",
    ])


def program_header_string(phdr: ProgramHeader) -> str:
    return (
        f"{strip_prefix(phdr.type, 'PT_'):<16}  {segment_flags(phdr.flags)}    "
        f"{phdr.vaddr:#8x}  {phdr.memsz:#8x}  {phdr.align:#8x}"
    )


def dynamic_entry_string(entry: DynamicEntry) -> str:
    tag = lookup_tag(entry.tag)
    name = tag_name(entry.tag)

    if tag in STRING_TAGS:
        value = str(entry.value)
    elif tag == DynamicTag.DT_FLAGS:
        value = join_flags(entry.value, DT_FLAGS_NAMES)
    elif tag == DynamicTag.DT_FLAGS_1:
        value = join_flags(entry.value, DT_FLAGS_1_NAMES)
    elif tag in COUNT_TAGS:
        value = str(entry.value)
    else:
        value = f"{entry.value:x}"

    return f"  {name:<16}  {value}"


def dynamic_strings(entries: Sequence[DynamicEntry]) -> List[str]:
    return [dynamic_entry_string(e) for e in entries]


def symbol_string(sym: Symbol) -> str:
    t = SYMBOL_TYPES.get(sym.type, "XXX")
    b = SYMBOL_BINDINGS.get(sym.bind, "X")
    return f"  {sym.value:8x} {t} {b} {sym.name}"


SECTION_COLUMNS = f"  {'Idx':>4} {'Name':<24} {'Type':<12} {'Offset':>8} {'Size':>8} {'Flag':>4}"


def section_string(idx: int, sec: SectionHeader) -> str:
    flags = join_flags(sec.flags, SECTION_FLAG_LETTERS, sep="")
    return (
        f"  [{idx:2d}] {sec.name:<24} {strip_prefix(sec.type, 'SHT_'):<12} "
        f"{sec.offset:8x} {sec.size:8x} {flags:>4}"
    )
