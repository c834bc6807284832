"""
Decoding of the ELF dynamic section.

The raw ``.dynamic`` bytes are a sequence of (d_tag, d_val) word pairs.
String-valued tags (DT_NEEDED, DT_RPATH, DT_RUNPATH, DT_SONAME) hold an
offset into the dynamic string table, which is decoded here rather than
delegated to the binary reader.
"""

import logging
import struct
from enum import IntEnum
from typing import List, Optional

from elftree.core.errors import MalformedBinary
from elftree.core.model import DynamicEntry


class DynamicTag(IntEnum):
    DT_NULL = 0
    DT_NEEDED = 1
    DT_PLTRELSZ = 2
    DT_PLTGOT = 3
    DT_HASH = 4
    DT_STRTAB = 5
    DT_SYMTAB = 6
    DT_RELA = 7
    DT_RELASZ = 8
    DT_RELAENT = 9
    DT_STRSZ = 10
    DT_SYMENT = 11
    DT_INIT = 12
    DT_FINI = 13
    DT_SONAME = 14
    DT_RPATH = 15
    DT_SYMBOLIC = 16
    DT_REL = 17
    DT_RELSZ = 18
    DT_RELENT = 19
    DT_PLTREL = 20
    DT_DEBUG = 21
    DT_TEXTREL = 22
    DT_JMPREL = 23
    DT_BIND_NOW = 24
    DT_INIT_ARRAY = 25
    DT_FINI_ARRAY = 26
    DT_INIT_ARRAYSZ = 27
    DT_FINI_ARRAYSZ = 28
    DT_RUNPATH = 29
    DT_FLAGS = 30
    DT_PREINIT_ARRAY = 32
    DT_PREINIT_ARRAYSZ = 33
    DT_SYMTAB_SHNDX = 34
    DT_RELRSZ = 35
    DT_RELR = 36
    DT_RELRENT = 37

    # OS-specific range (DT_LOOS .. DT_HIOS)
    DT_GNU_PRELINKED = 0x6FFFFDF5
    DT_GNU_CONFLICTSZ = 0x6FFFFDF6
    DT_GNU_LIBLISTSZ = 0x6FFFFDF7
    DT_CHECKSUM = 0x6FFFFDF8
    DT_PLTPADSZ = 0x6FFFFDF9
    DT_MOVEENT = 0x6FFFFDFA
    DT_MOVESZ = 0x6FFFFDFB
    DT_POSFLAG_1 = 0x6FFFFDFD
    DT_SYMINSZ = 0x6FFFFDFE
    DT_SYMINENT = 0x6FFFFDFF
    DT_GNU_HASH = 0x6FFFFEF5
    DT_TLSDESC_PLT = 0x6FFFFEF6
    DT_TLSDESC_GOT = 0x6FFFFEF7
    DT_GNU_CONFLICT = 0x6FFFFEF8
    DT_GNU_LIBLIST = 0x6FFFFEF9
    DT_CONFIG = 0x6FFFFEFA
    DT_DEPAUDIT = 0x6FFFFEFB
    DT_AUDIT = 0x6FFFFEFC
    DT_PLTPAD = 0x6FFFFEFD
    DT_MOVETAB = 0x6FFFFEFE
    DT_SYMINFO = 0x6FFFFEFF
    DT_VERSYM = 0x6FFFFFF0
    DT_RELACOUNT = 0x6FFFFFF9
    DT_RELCOUNT = 0x6FFFFFFA
    DT_FLAGS_1 = 0x6FFFFFFB
    DT_VERDEF = 0x6FFFFFFC
    DT_VERDEFNUM = 0x6FFFFFFD
    DT_VERNEED = 0x6FFFFFFE
    DT_VERNEEDNUM = 0x6FFFFFFF

    # Processor-specific range (DT_LOPROC .. DT_HIPROC)
    DT_AUXILIARY = 0x7FFFFFFD
    DT_FILTER = 0x7FFFFFFF


STRING_TAGS = frozenset({
    DynamicTag.DT_NEEDED,
    DynamicTag.DT_RPATH,
    DynamicTag.DT_RUNPATH,
    DynamicTag.DT_SONAME,
})


def lookup_tag(tag: int) -> Optional[DynamicTag]:
    """Returns the known tag for a raw value, or None for an unknown one."""
    try:
        return DynamicTag(tag)
    except ValueError:
        return None


def tag_name(tag: int) -> str:
    known = lookup_tag(tag)
    if known is None:
        return f"{tag:#x}"
    return known.name


def read_string(strtab: bytes, offset: int, name: str = "", path: str = "") -> str:
    if offset >= len(strtab):
        raise MalformedBinary(name, path, f"string offset {offset:#x} out of range")

    end = strtab.find(b"\x00", offset)
    if end < 0:
        raise MalformedBinary(name, path, f"unterminated string at {offset:#x}")

    return strtab[offset:end].decode("utf-8", errors="replace")


def parse_dynamic_section(
    data: bytes,
    strtab: bytes,
    is64: bool,
    little_endian: bool,
    name: str = "",
    path: str = "",
) -> List[DynamicEntry]:
    """
    Decodes consecutive (tag, value) pairs until DT_NULL or the end of the data.
    Unknown tags are kept with their raw integer value.
    """
    word = "Q" if is64 else "I"
    pair = struct.Struct(("<" if little_endian else ">") + word + word)

    entries = []
    for tag, value in pair.iter_unpack(data[:len(data) - len(data) % pair.size]):
        if tag == DynamicTag.DT_NULL:
            break

        if tag in STRING_TAGS:
            entries.append(DynamicEntry(tag, read_string(strtab, value, name, path)))
        else:
            entries.append(DynamicEntry(tag, value))

    logging.debug(f"Decoded {len(entries)} dynamic entries from {path or name}")
    return entries
