import logging
from typing import List, Optional

from elftools.common.exceptions import ELFError
from elftools.construct.core import ConstructError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from elftree.core.dynamic import DynamicTag, parse_dynamic_section
from elftree.core.errors import InvalidFormat, IOFailure, MalformedBinary, MissingSection
from elftree.core.model import LibraryMetadata, ProgramHeader, SectionHeader, Symbol

EXECUTABLE_TYPES = ("ET_EXEC", "ET_DYN")
IMPORT_BINDINGS = ("STB_GLOBAL", "STB_WEAK")


def read_library(name: str, path: str) -> LibraryMetadata:
    """Opens `path` and collects the metadata of one executable or shared object."""
    try:
        stream = open(path, "rb")
    except OSError as e:
        raise IOFailure(name, path, e.strerror or str(e)) from e

    with stream:
        try:
            elf = ELFFile(stream)
        except (ELFError, ConstructError) as e:
            raise InvalidFormat(name, path, str(e)) from e

        object_type = str(elf.header["e_type"])
        if object_type not in EXECUTABLE_TYPES:
            raise InvalidFormat(name, path, object_type)

        try:
            return _read_metadata(elf, name, path, object_type)
        except (ELFError, ConstructError) as e:
            raise MalformedBinary(name, path, str(e)) from e
        except OSError as e:
            raise IOFailure(name, path, e.strerror or str(e)) from e


def _read_metadata(elf: ELFFile, name: str, path: str, object_type: str) -> LibraryMetadata:
    dynamic = elf.get_section_by_name(".dynamic")
    if dynamic is None:
        raise MissingSection(name, path)

    dynstr = elf.get_section_by_name(".dynstr")
    if dynstr is None:
        raise MissingSection(name, path, "no dynamic string table")

    ident = elf.header["e_ident"]
    info = LibraryMetadata(
        path=path,
        machine=str(elf.header["e_machine"]),
        elf_class=str(ident["EI_CLASS"]),
        byte_order=str(ident["EI_DATA"]),
        object_type=object_type,
        os_abi=str(ident["EI_OSABI"]),
        abi_version=ident["EI_ABIVERSION"],
        interpreter=_read_interpreter(elf),
    )

    info.dynamic = parse_dynamic_section(
        dynamic.data(),
        dynstr.data(),
        is64=elf.elfclass == 64,
        little_endian=elf.little_endian,
        name=name,
        path=path,
    )
    info.needed = [str(v) for v in info.dynamic_values(DynamicTag.DT_NEEDED)]

    info.program_headers = [
        ProgramHeader(
            type=seg["p_type"],
            flags=seg["p_flags"],
            vaddr=seg["p_vaddr"],
            memsz=seg["p_memsz"],
            align=seg["p_align"],
        )
        for seg in elf.iter_segments()
    ]
    info.section_headers = [
        SectionHeader(
            name=sec.name,
            type=sec["sh_type"],
            offset=sec["sh_offset"],
            size=sec["sh_size"],
            flags=sec["sh_flags"],
        )
        for sec in elf.iter_sections()
    ]

    info.dynamic_symbols = _read_symbols(elf.get_section_by_name(".dynsym"))
    info.imported_symbols = [
        sym for sym in info.dynamic_symbols
        if sym.section == "SHN_UNDEF" and sym.bind in IMPORT_BINDINGS
    ]
    info.symbols = _read_symbols(elf.get_section_by_name(".symtab"))
    if not info.symbols:
        logging.debug(f"{path} has no symbol table (stripped)")

    return info


def _read_interpreter(elf: ELFFile) -> Optional[str]:
    interp = elf.get_section_by_name(".interp")
    if interp is None:
        return None
    return interp.data().rstrip(b"\x00").decode("utf-8", errors="replace")


def _read_symbols(section) -> List[Symbol]:
    if not isinstance(section, SymbolTableSection):
        return []

    symbols = []
    # Index 0 is the reserved null symbol
    for sym in list(section.iter_symbols())[1:]:
        symbols.append(Symbol(
            name=sym.name,
            value=sym["st_value"],
            type=str(sym["st_info"]["type"]),
            bind=str(sym["st_info"]["bind"]),
            section=sym["st_shndx"],
        ))
    return symbols
