import logging
import os
from typing import Iterator, Optional

from elftree.core.config import SearchConfig
from elftree.core.dynamic import DynamicTag
from elftree.core.model import LibraryMetadata


class LibraryResolver:
    """Finds a needed library the way ld.so(8) searches for it."""

    def __init__(self, config: SearchConfig) -> None:
        self.config = config

    def resolve(self, soname: str, requester: Optional[LibraryMetadata] = None) -> str:
        """Returns the first existing file for `soname`, or an empty string."""
        if "/" in soname:
            return soname

        for directory in self.search_dirs(requester):
            candidate = os.path.join(directory, soname)
            if os.path.isfile(candidate):
                logging.debug(f"Resolved {soname} -> {candidate}")
                return candidate

        logging.debug(f"Could not resolve {soname}")
        return ""

    def search_dirs(self, requester: Optional[LibraryMetadata] = None) -> Iterator[str]:
        if requester is not None:
            yield from _tag_dirs(requester, DynamicTag.DT_RPATH)

        yield from self.config.env_dirs

        if requester is not None:
            yield from _tag_dirs(requester, DynamicTag.DT_RUNPATH)

        yield from self.config.conf_dirs
        yield from self.config.default_dirs


def _tag_dirs(requester: LibraryMetadata, tag: DynamicTag) -> Iterator[str]:
    origin = os.path.dirname(requester.path)
    for value in requester.dynamic_values(tag):
        for directory in str(value).split(":"):
            if not directory:
                continue
            yield directory.replace("${ORIGIN}", origin).replace("$ORIGIN", origin)
