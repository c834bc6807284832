from typing import Optional


class ElfTreeError(Exception):
    """Base class for every fatal analysis error.

    Each error names the library being processed and the path it was
    read from (empty when no path could be determined).
    """

    reason = "analysis failed"

    def __init__(self, name: str, path: str = "", detail: Optional[str] = None) -> None:
        self.name = name
        self.path = path
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        msg = f"`{self.name}` {self.reason}"
        if self.path:
            msg += f": {self.path}"
        if self.detail:
            msg += f" ({self.detail})"
        return msg


class MissingSection(ElfTreeError):
    reason = "seems to be statically linked"


class MalformedBinary(ElfTreeError):
    reason = "has corrupt dynamic data"


class InvalidFormat(ElfTreeError):
    reason = "seems not to be a valid ELF executable"


class UnresolvedLibrary(ElfTreeError):
    reason = "cannot be found in the library search path"


class IOFailure(ElfTreeError):
    reason = "cannot be read"
