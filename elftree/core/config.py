import glob
import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

LD_LIBRARY_PATH = "LD_LIBRARY_PATH"
LD_SO_CONF = "/etc/ld.so.conf"
DEFAULT_LIBRARY_DIRS = ["/lib/", "/usr/lib/", "/lib64", "/usr/lib64"]


def read_ld_so_conf(filename: str, dirs: Optional[List[str]] = None, _chain: Tuple[str, ...] = ()) -> List[str]:
    """
    Appends the directories listed in an ld.so.conf style file to `dirs`.
    `include <glob>` lines are expanded and every match is read the same way.
    """
    if dirs is None:
        dirs = []

    real = os.path.realpath(filename)
    if real in _chain:
        logging.warning(f"Skipping cyclic include of {filename}")
        return dirs

    try:
        with open(filename, "r", encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError as e:
        logging.debug(f"Cannot read {filename}: {e}")
        return dirs

    chain = _chain + (real,)
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("include") and line[7:8].isspace():
            pattern = line[8:].strip()
            if not os.path.isabs(pattern):
                pattern = os.path.join(os.path.dirname(filename), pattern)

            for match in sorted(glob.glob(pattern)):
                read_ld_so_conf(match, dirs, chain)
        else:
            dirs.append(line)

    return dirs


def split_search_path(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [d for d in value.split(":") if d]


@dataclass
class SearchConfig:
    env_dirs: List[str] = field(default_factory=list)
    conf_dirs: List[str] = field(default_factory=list)
    default_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_LIBRARY_DIRS))

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        ld_so_conf: Optional[str] = None,
    ) -> 'SearchConfig':
        if environ is None:
            environ = os.environ

        config = cls(
            env_dirs=split_search_path(environ.get(LD_LIBRARY_PATH)),
            conf_dirs=read_ld_so_conf(ld_so_conf or LD_SO_CONF),
        )
        logging.debug(
            f"Search config: env={config.env_dirs} conf={config.conf_dirs} default={config.default_dirs}"
        )
        return config
