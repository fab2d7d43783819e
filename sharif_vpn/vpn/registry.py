"""Discovery of the IPsec connection name to operate on."""

import re
from pathlib import Path
from typing import Iterable, List, Optional

from .context import TunnelContext
from .exceptions import NoConfigFound, NoConnectionFound
from ..logging_utility import logger

RESERVED_NAMES = ("%default", "default")

_CONN_RE = re.compile(r"^\s*conn\s+(\S+)")


def read_connection_names(sources: Iterable[Path]) -> List[str]:
    """Collect declared conn names, in file order across sources."""
    names = []
    for source in sources:
        with open(source, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                match = _CONN_RE.match(line)
                if match:
                    names.append(match.group(1))
    return names


def pick_connection_name(names: List[str], keyword: str) -> Optional[str]:
    """Prefer a keyword match, else the first non-default entry."""
    pattern = re.compile(keyword)
    for name in names:
        if pattern.search(name):
            return name
    for name in names:
        if name not in RESERVED_NAMES:
            return name
    return None


class ConnectionRegistry:
    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx

    def resolve_connection_name(self, override: Optional[str] = None,
                                config_sources: Optional[Iterable[str]] = None) -> str:
        """
        Return the connection name, auto-detecting it from ipsec.conf.

        The first result is memoized on the context for the rest of the run.

        Raises:
            NoConfigFound: if none of the sources exist
            NoConnectionFound: if no usable conn entry is declared
        """
        if self.ctx.connection_name:
            return self.ctx.connection_name

        config = self.ctx.config
        override = config.conn_name if override is None else override
        if override:
            self.ctx.connection_name = override
            return override

        candidates = [Path(p) for p in (config.ipsec_conf_paths if config_sources is None else config_sources)]
        existing = [p for p in candidates if p.is_file()]
        if not existing:
            checked = " and ".join(str(p) for p in candidates)
            raise NoConfigFound(f"No ipsec.conf found (checked {checked})")

        try:
            names = read_connection_names(existing)
        except OSError as e:
            raise NoConfigFound(f"Cannot read ipsec.conf: {e}")

        name = pick_connection_name(names, config.conn_keyword)
        if not name:
            raise NoConnectionFound("Could not auto-detect a conn name in ipsec.conf")

        logger.info(f"Auto-detected CONN_NAME='{name}'")
        self.ctx.connection_name = name
        return name
