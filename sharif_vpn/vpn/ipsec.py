"""IPsec connection lifecycle against the external IKE daemon."""

from typing import Optional

from .context import TunnelContext
from .exceptions import ConfigurationError, TunnelUpFailed
from .registry import ConnectionRegistry
from .utils import retry
from ..logging_utility import logger


class IPsecSession:
    def __init__(self, ctx: TunnelContext, registry: Optional[ConnectionRegistry] = None):
        self.ctx = ctx
        self.ipsec = ctx.collaborators.ipsec
        self.registry = registry or ConnectionRegistry(ctx)

    @property
    def connection(self) -> str:
        return self.registry.resolve_connection_name()

    def reload(self) -> None:
        """Reload config and secrets; the daemon may apply them despite a failing helper."""
        logger.info("Reloading ipsec config & secrets…")
        if not self.ipsec.reload():
            logger.warning("ipsec reload reported failure; continuing")
        if not self.ipsec.reread_secrets():
            logger.warning("ipsec rereadsecrets reported failure; continuing")

    def is_loaded(self) -> bool:
        return f" {self.connection}" in self.ipsec.status()

    def wait_loaded(self, max_attempts: int = 8, interval: float = 0.5) -> bool:
        if retry(self.is_loaded, max_attempts, interval, sleep=self.ctx.sleep,
                 description=f"{self.connection} to load"):
            return True
        logger.info("Conn not visible yet; proceeding with ipsec up and retries…")
        return False

    def bring_up(self, max_attempts: int = 8, interval: float = 1.0) -> None:
        """
        Issue 'ipsec up' until it succeeds.

        Raises:
            TunnelUpFailed: when every attempt fails
        """
        name = self.connection
        logger.info(f"Bringing up {name}…")
        if not retry(lambda: self.ipsec.up(name), max_attempts, interval, sleep=self.ctx.sleep,
                     description=f"ipsec up {name}"):
            raise TunnelUpFailed(f"ipsec up {name} failed (check /etc/ipsec.conf name and syntax)")

    def up_sequence(self) -> None:
        self.registry.resolve_connection_name()
        self.reload()
        self.wait_loaded()
        self.bring_up()

    def bring_down(self) -> bool:
        """Best-effort 'ipsec down'; never raises."""
        try:
            name = self.connection
        except ConfigurationError as e:
            logger.info(f"{e}")
            logger.info("Conn name not known; skipping ipsec down.")
            return False

        logger.info(f"Bringing down IPsec connection {name}…")
        if not self.ipsec.down(name):
            logger.warning(f"ipsec down {name} reported failure; continuing")
            return False
        return True
