"""L2TP/IPsec tunnel orchestration."""

from typing import Optional

from .context import TunnelContext
from .exceptions import PrivilegeDenied
from .ipsec import IPsecSession
from .l2tp import L2TPDialer
from .network import PPPInterfaceWatcher, RouteManager
from .registry import ConnectionRegistry
from .resolver import NameResolver
from .services import (
    CHARON,
    IKE_PORTS,
    SWAN_STARTER,
    SWAN_SYSTEMD,
    XL2TPD,
    PortGuard,
    ServiceController,
)
from ..logging_utility import logger


class TunnelOrchestrator:
    """
    Brings the tunnel up and down.

    A fatal step in up() raises and leaves whatever was already done in place;
    down() is written to clean up from any such partial state and can be run
    repeatedly.
    """

    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx
        self.config = ctx.config
        self.services = ServiceController(ctx)
        self.ports = PortGuard(ctx)
        self.resolver = NameResolver(ctx)
        self.registry = ConnectionRegistry(ctx)
        self.ipsec = IPsecSession(ctx, self.registry)
        self.dialer = L2TPDialer(ctx, self.services)
        self.watcher = PPPInterfaceWatcher(ctx)
        self.routes = RouteManager(ctx)
        self.interface: Optional[str] = None

    def _acquire_privilege(self) -> None:
        if not self.ctx.collaborators.privilege.acquire():
            raise PrivilegeDenied("could not obtain sudo privileges")

    def _stop_daemons(self) -> None:
        logger.info("Stopping IKE daemons so UDP 500/4500 are free…")
        self.services.stop(SWAN_SYSTEMD)
        self.services.stop(SWAN_STARTER)
        self.services.kill_lingering(CHARON)
        self.ctx.sleep(0.4)

    def _start_daemons(self) -> None:
        logger.info(f"Starting {SWAN_STARTER} and {XL2TPD}…")
        self.services.start(SWAN_STARTER)
        self.services.start(XL2TPD)
        self.ctx.sleep(0.7)

    def _log_l2tp_sessions(self) -> None:
        sessions = self.ctx.collaborators.network.l2tp_sessions().strip()
        if sessions:
            logger.info(f"L2TP sessions:\n{sessions}")

    def up(self) -> str:
        """
        Establish the tunnel and install the route.

        Returns:
            The PPP interface carrying the tunnel
        """
        self._acquire_privilege()
        self.ctx.reset()

        self._stop_daemons()
        self.ports.check_free(IKE_PORTS)
        self._start_daemons()
        self.resolver.resolve(self.config.remote_host)
        self.ipsec.up_sequence()

        self.dialer.dial(self.config.l2tp_peer)
        ppp = self.watcher.wait_appear()
        self.watcher.wait_ready(ppp)
        self._log_l2tp_sessions()
        self.routes.add(self.config.route_cidr, ppp)

        self.interface = ppp
        logger.info("UP complete.")
        return ppp

    def down(self) -> None:
        """Tear everything down, tolerating whatever is already gone."""
        self._acquire_privilege()
        self.ctx.reset()

        ppp = self.watcher.current_interface()
        if ppp:
            self.routes.remove(self.config.route_cidr, ppp)

        self.dialer.hangup(self.config.l2tp_peer)
        self.ipsec.bring_down()

        logger.info(f"Stopping services ({SWAN_STARTER}, {SWAN_SYSTEMD}, {XL2TPD})…")
        for service in (XL2TPD, SWAN_STARTER, SWAN_SYSTEMD):
            self.services.stop(service)
        self.services.kill_lingering(CHARON)
        self.ports.check_free(IKE_PORTS)

        self.interface = None
        logger.info("DOWN complete.")
