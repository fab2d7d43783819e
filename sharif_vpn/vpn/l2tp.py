"""Dialing and hanging up the L2TP peer."""

from typing import Optional

from .context import TunnelContext
from .services import XL2TPD, ServiceController
from ..logging_utility import logger


class L2TPDialer:
    """
    Drives xl2tpd, preferring its control channel.

    The channel is looked up on every call since xl2tpd may create or remove it
    at any time. Without a channel, dialing restarts xl2tpd and relies on
    'autodial = yes' in its [lac] section; hanging up stops it. A channel
    that rejects the write is handled the same as a missing one.
    """

    def __init__(self, ctx: TunnelContext, services: Optional[ServiceController] = None):
        self.ctx = ctx
        self.control = ctx.collaborators.l2tp
        self.services = services or ServiceController(ctx)

    def dial(self, peer: str) -> None:
        channel = self.control.find_channel()
        if channel is not None:
            logger.info(f"Dialing L2TP peer {peer} via {channel}…")
            if self.control.write(channel, f"c {peer}"):
                return
            logger.warning(f"Could not write to {channel}")
        self.restart_daemon()

    def restart_daemon(self) -> None:
        logger.info("Control socket not usable; trying xl2tpd autodial (restart)…")
        self.services.restart(XL2TPD)

    def hangup(self, peer: str) -> None:
        channel = self.control.find_channel()
        if channel is not None:
            logger.info(f"Hanging up L2TP peer {peer}…")
            if self.control.write(channel, f"d {peer}"):
                return
            logger.warning(f"Could not write to {channel}")
        logger.info("L2TP control socket not usable; stopping xl2tpd…")
        self.services.stop(XL2TPD)
