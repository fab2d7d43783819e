"""PPP interface readiness and tunnel route management."""

import re
from typing import Optional

from .context import TunnelContext
from .exceptions import InterfaceNotReady, InterfaceTimeout, RouteInstallFailed
from .models import PPPInterfaceState
from .utils import retry
from ..logging_utility import logger

PPP_NAME_RE = re.compile(r"^ppp\d+$")


class PPPInterfaceWatcher:
    """Polls kernel link state; pppd creates the interface, we only observe it."""

    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx
        self.network = ctx.collaborators.network

    def current_interface(self) -> Optional[str]:
        for link in self.network.links():
            if PPP_NAME_RE.match(link.name):
                return link.name
        return None

    def state(self, name: str) -> PPPInterfaceState:
        link = self.network.link(name)
        if link is None:
            return PPPInterfaceState.ABSENT
        if not link.is_up:
            return PPPInterfaceState.PRESENT_DOWN
        if not self.network.ipv4_addresses(name):
            return PPPInterfaceState.PRESENT_UP_NO_ADDR
        return PPPInterfaceState.READY

    def is_ready(self, name: str) -> bool:
        return self.state(name) is PPPInterfaceState.READY

    def wait_appear(self, max_attempts: int = 40, interval: float = 0.5) -> str:
        """
        Wait for the first pppN interface.

        Raises:
            InterfaceTimeout: if none appears within the budget
        """
        logger.info("Waiting for PPP interface…")
        name = retry(self.current_interface, max_attempts, interval, sleep=self.ctx.sleep,
                     description="PPP interface")
        if not name:
            raise InterfaceTimeout("PPP interface did not appear")
        logger.info(f"PPP detected on {name}; waiting until it is ready…")
        return name

    def wait_ready(self, name: str, max_attempts: int = 40, interval: float = 0.5,
                   final_wait: float = 0.5) -> None:
        """
        Wait until the interface is UP and has an IPv4 address in the same poll.

        After the budget runs out the link is forced up once and sampled again.

        Raises:
            InterfaceNotReady: if the last sample still is not ready
        """
        if retry(lambda: self.is_ready(name), max_attempts, interval, sleep=self.ctx.sleep,
                 description=f"{name} to be ready"):
            logger.info(f"PPP {name} is ready")
            return

        logger.info(f"{name} is {self.state(name).value}; forcing link up")
        if not self.network.set_link_up(name):
            logger.warning(f"Could not set {name} up")
        self.ctx.sleep(final_wait)
        if self.is_ready(name):
            logger.info(f"PPP {name} is ready")
            return
        raise InterfaceNotReady(f"PPP interface {name} did not become ready (UP + IPv4 address)")


class RouteManager:
    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx
        self.network = ctx.collaborators.network

    def has_route(self, cidr: str, interface: str) -> bool:
        return any(route.device == interface for route in self.network.routes(cidr))

    def add(self, cidr: str, interface: str, max_attempts: int = 3, interval: float = 0.7) -> None:
        """
        Route cidr via interface unless it already is.

        Raises:
            RouteInstallFailed: if every attempt fails
        """
        if self.has_route(cidr, interface):
            logger.info(f"Route {cidr} already via {interface}")
            return

        # The link can be reported ready before routing accepts it
        if not retry(lambda: self.network.add_route(cidr, interface), max_attempts, interval,
                     sleep=self.ctx.sleep, description=f"route {cidr} via {interface}"):
            raise RouteInstallFailed(f"Failed to add route {cidr} via {interface} (device may not be fully up)")
        logger.info(f"Added route {cidr} via {interface}")

    def remove(self, cidr: str, interface: str) -> bool:
        """Best-effort removal, only if the route is present."""
        if not self.has_route(cidr, interface):
            return False
        logger.info(f"Removing route {cidr} from {interface}…")
        if not self.network.delete_route(cidr, interface):
            logger.warning(f"Could not remove route {cidr} from {interface}")
            return False
        return True
