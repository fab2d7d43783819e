"""Daemon supervision and UDP port checks."""

import re
from typing import Sequence

from .context import TunnelContext
from .exceptions import ServiceStartFailed
from .models import PortCheck, ServiceState
from .commands import CommandError
from ..logging_utility import logger

SWAN_STARTER = "strongswan-starter.service"  # stroke backend (ipsec commands)
SWAN_SYSTEMD = "strongswan.service"  # charon-systemd (swanctl backend)
XL2TPD = "xl2tpd.service"
CHARON = "charon"

IKE_PORTS = (500, 4500)


class ServiceController:
    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx
        self.services = ctx.collaborators.services

    def stop(self, service: str) -> bool:
        """Stop a service; already stopped is success."""
        state = self.services.state(service)
        if state is ServiceState.STOPPED:
            logger.debug(f"{service} already stopped")
            return True
        if not self.services.stop(service):
            if state is ServiceState.UNKNOWN:
                logger.debug(f"{service} not stoppable (state unknown); treating as stopped")
                return True
            logger.warning(f"Could not stop {service}; continuing")
            return False
        return True

    def start(self, service: str, required: bool = True) -> bool:
        if self.services.start(service):
            return True
        if required:
            raise ServiceStartFailed(f"failed to start {service} (see 'systemctl status {service}')")
        logger.warning(f"Could not start {service}; continuing")
        return False

    def restart(self, service: str) -> bool:
        if not self.services.restart(service):
            logger.warning(f"Could not restart {service}")
            return False
        return True

    def kill_lingering(self, process: str) -> bool:
        """Best-effort kill of a leftover daemon process."""
        if not self.services.kill(process):
            logger.warning(f"Could not kill lingering {process}")
            return False
        return True


class PortGuard:
    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx
        self.probe = ctx.collaborators.ports

    def check_free(self, ports: Sequence[int] = IKE_PORTS) -> PortCheck:
        """Report whether the given UDP ports are bound; never raises."""
        label = "UDP " + "/".join(str(p) for p in ports)
        try:
            listeners = self.probe.udp_listeners()
        except CommandError as e:
            logger.warning(f"Could not list UDP sockets: {e}")
            return PortCheck(free=False)

        pattern = re.compile(r":(%s)\s" % "|".join(str(p) for p in ports))
        busy = [line for line in listeners if pattern.search(line + " ")]
        if busy:
            logger.warning(f"Warning: {label} still in use:")
            for line in busy:
                logger.warning(line)
            return PortCheck(free=False, details=busy)

        logger.info(f"{label} are free.")
        return PortCheck(free=True)
