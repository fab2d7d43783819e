"""Per-invocation state shared by every tunnel component."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .interfaces import (
    IPsecControl,
    L2TPControl,
    NetworkState,
    PortProbe,
    PrivilegeControl,
    Resolver,
    ServiceControl,
)
from .system import (
    IprouteNetwork,
    SocketPortProbe,
    StrokeIPsec,
    SudoPrivilege,
    SystemdServices,
    SystemResolver,
    Xl2tpdControl,
)
from ..config import TunnelConfig


@dataclass
class Collaborators:
    """The external control planes, real or faked."""
    privilege: PrivilegeControl
    services: ServiceControl
    ports: PortProbe
    resolver: Resolver
    ipsec: IPsecControl
    l2tp: L2TPControl
    network: NetworkState

    @classmethod
    def system(cls) -> "Collaborators":
        return cls(
            privilege=SudoPrivilege(),
            services=SystemdServices(),
            ports=SocketPortProbe(),
            resolver=SystemResolver(),
            ipsec=StrokeIPsec(),
            l2tp=Xl2tpdControl(),
            network=IprouteNetwork(),
        )


@dataclass
class TunnelContext:
    """
    Configuration, collaborators and memoized state for one up/down run.

    The auto-detected connection name lives here rather than in a global so a
    new invocation starts from scratch.
    """
    config: TunnelConfig
    collaborators: Collaborators
    sleep: Callable[[float], None] = time.sleep
    connection_name: Optional[str] = None

    def reset(self) -> None:
        self.connection_name = None
