"""Protocol interfaces for the external control planes the tunnel is built on."""

from pathlib import Path
from typing import List, Optional, Protocol

from .models import LinkInfo, RouteEntry, ServiceState


class PrivilegeControl(Protocol):
    """Acquire elevated privileges for the rest of the run."""

    def acquire(self) -> bool:
        ...


class ServiceControl(Protocol):
    """Service supervisor operations."""

    def state(self, service: str) -> ServiceState:
        ...

    def start(self, service: str) -> bool:
        ...

    def stop(self, service: str) -> bool:
        ...

    def restart(self, service: str) -> bool:
        ...

    def kill(self, process: str) -> bool:
        """Signal a process by exact name; True if none is left running."""
        ...


class PortProbe(Protocol):
    """Listening socket inspection."""

    def udp_listeners(self) -> List[str]:
        """One line per listening UDP socket."""
        ...


class Resolver(Protocol):
    """Name resolution."""

    def resolve(self, hostname: str) -> Optional[str]:
        ...


class IPsecControl(Protocol):
    """IKE daemon control through its command line helper."""

    def reload(self) -> bool:
        ...

    def reread_secrets(self) -> bool:
        ...

    def status(self) -> str:
        ...

    def up(self, connection: str) -> bool:
        ...

    def down(self, connection: str) -> bool:
        ...


class L2TPControl(Protocol):
    """L2TP daemon control channel."""

    def find_channel(self) -> Optional[Path]:
        ...

    def write(self, channel: Path, directive: str) -> bool:
        ...


class NetworkState(Protocol):
    """Kernel link, address and route state."""

    def links(self) -> List[LinkInfo]:
        ...

    def link(self, name: str) -> Optional[LinkInfo]:
        ...

    def ipv4_addresses(self, name: str) -> List[str]:
        ...

    def set_link_up(self, name: str) -> bool:
        ...

    def routes(self, cidr: str) -> List[RouteEntry]:
        ...

    def add_route(self, cidr: str, device: str) -> bool:
        ...

    def delete_route(self, cidr: str, device: str) -> bool:
        ...

    def l2tp_sessions(self) -> str:
        ...
