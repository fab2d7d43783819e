"""Data models for tunnel management."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ServiceState(Enum):
    """systemd unit state as seen by the service controller"""
    STOPPED = "stopped"
    RUNNING = "running"
    UNKNOWN = "unknown"


class PPPInterfaceState(Enum):
    """PPP interface readiness"""
    ABSENT = "absent"
    PRESENT_DOWN = "present-down"
    PRESENT_UP_NO_ADDR = "present-up-no-addr"
    READY = "ready"


@dataclass
class LinkInfo:
    """Network interface information"""
    name: str
    flags: List[str] = field(default_factory=list)

    @property
    def is_up(self) -> bool:
        return "UP" in self.flags


@dataclass(frozen=True)
class RouteEntry:
    """Kernel route bound to an output device"""
    cidr: str
    device: str


@dataclass
class PortCheck:
    """Result of a UDP port occupancy check"""
    free: bool
    details: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.free
