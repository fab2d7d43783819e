"""Adapters driving the real daemons and kernel state through their CLIs."""

import errno
import os
import re
import socket
from pathlib import Path
from typing import List, Optional, Sequence

from .command_factory import VPNCommandFactory
from .commands import CommandError
from .models import LinkInfo, RouteEntry, ServiceState
from .utils import run_command
from ..logging_utility import logger

XL2TPD_CONTROL_PATHS = (
    Path("/var/run/xl2tpd/l2tp-control"),
    Path("/run/xl2tpd/l2tp-control"),
)

CONTROL_WRITE_TIMEOUT = 5.0

_LINK_RE =re.compile(r"^\d+:\s+([^:@\s]+)(?:@[^:\s]+)?:\s+<([^>]*)>")
_INET_RE = re.compile(r"\binet\s+(\S+)")
_DEV_RE = re.compile(r"\bdev\s+(\S+)")

_RUNNING_STATES = {"active", "activating", "reloading", "deactivating"}
_STOPPED_STATES = {"inactive", "failed"}


def parse_links(output: str) -> List[LinkInfo]:
    """Parse `ip -o link show` output."""
    links = []
    for line in output.splitlines():
        match = _LINK_RE.match(line.strip())
        if match:
            flags = [f for f in match.group(2).split(",") if f]
            links.append(LinkInfo(name=match.group(1), flags=flags))
    return links


def parse_ipv4_addresses(output: str) -> List[str]:
    """Parse `ip -o -4 addr show` output into address/prefix strings."""
    return _INET_RE.findall(output)


def parse_routes(cidr: str, output: str) -> List[RouteEntry]:
    """Parse `ip route show <cidr>` output."""
    routes = []
    for line in output.splitlines():
        match = _DEV_RE.search(line)
        if match:
            routes.append(RouteEntry(cidr=cidr, device=match.group(1)))
    return routes


def parse_service_state(output: str) -> ServiceState:
    state = output.strip().splitlines()[0].strip() if output.strip() else ""
    if state in _RUNNING_STATES:
        return ServiceState.RUNNING
    if state in _STOPPED_STATES:
        return ServiceState.STOPPED
    return ServiceState.UNKNOWN


def fifo_has_reader(path: Path) -> bool:
    """
    Whether a process has the FIFO open for reading.

    A FIFO left behind by a dead xl2tpd has no reader and a blocking write to
    it would never return. When we may not open it ourselves the answer is
    unknown and the FIFO is assumed live; writes are bounded by a timeout.
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_NONBLOCK)
    except OSError as e:
        if e.errno == errno.ENXIO:
            return False
        if e.errno in (errno.EACCES, errno.EPERM):
            return True
        raise
    os.close(fd)
    return True


def _succeeds(cmd: list[str], input: Optional[str] = None) -> bool:
    try:
        run_command(cmd, input=input)
        return True
    except CommandError as e:
        logger.debug(str(e))
        return False


class SudoPrivilege:
    def acquire(self) -> bool:
        if _succeeds(VPNCommandFactory.check_sudo()):
            return True
        logger.info("This needs sudo.")
        try:
            run_command(VPNCommandFactory.validate_sudo(), capture=False)
            return True
        except CommandError as e:
            logger.debug(str(e))
            return False


class SystemdServices:
    def state(self, service: str) -> ServiceState:
        try:
            stdout, _ = run_command(VPNCommandFactory.service_state(service), check=False)
        except CommandError as e:
            logger.debug(str(e))
            return ServiceState.UNKNOWN
        return parse_service_state(stdout)

    def start(self, service: str) -> bool:
        return _succeeds(VPNCommandFactory.start_service(service))

    def stop(self, service: str) -> bool:
        return _succeeds(VPNCommandFactory.stop_service(service))

    def restart(self, service: str) -> bool:
        return _succeeds(VPNCommandFactory.restart_service(service))

    def kill(self, process: str) -> bool:
        try:
            run_command(VPNCommandFactory.kill_process(process))
        except CommandError as e:
            # pkill exits 1 when nothing matched
            if e.returncode == 1:
                return True
            logger.debug(str(e))
            return False
        return True


class SocketPortProbe:
    def udp_listeners(self) -> List[str]:
        stdout, _ = run_command(VPNCommandFactory.list_udp_listeners())
        lines = stdout.splitlines()
        if lines and lines[0].startswith(("State", "Netid")):
            lines = lines[1:]
        return [line for line in lines if line.strip()]


class SystemResolver:
    def resolve(self, hostname: str) -> Optional[str]:
        try:
            infos = socket.getaddrinfo(hostname, None)
        except (OSError, UnicodeError) as e:
            logger.debug(f"Lookup of {hostname} failed: {e}")
            return None
        for info in infos:
            return info[4][0]
        return None


class StrokeIPsec:
    """strongSwan controlled through the stroke `ipsec` helper."""

    def reload(self) -> bool:
        return _succeeds(VPNCommandFactory.ipsec_reload())

    def reread_secrets(self) -> bool:
        return _succeeds(VPNCommandFactory.ipsec_reread_secrets())

    def status(self) -> str:
        try:
            stdout, _ = run_command(VPNCommandFactory.ipsec_status(), check=False)
        except CommandError as e:
            logger.debug(str(e))
            return ""
        return stdout

    def up(self, connection: str) -> bool:
        try:
            stdout, _ = run_command(VPNCommandFactory.ipsec_up(connection))
        except CommandError as e:
            logger.info(e.stdout.strip() or str(e))
            return False
        logger.debug(stdout.strip())
        return True

    def down(self, connection: str) -> bool:
        return _succeeds(VPNCommandFactory.ipsec_down(connection))


class Xl2tpdControl:
    def __init__(self, candidates: Sequence[Path] = XL2TPD_CONTROL_PATHS):
        self.candidates = tuple(candidates)

    def find_channel(self) -> Optional[Path]:
        for path in self.candidates:
            try:
                if path.is_socket():
                    return path
                if path.is_fifo() and fifo_has_reader(path):
                    return path
            except OSError:
                continue
        return None

    def write(self, channel: Path, directive: str) -> bool:
        try:
            run_command(VPNCommandFactory.write_control(channel), input=f"{directive}\n",
                        timeout=CONTROL_WRITE_TIMEOUT)
            return True
        except CommandError as e:
            logger.debug(str(e))
            return False


class IprouteNetwork:
    """Kernel state through iproute2."""

    def links(self) -> List[LinkInfo]:
        try:
            stdout, _ = run_command(VPNCommandFactory.list_links())
        except CommandError as e:
            logger.debug(str(e))
            return []
        return parse_links(stdout)

    def link(self, name: str) -> Optional[LinkInfo]:
        try:
            stdout, _ = run_command(VPNCommandFactory.show_link(name))
        except CommandError:
            return None
        links = parse_links(stdout)
        return links[0] if links else None

    def ipv4_addresses(self, name: str) -> List[str]:
        try:
            stdout, _ = run_command(VPNCommandFactory.show_ipv4_addresses(name))
        except CommandError:
            return []
        return parse_ipv4_addresses(stdout)

    def set_link_up(self, name: str) -> bool:
        return _succeeds(VPNCommandFactory.set_link_up(name))

    def routes(self, cidr: str) -> List[RouteEntry]:
        try:
            stdout, _ = run_command(VPNCommandFactory.show_route(cidr))
        except CommandError as e:
            logger.debug(str(e))
            return []
        return parse_routes(cidr, stdout)

    def add_route(self, cidr: str, device: str) -> bool:
        return _succeeds(VPNCommandFactory.add_route(cidr, device))

    def delete_route(self, cidr: str, device: str) -> bool:
        return _succeeds(VPNCommandFactory.delete_route(cidr, device))

    def l2tp_sessions(self) -> str:
        try:
            stdout, _ = run_command(VPNCommandFactory.show_l2tp_sessions())
        except CommandError as e:
            logger.debug(str(e))
            return ""
        return stdout
