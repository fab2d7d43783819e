"""Factory for creating tunnel-related commands."""

from pathlib import Path
from .commands import (
    SUDO,
    SYSTEMCTL,
    IPSEC,
    IP_LINK,
    IP_ADDR4,
    IP_ROUTE,
    IP_L2TP,
    SS_UDP_LISTEN,
    PKILL,
    TEE,
)


class VPNCommandFactory:
    """Factory for creating tunnel management commands."""

    @staticmethod
    def check_sudo() -> list[str]:
        """Create non-interactive sudo check command."""
        return SUDO.with_option("non_interactive").with_arg("true").build()

    @staticmethod
    def validate_sudo() -> list[str]:
        """Create command that prompts for and caches sudo credentials."""
        return SUDO.with_option("validate").build()

    @staticmethod
    def service_state(service: str) -> list[str]:
        """Create unit state query command."""
        return SYSTEMCTL.with_args("is-active", service).build()

    @staticmethod
    def start_service(service: str) -> list[str]:
        return SYSTEMCTL.with_args("start", service).as_sudo().build()

    @staticmethod
    def stop_service(service: str) -> list[str]:
        return SYSTEMCTL.with_args("stop", service).as_sudo().build()

    @staticmethod
    def restart_service(service: str) -> list[str]:
        return SYSTEMCTL.with_args("restart", service).as_sudo().build()

    @staticmethod
    def kill_process(process: str) -> list[str]:
        """Create command killing a root-owned process by exact name."""
        return PKILL.with_options(euid="root", exact=None).with_arg(process).as_sudo().build()

    @staticmethod
    def list_udp_listeners() -> list[str]:
        return SS_UDP_LISTEN.as_sudo().build()

    @staticmethod
    def ipsec_reload() -> list[str]:
        return IPSEC.with_arg("reload").as_sudo().build()

    @staticmethod
    def ipsec_reread_secrets() -> list[str]:
        return IPSEC.with_arg("rereadsecrets").as_sudo().build()

    @staticmethod
    def ipsec_status() -> list[str]:
        """Create full IPsec status command."""
        return IPSEC.with_arg("statusall").as_sudo().build()

    @staticmethod
    def ipsec_up(connection: str) -> list[str]:
        return IPSEC.with_args("up", connection).as_sudo().build()

    @staticmethod
    def ipsec_down(connection: str) -> list[str]:
        return IPSEC.with_args("down", connection).as_sudo().build()

    @staticmethod
    def write_control(channel: Path) -> list[str]:
        """Create command writing stdin to the L2TP control channel."""
        return TEE.with_arg(str(channel)).as_sudo().build()

    @staticmethod
    def list_links() -> list[str]:
        """Create command to list network links."""
        return IP_LINK.with_arg("show").build()

    @staticmethod
    def show_link(interface: str) -> list[str]:
        return IP_LINK.with_args("show", "dev", interface).build()

    @staticmethod
    def show_ipv4_addresses(interface: str) -> list[str]:
        return IP_ADDR4.with_args("show", "dev", interface).build()

    @staticmethod
    def set_link_up(interface: str) -> list[str]:
        return IP_LINK.with_args("set", interface, "up").as_sudo().build()

    @staticmethod
    def show_route(cidr: str) -> list[str]:
        """Create route show command."""
        return IP_ROUTE.with_args("show", cidr).build()

    @staticmethod
    def add_route(cidr: str, interface: str) -> list[str]:
        return IP_ROUTE.with_args("add", cidr, "dev", interface).as_sudo().build()

    @staticmethod
    def delete_route(cidr: str, interface: str) -> list[str]:
        return IP_ROUTE.with_args("del", cidr, "dev", interface).as_sudo().build()

    @staticmethod
    def show_l2tp_sessions() -> list[str]:
        return IP_L2TP.with_args("show", "session").as_sudo().build()
