import subprocess

import pytest

from sharif_vpn.vpn import system
from sharif_vpn.vpn.command_factory import VPNCommandFactory
from sharif_vpn.vpn.commands import IP, CommandError, ValidationError
from sharif_vpn.vpn.models import LinkInfo, RouteEntry, ServiceState
from sharif_vpn.vpn.utils import retry, run_command

IP_LINK_OUTPUT = """\
1: lo: <LOOPBACK,UP,LOWER_UP> mtu 65536 qdisc noqueue state UNKNOWN mode DEFAULT group default qlen 1000\\    link/loopback 00:00:00:00:00:00 brd 00:00:00:00:00:00
2: wlp2s0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc noqueue state UP mode DORMANT group default qlen 1000\\    link/ether 3c:a0:67:11:22:33 brd ff:ff:ff:ff:ff:ff
5: veth0@if4: <BROADCAST,MULTICAST> mtu 1500 qdisc noop state DOWN mode DEFAULT group default qlen 1000\\    link/ether 6a:1e:22:00:11:22 brd ff:ff:ff:ff:ff:ff link-netnsid 0
9: ppp0: <POINTOPOINT,MULTICAST,NOARP,UP,LOWER_UP> mtu 1400 qdisc fq_codel state UNKNOWN mode DEFAULT group default qlen 3\\    link/ppp
"""


def test_parse_links():
    links = system.parse_links(IP_LINK_OUTPUT)

    assert [link.name for link in links] == ["lo", "wlp2s0", "veth0", "ppp0"]
    assert links[3] == LinkInfo("ppp0", ["POINTOPOINT", "MULTICAST", "NOARP", "UP", "LOWER_UP"])
    assert links[3].is_up
    assert not links[2].is_up


def test_lower_up_alone_is_not_up():
    assert not LinkInfo("ppp0", ["POINTOPOINT", "LOWER_UP"]).is_up


def test_parse_ipv4_addresses():
    output = "9: ppp0    inet 10.0.0.5 peer 172.27.0.1/32 scope global ppp0\\       valid_lft forever preferred_lft forever\n"

    assert system.parse_ipv4_addresses(output) == ["10.0.0.5"]
    assert system.parse_ipv4_addresses("") == []


def test_parse_routes():
    output = "172.27.48.0/22 dev ppp0 scope link \n"

    assert system.parse_routes("172.27.48.0/22", output) == [RouteEntry("172.27.48.0/22", "ppp0")]
    assert system.parse_routes("172.27.48.0/22", "") == []


@pytest.mark.parametrize("output, expected", [
    ("active\n", ServiceState.RUNNING),
    ("inactive\n", ServiceState.STOPPED),
    ("failed\n", ServiceState.STOPPED),
    ("", ServiceState.UNKNOWN),
    ("maintenance\n", ServiceState.UNKNOWN),
])
def test_parse_service_state(output, expected):
    assert system.parse_service_state(output) is expected


def test_factory_commands():
    assert VPNCommandFactory.check_sudo() == ["sudo", "--non-interactive", "true"]
    assert VPNCommandFactory.stop_service("xl2tpd.service") == ["sudo", "systemctl", "stop", "xl2tpd.service"]
    assert VPNCommandFactory.kill_process("charon") == ["sudo", "pkill", "--euid", "root", "--exact", "charon"]
    assert VPNCommandFactory.ipsec_up("sharif") == ["sudo", "ipsec", "up", "sharif"]
    assert VPNCommandFactory.list_links() == ["ip", "--oneline", "link", "show"]
    assert VPNCommandFactory.show_ipv4_addresses("ppp0") == [
        "ip", "--oneline", "--family", "inet", "addr", "show", "dev", "ppp0"]
    assert VPNCommandFactory.add_route("172.27.48.0/22", "ppp0") == [
        "sudo", "ip", "route", "add", "172.27.48.0/22", "dev", "ppp0"]
    assert VPNCommandFactory.list_udp_listeners() == [
        "sudo", "ss", "--udp", "--listening", "--numeric", "--processes"]


def test_command_rejects_unknown_option():
    with pytest.raises(ValidationError, match="Valid options are"):
        IP.with_option("color", "always")


def test_command_rejects_value_for_flag():
    with pytest.raises(ValidationError):
        IP.with_option("oneline", "yes")


def test_run_command_wraps_failures(monkeypatch):
    def failing(cmd, **kwargs):
        raise subprocess.CalledProcessError(3, cmd, output="", stderr="boom")

    monkeypatch.setattr(subprocess, "run", failing)

    with pytest.raises(CommandError) as excinfo:
        run_command(["ipsec", "up", "sharif"])

    assert excinfo.value.returncode == 3
    assert "boom" in str(excinfo.value)


def test_run_command_missing_binary(monkeypatch):
    def missing(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(subprocess, "run", missing)

    with pytest.raises(CommandError, match="could not be executed"):
        run_command(["xl2tpd-control"])


def test_kill_with_no_matching_process_is_success(monkeypatch):
    def no_match(cmd, check=True, input=None, capture=True):
        raise CommandError("Command failed", returncode=1)

    monkeypatch.setattr(system, "run_command", no_match)

    assert system.SystemdServices().kill("charon") is True


def test_retry_sleeps_only_between_attempts():
    sleeps = []
    results = iter([None, "", "ppp0"])

    assert retry(lambda: next(results), 5, 0.5, sleep=sleeps.append) == "ppp0"
    assert sleeps == [0.5, 0.5]

    sleeps.clear()
    assert retry(lambda: None, 3, 0.5, sleep=sleeps.append) is None
    assert sleeps == [0.5, 0.5]


def test_run_command_timeout(monkeypatch):
    def hung(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", hung)

    with pytest.raises(CommandError, match="timed out"):
        run_command(["sudo", "tee", "/run/xl2tpd/l2tp-control"], input="d sharif\n", timeout=1.0)
