import pytest

from sharif_vpn.vpn.exceptions import ResolutionFailure, TunnelUpFailed
from sharif_vpn.vpn.ipsec import IPsecSession
from sharif_vpn.vpn.resolver import NameResolver

from fakes import FakeIPsec, FakeResolver


def test_up_sequence_reloads_then_waits_then_brings_up(ctx, collaborators):
    collaborators.ipsec = FakeIPsec(connections=["sharif"])
    ctx.collaborators = collaborators
    session = IPsecSession(ctx)

    session.up_sequence()

    verbs = [c[0] for c in collaborators.ipsec.calls]
    assert verbs == ["reload", "rereadsecrets", "statusall", "up"]
    assert collaborators.ipsec.up_calls() == ["sharif"]


def test_wait_loaded_not_visible_is_not_fatal(ctx, collaborators, sleep):
    session = IPsecSession(ctx)

    assert session.wait_loaded() is False
    assert sleep.calls == [0.5] * 7


def test_bring_up_retries_until_success(ctx, collaborators, sleep):
    collaborators.ipsec.up_failures = 2

    IPsecSession(ctx).bring_up()

    assert collaborators.ipsec.up_calls() == ["sharif"] * 3
    assert sleep.calls == [1.0, 1.0]


def test_bring_up_exhaustion_raises(ctx, collaborators, sleep):
    collaborators.ipsec.up_failures = 100

    with pytest.raises(TunnelUpFailed, match="check /etc/ipsec.conf"):
        IPsecSession(ctx).bring_up()

    assert len(collaborators.ipsec.up_calls()) == 8


def test_bring_down_failure_is_advisory(ctx, collaborators):
    collaborators.ipsec.down_ok = False

    assert IPsecSession(ctx).bring_down() is False
    assert ("down", "sharif") in collaborators.ipsec.calls


def test_bring_down_without_connection_name_skips(ctx, collaborators, tmp_path):
    ctx.config = ctx.config.model_copy(update={"ipsec_conf_paths": (str(tmp_path / "missing.conf"),)})

    assert IPsecSession(ctx).bring_down() is False
    assert collaborators.ipsec.calls == []


def test_resolver_retries_then_succeeds(ctx, collaborators, sleep):
    collaborators.resolver.failures = 3

    assert NameResolver(ctx).resolve("access2.sharif.edu") == "194.225.0.1"
    assert sleep.calls == [0.5] * 3


def test_resolver_exhaustion_is_fatal(ctx, collaborators, sleep):
    ctx.collaborators.resolver = FakeResolver(address=None)

    with pytest.raises(ResolutionFailure, match="access2.sharif.edu"):
        NameResolver(ctx).resolve("access2.sharif.edu", max_attempts=10, interval=0.5)

    assert ctx.collaborators.resolver.calls == 10
