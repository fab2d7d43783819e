import pytest

from sharif_vpn.config import TunnelConfig
from sharif_vpn.vpn.context import TunnelContext
from sharif_vpn.vpn.exceptions import NoConfigFound, NoConnectionFound
from sharif_vpn.vpn.registry import ConnectionRegistry, pick_connection_name

from fakes import make_collaborators


def write_conf(path, *names):
    path.write_text("".join(f"conn {name}\n    auto=add\n\n" for name in names))
    return path


def registry_for(*paths, conn_name=None):
    config = TunnelConfig(conn_name=conn_name, ipsec_conf_paths=tuple(str(p) for p in paths))
    return ConnectionRegistry(TunnelContext(config, make_collaborators()))


def test_keyword_match_wins_over_first_non_default(tmp_path):
    conf = write_conf(tmp_path / "ipsec.conf", "%default", "default", "office-vpn", "sharif-edu")

    assert registry_for(conf).resolve_connection_name("", [conf]) == "sharif-edu"


def test_first_non_default_when_no_keyword_match(tmp_path):
    conf = write_conf(tmp_path / "ipsec.conf", "%default", "corp-net", "other-net")

    assert registry_for(conf).resolve_connection_name("", [conf]) == "corp-net"


def test_override_returned_verbatim(tmp_path):
    missing = tmp_path / "nope.conf"

    assert registry_for(missing).resolve_connection_name("whatever name", [missing]) == "whatever name"


def test_override_from_config(tmp_path):
    missing = tmp_path / "nope.conf"

    assert registry_for(missing, conn_name="L2TP-PSK").resolve_connection_name() == "L2TP-PSK"


def test_sources_scanned_in_order_and_missing_ones_skipped(tmp_path):
    first = write_conf(tmp_path / "a.conf", "%default")
    second = write_conf(tmp_path / "b.conf", "lab", "sharif")
    missing = tmp_path / "c.conf"

    registry = registry_for(missing, first, second)

    assert registry.resolve_connection_name() == "sharif"


def test_indented_conn_lines_are_entries(tmp_path):
    conf = tmp_path / "ipsec.conf"
    conf.write_text("config setup\n\n  conn\tvpn-home\n    auto=add\n# conn commented\n")

    assert registry_for(conf).resolve_connection_name() == "vpn-home"


def test_no_entries_raises_no_connection_found(tmp_path):
    conf = write_conf(tmp_path / "ipsec.conf", "%default", "default")

    with pytest.raises(NoConnectionFound):
        registry_for(conf).resolve_connection_name()


def test_no_sources_raises_no_config_found(tmp_path):
    missing = [tmp_path / "ipsec.conf", tmp_path / "strongswan" / "ipsec.conf"]

    with pytest.raises(NoConfigFound, match="checked"):
        registry_for(*missing).resolve_connection_name()


def test_result_is_memoized_until_reset(tmp_path):
    conf = write_conf(tmp_path / "ipsec.conf", "corp-net")
    registry = registry_for(conf)

    assert registry.resolve_connection_name() == "corp-net"
    write_conf(conf, "sharif")
    assert registry.resolve_connection_name() == "corp-net"

    registry.ctx.reset()
    assert registry.resolve_connection_name() == "sharif"


def test_pick_connection_name_custom_keyword():
    assert pick_connection_name(["%default", "a", "uni-b"], keyword="uni") == "uni-b"
    assert pick_connection_name(["%default", "default"], keyword="uni") is None


def test_non_utf8_bytes_do_not_break_detection(tmp_path):
    conf = tmp_path / "ipsec.conf"
    conf.write_bytes(b"# caf\xe9 config\nconn %default\nconn sharif\n")

    assert registry_for(conf).resolve_connection_name() == "sharif"
