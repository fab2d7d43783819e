import pytest

from sharif_vpn.config import TunnelConfig
from sharif_vpn.vpn.context import TunnelContext

from fakes import SleepRecorder, make_collaborators

IPSEC_CONF = """\
config setup
    charondebug="ike 1"

conn %default
    keyexchange=ikev1

conn sharif
    type=transport
    right=access2.sharif.edu
    auto=add
"""


@pytest.fixture
def ipsec_conf(tmp_path):
    path = tmp_path / "ipsec.conf"
    path.write_text(IPSEC_CONF)
    return path


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def config(ipsec_conf):
    return TunnelConfig(ipsec_conf_paths=(str(ipsec_conf),))


@pytest.fixture
def collaborators():
    return make_collaborators()


@pytest.fixture
def ctx(config, collaborators, sleep):
    return TunnelContext(config, collaborators, sleep=sleep)
