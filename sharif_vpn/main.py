import argparse
import sys
import time
from typing import Callable, List, Mapping, Optional

from .config import TunnelConfig
from .logging_utility import Logger, logger
from .vpn.context import Collaborators, TunnelContext
from .vpn.exceptions import ConfigurationError, VPNError
from .vpn.manager import TunnelOrchestrator

EPILOG = """\
commands:
  up     stop anything on UDP 500/4500, start strongswan-starter + xl2tpd, bring tunnel up
  down   hang up L2TP (via control or autodial fallback), bring IPsec down, stop services

env overrides:
  CONN_NAME        (auto-detected if empty)
  L2TP_PEER        (default: {l2tp_peer})
  REMOTE_HOST      (default: {remote_host})
  ROUTE_CIDR       (default: {route_cidr})
  CONN_KEYWORD     (default: {conn_keyword})
  IPSEC_CONF_PATHS (default: {ipsec_conf_paths})
  VPN_LOG_FILE     (optional log file)
"""


def build_parser() -> argparse.ArgumentParser:
    defaults = TunnelConfig()
    parser = argparse.ArgumentParser(
        prog="sharif-vpn",
        description="Bring the Sharif L2TP/IPsec tunnel up or down",
        epilog=EPILOG.format(
            l2tp_peer=defaults.l2tp_peer,
            remote_host=defaults.remote_host,
            route_cidr=defaults.route_cidr,
            conn_keyword=defaults.conn_keyword,
            ipsec_conf_paths=":".join(defaults.ipsec_conf_paths),
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", nargs="?", choices=["up", "down"])
    return parser


def main(argv: Optional[List[str]] = None,
         environ: Optional[Mapping[str, str]] = None,
         collaborators: Optional[Collaborators] = None,
         sleep: Callable[[float], None] = time.sleep) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    try:
        config = TunnelConfig.from_env(environ)
        if config.log_file:
            try:
                Logger().add_file(config.log_file)
            except OSError as e:
                raise ConfigurationError(f"Cannot open VPN_LOG_FILE {config.log_file}: {e}")

        ctx = TunnelContext(config, collaborators or Collaborators.system(), sleep=sleep)
        orchestrator = TunnelOrchestrator(ctx)
        if args.command == "up":
            orchestrator.up()
        else:
            orchestrator.down()
    except VPNError as e:
        logger.debug(f"{args.command} failed: {e!r}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(f"Interrupted during '{args.command}'; run 'down' to clean up.", file=sys.stderr)
        return 130
    return 0


def run() -> None:
    sys.exit(main())
