"""Tunnel configuration resolved from environment overrides."""

import ipaddress
import os
import re
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .vpn.exceptions import ConfigurationError

DEFAULT_IPSEC_CONF_PATHS = ("/etc/ipsec.conf", "/etc/strongswan/ipsec.conf")

# Environment variable for each overridable field
ENV_VARS = {
    "conn_name": "CONN_NAME",
    "l2tp_peer": "L2TP_PEER",
    "remote_host": "REMOTE_HOST",
    "route_cidr": "ROUTE_CIDR",
    "conn_keyword": "CONN_KEYWORD",
    "ipsec_conf_paths": "IPSEC_CONF_PATHS",
    "log_file": "VPN_LOG_FILE",
}


class TunnelConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    conn_name: Optional[str] = None
    l2tp_peer: str = "sharif"
    remote_host: str = "access2.sharif.edu"
    route_cidr: str = "172.27.48.0/22"
    conn_keyword: str = "sharif"
    ipsec_conf_paths: Tuple[str, ...] = DEFAULT_IPSEC_CONF_PATHS
    log_file: Optional[str] = None

    @field_validator("conn_name", "log_file", mode="before")
    @classmethod
    def _empty_as_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("l2tp_peer", "remote_host", "conn_keyword")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("conn_keyword")
    @classmethod
    def _valid_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"not a valid regular expression ({e})")
        return value

    @field_validator("route_cidr")
    @classmethod
    def _valid_network(cls, value: str) -> str:
        ipaddress.ip_network(value.strip(), strict=False)
        return value.strip()

    @field_validator("ipsec_conf_paths", mode="before")
    @classmethod
    def _split_paths(cls, value):
        if isinstance(value, str):
            value = tuple(p for p in value.split(":") if p)
        if not value:
            raise ValueError("at least one path is required")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TunnelConfig":
        """Build the configuration from environment overrides, defaults elsewhere."""
        environ = os.environ if environ is None else environ
        values = {field: environ[var] for field, var in ENV_VARS.items() if var in environ}
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{ENV_VARS.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}")
