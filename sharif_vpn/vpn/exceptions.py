"""Custom exceptions for tunnel management."""


class VPNError(Exception):
    """Base exception for VPN-related errors."""
    pass


class ConfigurationError(VPNError):
    """Raised when there's an issue with tunnel or IPsec configuration"""
    pass


class NoConfigFound(ConfigurationError):
    """Raised when none of the ipsec.conf candidates exist"""
    pass


class NoConnectionFound(ConfigurationError):
    """Raised when no usable conn entry can be auto-detected"""
    pass


class PrivilegeDenied(VPNError):
    """Raised when sudo privileges cannot be acquired"""
    pass


class ResolutionFailure(VPNError):
    """Raised when the remote gateway never resolves"""
    pass


class ServiceStartFailed(VPNError):
    """Raised when a required daemon fails to start"""
    pass


class TunnelError(VPNError):
    """Raised when the IPsec tunnel cannot be negotiated"""
    pass


class TunnelUpFailed(TunnelError):
    """Raised when 'ipsec up' keeps failing"""
    pass


class InterfaceError(VPNError):
    """Raised when there's an issue with network interfaces"""
    pass


class InterfaceTimeout(InterfaceError):
    """Raised when no PPP interface shows up"""
    pass


class InterfaceNotReady(InterfaceError):
    """Raised when the PPP interface never gets UP with an IPv4 address"""
    pass


class RouteInstallFailed(VPNError):
    """Raised when the tunnel route cannot be added"""
    pass
