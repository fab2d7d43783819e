"""Command templates and builders for tunnel management."""

from typing import List, Optional, Dict
from dataclasses import dataclass


class CommandError(Exception):
    """Base exception for command-related errors."""

    def __init__(self, message: str, returncode: Optional[int] = None,
                 stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class ValidationError(CommandError):
    """Raised when command validation fails."""
    pass


@dataclass
class Command:
    """Command builder with validation."""
    base_cmd: List[str]
    use_sudo: bool = False
    _valid_options: Optional[Dict[str, type]] = None

    def _validate_option(self, opt: str, value: Optional[str]) -> None:
        """Validate option and its value if validation rules exist."""
        if self._valid_options is not None:
            # Remove leading dashes for validation
            opt_name = opt.lstrip('-').replace('-', '_')

            if opt_name not in self._valid_options:
                valid_opts = ", ".join(f"--{opt.replace('_', '-')}"
                                       for opt in self._valid_options.keys())
                raise ValidationError(
                    f"Invalid option '{opt}' for command {self.base_cmd[0]}. "
                    f"Valid options are: {valid_opts}"
                )

            expected_type = self._valid_options[opt_name]
            if expected_type is type(None):
                if value is not None:
                    raise ValidationError(f"Option '{opt}' is a flag and takes no value")
                return

            if value is None:
                raise ValidationError(f"Option '{opt}' requires a value")
            try:
                expected_type(value)
            except ValueError:
                raise ValidationError(
                    f"Invalid value '{value}' for option '{opt}'. Expected {expected_type.__name__}"
                )

    def _validate_executable(self) -> None:
        """Validate that base command exists."""
        if not self.base_cmd:
            raise ValidationError("Command cannot be empty")

    @classmethod
    def from_str(cls, cmd: str, valid_options: Optional[Dict[str, type]] = None) -> 'Command':
        """Create command from string with optional validation rules."""
        command = cls(cmd.split(), _valid_options=valid_options)
        command._validate_executable()
        return command

    def with_arg(self, arg: str) -> 'Command':
        """Add single argument."""
        return Command(self.base_cmd + [arg], self.use_sudo, self._valid_options)

    def with_args(self, *args: str) -> 'Command':
        """Add multiple arguments."""
        return Command(self.base_cmd + list(args), self.use_sudo, self._valid_options)

    def with_option(self, opt: str, value: Optional[str] = None) -> 'Command':
        """Add option with validation."""
        opt_clean = opt.lstrip('-')
        self._validate_option(opt_clean, value)
        cmd = self.base_cmd.copy()
        cmd.append(f"--{opt_clean.replace('_', '-')}")
        if value is not None:
            cmd.append(str(value))
        return Command(cmd, self.use_sudo, self._valid_options)

    def with_options(self, **kwargs: Optional[str]) -> 'Command':
        """Add multiple options with validation."""
        cmd = self.base_cmd.copy()
        for opt, value in kwargs.items():
            self._validate_option(opt, str(value) if value is not None else None)
            cmd.append("--" + opt.replace("_", "-"))
            if value is not None:
                cmd.append(str(value))
        return Command(cmd, self.use_sudo, self._valid_options)

    def as_sudo(self) -> 'Command':
        """Mark command to be executed with sudo."""
        return Command(self.base_cmd, True, self._valid_options)

    def build(self) -> List[str]:
        """Get final command list."""
        self._validate_executable()
        return ["sudo"] + self.base_cmd if self.use_sudo else self.base_cmd


IP_OPTIONS = {
    'oneline': type(None),
    'family': str,
}

SS_OPTIONS = {
    'udp': type(None),
    'listening': type(None),
    'numeric': type(None),
    'processes': type(None),
}

PKILL_OPTIONS = {
    'euid': str,
    'exact': type(None),
}

SUDO_OPTIONS = {
    'non_interactive': type(None),
    'validate': type(None),
}

SYSTEMCTL_OPTIONS = {
    'no_pager': type(None),
}


SUDO = Command.from_str("sudo", valid_options=SUDO_OPTIONS)

SYSTEMCTL = Command.from_str("systemctl", valid_options=SYSTEMCTL_OPTIONS)

IPSEC = Command.from_str("ipsec")

IP = Command.from_str("ip", valid_options=IP_OPTIONS)
IP_LINK = IP.with_options(oneline=None).with_arg("link")
IP_ADDR4 = IP.with_options(oneline=None, family="inet").with_arg("addr")
IP_ROUTE = IP.with_arg("route")
IP_L2TP = IP.with_arg("l2tp")

SS_UDP_LISTEN = Command.from_str("ss", valid_options=SS_OPTIONS).with_options(
    udp=None,
    listening=None,
    numeric=None,
    processes=None,
)

PKILL = Command.from_str("pkill", valid_options=PKILL_OPTIONS)

TEE = Command.from_str("tee")
