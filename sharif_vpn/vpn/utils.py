"""Utility functions for tunnel management."""

import subprocess
import time
from typing import Callable, Optional, Tuple, TypeVar

from .commands import CommandError
from ..logging_utility import logger

T = TypeVar("T")


def run_command(cmd: list[str], check: bool = True, input: Optional[str] = None,
                capture: bool = True, timeout: Optional[float] = None) -> Tuple[str, str]:
    """
    Run shell command and return output.

    Args:
        cmd: Command as list of strings
        check: Whether to raise exception on error
        input: Text fed to the command's stdin
        capture: Whether to capture output; interactive commands need the terminal
        timeout: Seconds before the command is killed and treated as failed

    Returns:
        Tuple of (stdout, stderr)
    """
    try:
        result = subprocess.run(cmd, capture_output=capture, text=True, check=check, input=input,
                                timeout=timeout)
        return result.stdout or "", result.stderr or ""
    except subprocess.TimeoutExpired:
        raise CommandError(f"Command timed out after {timeout}s: {' '.join(cmd)}")
    except subprocess.CalledProcessError as e:
        raise CommandError(f"Command failed: {' '.join(cmd)}\n{e.stderr or ''}".rstrip(),
                           returncode=e.returncode, stdout=e.stdout or "", stderr=e.stderr or "")
    except OSError as e:
        raise CommandError(f"Command could not be executed: {' '.join(cmd)}: {e}")


def retry(probe: Callable[[], T], attempts: int, interval: float,
          sleep: Callable[[float], None] = time.sleep,
          description: Optional[str] = None) -> Optional[T]:
    """
    Poll until probe returns a truthy value.

    Sleeps a fixed interval between attempts, never after the last one.

    Args:
        probe: Callable returning a truthy result on success
        attempts: Maximum number of attempts
        interval: Seconds to sleep between attempts
        sleep: Sleep function, replaced in tests
        description: What is being waited for, used in debug logs

    Returns:
        The first truthy result, or None if every attempt failed
    """
    for attempt in range(1, attempts + 1):
        result = probe()
        if result:
            return result
        if description:
            logger.debug(f"Waiting for {description}... ({attempt}/{attempts})")
        if attempt < attempts:
            sleep(interval)
    return None
