"""Remote gateway name resolution."""

from .context import TunnelContext
from .exceptions import ResolutionFailure
from .utils import retry
from ..logging_utility import logger


class NameResolver:
    def __init__(self, ctx: TunnelContext):
        self.ctx = ctx
        self.resolver = ctx.collaborators.resolver

    def resolve(self, hostname: str, max_attempts: int = 10, interval: float = 0.5) -> str:
        """
        Resolve hostname, retrying at a fixed interval.

        Raises:
            ResolutionFailure: if no attempt yields an address
        """
        logger.info(f"Resolving {hostname}…")
        address = retry(lambda: self.resolver.resolve(hostname), max_attempts, interval,
                        sleep=self.ctx.sleep, description=f"{hostname} to resolve")
        if not address:
            raise ResolutionFailure(f"cannot resolve {hostname}")
        logger.debug(f"{hostname} resolved to {address}")
        return address
