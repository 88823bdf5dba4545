"""Base collector abstract class for the scrape pipeline."""

from abc import ABC, abstractmethod
from typing import Any
import logging
from functools import wraps

from ..utils.metrics import ScrapeSnapshot


class BaseCollector(ABC):
    """Abstract base class for collectors producing a scrape snapshot."""

    def __init__(self, config: Any, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Collector-specific configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    async def collect(self, *args, **kwargs) -> ScrapeSnapshot:
        """
        Run one collection cycle.

        Returns:
            ScrapeSnapshot: Results of the cycle

        Note:
            Implementations should use @safe_collect so that a cycle never
            raises into the exposition layer.
        """
        pass


def safe_collect(func):
    """
    Decorator turning an unexpected cycle failure into an empty snapshot.

    Args:
        func: Collector method to wrap

    Returns:
        Wrapped coroutine that logs and swallows cycle-level exceptions
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Collection cycle failed: {e}", exc_info=True)
            return ScrapeSnapshot()
    return wrapper
