"""
Shared-instance metaclass for the process-wide resources of the site:
the database engine and the application factory.
"""
import logging
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class Base(type):
    """
    Keeps one instance per class.

    ``reset()`` drops the instance of a single class and closes it when it
    holds resources, so the next call builds a fresh one.
    """
    _instances: Dict[type, Any] = {}
    _lock = threading.RLock()

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            with cls._lock:
                if cls not in cls._instances:
                    cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]

    def current(cls) -> Optional[Any]:
        """The existing instance, without creating one."""
        return cls._instances.get(cls)

    def reset(cls) -> None:
        """Forget the instance of this class, closing it first if it can be closed."""
        with cls._lock:
            instance = cls._instances.pop(cls, None)
        if instance is None:
            return
        close = getattr(instance, 'close', None)
        if callable(close):
            close()
        logger.debug(f"Reset shared {cls.__name__} instance")
