"""Base classes for configuration and state models.

Kept apart from config.py so that log.py can build on them
without a circular import:
- Closeable protocol for resource cleanup
- BaseCloseable, which closes its children recursively
- BaseConfig and BaseState, semantic markers for readers
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything with a close() method."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its Closeable fields on close().

    Models deriving from this are context managers. Closing walks the
    model fields in declaration order and keeps going when one child
    fails, so that a broken sink does not leave a log file open:

        State -> Config -> Logger -> Sink
    """

    def close(self):
        """Close every Closeable child, reporting failures to stderr."""
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                print(
                    f"Warning: Error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Configuration section (loaded from YAML/env/CLI)."""
    pass


class BaseState(BaseCloseable):
    """Runtime state section (mutated while a session runs)."""
    pass


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
