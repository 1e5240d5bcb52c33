import functools
from typing import TypeVar, Any
from collections.abc import Callable

from shortlinks.dao.exceptions import StorageUnavailableError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_storage_errors(method: F) -> F:
    """Wrap file-interacting store methods to handle OS-level I/O errors

    Args:
        method (Callable[..., Any]):
            Store method performing file operations which may raise OSError
            (missing directory, permission denied, disk full, ...).

    Returns:
        Callable[..., Any]:
            Wrapped method which raises StorageUnavailableError on I/O failures.

    Example:
        >>> @handle_storage_errors
        ... def read(self):
        ...     return self.data_path.read_text()
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except OSError as e:
            raise StorageUnavailableError(f"Can't access JSON store at {self.data_path}.") from e

    return wrapper
