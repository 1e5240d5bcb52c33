"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when the data store fails (I/O, connectivity, timeouts).

    StorageUnavailableError:
        Raised when the backing directory, file or server is inaccessible.

    LockTimeoutError:
        Raised when exclusive access to the store is not obtained in time.

    CorruptDataError:
        Raised when persisted content can't be deserialized into a store.

    ShortcodeAlreadyExistsError:
        Raised when inserting a code already taken by a different URL.

    CodeSpaceExhaustedError:
        Raised when no free short code is found within the retry bound.

Example:
    >>> from shortlinks.dao.exceptions import LockTimeoutError
    >>> raise LockTimeoutError("Lock on data/urls.json.lock not acquired within 1000ms.")
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.LockTimeoutError: Lock on data/urls.json.lock not acquired within 1000ms.
"""

from shortlinks.exceptions import ShortLinksError


class DAOError(ShortLinksError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include I/O failures, connection issues and timeouts.
    """

    error_code = 'dao:data_store_error'


class StorageUnavailableError(DataStoreError):
    """Raised when the backing storage is inaccessible."""

    error_code = 'dao:storage_unavailable_error'


class LockTimeoutError(DataStoreError):
    """Raised when the exclusive store lock is not acquired within the timeout."""

    error_code = 'dao:lock_timeout_error'


class CorruptDataError(DAOError):
    """Raised when persisted store content is not a valid store document."""

    error_code = 'dao:corrupt_data_error'


class ShortcodeAlreadyExistsError(DAOError):
    """Raised when a short code is already mapped to a different URL."""

    error_code = 'dao:shortcode_already_exists_error'


class CodeSpaceExhaustedError(DAOError):
    """Raised when short code generation exceeds its retry bound."""

    error_code = 'dao:code_space_exhausted_error'
