"""Abstract base class for UrlRecord data access objects (DAOs).

This class establishes a consistent contract for all UrlRecord DAO implementations,
regardless of the underlying storage mechanism (e.g., a JSON file or Redis).

Responsibilities:
    - Provide an interface for inserting and looking up UrlRecordModel objects
      by short code and by original URL.
    - Provide an atomic click counter per record.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.dao.file import UrlRecordFileDAO

        >>> dao = UrlRecordFileDAO(data_path='data/urls.json').initialize()
        >>> record = dao.insert('https://example.com/blog/article-123', 'a1b2c3')

        >>> dao.find_by_code('a1b2c3')
        'https://example.com/blog/article-123'

        >>> dao.register_click('a1b2c3')
        >>> dao.find_by_url('https://example.com/blog/article-123').clicks
        1
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import UrlRecordModel


class UrlRecordBaseDAO(ABC):
    """Interface for UrlRecord data access objects (DAOs).

    Methods:
        initialize() -> UrlRecordBaseDAO:
            Prepare the backing store. Safe to call on every process start.
            Raises StorageUnavailableError if the store is inaccessible.

        find_by_url(original: str) -> UrlRecordModel | None:
            Retrieve the record of an original URL, None if not stored.

        find_by_code(code: str) -> str | None:
            Retrieve the original URL of a short code, None if not stored.

        get(code: str) -> UrlRecordModel | None:
            Retrieve the full record of a short code, None if not stored.

        insert(original: str, code: str, created_at: datetime | None) -> UrlRecordModel:
            Atomically re-check uniqueness and store a new record.
            Returns the existing record if the original URL is already stored.
            Raises ShortcodeAlreadyExistsError if the code maps to another URL.

        register_click(code: str) -> None:
            Atomically increment the click counter. No-op for unknown codes.

    All methods raise DataStoreError (or one of its subclasses) on storage failures.

    Subclassing:
        Datastore-specific implementations (e.g., UrlRecordFileDAO or
        UrlRecordRedisDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Records are never deleted and never expire.
    """

    @abstractmethod
    def initialize(self) -> 'UrlRecordBaseDAO':
        """Ensure the backing store exists and is reachable.

        Returns:
            UrlRecordBaseDAO: self (for method chaining)

        Raises:
            StorageUnavailableError:
                If the backing store can't be created or reached.
        """
        pass

    @abstractmethod
    def find_by_url(self, original: str) -> UrlRecordModel | None:
        """Retrieve the record stored for an original URL.

        Args:
            original (str):
                The full original URL.

        Returns:
            UrlRecordModel | None: The stored record if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_code(self, code: str) -> str | None:
        """Retrieve the original URL mapped to a short code.

        Args:
            code (str):
                The short code.

        Returns:
            str | None: The original URL if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, code: str) -> UrlRecordModel | None:
        """Retrieve the full record stored for a short code.

        Args:
            code (str):
                The short code.

        Returns:
            UrlRecordModel | None: The stored record if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, original: str, code: str, created_at: datetime | None = None) -> UrlRecordModel:
        """Store a new record with zero clicks.

        Uniqueness of both the original URL and the code is re-checked
        atomically with the write.

        Args:
            original (str):
                The full original URL.

            code (str):
                A short code, usually checked with find_by_code() beforehand.

            created_at (datetime | None):
                Creation moment. Defaults to now (UTC).

        Returns:
            UrlRecordModel: The new record, or the existing record if the
            original URL was already stored.

        Raises:
            ShortcodeAlreadyExistsError:
                If the code is already mapped to a different URL.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def register_click(self, code: str) -> None:
        """Increment the click counter of a short code by one.

        Unknown codes are ignored.

        Args:
            code (str):
                The short code.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
