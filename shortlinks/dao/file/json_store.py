"""Persistent JSON file store guarded by an advisory file lock

This module owns the on-disk representation of every UrlRecord. All reads and
writes of the backing file happen inside one exclusive access window:

    acquire lock -> read/deserialize -> mutate in memory -> serialize/write -> release lock

Responsibilities:
    - Create the backing directory and file on first run (race-safe);
    - Serialize every accessor (threads and processes) through one lock;
    - Bound lock acquisition with a timeout;
    - Recover from corrupt content by substituting an empty store;
    - Never leave the backing file half-written.

Classes:
    JsonFileStore:
        Load/save primitives and the exclusive access window.

Example:
    >>> store = JsonFileStore('data/urls.json').initialize()
    >>> with store.exclusive_access() as state:
    ...     state.find_by_code('ab12cd')
    >>> store.with_exclusive_access(len)
    0

NOTE:
    The lock is a `filelock.FileLock` on '<data path>.lock'. On POSIX it is an
    flock(2) lock, which the OS releases when the holding process dies, so a
    lock file left behind by a crashed process never blocks a restart.
"""

import os
import json
import stat
import logging
import tempfile
import contextlib
from pathlib import Path
from typing import TypeVar
from collections.abc import Callable, Iterator

import filelock

from shortlinks.constants import Store, STORE_INITIALIZED, CORRUPT_DATA_RECOVERED, LOCK_TIMEOUT
from shortlinks.models import StoreModel
from shortlinks.dao.file.helpers import handle_storage_errors
from shortlinks.dao.exceptions import CorruptDataError, LockTimeoutError, StorageUnavailableError


T = TypeVar('T')


logger = logging.getLogger(__name__)


def _process_umask() -> int:
    # The umask can only be read by setting it; done once, at import time
    mask = os.umask(0o022)
    os.umask(mask)
    return mask


# Mode of a newly created backing file, as open() would create it
DEFAULT_FILE_MODE = 0o666 & ~_process_umask()


class JsonFileStore:
    """JSON file backed store with cross-process mutual exclusion.

    Attributes:
        data_path (Path):
            Path to the backing JSON document.
        lock_path (Path):
            Path to the companion lock marker (data path + suffix).
        lock_timeout_ms (int):
            Maximum wait for the exclusive lock, in milliseconds.

    Methods:
        initialize() -> JsonFileStore:
            Create the backing directory and an empty store if absent.
            Raises StorageUnavailableError if the directory is not writable.

        exclusive_access() -> ContextManager[StoreModel]:
            Lock, load and yield the store. Persist it on exit if it was mutated.
            Raises LockTimeoutError if the lock is not acquired in time.

        with_exclusive_access(fn: Callable[[StoreModel], T]) -> T:
            Callable flavour of exclusive_access().

        load() -> StoreModel / save(store: StoreModel) -> None:
            Raw primitives. Only call them while holding the lock.
    """

    def __init__(
        self,
        data_path: str | os.PathLike = Store.DATA_PATH,
        lock_timeout_ms: int = Store.LOCK_TIMEOUT_MS,
        lock_suffix: str = Store.LOCK_SUFFIX,
    ):
        if lock_timeout_ms <= 0:
            raise ValueError(f'Lock timeout must be a positive number of milliseconds (given value: {lock_timeout_ms}).')

        self.data_path = Path(data_path)
        self.lock_path = Path(f'{self.data_path}{lock_suffix}')
        self.lock_timeout_ms = lock_timeout_ms

    def __repr__(self) -> str:
        return f'<JsonFileStore {self.data_path}>'

    @handle_storage_errors
    def initialize(self) -> 'JsonFileStore':
        """Ensure the backing directory and file exist

        Safe to call on every process start, even while other processes are
        initializing: the existence check and the first write happen under the
        exclusive lock, and an existing file is never truncated.

        Returns:
            JsonFileStore: self (for method chaining)

        Raises:
            StorageUnavailableError:
                If the directory can't be created, is not writable, or the data
                path is taken by something that isn't a regular file.
            LockTimeoutError:
                If the lock is not acquired within the timeout.
        """
        directory = self.data_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        if not os.access(directory, os.W_OK):
            raise StorageUnavailableError(f'Directory {directory} is not writable.')

        with self._locked():
            if self.data_path.exists():
                if not self.data_path.is_file():
                    raise StorageUnavailableError(f'Data path {self.data_path} is not a regular file.')
                logger.debug('JSON store already exists.', extra={'dataPath': str(self.data_path)})
                return self

            self.save(StoreModel.empty())

        logger.info('Initialized empty JSON store.', extra={'dataPath': str(self.data_path), 'event': STORE_INITIALIZED})
        return self

    @contextlib.contextmanager
    def exclusive_access(self) -> Iterator[StoreModel]:
        """Open an exclusive access window over the store

        Yields a freshly deserialized working copy. When the block exits normally
        and the copy differs from what was loaded, it is written back before the
        lock is released. When the block raises, nothing is written. The lock is
        released on every exit path.

        Yields:
            StoreModel: the current store (empty if the file content is corrupt).

        Raises:
            LockTimeoutError:
                If the lock is not acquired within the timeout. Nothing is held
                and nothing is written in that case.
            StorageUnavailableError:
                On I/O failures while reading or writing the backing file.
        """
        with self._locked():
            store = self.load()
            snapshot = store.to_document()

            yield store

            if store.to_document() != snapshot:
                self.save(store)

    def with_exclusive_access(self, fn: Callable[[StoreModel], T]) -> T:
        """Invoke `fn` with the store inside an exclusive access window.

        Mutations `fn` performs on the store are persisted (see exclusive_access()).
        When `fn` returns a StoreModel, that store is persisted instead and
        replaces the file content as a whole.

        Example:
            >>> store.with_exclusive_access(lambda state: state.find_by_code('ab12cd'))
            'https://example.com'
        """
        with self._locked():
            store = self.load()
            snapshot = store.to_document()

            result = fn(store)

            target = result if isinstance(result, StoreModel) else store
            if target.to_document() != snapshot:
                self.save(target)

        return result

    @handle_storage_errors
    def load(self) -> StoreModel:
        """Read and deserialize the backing file

        A missing file reads as an empty store. Corrupt content is logged as a
        warning and also reads as an empty store; the file itself is left as is.
        """
        try:
            content = self.data_path.read_bytes()
        except FileNotFoundError:
            return StoreModel.empty()

        try:
            return self._decode(content)
        except CorruptDataError as e:
            logger.warning(
                'JSON store content is corrupt. Substituting an empty store.',
                extra={'dataPath': str(self.data_path), 'reason': str(e), 'event': CORRUPT_DATA_RECOVERED},
            )
            return StoreModel.empty()

    @handle_storage_errors
    def save(self, store: StoreModel) -> None:
        """Serialize and write the store, replacing the backing file atomically

        The document is written to a temporary file in the same directory and
        renamed over the backing file, so readers only ever see the previous or
        the new content.
        """
        payload = json.dumps(store.to_document(), indent=Store.JSON_INDENT, ensure_ascii=False)

        fd, tmp_path = tempfile.mkstemp(
            dir=self.data_path.parent,
            prefix=f'.{self.data_path.name}.',
            suffix='.tmp',
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600 files; keep the mode readers already rely on
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.data_path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise

    def _file_mode(self) -> int:
        """Return the mode to write the backing file with: the current one, if any."""
        try:
            return stat.S_IMODE(self.data_path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        # A fresh lock object per window: threads sharing this store and other
        # processes sharing the file all contend on the OS-level lock.
        lock = filelock.FileLock(self.lock_path, timeout=self.lock_timeout_ms / 1000)

        # NOTE: filelock.Timeout subclasses TimeoutError (an OSError), so it
        #       must be handled before the generic OSError branch.
        try:
            lock.acquire()
        except filelock.Timeout as e:
            logger.warning(
                'Timed out waiting for the JSON store lock.',
                extra={'lockPath': str(self.lock_path), 'timeoutMs': self.lock_timeout_ms, 'event': LOCK_TIMEOUT},
            )
            raise LockTimeoutError(f'Lock on {self.lock_path} not acquired within {self.lock_timeout_ms}ms.') from e
        except OSError as e:
            raise StorageUnavailableError(f"Can't create lock file {self.lock_path}.") from e

        try:
            yield
        finally:
            lock.release()

    @staticmethod
    def _decode(content: bytes) -> StoreModel:
        try:
            document = json.loads(content.decode('utf-8'))
        except (ValueError, RecursionError) as e:  # RecursionError: deeply nested arrays or objects
            raise CorruptDataError(f'Invalid JSON document: {e}') from e
        return StoreModel.from_document(document)
