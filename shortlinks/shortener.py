"""Shorten and resolve flows on top of a UrlRecord DAO

These are the two request flows HTTP handlers run against the storage layer.
They never decide HTTP semantics: errors propagate to the caller, which maps
them to status codes (e.g. LockTimeoutError -> 503, CodeSpaceExhaustedError -> 500).

Functions:
    shorten_url(dao, original, ...) -> UrlRecordModel
        Return the existing record of a URL or create one with a fresh code.
    resolve_url(dao, code) -> str | None
        Return the original URL of a code and register a click on it.

Example:
    >>> record = shorten_url(dao, 'https://example.com')
    >>> shorten_url(dao, 'https://example.com') == record
    True
    >>> resolve_url(dao, record.code)
    'https://example.com'
"""

import logging
from datetime import datetime
from collections.abc import Callable

from shortlinks.constants import Shortcode, SHORTCODE_COLLISION
from shortlinks.models import UrlRecordModel
from shortlinks.dao.base import UrlRecordBaseDAO
from shortlinks.dao.exceptions import CodeSpaceExhaustedError, ShortcodeAlreadyExistsError
from shortlinks.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


def shorten_url(
    dao: UrlRecordBaseDAO,
    original: str,
    *,
    length: int = Shortcode.LENGTH,
    max_attempts: int = Shortcode.MAX_ATTEMPTS,
    created_at: datetime | None = None,
    generate: Callable[[int], str] = generate_shortcode,
) -> UrlRecordModel:
    """Shorten a URL, idempotently

    This flow follows this procedure:
    - Step 1: Return the existing record if the URL is already stored
    - Step 2: Generate a code and check it is free (outside the store lock)
    - Step 3: Insert the record; the DAO re-checks uniqueness under the lock
    - Step 4: On a collision in step 2 or 3, go back to step 2 (bounded)

    Args:
        dao (UrlRecordBaseDAO):
            Initialized DAO of the active storage backend.
        original (str):
            Validated original URL.
        length (int):
            Short code length. Defaults to 6.
        max_attempts (int):
            Maximum number of generated codes to try. Defaults to 100.
        created_at (datetime | None):
            Creation moment of a new record. Defaults to now.
        generate (Callable[[int], str]):
            Code generator taking the code length. Defaults to generate_shortcode().

    Returns:
        UrlRecordModel: The existing or newly created record.

    Raises:
        CodeSpaceExhaustedError:
            If no free code was found within max_attempts.
        DataStoreError:
            If the data store fails (e.g. LockTimeoutError).
    """
    # 1- Return the existing record for an already shortened URL
    existing = dao.find_by_url(original)
    if existing is not None:
        logger.debug('URL already shortened.', extra={'code': existing.code})
        return existing

    for attempt in range(1, max_attempts + 1):
        # 2- Generate a code and check it is free
        code = generate(length)
        if dao.find_by_code(code) is not None:
            logger.info('Generated short code is taken. Retrying.', extra={'code': code, 'attempt': attempt, 'event': SHORTCODE_COLLISION})
            continue

        # 3- Insert with atomic re-check
        try:
            return dao.insert(original, code, created_at)
        except ShortcodeAlreadyExistsError:
            logger.info(
                'Short code was taken before insert. Retrying.',
                extra={'code': code, 'attempt': attempt, 'event': SHORTCODE_COLLISION},
            )

    raise CodeSpaceExhaustedError(f'No free short code of length {length} found after {max_attempts} attempts.')


def resolve_url(dao: UrlRecordBaseDAO, code: str) -> str | None:
    """Resolve a short code to its original URL and count the click

    Returns:
        str | None: The original URL, or None if the code is unknown.
    """
    original = dao.find_by_code(code)
    if original is None:
        logger.debug('Short code not found.', extra={'code': code})
        return None

    dao.register_click(code)
    return original
