"""Helper utilities shared by DAOs, the shorten flow and the bootstrap CLI.

Functions:
    get_short_url(code: str, base_url: str | None = None) -> str
        Get string representation of short URL for a given code
    isoformat_utc(moment: datetime | None = None) -> str
        Format a moment as an ISO 8601 UTC timestamp with millisecond precision
    load_yaml(path: Path) -> dict[str, Any]
        Safely load a YAML document into a dictionary

Example:
    >>> from shortlinks.utils.helpers import get_short_url
    >>> get_short_url('ab12cd', 'https://sho.rt/')
    'https://sho.rt/r/ab12cd'

    >>> get_short_url('ab12cd')
    'http://localhost:3000/r/ab12cd'
"""

from datetime import datetime, UTC
from pathlib import Path
from typing import Any

import yaml

from shortlinks.constants import DEFAULT_BASE_URL


def get_short_url(code: str, base_url: str | None = None) -> str:
    """Get string representation of shortened URL

    Args:
        code (str): short code
        base_url (str | None): public base URL, 'http://localhost:3000' when empty

    Returns:
        str: short url string representation, e.g. 'https://sho.rt/r/ab12cd'
    """
    return f'{(base_url or DEFAULT_BASE_URL).rstrip("/")}/r/{code}'


def isoformat_utc(moment: datetime | None = None) -> str:
    """Format a moment as an ISO 8601 UTC timestamp, e.g. '2025-10-15T12:00:00.000Z'.

    Naive datetimes are assumed to already be in UTC. Defaults to now.
    """
    if moment is None:
        moment = datetime.now(UTC)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)

    # fmt: off
    return moment.astimezone(UTC) \
                 .isoformat(timespec='milliseconds') \
                 .replace('+00:00', 'Z')
    # fmt: on


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file into a Python dictionary.

    Args:
        path (Path):
            Path to a YAML file.

    Returns:
        dict[str, Any]:
            Parsed YAML document. Returns {} for empty files.

    Raises:
        FileNotFoundError:
            If the file does not exist.
    """
    if not path.is_file():
        raise FileNotFoundError(f'YAML not found: {path}')
    with path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return data or {}
