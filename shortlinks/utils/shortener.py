"""Short code generation utility

This module provides a helper function for generating random, fixed-length
base-36 short codes (digits + lowercase letters).

Functions:
    generate_shortcode(length=6, alphabet=ALPHABET):
        Generate a random short code suitable for use as a URL slug.

Example:
    >>> from shortlinks.utils import generate_shortcode
    >>> generate_shortcode()
    'a1b2c3'

NOTE:
    - Codes are NOT cryptographically secure and NOT unique by construction.
      The space for 6 characters is 36^6 (~2.1 * 10^9), so callers must check
      for collisions and retry (see shortlinks.shortener.shorten_url()).
"""

import random
import string

from shortlinks.constants import Shortcode


ALPHABET = string.digits + string.ascii_lowercase
BASE = len(ALPHABET)  # 10 digits + 26 lowercase letters


def generate_shortcode(length: int = Shortcode.LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random fixed-length short code.

    Args:
        length (int, optional):
            Number of characters in the code. Defaults to 6.

        alphabet (str, optional):
            Characters to draw from. Defaults to base-36 [0-9a-z].

    Returns:
        str: A random code, e.g. 'k3x9q0'.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is not positive or the alphabet is empty.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not alphabet:
        raise ValueError('Alphabet must be a non-empty string.')

    return ''.join(random.choices(alphabet, k=length))  # noqa: S311
