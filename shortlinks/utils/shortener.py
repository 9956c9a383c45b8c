"""Shortcode generation utility

This module provides helpers for generating random short codes and
validating user-supplied custom aliases.

Functions:
    generate_shortcode(nbytes=4):
        Generate a random hex token suitable for use as a URL slug.
    is_valid_shortcode(shortcode):
        Check whether a custom alias may be used as a short code.

Example:
    >>> from shortlinks.utils import generate_shortcode
    >>> generate_shortcode()
    'a1b2c3d4'
    >>> is_valid_shortcode('my-alias')
    True
    >>> is_valid_shortcode('cleanup')
    False
"""

import re
import secrets

from shortlinks.constants import Shortcode


SHORTCODE_PATTERN = re.compile(rf'[A-Za-z0-9_-]{{1,{Shortcode.MAX_LENGTH}}}')


def generate_shortcode(nbytes: int = Shortcode.RANDOM_BYTES) -> str:
    """Generate a random short code.

    The code is `nbytes` bytes from a CSPRNG, hex encoded, so its length is
    always 2 * nbytes characters. It carries no meaning and is not guaranteed
    unique: callers must check it against the data store and retry on collision.

    Args:
        nbytes (int, optional):
            Number of random bytes. Defaults to 4 (8 hex characters).

    Returns:
        str: lowercase hex short code.

    Example:
        >>> len(generate_shortcode())
        8
    """
    if not isinstance(nbytes, int) or isinstance(nbytes, bool):
        raise TypeError(f'Number of bytes must be of type integer (given type: {type(nbytes)}).')
    if nbytes <= 0:
        raise ValueError(f'Number of bytes must be a positive integer (given value: {nbytes}).')

    return secrets.token_hex(nbytes)


def is_valid_shortcode(shortcode: str) -> bool:
    """Return True if `shortcode` is usable as a custom alias.

    Valid aliases are 1-64 characters of [A-Za-z0-9_-] and don't shadow
    another route (e.g. '/shorten' or '/url').
    """
    if not isinstance(shortcode, str):
        return False
    return SHORTCODE_PATTERN.fullmatch(shortcode) is not None and shortcode not in Shortcode.RESERVED
