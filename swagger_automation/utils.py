"""
Helper utilities for the automation package.
"""

import logging
import re
import secrets
import string
from typing import Optional, Set

TOKEN_ALPHABET = string.digits + string.ascii_lowercase


def setup_logging(log_file: Optional[str] = "swagger_automation.log", level: int = logging.INFO):
    """
    Configure logging for both console and file output.

    Args:
        log_file: Destination path for the log file (None disables the file handler).
        level: Logging verbosity level.
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def sanitize_identifier(text: str) -> str:
    """Replace every non-alphanumeric character with '_' and lowercase the result."""
    return re.sub(r'[^a-zA-Z0-9]', '_', text or '').lower()


def random_token(length: int = 9, used: Optional[Set[str]] = None) -> str:
    """
    Return a random base36 token.

    When `used` is given, the token is guaranteed not to be in it and is added to it.
    """
    while True:
        token = ''.join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))
        if used is None:
            return token
        if token not in used:
            used.add(token)
            return token
