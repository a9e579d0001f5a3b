"""Module-level settings for header stores and the CLI.

`CANONICAL_ORDER` is the list of names a fresh `HeaderStore()` pre-registers
so that serialization follows the usual RFC822 field order. Override it with
`set_canonical_order()` or `set_canonical_order_from_file()`; stores that
already exist keep the order they were built with.
"""
import json
import logging
from typing import Iterable, List, Tuple

logger = logging.getLogger(__name__)

# fields: dates, source (trace, originator, resent), destination, optional
DEFAULT_CANONICAL_ORDER: Tuple[str, ...] = (
    'Date',
    'Resent-Date',
    'Return-path',
    'Received',
    'Sender',
    'From',
    'Reply-To',
    'Resent-Sender',
    'Resent-From',
    'Resent-Reply-To',
    'To',
    'Resent-To',
    'cc',
    'Resent-cc',
    'bcc',
    'Resent-bcc',
    'Message-ID',
    'Resent-Message-ID',
    'In-Reply-To',
    'References',
    'Keywords',
    'Subject',
    'Comments',
    'Encrypted',
)

CANONICAL_ORDER: Tuple[str, ...] = DEFAULT_CANONICAL_ORDER

# Used by the CLI when a header has several values
DEFAULT_DELIMITER = ', '


def set_canonical_order(names: Iterable[str]):
    """Replace the order pre-registered by new stores."""
    global CANONICAL_ORDER
    CANONICAL_ORDER = tuple(n.strip() for n in names if n and n.strip())


def reset_canonical_order():
    global CANONICAL_ORDER
    CANONICAL_ORDER = DEFAULT_CANONICAL_ORDER


def _names_from_text(raw: str) -> List[str]:
    names = []
    for line in raw.splitlines():
        s = line.split('#', 1)[0].strip()
        if s:
            names.append(s)
    return names


def set_canonical_order_from_file(path: str) -> bool:
    """Load the canonical order from a JSON list or a plain list of names.

    JSON format: ["Date", "From", ...]
    Plain text format: one name per line, `#` starts a comment.
    Returns False and keeps the current order if nothing usable was found.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read().strip()
    except OSError as e:
        logger.warning('Cannot read header order file %s: %s', path, e)
        return False

    try:
        data = json.loads(raw)
    except ValueError:
        names = _names_from_text(raw)
    else:
        if not isinstance(data, list):
            logger.warning('Header order file %s is not a JSON list', path)
            return False
        names = [str(n) for n in data]

    if not any(n.strip() for n in names):
        return False
    set_canonical_order(names)
    logger.debug('Loaded %d canonical header names from %s', len(CANONICAL_ORDER), path)
    return True
