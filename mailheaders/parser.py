"""Parse raw RFC822 header blocks into a HeaderStore.

Two entry points:

- `load_headers(store, stream)` reads a binary stream one byte at a time and
  un-folds continuation lines as it goes.
- `HeaderLineParser` takes already-split header lines, one call per line, and
  remembers the last header name so a following continuation line can be
  folded into it.

Input is treated as one byte per character (latin-1); nothing is decoded.
"""
import logging
from typing import TYPE_CHECKING, BinaryIO, Callable, List, Optional

from .errors import HeaderParseError

if TYPE_CHECKING:
    from .store import HeaderStore

logger = logging.getLogger(__name__)

CR = '\r'


class _BlockScanner:
    """Character-level state machine over one header block.

    Completed name/value pairs are passed to `emit`; the pair still being
    accumulated when `scan()` returns is left for `flush()`.
    """

    def __init__(self, stream: BinaryIO, emit: Callable[[str, str], None]):
        self._stream = stream
        self._emit = emit
        self._name: List[str] = []
        self._value: List[str] = []

    def _read(self) -> str:
        b = self._stream.read(1)
        if not b:
            return ''
        return b.decode('latin-1')

    def flush(self):
        if self._name:
            self._emit(''.join(self._name).strip(), ''.join(self._value).strip())
        self._name = []
        self._value = []

    def scan(self) -> bool:
        """Consume the block. Returns True if it ended on an empty line."""
        while True:
            c = self._read()
            if not c:
                return False
            if c == CR:
                # empty line ends the block; LF is consumed unchecked
                self._read()
                return True
            if c.isspace():
                # continuation: drop the indent, keep filling the value
                while True:
                    c = self._read()
                    if not c:
                        return False
                    if not c.isspace():
                        break
            else:
                self.flush()
                while True:
                    self._name.append(c)
                    c = self._read()
                    if not c:
                        return False
                    if c == ':':
                        break
                c = self._read()
                if not c:
                    return False

            while c != CR:
                self._value.append(c)
                c = self._read()
                if not c:
                    return False
            # LF
            if not self._read():
                return False


def load_headers(store: 'HeaderStore', stream: BinaryIO) -> int:
    """Read a header block from `stream` into `store`.

    `stream` must provide `read(1)` returning bytes (b'' at end of stream).
    Returns the number of headers added. Headers added before a read error
    stay in the store; the error is re-raised as HeaderParseError.
    """
    added = 0

    def emit(name: str, value: str):
        nonlocal added
        store.add_header(name, value)
        added += 1

    scanner = _BlockScanner(stream, emit)
    try:
        terminated = scanner.scan()
    except OSError as e:
        logger.debug('Header stream failed after %d headers: %s', added, e)
        raise HeaderParseError('Error loading headers', e) from e
    scanner.flush()
    logger.debug('Loaded %d headers (%s)', added, 'blank line' if terminated else 'end of stream')
    return added


class HeaderLineParser:
    """Feed raw header lines into a store, folding continuation lines.

    `last_header_name` only has meaning within one session; use a fresh
    parser for each independent sequence of lines.
    """

    def __init__(self, store: 'HeaderStore'):
        self._store = store
        self.last_header_name: Optional[str] = None

    def feed(self, line: str):
        if not line:
            return
        if line[0].isspace():
            self._fold(line)
            return
        name, _, value = line.partition(':')
        self.last_header_name = name.strip()
        self._store.add_header(self.last_header_name, value.strip())

    def _fold(self, line: str):
        text = line.lstrip()
        if self.last_header_name is None or not self._store.extend_last(self.last_header_name, text):
            logger.debug('Dropping continuation line with no header to fold into: %r', line)
