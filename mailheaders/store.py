"""Ordered, case-insensitive multi-map of RFC822 headers.

Headers are kept per folded name (see `header_key`) in the order each name
was first seen; values for one name stay in the order they were added.
A fresh `HeaderStore()` pre-registers empty slots for the usual RFC822
fields so that serialization follows the conventional order.

All accessors returning several headers hand back one-shot iterators over a
snapshot taken at call time. Call the accessor again for another pass.
"""
import io
import logging
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional

from . import config
from .header import Header, header_key
from .parser import HeaderLineParser, load_headers

logger = logging.getLogger(__name__)

_UNSET = object()


class HeaderStore:
    """Headers of one message.

    HeaderStore()        -> empty, canonical RFC822 slots registered
    HeaderStore(stream)  -> parsed from a binary stream, no canonical slots
    """

    def __init__(self, stream: Optional[BinaryIO] = None):
        self._headers: Dict[str, List[Header]] = {}
        self._lines = HeaderLineParser(self)
        if stream is None:
            for name in config.CANONICAL_ORDER:
                self._headers.setdefault(header_key(name), [])
        else:
            self.load(stream)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'HeaderStore':
        return cls(io.BytesIO(data))

    def load(self, stream: BinaryIO) -> int:
        """Parse a header block from `stream` and add every header found.

        Raises HeaderParseError if the stream fails; headers read up to that
        point are kept.
        """
        return load_headers(self, stream)

    # lookups

    def get_header(self, name: str, delimiter=_UNSET):
        """Return all values for `name`, or None if it was never registered.

        With a `delimiter` argument, return them as one string instead
        (see `get_header_string`).
        """
        if delimiter is not _UNSET:
            return self.get_header_string(name, delimiter)
        headers = self._headers.get(header_key(name))
        if headers is None:
            return None
        return [h.value for h in headers]

    def get_header_string(self, name: str, delimiter: Optional[str]) -> Optional[str]:
        """Return the values for `name` joined by `delimiter`.

        None if the name was never registered, '' if it has no values.
        A `delimiter` of None returns only the first value.
        """
        headers = self._headers.get(header_key(name))
        if headers is None:
            return None
        if not headers:
            return ''
        if len(headers) == 1 or delimiter is None:
            return headers[0].value
        return delimiter.join(h.value for h in headers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and header_key(name) in self._headers

    def __len__(self) -> int:
        return sum(len(headers) for headers in self._headers.values())

    def __iter__(self) -> Iterator[Header]:
        return self.get_all_headers()

    def __repr__(self) -> str:
        return f"HeaderStore({list(self.get_all_headers())!r})"

    # mutation

    def set_header(self, name: str, value: str):
        """Replace every value of `name` with this single one."""
        self._headers[header_key(name)] = [Header(name, value)]

    def set_address_header(self, name: str, addresses: Iterable[object]):
        """Replace `name` with one header per address (rendered with str())."""
        self._headers[header_key(name)] = [Header(name, str(a)) for a in addresses]

    def add_header(self, name: str, value: str):
        self._headers.setdefault(header_key(name), []).append(Header(name, value))

    def remove_header(self, name: str):
        """Drop all values of `name`; the name itself stays registered."""
        headers = self._headers.get(header_key(name))
        if headers is not None:
            headers.clear()

    def extend_last(self, name: str, text: str) -> bool:
        """Append `text` to the newest value of `name`.

        Returns False if `name` has no values to extend.
        """
        headers = self._headers.get(header_key(name))
        if not headers:
            return False
        last = headers.pop()
        headers.append(Header(last.name, (last.value + text).strip()))
        return True

    def add_header_line(self, line: str):
        """Add one raw `Name: value` line, or fold a continuation line
        (leading whitespace) into the header added just before it."""
        self._lines.feed(line)

    def line_session(self) -> HeaderLineParser:
        """Return a line parser with its own continuation state."""
        return HeaderLineParser(self)

    # enumeration

    @staticmethod
    def _keys(names: Iterable[str]) -> set:
        # a bare name is one name, not a sequence of letters
        if isinstance(names, str):
            names = (names,)
        return {header_key(n) for n in names}

    def _select(self, keep) -> List[Header]:
        result = []
        for key, headers in self._headers.items():
            if keep(key):
                result.extend(headers)
        return result

    def get_all_headers(self) -> Iterator[Header]:
        return iter(self._select(lambda key: True))

    def get_matching_headers(self, names: Iterable[str]) -> Iterator[Header]:
        include = self._keys(names)
        return iter(self._select(lambda key: key in include))

    def get_non_matching_headers(self, names: Iterable[str]) -> Iterator[Header]:
        exclude = self._keys(names)
        return iter(self._select(lambda key: key not in exclude))

    def get_all_header_lines(self) -> Iterator[str]:
        return (h.line for h in self.get_all_headers())

    def get_matching_header_lines(self, names: Iterable[str]) -> Iterator[str]:
        return (h.line for h in self.get_matching_headers(names))

    def get_non_matching_header_lines(self, names: Iterable[str]) -> Iterator[str]:
        return (h.line for h in self.get_non_matching_headers(names))

    # output

    def write_to(self, out: BinaryIO, ignore: Optional[Iterable[str]] = None):
        """Write every header as `Name:Value` CRLF, skipping names in `ignore`.

        There is no space after the colon.
        """
        headers = self.get_non_matching_headers(ignore or ())
        written = 0
        for h in headers:
            out.write(f"{h.name}:{h.value}\r\n".encode('latin-1', errors='replace'))
            written += 1
        logger.debug('Wrote %d headers', written)

    def to_bytes(self, ignore: Optional[Iterable[str]] = None) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf, ignore)
        return buf.getvalue()
