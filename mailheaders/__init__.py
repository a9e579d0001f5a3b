"""Streaming parser and ordered store for RFC822 message headers."""
from .errors import HeaderParseError, MessagingError
from .header import Header, header_key
from .parser import HeaderLineParser, load_headers
from .store import HeaderStore

__all__ = [
    'Header',
    'HeaderLineParser',
    'HeaderParseError',
    'HeaderStore',
    'MessagingError',
    'header_key',
    'load_headers',
]
