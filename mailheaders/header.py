"""Header record and the key function used to match header names."""
from typing import NamedTuple, Union


class Header(NamedTuple):
    """One name/value pair from a message header block.

    `name` keeps the case it was added with; matching is done on
    `header_key(name)` only.
    """
    name: str
    value: str

    @property
    def line(self) -> str:
        return f"{self.name}: {self.value}"


def header_key(name: Union[str, Header]) -> str:
    """Return the folded lookup key for a header name (or a Header)."""
    if isinstance(name, Header):
        name = name.name
    return name.lower()
